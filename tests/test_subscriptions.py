"""Tests for subscriptions and notification."""

from types import SimpleNamespace

import pytest

from endpoint_stubs import (
    CallbackKind,
    InvalidCallback,
    Subscription,
    SubscriptionRegistry,
    Verb,
)


def make_record(service_id="docs", endpoint_id="show", verb=Verb.GET):
    return SimpleNamespace(service_id=service_id, endpoint_id=endpoint_id, verb=verb)


@pytest.fixture
def registry():
    return SubscriptionRegistry()


def test_callback_kind_of():
    """Callbacks are classified by the arguments they take."""

    def record_callback(record):
        pass

    def optional_callback(record=None):
        pass

    def varargs_callback(*args):
        pass

    class Handler:
        def __call__(self, record):
            pass

    assert CallbackKind.of(lambda: None) is CallbackKind.NO_ARGS
    assert CallbackKind.of(record_callback) is CallbackKind.RECORD
    assert CallbackKind.of(optional_callback) is CallbackKind.RECORD
    assert CallbackKind.of(varargs_callback) is CallbackKind.RECORD
    assert CallbackKind.of(Handler()) is CallbackKind.RECORD
    assert CallbackKind.of(lambda a, b: None) is CallbackKind.UNSUPPORTED
    assert CallbackKind.of(lambda *, key: None) is CallbackKind.UNSUPPORTED


def test_subscription_defaults_to_any_verb(registry):
    """Without a verb a subscription matches every verb."""
    subscription = registry.subscribe("docs", "show", callback=lambda: None)

    assert subscription.verb is Verb.ANY
    assert subscription.matches("docs", "show", "POST")


def test_subscription_requires_callable():
    """Non-callables are rejected right away."""
    with pytest.raises(InvalidCallback):
        Subscription("docs", "show", "get", "not callable")


def test_subscribe_is_idempotent(registry):
    """Subscribing twice with the same tuple keeps one subscription."""
    first = registry.subscribe("docs", "show", "get", lambda: None)
    second = registry.subscribe("docs", "show", "GET", lambda record: None)

    assert second is first
    assert len(registry) == 1


def test_subscribe_distinct_verbs(registry):
    """Different verbs are different subscriptions."""
    registry.subscribe("docs", "show", "get", lambda: None)
    registry.subscribe("docs", "show", "any", lambda: None)

    assert len(registry) == 2


def test_unsubscribe(registry):
    """unsubscribe removes and returns the exact subscription."""
    subscription = registry.subscribe("docs", "show", "get", lambda: None)

    assert registry.unsubscribe("docs", "show", "post") is None
    assert registry.unsubscribe("docs", "show", "get") is subscription
    assert len(registry) == 0
    assert registry.unsubscribe("docs", "show", "get") is None


def test_notify_passes_record(registry):
    """One-argument callbacks receive the record."""
    received = []
    registry.subscribe("docs", "show", "get", received.append)
    record = make_record()

    registry.notify(record)

    assert received == [record]


def test_notify_without_arguments(registry):
    """Zero-argument callbacks are called bare."""
    calls = []
    registry.subscribe("docs", "show", "get", lambda: calls.append("called"))

    registry.notify(make_record())

    assert calls == ["called"]


def test_notify_matches_any_on_either_side(registry):
    """ANY on the subscription or the record matches."""
    calls = []
    registry.subscribe("docs", "show", "any", lambda: calls.append("any"))
    registry.subscribe("docs", "create", "post", lambda: calls.append("post"))

    registry.notify(make_record(verb=Verb.DELETE))
    registry.notify(make_record(endpoint_id="create", verb=Verb.ANY))

    assert calls == ["any", "post"]


def test_notify_ignores_other_endpoints(registry):
    """Nothing is called for unrelated records."""
    calls = []
    registry.subscribe("docs", "show", "get", lambda: calls.append("called"))

    assert registry.notify(make_record(endpoint_id="index")) is None
    assert registry.notify(make_record(verb=Verb.POST)) is None
    assert calls == []


def test_invalid_arity_fails_at_notify_time(registry):
    """Unsupported callbacks subscribe fine and fail when notified."""
    subscription = registry.subscribe("docs", "show", "get", lambda a, b: None)

    assert subscription.kind is CallbackKind.UNSUPPORTED
    with pytest.raises(InvalidCallback) as exc_info:
        registry.notify(make_record())

    assert "either take 0 or 1 arguments" in str(exc_info.value)


def test_explicit_kind_overrides_signature(registry):
    """An explicit kind decides how the callback is called."""
    received = []
    registry.subscribe("docs", "show", "get", lambda *args: received.append(args), kind=CallbackKind.NO_ARGS)

    registry.notify(make_record())

    assert received == [()]


def test_reset(registry):
    """reset drops all subscriptions."""
    registry.subscribe("docs", "show", "get", lambda: None)

    registry.reset()

    assert len(registry) == 0
    assert list(registry) == []
