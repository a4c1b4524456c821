"""Structured configuration for a stubbed request and its response."""

from typing import Any, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, field_validator


class RequestOptions(BaseModel):
    """Extra request matchers on top of verb and URI."""

    model_config = ConfigDict(extra="forbid", populate_by_name=True)

    headers: Optional[dict[str, str]] = None
    query: Optional[dict[str, Union[str, list[str]]]] = None
    json_body: Optional[Any] = Field(default=None, alias="json")
    content: Optional[Union[str, bytes]] = None

    def as_kwargs(self) -> dict[str, Any]:
        fields = {
            "headers": self.headers,
            "query": self.query,
            "json": self.json_body,
            "content": self.content,
        }
        return {name: value for name, value in fields.items() if value is not None}


class ResponseOptions(BaseModel):
    model_config = ConfigDict(extra="forbid", populate_by_name=True)

    status: int = Field(default=200, ge=100, le=599)
    headers: Optional[dict[str, str]] = None
    json_body: Optional[Any] = Field(default=None, alias="json")
    text: Optional[str] = None
    content: Optional[bytes] = None

    def as_kwargs(self) -> dict[str, Any]:
        fields = {
            "status": self.status,
            "headers": self.headers,
            "json": self.json_body,
            "text": self.text,
            "content": self.content,
        }
        return {name: value for name, value in fields.items() if value is not None}


class StubOptions(BaseModel):
    """
    Everything a stub can be configured with.

    Each section is optional and independent:
        StubOptions(response={"status": 201, "json": {"id": 1}})
        StubOptions(error=ConnectionError)
        StubOptions(timeout=True)
    """

    model_config = ConfigDict(extra="forbid", arbitrary_types_allowed=True)

    request: Optional[RequestOptions] = None
    response: Optional[ResponseOptions] = None
    error: Optional[Any] = None
    timeout: bool = False

    @field_validator("error")
    @classmethod
    def _error_is_exception(cls, value: Any) -> Any:
        if value is None or isinstance(value, BaseException):
            return value
        if isinstance(value, type) and issubclass(value, BaseException):
            return value
        raise ValueError("error must be an exception class or instance")

    @classmethod
    def coerce(cls, value: Union["StubOptions", dict, None]) -> "StubOptions":
        if value is None:
            return cls()
        if isinstance(value, cls):
            return value
        return cls.model_validate(value)

    def merged_with(self, overrides: Union["StubOptions", dict, None]) -> "StubOptions":
        """Sections set in overrides replace the matching sections here."""
        overrides = StubOptions.coerce(overrides)
        merged = {name: getattr(self, name) for name in self.model_fields_set}
        merged.update({name: getattr(overrides, name) for name in overrides.model_fields_set})
        return StubOptions.model_validate(merged)
