"""Recording of stubbed endpoint invocations."""

import logging
import os
import threading
import traceback
from datetime import datetime
from pathlib import Path
from typing import Any, Iterator, Optional

from .endpoint import Endpoint, Verb
from .service import Service
from .uri import safe_join

logger = logging.getLogger(__name__)

PACKAGE_DIR = str(Path(__file__).resolve().parent)


def current_call_site() -> str:
    """The running pytest test id, or the first caller outside this package."""
    test_id = os.getenv("PYTEST_CURRENT_TEST")
    if test_id:
        return test_id.rsplit(" (", 1)[0]

    for frame in reversed(traceback.extract_stack()[:-1]):
        if not str(Path(frame.filename).resolve()).startswith(PACKAGE_DIR):
            return f"{frame.filename}:{frame.lineno}"
    return "unknown"


class RequestRecord:
    """One stub registered for an endpoint, and whether it has been used."""

    def __init__(self, recording: "EndpointRecording", stub: Any, uri: str):
        self.recording = recording
        self.verb: Verb = recording.verb
        self.uri = uri
        self.stub = stub
        self.recorded_at = datetime.now()
        self.recorded_from = current_call_site()
        self.responded_at: Optional[datetime] = None
        self._lock = threading.Lock()

    @property
    def service_id(self) -> str:
        return self.recording.service_id

    @property
    def endpoint_id(self) -> str:
        return self.recording.endpoint_id

    @property
    def uri_template(self) -> str:
        return self.recording.uri_template

    @property
    def responded(self) -> bool:
        return self.responded_at is not None

    def mark_as_responded(self) -> bool:
        """Set responded_at once. Returns False if it was already set."""
        with self._lock:
            if self.responded_at is not None:
                return False
            self.responded_at = datetime.now()
            return True

    def to_dict(self) -> dict[str, Any]:
        return {
            "service_id": self.service_id,
            "endpoint_id": self.endpoint_id,
            "verb": self.verb.value,
            "uri": self.uri,
            "recorded_at": self.recorded_at.isoformat(),
            "recorded_from": self.recorded_from,
            "responded_at": self.responded_at.isoformat() if self.responded_at else None,
        }

    def __repr__(self) -> str:
        return (
            f"<RequestRecord :{self.service_id}/:{self.endpoint_id} "
            f"{self.verb.value} {self.uri} responded={self.responded}>"
        )


class EndpointRecording:
    """Append-only list of records for one (service, endpoint) pair."""

    def __init__(self, service: Service, endpoint: Endpoint):
        self.service_id = service.id
        self.endpoint_id = endpoint.id
        self.verb = endpoint.verb
        self.uri_template = safe_join(service.uri, endpoint.uri_template)
        self._records: list[RequestRecord] = []
        self._lock = threading.Lock()

    def record(self, stub: Any, uri: str) -> RequestRecord:
        record = RequestRecord(self, stub, uri)
        with self._lock:
            self._records.append(record)
        return record

    def find_by_stub(self, stub: Any) -> Optional[RequestRecord]:
        return next((record for record in self if record.stub is stub), None)

    @property
    def records(self) -> list[RequestRecord]:
        with self._lock:
            return list(self._records)

    def __iter__(self) -> Iterator[RequestRecord]:
        return iter(self.records)

    def __len__(self) -> int:
        return len(self._records)


class MetricsRegistry:
    """All recordings of a session, one bucket per endpoint."""

    def __init__(self):
        self._recordings: dict[tuple[str, str], EndpointRecording] = {}
        self._lock = threading.Lock()

    def record(self, service: Service, endpoint: Endpoint, stub: Any, uri: str) -> RequestRecord:
        with self._lock:
            key = (service.id, endpoint.id)
            recording = self._recordings.get(key)
            if recording is None:
                recording = self._recordings[key] = EndpointRecording(service, endpoint)
        record = recording.record(stub, uri)
        logger.debug(f"Recorded {record}")
        return record

    def find(self, service_id: str, endpoint_id: str) -> Optional[EndpointRecording]:
        return self._recordings.get((service_id, endpoint_id))

    def requests_for(self, service_id: str, endpoint_id: str) -> list[RequestRecord]:
        recording = self.find(service_id, endpoint_id)
        return recording.records if recording else []

    def find_by_stub(self, stub: Any) -> Optional[RequestRecord]:
        for recording in self:
            record = recording.find_by_stub(stub)
            if record is not None:
                return record
        return None

    def mark_as_responded(self, stub: Any) -> Optional[RequestRecord]:
        """Mark the record for stub as responded; a second call changes nothing."""
        record = self.find_by_stub(stub)
        if record is not None and record.mark_as_responded():
            logger.debug(f"Responded {record}")
        return record

    def reset(self) -> None:
        with self._lock:
            self._recordings.clear()

    def __iter__(self) -> Iterator[EndpointRecording]:
        with self._lock:
            return iter(list(self._recordings.values()))

    def __len__(self) -> int:
        return len(self._recordings)
