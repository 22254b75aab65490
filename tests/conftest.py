import json

import pytest
import requests

from tubechain.events import EventRecorder


class FakeResponse:
    def __init__(self, status_code=200, text='', payload=None):
        self.status_code = status_code
        self.text = text if payload is None else json.dumps(payload)
        self._payload = payload

    def json(self):
        if self._payload is None:
            return json.loads(self.text)
        return self._payload

    def raise_for_status(self):
        if self.status_code >= 400:
            raise requests.HTTPError(f"{self.status_code} Error")


class StubProvider:
    """Provider double that counts invocations."""

    def __init__(self, name, result=None, error=None, delay=None):
        self.name = name
        self.result = result
        self.error = error
        self.delay = delay
        self.calls = 0

    def invoke(self, identifier, timeout):
        self.calls += 1
        if self.delay is not None:
            self.delay.wait(5)
        if self.error is not None:
            raise self.error
        return self.result


@pytest.fixture
def recorder():
    return EventRecorder()
