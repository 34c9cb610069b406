# tests/conftest.py
import os, sys
import json
import threading
import pytest

ROOT = os.path.abspath(os.path.join(os.path.dirname(__file__), ".."))
if ROOT not in sys.path:
    sys.path.insert(0, ROOT)

from ride_booking.config import Settings


# --- fakes ---

class FakeTimer:
    """Stands in for threading.Timer; fires only when the test says so."""

    def __init__(self, interval, function, args=None, kwargs=None):
        self.interval = interval
        self.function = function
        self.args = args or ()
        self.kwargs = kwargs or {}
        self.daemon = False
        self.started = False
        self.cancelled = False

    def start(self):
        self.started = True

    def cancel(self):
        self.cancelled = True

    def fire(self, force=False):
        if self.cancelled and not force:
            return
        self.function(*self.args, **self.kwargs)


class TimerFactory:
    def __init__(self):
        self.timers = []

    def __call__(self, interval, function, args=None, kwargs=None):
        t = FakeTimer(interval, function, args, kwargs)
        self.timers.append(t)
        return t

    def fire_pending(self):
        for t in list(self.timers):
            if t.started and not t.cancelled:
                t.fire()


def place(pid, main, secondary=None):
    fmt = {"mainText": {"text": main}}
    if secondary is not None:
        fmt["secondaryText"] = {"text": secondary}
    text = f"{main}, {secondary}" if secondary else main
    return {"placePrediction": {"placeId": pid, "text": {"text": text}, "structuredFormat": fmt}}


class FakePlacesClient:
    """
    Answers places:autocomplete calls by languageCode.
    A value that is an Exception instance is raised instead of returned.
    """

    def __init__(self, responses, on_call=None):
        self.responses = responses
        self.on_call = on_call
        self.calls = []
        self._lock = threading.Lock()

    def post_json(self, url, payload, headers=None):
        with self._lock:
            self.calls.append({"url": url, "payload": payload, "headers": headers})
        if self.on_call:
            self.on_call(payload)
        answer = self.responses[payload["languageCode"]]
        if isinstance(answer, Exception):
            raise answer
        return answer

    def get_json(self, url, params, headers=None):
        with self._lock:
            self.calls.append({"url": url, "params": params, "headers": headers})
        return self.responses["details"]


class FakeResponse:
    def __init__(self, status_code=200, body=None, text=None):
        self.status_code = status_code
        self.text = text if text is not None else json.dumps(body)

    def json(self):
        return json.loads(self.text)


class FakeBookingClient:
    def __init__(self, response=None, error=None):
        self.response = response
        self.error = error
        self.calls = []

    def post(self, url, data, headers=None, timeout=None):
        self.calls.append({"url": url, "data": data, "headers": headers, "timeout": timeout})
        if self.error is not None:
            raise self.error
        return self.response


# --- fixtures ---

@pytest.fixture
def settings():
    return Settings(api_key="test-key")


@pytest.fixture
def timer_factory():
    return TimerFactory()
