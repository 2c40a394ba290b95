import logging

import pytest
import requests

from app.services.push_channel import HttpPushChannel, LoggingPushChannel, PushDispatcher, PushEvent


class FakeResponse:
    def __init__(self, status_code=200):
        self.status_code = status_code

    def raise_for_status(self):
        if self.status_code >= 400:
            raise requests.HTTPError(f"{self.status_code} error")


class FakeSession:
    def __init__(self, status_code=200):
        self.status_code = status_code
        self.calls = []

    def post(self, url, json=None, timeout=None):
        self.calls.append((url, json, timeout))
        return FakeResponse(self.status_code)


def test_http_channel_posts_event_as_json():
    session = FakeSession()
    channel = HttpPushChannel("http://push.local/events", timeout=1.5, session=session)

    channel.publish(PushEvent(recipient_id=3, type="Comment", message="hi", reference_id=9))

    assert session.calls == [(
        "http://push.local/events",
        {"recipient_id": 3, "type": "Comment", "message": "hi", "reference_id": 9},
        1.5,
    )]


def test_http_channel_raises_on_error_status():
    channel = HttpPushChannel("http://push.local/events", session=FakeSession(status_code=503))
    with pytest.raises(requests.HTTPError):
        channel.publish(PushEvent(recipient_id=1, type="Follow", message="x"))


def test_dispatcher_logs_and_swallows_delivery_failures(caplog):
    dispatcher = PushDispatcher(HttpPushChannel("http://push.local", session=FakeSession(status_code=500)))
    with caplog.at_level(logging.ERROR, logger="app.services.push_channel"):
        dispatcher.publish(PushEvent(recipient_id=1, type="Follow", message="x"))
        dispatcher.wait(timeout=5)
    dispatcher.shutdown()

    assert "Push delivery failed for user 1" in caplog.text


def test_dispatcher_drops_events_after_shutdown(caplog):
    dispatcher = PushDispatcher(LoggingPushChannel())
    dispatcher.shutdown()

    with caplog.at_level(logging.WARNING, logger="app.services.push_channel"):
        dispatcher.publish(PushEvent(recipient_id=2, type="Follow", message="late"))

    assert "dropping event for user 2" in caplog.text
