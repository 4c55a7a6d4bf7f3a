import pytest
import requests

from thumbnailer.reporter import StatusReporter


class FakeResponse:
    def __init__(self, status_code: int = 200, payload=None, text: str = "") -> None:
        self.status_code = status_code
        self._payload = payload
        self.text = text

    def json(self):
        if self._payload is None:
            raise ValueError("No JSON object could be decoded")
        return self._payload


class FakeSession:
    def __init__(self, *responses) -> None:
        self.responses = list(responses)
        self.posts: list[dict] = []

    def post(self, url, json=None, headers=None, timeout=None):
        self.posts.append({"url": url, "json": json, "headers": headers, "timeout": timeout})
        response = self.responses.pop(0)
        if isinstance(response, Exception):
            raise response
        return response


ENDPOINT = "https://gallery.example.com/api/"


def test_authenticates_then_reports_duration() -> None:
    session = FakeSession(FakeResponse(200, {"token": "abc123"}), FakeResponse(200, {}))
    StatusReporter(session, timeout=5).report("videos/clip.mp4", 42, ENDPOINT, "bot", "pw")

    auth, update = session.posts
    assert auth["url"] == "https://gallery.example.com/api/auth"
    assert auth["json"] == {"username": "bot", "password": "pw"}
    assert auth["timeout"] == 5
    assert update["url"] == "https://gallery.example.com/api/gallery/update_video_duration"
    assert update["json"] == {"original": "videos/clip.mp4", "duration": 42}
    assert update["headers"] == {"Authorization": "Bearer abc123"}


def test_endpoint_without_trailing_slash() -> None:
    session = FakeSession(FakeResponse(200, {"token": "t"}), FakeResponse(200, {}))
    StatusReporter(session).report("clip.mp4", 1, "https://gallery.example.com/api", "u", "p")
    assert session.posts[0]["url"] == "https://gallery.example.com/api/auth"


@pytest.mark.parametrize(
    "auth_response",
    [
        FakeResponse(401, {"error": "bad credentials"}),
        FakeResponse(500),
        FakeResponse(200, None),
        FakeResponse(200, {"message": "ok"}),
        requests.ConnectionError("connection refused"),
        requests.Timeout("timed out"),
    ],
)
def test_failed_auth_skips_update_and_does_not_raise(auth_response) -> None:
    session = FakeSession(auth_response)
    StatusReporter(session).report("clip.mp4", 12, ENDPOINT, "bot", "pw")
    assert len(session.posts) == 1


@pytest.mark.parametrize(
    "update_response",
    [FakeResponse(403, text="forbidden"), requests.ConnectionError("reset")],
)
def test_failed_update_does_not_raise(update_response) -> None:
    session = FakeSession(FakeResponse(200, {"token": "t"}), update_response)
    StatusReporter(session).report("clip.mp4", 12, ENDPOINT, "bot", "pw")
    assert len(session.posts) == 2


def test_unconfigured_endpoint_makes_no_calls() -> None:
    session = FakeSession()
    StatusReporter(session).report("clip.mp4", 12, "", "", "")
    assert session.posts == []
