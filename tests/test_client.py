"""Tests for the API client."""
from typing import Any, List

import pytest
import requests

from revision_hub.client import ApiClientError, ExamApiClient


class FakeResponse:
    def __init__(self, status_code: int, payload: Any = None, text_only: bool = False):
        self.status_code = status_code
        self._payload = payload
        self._text_only = text_only

    def json(self):
        if self._text_only:
            raise ValueError("not json")
        return self._payload


class FakeSession:
    def __init__(self, response: FakeResponse = None, error: Exception = None):
        self.response = response
        self.error = error
        self.urls: List[str] = []

    def get(self, url: str, timeout: float = None):
        self.urls.append(url)
        if self.error is not None:
            raise self.error
        return self.response


def _client(session: FakeSession) -> ExamApiClient:
    return ExamApiClient("http://api.test/api/", timeout=1.0, session=session)


class TestExamApiClient:
    """Tests for ExamApiClient."""

    def test_list_exams(self) -> None:
        session = FakeSession(FakeResponse(200, [{"id": "m1"}]))
        assert _client(session).list_exams() == [{"id": "m1"}]
        assert session.urls == ["http://api.test/api/exams"]

    def test_get_exam_quotes_id(self) -> None:
        session = FakeSession(FakeResponse(200, {"exam": {"id": "a b"}, "questions": []}))
        _client(session).get_exam("a b")
        assert session.urls == ["http://api.test/api/exams/a%20b"]

    def test_server_error_message_is_surfaced(self) -> None:
        session = FakeSession(FakeResponse(404, {"error": "試験が見つかりません。"}))
        with pytest.raises(ApiClientError) as excinfo:
            _client(session).get_exam("nope")
        assert excinfo.value.message == "試験が見つかりません。"
        assert excinfo.value.status_code == 404

    def test_non_json_error_gets_generic_message(self) -> None:
        session = FakeSession(FakeResponse(502, text_only=True))
        with pytest.raises(ApiClientError) as excinfo:
            _client(session).list_exams()
        assert "502" in excinfo.value.message

    def test_connection_error(self) -> None:
        session = FakeSession(error=requests.ConnectionError("refused"))
        with pytest.raises(ApiClientError):
            _client(session).list_exams()

    def test_unexpected_shape(self) -> None:
        session = FakeSession(FakeResponse(200, {"not": "a list"}))
        with pytest.raises(ApiClientError):
            _client(session).list_exams()

    def test_health_accepts_503(self) -> None:
        session = FakeSession(FakeResponse(503, {"status": "unhealthy"}))
        assert _client(session).health()["status"] == "unhealthy"
