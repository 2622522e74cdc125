"""
Shared fixtures: a fake requests session and clients/services wired to it.
"""
import json

import pytest
import requests

from comexstat.client import ComexstatClient
from comexstat.config import Settings
from comexstat.service import ComexstatService


def json_response(payload, status: int = 200) -> requests.Response:
    response = requests.Response()
    response.status_code = status
    response._content = json.dumps(payload).encode("utf-8")
    response.headers["Content-Type"] = "application/json"
    response.encoding = "utf-8"
    return response


class FakeSession:
    """Records every request and answers from a queue (last answer repeats)."""

    def __init__(self):
        self.headers: dict = {}
        self.max_redirects = 30
        self.verify = True
        self.calls: list[dict] = []
        self._answers: list = []

    def respond(self, payload, status: int = 200) -> "FakeSession":
        self._answers.append(json_response(payload, status))
        return self

    def respond_raw(self, response_or_exc) -> "FakeSession":
        self._answers.append(response_or_exc)
        return self

    def request(self, method, url, params=None, json=None, timeout=None, verify=None):
        self.calls.append({
            "method": method,
            "url": url,
            "params": params,
            "json": json,
            "timeout": timeout,
            "verify": verify,
        })
        if not self._answers:
            return json_response({"data": {}, "success": True})
        answer = self._answers.pop(0) if len(self._answers) > 1 else self._answers[0]
        if isinstance(answer, BaseException):
            raise answer
        return answer


@pytest.fixture
def fake_session() -> FakeSession:
    return FakeSession()


@pytest.fixture
def settings() -> Settings:
    return Settings(base_url="https://comexstat.test")


@pytest.fixture
def client(settings, fake_session) -> ComexstatClient:
    return ComexstatClient(settings, session=fake_session)


@pytest.fixture
def service(client) -> ComexstatService:
    return ComexstatService(client)


@pytest.fixture
def query_args() -> dict:
    return {
        "flow": "export",
        "period": {"from": "2023-01", "to": "2023-12"},
        "monthDetail": False,
        "filters": [{"filter": "country", "values": [105]}],
        "details": ["country", "state"],
        "metrics": ["metricFOB", "metricKG"],
    }
