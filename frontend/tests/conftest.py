import json
import sys
from pathlib import Path

FRONTEND_DIR = Path(__file__).resolve().parents[1]
if str(FRONTEND_DIR) not in sys.path:
    sys.path.insert(0, str(FRONTEND_DIR))

import httpx
import pytest

from ats_console.api import CandidateApiService

BASE_URL = "http://ats.test/api"


class Recorder:
    """MockTransport handler that records requests and replays canned responses"""

    def __init__(self):
        self.requests = []
        self.responses = []

    def reply(self, status_code=200, body=None):
        self.responses.append((status_code, body))
        return self

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        status_code, body = self.responses.pop(0) if self.responses else (200, {"success": True})
        return httpx.Response(status_code, json=body)

    @property
    def last(self) -> httpx.Request:
        return self.requests[-1]

    def last_json(self):
        return json.loads(self.last.content)


@pytest.fixture
def recorder():
    return Recorder()


@pytest.fixture
def api(recorder):
    client = httpx.Client(transport=httpx.MockTransport(recorder))
    service = CandidateApiService(BASE_URL, client=client)
    yield service
    service.close()
