import json

import httpx
import openai
import pytest
from fastapi.testclient import TestClient
from langchain_core.language_models.fake_chat_models import FakeListChatModel

from api_main import app, get_roast_client
from roast_client import RoastCompletionClient


def status_error(status_code: int) -> openai.APIStatusError:
    request = httpx.Request("POST", "https://api.openai.com/v1/chat/completions")
    response = httpx.Response(status_code, request=request)
    return openai.APIStatusError(
        f"Error code: {status_code}", response=response, body=None
    )


class UpstreamDownChatModel(FakeListChatModel):
    """Every call fails the way the OpenAI SDK reports a 503."""

    responses: list = []

    def _call(self, *args, **kwargs) -> str:
        raise status_error(503)


def raising_llm(make_error) -> FakeListChatModel:
    """Chat model whose every call raises `make_error()`."""

    class RaisingChatModel(FakeListChatModel):
        responses: list = []

        def _call(self, *args, **kwargs) -> str:
            raise make_error()

    return RaisingChatModel()


def connection_error() -> openai.APIConnectionError:
    return openai.APIConnectionError(
        request=httpx.Request("POST", "https://api.openai.com/v1/chat/completions")
    )


class RecordingFactory:
    """llm_factory stand-in: hands out a prepared chat model and records each call."""

    def __init__(self, llm):
        self.llm = llm
        self.api_keys = []

    def __call__(self, api_key: str):
        self.api_keys.append(api_key)
        return self.llm


def fake_llm(content) -> FakeListChatModel:
    if not isinstance(content, str):
        content = json.dumps(content)
    return FakeListChatModel(responses=[content])


def make_roasts(n: int):
    return [
        {"screen": f"screen {i}", "done": f"done {i}", "missed": f"missed {i}"}
        for i in range(n)
    ]


@pytest.fixture
def roast_payload():
    return {
        "habit": "exercise",
        "reason": "lazy",
        "tone": "brutal",
        "streak": 3,
        "consecutiveMisses": 2,
        "escalationState": 1,
    }


@pytest.fixture
def api():
    """
    TestClient factory. Pass the RoastCompletionClient the endpoint should use;
    the default has no key, so every request is served from the fallback pool.
    """

    def _make(roast_client: RoastCompletionClient = None) -> TestClient:
        roast_client = roast_client or RoastCompletionClient(api_key=None)
        app.dependency_overrides[get_roast_client] = lambda: roast_client
        return TestClient(app)

    yield _make
    app.dependency_overrides.clear()
