import json

import httpx
import pytest
from fastapi.testclient import TestClient

from app.client.api import BackendClient, BackendError
from app.models.conversation import Message, MessagePart


def _messages(text: str = "Hi") -> list[Message]:
    return [Message(id="m1", role="user", parts=[MessagePart(type="text", text=text)])]


@pytest.fixture
def backend(client: TestClient) -> BackendClient:
    return BackendClient(base_url="http://testserver/api", http_client=client)


def test_list_agents(backend: BackendClient):
    agents = backend.list_agents()
    assert [a.id for a in agents][:2] == ["doubao-pro", "doubao-lite"]
    assert all(a.kind == "builtin" for a in agents)


def test_healthcheck(backend: BackendClient):
    data = backend.healthcheck()
    assert data["status"] == "ok"
    assert data["providers"]["openai"]["configured"] is True


def test_stream_chat(backend: BackendClient):
    deltas = list(backend.stream_chat(_messages(), agent_id="doubao-lite"))
    assert "".join(deltas) == "Hello, world"


def test_stream_chat_surfaces_registry_error(backend: BackendClient):
    with pytest.raises(BackendError, match="Unknown modelId: nope") as exc_info:
        list(backend.stream_chat(_messages(), agent_id="nope"))
    assert exc_info.value.status_code == 400


def _mock_backend(handler) -> BackendClient:
    return BackendClient(
        base_url="http://backend.test/api",
        http_client=httpx.Client(transport=httpx.MockTransport(handler)),
    )


def test_stream_error_event_raises():
    def handler(request: httpx.Request) -> httpx.Response:
        body = (
            'data: {"type": "text-delta", "delta": "par"}\n\n'
            'data: {"type": "error", "errorText": "rate limited"}\n\n'
            "data: [DONE]\n\n"
        )
        return httpx.Response(200, text=body, headers={"content-type": "text/event-stream"})

    backend = _mock_backend(handler)
    stream = backend.stream_chat(_messages(), model_id="gpt-4o")
    assert next(stream) == "par"
    with pytest.raises(BackendError, match="rate limited"):
        next(stream)


def test_request_body_omits_unset_fields():
    captured = {}

    def handler(request: httpx.Request) -> httpx.Response:
        captured["body"] = request.content
        return httpx.Response(200, text="data: [DONE]\n\n")

    backend = _mock_backend(handler)
    assert list(backend.stream_chat(_messages("Yo"), model_id="gpt-4o", temperature=0.3)) == []
    body = json.loads(captured["body"])
    assert body == {
        "modelId": "gpt-4o",
        "temperature": 0.3,
        "messages": [{"id": "m1", "role": "user", "parts": [{"type": "text", "text": "Yo"}]}],
    }


def test_non_json_error_body():
    backend = _mock_backend(lambda request: httpx.Response(502, text="Bad Gateway"))
    with pytest.raises(BackendError, match="Backend error \\(502\\)"):
        backend.list_agents()
