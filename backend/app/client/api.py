"""HTTP client for the agents market backend."""

import json
from collections.abc import Iterator, Sequence

import httpx

from app.config import settings
from app.models.agent import BuiltinAgent
from app.models.conversation import Message


class BackendError(RuntimeError):
    """The backend rejected a request or reported a stream error."""

    def __init__(self, message: str, status_code: int | None = None):
        self.status_code = status_code
        super().__init__(message)


def _error_message(resp: httpx.Response) -> str:
    try:
        payload = resp.json()
    except ValueError:
        payload = None
    detail = payload.get("detail") if isinstance(payload, dict) else None
    return str(detail) if detail else f"Backend error ({resp.status_code}): {resp.text[:200]}"


class BackendClient:
    def __init__(
        self,
        base_url: str | None = None,
        http_client: httpx.Client | None = None,
        timeout: float = 120.0,
    ):
        self.base_url = (base_url or settings.backend_api_url).rstrip("/")
        self.http = http_client or httpx.Client(timeout=timeout)

    def list_agents(self) -> list[BuiltinAgent]:
        resp = self.http.get(f"{self.base_url}/agents")
        if resp.is_error:
            raise BackendError(_error_message(resp), resp.status_code)
        return [BuiltinAgent.model_validate(item) for item in resp.json()["items"]]

    def healthcheck(self) -> dict:
        resp = self.http.get(f"{self.base_url}/healthcheck")
        if resp.is_error:
            raise BackendError(_error_message(resp), resp.status_code)
        return resp.json()

    def stream_chat(
        self,
        messages: Sequence[Message],
        *,
        agent_id: str | None = None,
        model_id: str | None = None,
        system_prompt: str | None = None,
        temperature: float | None = None,
        max_tokens: int | None = None,
    ) -> Iterator[str]:
        """Send the transcript and yield reply text deltas as they arrive."""
        body = {
            "agentId": agent_id,
            "modelId": model_id,
            "systemPrompt": system_prompt,
            "temperature": temperature,
            "maxTokens": max_tokens,
            "messages": [m.model_dump(by_alias=True, exclude_none=True) for m in messages],
        }
        body = {k: v for k, v in body.items() if v is not None}

        with self.http.stream("POST", f"{self.base_url}/chat", json=body) as resp:
            if resp.is_error:
                resp.read()
                raise BackendError(_error_message(resp), resp.status_code)
            for line in resp.iter_lines():
                if not line.startswith("data: "):
                    continue
                data_str = line[6:]
                if data_str == "[DONE]":
                    break
                try:
                    event = json.loads(data_str)
                except json.JSONDecodeError:
                    continue
                if event.get("type") == "text-delta":
                    yield event.get("delta", "")
                elif event.get("type") == "error":
                    raise BackendError(event.get("errorText") or "unknown stream error")

    def close(self) -> None:
        self.http.close()
