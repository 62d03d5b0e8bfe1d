"""Chat agent service: streams replies from the resolved provider model."""

import json
import logging
from collections.abc import AsyncIterator, Sequence

from openai import OpenAIError

from app.models.conversation import Message
from app.services.registry import ModelHandle

logger = logging.getLogger(__name__)

DONE_EVENT = "data: [DONE]\n\n"


def _event(payload: dict) -> str:
    return f"data: {json.dumps(payload, ensure_ascii=False)}\n\n"


class ChatAgentService:
    """Turns a UI transcript into provider chat messages and streams the reply."""

    def compose_messages(
        self,
        system_prompt: str,
        messages: Sequence[Message],
    ) -> list[dict[str, str]]:
        """Build chat-completion messages from the agent prompt and transcript.

        Only text parts are forwarded; messages without text are dropped.
        """
        api_messages = []
        if system_prompt:
            api_messages.append({"role": "system", "content": system_prompt})
        for msg in messages:
            text = msg.text
            if text:
                api_messages.append({"role": msg.role, "content": text})
        return api_messages

    async def stream_events(
        self,
        handle: ModelHandle,
        system_prompt: str,
        messages: Sequence[Message],
        temperature: float,
        max_tokens: int | None = None,
    ) -> AsyncIterator[str]:
        """Yield server-sent events carrying text deltas, then a DONE marker."""
        api_messages = self.compose_messages(system_prompt, messages)
        try:
            async for delta in handle.stream_text(
                api_messages, temperature=temperature, max_tokens=max_tokens
            ):
                yield _event({"type": "text-delta", "delta": delta})
        except OpenAIError as e:
            logger.error(f"Streaming from {handle.provider.value}/{handle.model} failed: {e}")
            yield _event({"type": "error", "errorText": str(e)})
        yield DONE_EVENT


chat_agent = ChatAgentService()
