from typing import Literal

from pydantic import ConfigDict, Field

from app.models.common import CamelModel


class MessagePart(CamelModel):
    # Non-text parts (tool calls, files, ...) are kept as-is.
    model_config = ConfigDict(extra="allow")

    type: str
    text: str | None = None


class Message(CamelModel):
    model_config = ConfigDict(extra="allow")

    id: str
    role: Literal["system", "user", "assistant"]
    parts: list[MessagePart] = Field(default_factory=list)

    @property
    def text(self) -> str:
        """Concatenated text of the message's text parts."""
        return "".join(p.text for p in self.parts if p.type == "text" and p.text)


class ConversationHistory(CamelModel):
    messages: list[Message] = Field(default_factory=list)
    updated_at: int  # epoch milliseconds
