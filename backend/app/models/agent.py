from typing import Annotated, Literal, Union

from pydantic import Field

from app.models.common import CamelModel


class BuiltinAgent(CamelModel):
    kind: Literal["builtin"] = "builtin"
    id: str
    model_id: str
    name: str
    system_prompt: str
    temperature: float


class CustomAgentConfig(CamelModel):
    kind: Literal["custom"] = "custom"
    id: str
    base_agent_id: str | None = None
    name: str
    model_id: str
    system_prompt: str
    temperature: float = 0.7
    max_tokens: int | None = None
    created_at: int  # epoch milliseconds
    updated_at: int


Agent = Annotated[Union[BuiltinAgent, CustomAgentConfig], Field(discriminator="kind")]
