import logging

from fastapi import APIRouter, Depends, HTTPException
from fastapi.responses import StreamingResponse
from pydantic import Field

from app.api.deps import get_directory, get_registry
from app.models.common import CamelModel
from app.models.conversation import Message
from app.services.agent_directory import AgentDirectory
from app.services.chat_agent import chat_agent
from app.services.errors import ModelRegistryError
from app.services.registry import ModelRegistry

logger = logging.getLogger(__name__)

router = APIRouter(tags=["chat"])

DEFAULT_TEMPERATURE = 0.7


class ChatRequest(CamelModel):
    agent_id: str | None = None
    model_id: str | None = None
    system_prompt: str | None = None
    temperature: float | None = Field(default=None, ge=0, le=2)
    max_tokens: int | None = Field(default=None, gt=0)
    messages: list[Message]


@router.post("/chat")
async def chat(
    body: ChatRequest,
    directory: AgentDirectory = Depends(get_directory),
    registry: ModelRegistry = Depends(get_registry),
):
    # Built-in agent ids equal their model ids, so an unknown agent id
    # falls through to the registry and fails with the list of valid ids.
    model_id = body.model_id or body.agent_id
    if not model_id:
        raise HTTPException(status_code=400, detail="agentId or modelId is required")
    agent = directory.get_agent_by_id(body.agent_id) if body.agent_id else None

    try:
        handle = registry.get_model(model_id)
    except ModelRegistryError as e:
        raise HTTPException(status_code=400, detail=str(e))

    system_prompt = body.system_prompt
    if system_prompt is None:
        system_prompt = agent.system_prompt if agent else ""
    temperature = body.temperature
    if temperature is None:
        temperature = agent.temperature if agent else DEFAULT_TEMPERATURE

    logger.info(f"Chat request for {model_id} with {len(body.messages)} messages")
    return StreamingResponse(
        chat_agent.stream_events(
            handle,
            system_prompt=system_prompt,
            messages=body.messages,
            temperature=temperature,
            max_tokens=body.max_tokens,
        ),
        media_type="text/event-stream",
    )
