from fastapi import APIRouter, Depends

from app.api.deps import get_directory
from app.models.common import CamelModel
from app.services.agent_directory import AgentDirectory

router = APIRouter(prefix="/agents", tags=["agents"])


class AgentListItem(CamelModel):
    id: str
    model_id: str
    name: str
    system_prompt: str
    temperature: float


class AgentListResponse(CamelModel):
    items: list[AgentListItem]


@router.get("", response_model=AgentListResponse)
async def list_agents(directory: AgentDirectory = Depends(get_directory)):
    return AgentListResponse(
        items=[
            AgentListItem(
                id=agent.id,
                model_id=agent.model_id,
                name=agent.name,
                system_prompt=agent.system_prompt,
                temperature=agent.temperature,
            )
            for agent in directory.agents
        ]
    )
