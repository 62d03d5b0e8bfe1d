"""Client-side agent list: backend agents merged with stored custom agents."""

import logging
from collections.abc import Sequence
from typing import Literal

from app.client.api import BackendClient
from app.client.formatting import generate_id
from app.client.persistence import LocalPersistence, now_ms
from app.models.agent import Agent, BuiltinAgent, CustomAgentConfig

logger = logging.getLogger(__name__)

VOLCENGINE_MODEL_PREFIX = "doubao"
CLONE_SUFFIX = " (copy)"


def _sort_key(agent: Agent) -> tuple[int, int, str]:
    # Volcengine first, then built-in before custom, then by name.
    provider_rank = 0 if agent.model_id.startswith(VOLCENGINE_MODEL_PREFIX) else 1
    custom_rank = 1 if agent.kind == "custom" else 0
    return provider_rank, custom_rank, agent.name.casefold()


class AgentBook:
    def __init__(self, persistence: LocalPersistence, backend_agents: Sequence[BuiltinAgent]):
        self.persistence = persistence
        self.backend_agents = list(backend_agents)
        self.custom_agents = persistence.load_custom_agents()
        self.timestamps = persistence.get_all_conversation_timestamps()

    @classmethod
    def from_backend(cls, persistence: LocalPersistence, client: BackendClient) -> "AgentBook":
        return cls(persistence, client.list_agents())

    @property
    def agents(self) -> list[Agent]:
        return sorted([*self.backend_agents, *self.custom_agents], key=_sort_key)

    def get_agent_by_id(self, agent_id: str) -> Agent | None:
        return next((a for a in self.agents if a.id == agent_id), None)

    def get_agent_last_update(self, agent_id: str) -> int:
        return self.timestamps.get(agent_id, 0)

    def default_agent(self) -> Agent | None:
        """The first Volcengine agent in backend order, else the first backend agent."""
        preferred = next(
            (a for a in self.backend_agents if a.model_id.startswith(VOLCENGINE_MODEL_PREFIX)),
            None,
        )
        if preferred:
            return preferred
        if self.backend_agents:
            return self.backend_agents[0]
        agents = self.agents
        return agents[0] if agents else None

    def reload_custom_agents(self) -> None:
        self.custom_agents = self.persistence.load_custom_agents()

    def reload_timestamps(self) -> None:
        self.timestamps = self.persistence.get_all_conversation_timestamps()

    def build_custom_agent(
        self,
        *,
        mode: Literal["create", "edit", "clone"],
        name: str,
        model_id: str,
        system_prompt: str,
        temperature: float = 0.7,
        max_tokens: int | None = None,
        agent: Agent | None = None,
    ) -> CustomAgentConfig:
        """Validate editor input and build the config to store.

        ``edit`` keeps the id and creation time of the custom agent being
        edited; ``clone`` records the source agent as ``base_agent_id``.
        """
        name = name.strip()
        system_prompt = system_prompt.strip()
        if not name or not system_prompt:
            raise ValueError("Name and system prompt are required")
        known_models = {a.model_id for a in self.backend_agents}
        if model_id not in known_models:
            raise ValueError(
                f"Unknown modelId: {model_id}. Available: {', '.join(sorted(known_models))}"
            )
        if mode in ("edit", "clone") and agent is None:
            raise ValueError(f"Mode {mode} requires a source agent")

        now = now_ms()
        editing = mode == "edit" and isinstance(agent, CustomAgentConfig)
        return CustomAgentConfig(
            id=agent.id if editing else generate_id(),
            base_agent_id=agent.id if mode == "clone" else None,
            name=name,
            model_id=model_id,
            system_prompt=system_prompt,
            temperature=temperature,
            max_tokens=max_tokens or None,
            created_at=agent.created_at if editing else now,
            updated_at=now,
        )

    def clone_defaults(self, agent: Agent) -> dict:
        """Editor defaults when cloning ``agent``."""
        return {
            "name": f"{agent.name}{CLONE_SUFFIX}",
            "model_id": agent.model_id,
            "system_prompt": agent.system_prompt,
            "temperature": agent.temperature,
            "max_tokens": agent.max_tokens if isinstance(agent, CustomAgentConfig) else None,
        }

    def save_custom_agent(self, config: CustomAgentConfig) -> None:
        self.persistence.save_custom_agent(config)
        self.reload_custom_agents()

    def delete_custom_agent(self, agent_id: str) -> None:
        logger.info(f"Deleting custom agent {agent_id}")
        self.persistence.delete_custom_agent(agent_id)
        self.reload_custom_agents()
