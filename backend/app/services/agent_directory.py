from collections.abc import Iterable

from app.models.agent import BuiltinAgent
from app.models.catalog import CatalogEntry, ModelProvider
from app.services.catalog import MODEL_LIST
from app.services.errors import MisconfiguredModel


def _provider_rank(entry: CatalogEntry) -> int:
    return 0 if entry.provider is ModelProvider.VOLCENGINE else 1


class AgentDirectory:
    """Built-in agents derived one-to-one from catalog entries."""

    def __init__(self, catalog: Iterable[CatalogEntry] = MODEL_LIST):
        self.catalog = tuple(catalog)
        seen: set[str] = set()
        for entry in self.catalog:
            if entry.model_id in seen:
                raise MisconfiguredModel(f"Duplicate modelId in catalog: {entry.model_id}")
            seen.add(entry.model_id)

        ordered = sorted(self.catalog, key=lambda e: (_provider_rank(e), e.id))
        self.agents = [
            BuiltinAgent(
                id=entry.model_id,
                model_id=entry.model_id,
                name=entry.name,
                system_prompt=entry.system_prompt,
                temperature=entry.temperature,
            )
            for entry in ordered
        ]

    def get_agent_by_id(self, agent_id: str) -> BuiltinAgent | None:
        return next((a for a in self.agents if a.id == agent_id), None)

    def get_model_by_model_id(self, model_id: str) -> CatalogEntry | None:
        return next((e for e in self.catalog if e.model_id == model_id), None)

    def list_available_model_ids(self) -> str:
        return ", ".join(entry.model_id for entry in self.catalog)

    def model_ids_for(self, provider: ModelProvider) -> list[str]:
        return [entry.model_id for entry in self.catalog if entry.provider is provider]
