"""Resolve a catalog model id to a handle bound to a provider client."""

import logging
from collections.abc import AsyncIterator
from dataclasses import dataclass
from typing import Any

from app.models.catalog import ModelProvider
from app.services.agent_directory import AgentDirectory
from app.services.credentials import CredentialResolver
from app.services.errors import MisconfiguredModel, UnknownModel
from app.services.providers import ProviderClientCache, resolve_credentials

logger = logging.getLogger(__name__)


@dataclass
class ModelHandle:
    """A provider client bound to one underlying model or endpoint id."""

    provider: ModelProvider
    model: str
    client: Any  # AsyncOpenAI-compatible

    async def stream_text(
        self,
        messages: list[dict[str, str]],
        temperature: float,
        max_tokens: int | None = None,
    ) -> AsyncIterator[str]:
        """Yield text deltas from a streamed chat completion."""
        kwargs: dict[str, Any] = {
            "model": self.model,
            "messages": messages,
            "temperature": temperature,
            "stream": True,
        }
        if max_tokens:
            kwargs["max_tokens"] = max_tokens
        stream = await self.client.chat.completions.create(**kwargs)
        async for chunk in stream:
            if not chunk.choices:
                continue
            delta = chunk.choices[0].delta.content
            if delta:
                yield delta


class ModelRegistry:
    def __init__(
        self,
        directory: AgentDirectory,
        cache: ProviderClientCache,
        resolver: CredentialResolver,
    ):
        self.directory = directory
        self.cache = cache
        self.resolver = resolver

    def get_model(self, model_id: str) -> ModelHandle:
        entry = self.directory.get_model_by_model_id(model_id)
        if entry is None:
            logger.warning(f"Requested unknown model {model_id}")
            raise UnknownModel(model_id, self.directory.list_available_model_ids())

        if entry.provider is ModelProvider.OPENAI:
            client = self.cache.get_client(resolve_credentials(entry.provider, self.resolver))
            model = entry.model or entry.model_id
            if entry.model_id_env:
                model = self.resolver.get(entry.model_id_env, default=model)
            return ModelHandle(provider=entry.provider, model=model, client=client)

        if not entry.endpoint_id_env:
            raise MisconfiguredModel(
                f"Model {model_id} is missing endpoint_id_env in the model catalog"
            )
        client = self.cache.get_client(resolve_credentials(entry.provider, self.resolver))
        endpoint_id = self.resolver.resolve(entry.endpoint_id_env)
        return ModelHandle(provider=entry.provider, model=endpoint_id, client=client)
