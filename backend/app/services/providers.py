"""Provider credentials and the per-credential client cache."""

import logging
from collections.abc import Callable
from dataclasses import dataclass

from openai import AsyncOpenAI

from app.config import settings
from app.models.catalog import ModelProvider
from app.services.credentials import (
    OPENAI_API_KEY,
    VOLC_API_KEY,
    VOLCENGINE_API_KEY,
    VOLCENGINE_BASE_URL,
    CredentialResolver,
)

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ProviderCredentials:
    provider: ModelProvider
    api_key: str
    base_url: str | None = None

    @property
    def cache_key(self) -> str:
        if self.provider is ModelProvider.VOLCENGINE:
            return f"{self.provider.value}::{self.base_url}::{self.api_key}"
        return f"{self.provider.value}::{self.api_key}"


def resolve_credentials(
    provider: ModelProvider, resolver: CredentialResolver
) -> ProviderCredentials:
    """Resolve the credentials a provider needs, failing on the first gap."""
    if provider is ModelProvider.OPENAI:
        return ProviderCredentials(provider=provider, api_key=resolver.resolve(OPENAI_API_KEY))
    base_url = resolver.get(VOLCENGINE_BASE_URL, default=settings.volcengine_base_url)
    api_key = resolver.resolve(VOLCENGINE_API_KEY, VOLC_API_KEY)
    return ProviderCredentials(provider=provider, api_key=api_key, base_url=base_url)


def create_openai_client(credentials: ProviderCredentials) -> AsyncOpenAI:
    return AsyncOpenAI(api_key=credentials.api_key, base_url=credentials.base_url)


class ProviderClientCache:
    """Memoize one client per distinct credential tuple.

    Entries are only ever added. Two requests missing on the same key at
    once may both build a client; the last one stored wins and both are
    equivalent.
    """

    def __init__(
        self,
        factory: Callable[[ProviderCredentials], object] = create_openai_client,
    ):
        self._factory = factory
        self._clients: dict[str, object] = {}

    def get_client(self, credentials: ProviderCredentials) -> object:
        key = credentials.cache_key
        client = self._clients.get(key)
        if client is None:
            logger.info(f"Creating {credentials.provider.value} client")
            client = self._factory(credentials)
            self._clients[key] = client
        return client

    def __len__(self) -> int:
        return len(self._clients)


def check_provider_configuration(resolver: CredentialResolver) -> dict[str, dict]:
    """Report which providers have an API key available."""
    volcengine_key = resolver.get(VOLCENGINE_API_KEY, VOLC_API_KEY)
    openai_key = resolver.get(OPENAI_API_KEY)
    return {
        ModelProvider.VOLCENGINE.value: {
            "configured": bool(volcengine_key),
            "error": None if volcengine_key else "Doubao API key is not configured",
        },
        ModelProvider.OPENAI.value: {
            "configured": bool(openai_key),
            "error": None if openai_key else "OpenAI API key is not configured",
        },
    }
