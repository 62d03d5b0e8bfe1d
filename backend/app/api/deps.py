from fastapi import Depends, Request

from app.services.agent_directory import AgentDirectory
from app.services.credentials import CredentialResolver
from app.services.providers import ProviderClientCache
from app.services.registry import ModelRegistry


def get_directory(request: Request) -> AgentDirectory:
    return request.app.state.directory


def get_client_cache(request: Request) -> ProviderClientCache:
    return request.app.state.client_cache


def get_resolver() -> CredentialResolver:
    return CredentialResolver.from_environ()


def get_registry(
    directory: AgentDirectory = Depends(get_directory),
    cache: ProviderClientCache = Depends(get_client_cache),
    resolver: CredentialResolver = Depends(get_resolver),
) -> ModelRegistry:
    return ModelRegistry(directory=directory, cache=cache, resolver=resolver)
