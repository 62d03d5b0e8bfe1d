from datetime import UTC, datetime
from typing import Literal

from fastapi import APIRouter, Depends
from pydantic import BaseModel

from app.api.deps import get_directory, get_resolver
from app.models.catalog import ModelProvider
from app.services.agent_directory import AgentDirectory
from app.services.credentials import CredentialResolver
from app.services.providers import check_provider_configuration

router = APIRouter(tags=["health"])


class ProviderStatus(BaseModel):
    configured: bool
    models: list[str]
    error: str | None = None


class ProvidersStatus(BaseModel):
    volcengine: ProviderStatus
    openai: ProviderStatus


class HealthcheckResponse(BaseModel):
    status: Literal["ok", "error"]
    providers: ProvidersStatus
    timestamp: str


@router.get("/healthcheck", response_model=HealthcheckResponse)
async def healthcheck(
    directory: AgentDirectory = Depends(get_directory),
    resolver: CredentialResolver = Depends(get_resolver),
):
    """Report provider configuration; ok when at least one provider can serve."""
    configuration = check_provider_configuration(resolver)
    providers = {
        provider.value: ProviderStatus(
            configured=configuration[provider.value]["configured"],
            models=directory.model_ids_for(provider),
            error=configuration[provider.value]["error"],
        )
        for provider in ModelProvider
    }
    any_configured = any(p.configured for p in providers.values())
    return HealthcheckResponse(
        status="ok" if any_configured else "error",
        providers=ProvidersStatus(**providers),
        timestamp=datetime.now(UTC).isoformat(),
    )
