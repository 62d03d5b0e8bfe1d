"""Tests for resolving catalog model ids to provider-bound handles."""

import asyncio
from unittest.mock import AsyncMock, MagicMock

import pytest
from openai import AsyncOpenAI

from app.models.catalog import CatalogEntry, ModelProvider
from app.services.agent_directory import AgentDirectory
from app.services.credentials import CredentialResolver
from app.services.errors import MisconfiguredModel, MissingCredential, UnknownModel
from app.services.providers import ProviderClientCache
from app.services.registry import ModelHandle, ModelRegistry
from conftest import make_stream

GPT_4O_MINI = CatalogEntry(
    id=1,
    model_id="gpt-4o-mini",
    name="GPT-4o mini",
    provider=ModelProvider.OPENAI,
    model="gpt-4o-mini",
    system_prompt="Be helpful.",
    temperature=0.7,
)
DOUBAO_PRO = CatalogEntry(
    id=2,
    model_id="doubao-pro",
    name="Doubao Pro",
    provider=ModelProvider.VOLCENGINE,
    endpoint_id_env="EP_DOUBAO_PRO",
    system_prompt="Role-play.",
    temperature=0.8,
)
DOUBAO_BROKEN = CatalogEntry(
    id=3,
    model_id="doubao-broken",
    name="Broken",
    provider=ModelProvider.VOLCENGINE,
)


def make_registry(env: dict[str, str], *entries: CatalogEntry) -> ModelRegistry:
    return ModelRegistry(
        directory=AgentDirectory(entries or (GPT_4O_MINI, DOUBAO_PRO)),
        cache=ProviderClientCache(),
        resolver=CredentialResolver([env]),
    )


def test_volcengine_model_binds_endpoint_id():
    registry = make_registry(
        {"OPENAI_API_KEY": "sk-x", "VOLCENGINE_API_KEY": "volc", "EP_DOUBAO_PRO": "ep-123"}
    )
    handle = registry.get_model("doubao-pro")

    assert handle.provider is ModelProvider.VOLCENGINE
    assert handle.model == "ep-123"
    assert isinstance(handle.client, AsyncOpenAI)
    assert str(handle.client.base_url).startswith("https://ark.cn-beijing.volces.com/api/v3")


def test_unknown_model_lists_every_valid_id():
    registry = make_registry({"OPENAI_API_KEY": "sk-x", "EP_DOUBAO_PRO": "ep-123"})
    with pytest.raises(UnknownModel) as exc_info:
        registry.get_model("missing-id")
    assert "gpt-4o-mini, doubao-pro" in str(exc_info.value)


def test_openai_model_binds_underlying_model():
    registry = make_registry({"OPENAI_API_KEY": "sk-x"})
    handle = registry.get_model("gpt-4o-mini")
    assert handle.provider is ModelProvider.OPENAI
    assert handle.model == "gpt-4o-mini"
    assert handle.client.api_key == "sk-x"


def test_openai_model_override_from_environment():
    entry = GPT_4O_MINI.model_copy(update={"model_id_env": "OPENAI_MODEL_ID"})
    registry = make_registry({"OPENAI_API_KEY": "sk-x", "OPENAI_MODEL_ID": "gpt-4.1"}, entry)
    assert registry.get_model("gpt-4o-mini").model == "gpt-4.1"


@pytest.mark.parametrize(
    "env",
    [
        {},
        {"VOLCENGINE_API_KEY": "volc", "EP_DOUBAO_PRO": "ep-123"},
    ],
)
def test_missing_endpoint_mapping_is_misconfigured(env: dict[str, str]):
    registry = make_registry(env, DOUBAO_BROKEN)
    with pytest.raises(MisconfiguredModel):
        registry.get_model("doubao-broken")


def test_missing_openai_key():
    registry = make_registry({})
    with pytest.raises(MissingCredential, match="OPENAI_API_KEY"):
        registry.get_model("gpt-4o-mini")


def test_missing_endpoint_variable():
    registry = make_registry({"VOLCENGINE_API_KEY": "volc"})
    with pytest.raises(MissingCredential, match="EP_DOUBAO_PRO"):
        registry.get_model("doubao-pro")


def test_handles_share_client_but_are_rebuilt():
    second = DOUBAO_PRO.model_copy(
        update={"id": 4, "model_id": "doubao-pro-2", "endpoint_id_env": "EP_DOUBAO_PRO_2"}
    )
    registry = make_registry(
        {"VOLC_API_KEY": "volc", "EP_DOUBAO_PRO": "ep-1", "EP_DOUBAO_PRO_2": "ep-2"},
        DOUBAO_PRO,
        second,
    )
    a = registry.get_model("doubao-pro")
    b = registry.get_model("doubao-pro-2")
    again = registry.get_model("doubao-pro")

    assert a.client is b.client is again.client
    assert a is not again
    assert (a.model, b.model) == ("ep-1", "ep-2")
    assert len(registry.cache) == 1


def test_stream_text_yields_deltas():
    client = MagicMock()
    client.chat.completions.create = AsyncMock(return_value=make_stream("a", "", "b"))
    handle = ModelHandle(provider=ModelProvider.OPENAI, model="gpt-4o", client=client)

    async def collect():
        return [d async for d in handle.stream_text([{"role": "user", "content": "hi"}], 0.5, 64)]

    assert asyncio.run(collect()) == ["a", "b"]
    client.chat.completions.create.assert_awaited_once_with(
        model="gpt-4o",
        messages=[{"role": "user", "content": "hi"}],
        temperature=0.5,
        stream=True,
        max_tokens=64,
    )
