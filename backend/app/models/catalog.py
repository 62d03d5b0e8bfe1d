from enum import Enum

from pydantic import BaseModel, ConfigDict


class ModelProvider(str, Enum):
    OPENAI = "openai"
    VOLCENGINE = "volcengine"


class CatalogEntry(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: int  # ordering key
    model_id: str
    name: str
    provider: ModelProvider
    model: str | None = None  # underlying OpenAI model
    model_id_env: str | None = None  # optional override of `model`
    endpoint_id_env: str | None = None  # Volcengine endpoint id variable
    system_prompt: str = ""
    temperature: float = 0.7
