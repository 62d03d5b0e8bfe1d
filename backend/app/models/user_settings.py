from typing import Literal

from app.models.common import CamelModel


class UserSettings(CamelModel):
    openai_api_key: str | None = None
    default_model_id: str | None = None
    theme: Literal["light", "dark"] | None = None
