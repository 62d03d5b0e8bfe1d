from typing import Any

from app.client.crypto import mask_key
from app.client.persistence import LocalPersistence
from app.models.user_settings import UserSettings


class Preferences:
    """Cached view of the stored user settings."""

    def __init__(self, persistence: LocalPersistence):
        self.persistence = persistence
        self.settings: UserSettings = persistence.load_settings()

    def update(self, **updates: Any) -> UserSettings:
        self.settings = self.persistence.update_settings(updates)
        return self.settings

    def clear(self, field: str) -> UserSettings:
        if field not in UserSettings.model_fields:
            raise ValueError(f"Unknown setting: {field}")
        return self.update(**{field: None})

    def masked_openai_api_key(self) -> str | None:
        key = self.settings.openai_api_key
        return mask_key(key) if key else None
