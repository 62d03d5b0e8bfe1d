"""Local persistence for conversations, custom agents and user settings.

Everything lives in one key/value store under fixed prefixes, serialized
as JSON in the same camelCase layout the web client uses:

* ``agents-market-conversation-<agentId>``: one conversation history per agent
* ``agents-market-custom-agents``: the list of custom agent configs
* ``agents-market-settings``: the user settings record

Writes are best effort. A failed conversation write triggers a cleanup of
stale conversations and one retry; if that also fails the history is not
persisted and the failure is only logged. Collections and settings are
rewritten whole on every change (last writer wins).
"""

import json
import logging
import time
from collections.abc import Callable, Mapping
from dataclasses import dataclass
from typing import Any

from pydantic import TypeAdapter, ValidationError

from app.client.crypto import KeyCipher
from app.client.storage import KeyValueStorage, SQLStorage, StorageError, entry_size
from app.config import settings
from app.database import create_storage_engine, init_db
from app.models.agent import CustomAgentConfig
from app.models.conversation import ConversationHistory
from app.models.user_settings import UserSettings

logger = logging.getLogger(__name__)

STORAGE_KEY_PREFIX = "agents-market-conversation-"
CUSTOM_AGENTS_KEY = "agents-market-custom-agents"
SETTINGS_KEY = "agents-market-settings"

THIRTY_DAYS_MS = 30 * 24 * 60 * 60 * 1000
# Browsers allow roughly 5-10MB; 5MB is the conservative estimate.
ASSUMED_QUOTA_BYTES = 5 * 1024 * 1024

_custom_agents_adapter = TypeAdapter(list[CustomAgentConfig])


def now_ms() -> int:
    return int(time.time() * 1000)


@dataclass(frozen=True)
class StorageUsage:
    used: int
    total: int
    percentage: int


class LocalPersistence:
    def __init__(
        self,
        storage: KeyValueStorage,
        cipher: KeyCipher | None = None,
        clock: Callable[[], int] = now_ms,
    ):
        self.storage = storage
        self.cipher = cipher
        self.clock = clock

    # ------------------------------------------------------------------
    # Conversation history
    # ------------------------------------------------------------------
    def save_conversation_history(self, agent_id: str, history: ConversationHistory) -> None:
        key = f"{STORAGE_KEY_PREFIX}{agent_id}"
        payload = history.model_dump_json(by_alias=True, exclude_none=True)
        try:
            self.storage.set_item(key, payload)
        except StorageError as e:
            logger.error(f"Failed to save conversation for {agent_id}: {e}")
            self.cleanup_old_conversations()
            try:
                self.storage.set_item(key, payload)
            except StorageError as retry_error:
                # The history is dropped for this call; the next save retries.
                logger.error(
                    f"Failed to save conversation for {agent_id} after cleanup: {retry_error}"
                )

    def load_conversation_history(self, agent_id: str) -> ConversationHistory:
        data = self.storage.get_item(f"{STORAGE_KEY_PREFIX}{agent_id}")
        if not data:
            return ConversationHistory(messages=[], updated_at=self.clock())
        try:
            return ConversationHistory.model_validate_json(data)
        except ValidationError as e:
            logger.error(f"Failed to load conversation for {agent_id}: {e}")
            return ConversationHistory(messages=[], updated_at=self.clock())

    def delete_conversation_history(self, agent_id: str) -> None:
        self.storage.remove_item(f"{STORAGE_KEY_PREFIX}{agent_id}")

    def get_all_conversation_timestamps(self) -> dict[str, int]:
        timestamps: dict[str, int] = {}
        for key in self._conversation_keys():
            agent_id = key[len(STORAGE_KEY_PREFIX):]
            try:
                history = json.loads(self.storage.get_item(key) or "{}")
            except ValueError as e:
                logger.error(f"Failed to parse conversation for {agent_id}: {e}")
                continue
            timestamps[agent_id] = _updated_at(history) or 0
        return timestamps

    def cleanup_old_conversations(self) -> int:
        """Delete conversations older than 30 days or unreadable; return the count.

        Storage failures are logged and stop the sweep early.
        """
        now = self.clock()
        removed = 0
        try:
            keys_to_delete = []
            for key in self._conversation_keys():
                updated_at = self._stored_updated_at(key)
                if updated_at is None or now - updated_at > THIRTY_DAYS_MS:
                    keys_to_delete.append(key)

            for key in keys_to_delete:
                self.storage.remove_item(key)
                removed += 1
        except StorageError as e:
            logger.error(f"Failed to clean up old conversations: {e}")
        if removed:
            logger.info(f"Cleaned up {removed} old conversations")
        return removed

    # ------------------------------------------------------------------
    # Custom agents
    # ------------------------------------------------------------------
    def save_custom_agents(self, agents: list[CustomAgentConfig]) -> None:
        payload = _custom_agents_adapter.dump_json(agents, by_alias=True).decode()
        try:
            self.storage.set_item(CUSTOM_AGENTS_KEY, payload)
        except StorageError as e:
            logger.error(f"Failed to save custom agents: {e}")

    def load_custom_agents(self) -> list[CustomAgentConfig]:
        data = self.storage.get_item(CUSTOM_AGENTS_KEY)
        if not data:
            return []
        try:
            return _custom_agents_adapter.validate_json(data)
        except ValidationError as e:
            logger.error(f"Failed to load custom agents: {e}")
            return []

    def save_custom_agent(self, agent: CustomAgentConfig) -> None:
        agents = self.load_custom_agents()
        for index, existing in enumerate(agents):
            if existing.id == agent.id:
                agents[index] = agent
                break
        else:
            agents.append(agent)
        self.save_custom_agents(agents)

    def delete_custom_agent(self, agent_id: str) -> None:
        agents = self.load_custom_agents()
        self.save_custom_agents([a for a in agents if a.id != agent_id])

    # ------------------------------------------------------------------
    # Settings
    # ------------------------------------------------------------------
    def save_settings(self, user_settings: UserSettings) -> None:
        stored = user_settings
        if self.cipher and user_settings.openai_api_key:
            stored = user_settings.model_copy(
                update={"openai_api_key": self.cipher.encrypt(user_settings.openai_api_key)}
            )
        try:
            self.storage.set_item(
                SETTINGS_KEY, stored.model_dump_json(by_alias=True, exclude_none=True)
            )
        except StorageError as e:
            logger.error(f"Failed to save settings: {e}")

    def load_settings(self) -> UserSettings:
        data = self.storage.get_item(SETTINGS_KEY)
        if not data:
            return UserSettings()
        try:
            user_settings = UserSettings.model_validate_json(data)
        except ValidationError as e:
            logger.error(f"Failed to load settings: {e}")
            return UserSettings()
        if self.cipher and user_settings.openai_api_key:
            try:
                raw_key = self.cipher.decrypt(user_settings.openai_api_key)
            except ValueError as e:
                logger.error(f"Stored OpenAI API key is unreadable, ignoring it: {e}")
                raw_key = None
            user_settings = user_settings.model_copy(update={"openai_api_key": raw_key})
        return user_settings

    def update_settings(self, updates: Mapping[str, Any]) -> UserSettings:
        """Merge ``updates`` (snake_case field names) into the stored settings.

        A ``None`` value clears the field.
        """
        current = self.load_settings().model_dump()
        updated = UserSettings.model_validate({**current, **updates})
        self.save_settings(updated)
        return updated

    # ------------------------------------------------------------------
    # Usage
    # ------------------------------------------------------------------
    def get_storage_usage(self) -> StorageUsage:
        used = 0
        for key in self.storage.keys():
            used += entry_size(key, self.storage.get_item(key) or "")
        total = ASSUMED_QUOTA_BYTES
        return StorageUsage(used=used, total=total, percentage=round(used / total * 100))

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------
    def _conversation_keys(self) -> list[str]:
        return [key for key in self.storage.keys() if key.startswith(STORAGE_KEY_PREFIX)]

    def _stored_updated_at(self, key: str) -> int | None:
        """The stored updatedAt, or None when the entry is corrupt."""
        try:
            history = json.loads(self.storage.get_item(key) or "")
        except ValueError:
            return None
        return _updated_at(history)


def _updated_at(history: Any) -> int | None:
    """A stored history's numeric updatedAt, or None."""
    if not isinstance(history, dict):
        return None
    updated_at = history.get("updatedAt")
    if isinstance(updated_at, bool) or not isinstance(updated_at, (int, float)):
        return None
    return int(updated_at)


def open_local_persistence(storage_url: str | None = None) -> LocalPersistence:
    """Persistence over the configured SQL store, with key encryption."""
    engine = create_storage_engine(storage_url)
    init_db(engine)
    return LocalPersistence(
        SQLStorage(engine, quota_bytes=settings.storage_quota_bytes),
        cipher=KeyCipher(),
    )
