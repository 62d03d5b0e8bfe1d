from app.models.agent import Agent, BuiltinAgent, CustomAgentConfig
from app.models.catalog import CatalogEntry, ModelProvider
from app.models.conversation import ConversationHistory, Message, MessagePart
from app.models.storage import StorageItem
from app.models.user_settings import UserSettings

__all__ = [
    "Agent",
    "BuiltinAgent",
    "CatalogEntry",
    "ConversationHistory",
    "CustomAgentConfig",
    "Message",
    "MessagePart",
    "ModelProvider",
    "StorageItem",
    "UserSettings",
]
