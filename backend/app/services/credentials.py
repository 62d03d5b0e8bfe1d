"""Credential lookup over an ordered list of key/value sources."""

import os
from collections.abc import Mapping, Sequence

from app.services.errors import MissingCredential

OPENAI_API_KEY = "OPENAI_API_KEY"
OPENAI_MODEL_ID = "OPENAI_MODEL_ID"
VOLCENGINE_BASE_URL = "VOLCENGINE_BASE_URL"
VOLCENGINE_API_KEY = "VOLCENGINE_API_KEY"
VOLC_API_KEY = "VOLC_API_KEY"  # legacy alias of VOLCENGINE_API_KEY

_HINTS = {
    OPENAI_API_KEY: (
        "OpenAI API key is not configured. "
        "Set OPENAI_API_KEY in the environment."
    ),
    VOLCENGINE_API_KEY: (
        "Doubao API key is not configured. "
        "Set VOLCENGINE_API_KEY or VOLC_API_KEY in the environment."
    ),
}
_HINTS[VOLC_API_KEY] = _HINTS[VOLCENGINE_API_KEY]


class CredentialResolver:
    """Resolve named values from sources consulted in priority order.

    Each key name is tried against every source before the next alias is
    considered, so a primary name set anywhere beats a legacy alias.
    Empty strings count as unset.
    """

    def __init__(self, sources: Sequence[Mapping[str, str]]):
        self.sources = list(sources)

    @classmethod
    def from_environ(cls, overrides: Mapping[str, str] | None = None) -> "CredentialResolver":
        """Supplied overrides first, then the process environment."""
        return cls([overrides or {}, os.environ])

    def get(self, key: str, *aliases: str, default: str | None = None) -> str | None:
        for name in (key, *aliases):
            for source in self.sources:
                value = source.get(name)
                if value:
                    return value
        return default

    def resolve(self, key: str, *aliases: str) -> str:
        value = self.get(key, *aliases)
        if value is None:
            raise MissingCredential(key, _HINTS.get(key))
        return value
