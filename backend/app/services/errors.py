class ModelRegistryError(RuntimeError):
    """Base error for model resolution failures surfaced to the user."""


class MissingCredential(ModelRegistryError):
    """A required configuration value is not set."""

    def __init__(self, key: str, message: str | None = None):
        self.key = key
        super().__init__(message or f"Missing environment variable: {key}")


class UnknownModel(ModelRegistryError):
    """The requested model id is not in the catalog."""

    def __init__(self, model_id: str, available: str):
        self.model_id = model_id
        super().__init__(f"Unknown modelId: {model_id}. Available: {available}")


class MisconfiguredModel(ModelRegistryError):
    """A catalog entry is internally inconsistent."""
