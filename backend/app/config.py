from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    app_name: str = "Agents Market"
    cors_origins: list[str] = ["*"]
    volcengine_base_url: str = "https://ark.cn-beijing.volces.com/api/v3"
    storage_url: str = "sqlite:///agents_market.db"
    storage_quota_bytes: int = 5 * 1024 * 1024
    encryption_key: str = "change-me-in-production"
    backend_api_url: str = "http://localhost:3000/api"
    log_level: str = "INFO"

    class Config:
        env_prefix = "AGENTS_MARKET_"


settings = Settings()
