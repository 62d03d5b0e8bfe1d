from sqlalchemy.engine import Engine
from sqlmodel import SQLModel, create_engine

from app.config import settings


def create_storage_engine(url: str | None = None) -> Engine:
    return create_engine(url or settings.storage_url, echo=False)


def init_db(engine: Engine) -> None:
    import app.models  # noqa: F401  register all models with SQLModel metadata

    SQLModel.metadata.create_all(engine)
