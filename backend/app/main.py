import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from app.api.agents import router as agents_router
from app.api.chat import router as chat_router
from app.api.health import router as health_router
from app.config import settings
from app.services.agent_directory import AgentDirectory
from app.services.providers import ProviderClientCache


@asynccontextmanager
async def lifespan(app: FastAPI):
    logging.basicConfig(level=settings.log_level)
    logging.getLogger(__name__).info(
        f"Serving {len(app.state.directory.agents)} agents"
    )
    yield


app = FastAPI(title=settings.app_name, version="0.1.0", lifespan=lifespan)

# Shared for the process lifetime; handlers receive them through app.api.deps.
app.state.directory = AgentDirectory()
app.state.client_cache = ProviderClientCache()

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(agents_router, prefix="/api")
app.include_router(health_router, prefix="/api")
app.include_router(chat_router, prefix="/api")


@app.get("/health")
async def health():
    return {"status": "ok"}
