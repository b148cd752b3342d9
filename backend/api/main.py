from __future__ import annotations

from contextlib import asynccontextmanager
from typing import Dict

from fastapi import Depends, FastAPI
from fastapi.middleware.cors import CORSMiddleware

from backend.api import agents, onboarding
from backend.api.deps import shutdown_service, verify_token
from backend.core.logging_config import configure_logging
from backend.core.valkey import get_client


@asynccontextmanager
async def lifespan(app: FastAPI):
    configure_logging()
    yield
    await shutdown_service()


app = FastAPI(title="Agent Onboarding API", version="0.1.0", lifespan=lifespan)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.get("/health")
async def health() -> Dict[str, str]:
    try:
        get_client().ping()
    except Exception as exc:
        return {"status": "degraded", "detail": str(exc)}
    return {"status": "ok"}


app.include_router(onboarding.router, dependencies=[Depends(verify_token)])
app.include_router(agents.router, dependencies=[Depends(verify_token)])
