"""Gateway server entry point."""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager

import uvicorn
from fastapi import FastAPI
from fastapi.responses import JSONResponse

from speaches_ui import __version__
from speaches_ui.backend.factory import create_backend
from speaches_ui.config import settings
from speaches_ui.gateway import SpeechGateway
from speaches_ui.routers.models import router as models_router
from speaches_ui.routers.stt import router as stt_router
from speaches_ui.routers.tts import router as tts_router

log = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Open/close the shared speaches client."""
    backend = create_backend()
    await backend.start()
    app.state.gateway = SpeechGateway(backend)

    if await backend.health_check():
        log.info("speaches backend reachable at %s", backend.base_url)
    else:
        log.warning("speaches backend not reachable at %s", backend.base_url)

    yield

    await backend.close()


app = FastAPI(
    title="Speaches UI Gateway",
    version=__version__,
    lifespan=lifespan,
)

app.include_router(tts_router)
app.include_router(stt_router)
app.include_router(models_router)


@app.get("/health")
async def health():
    """Liveness / readiness check."""
    gateway: SpeechGateway = app.state.gateway
    backend_ok = await gateway.backend.health_check()
    return JSONResponse(
        {
            "status": "ok" if backend_ok else "degraded",
            "backend": gateway.backend.debug_snapshot(),
            "backend_reachable": backend_ok,
        },
        status_code=200 if backend_ok else 503,
    )


def main() -> None:
    logging.basicConfig(
        level=settings.log_level,
        format="%(asctime)s %(levelname)-8s %(name)s  %(message)s",
    )
    uvicorn.run(
        "speaches_ui.main:app",
        host=settings.host,
        port=settings.port,
        log_level=settings.log_level.lower(),
    )


if __name__ == "__main__":
    main()
