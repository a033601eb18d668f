"""FastAPI application factory for the loopback demo backend."""

from __future__ import annotations

import uvicorn
from fastapi import FastAPI

from prime_sdr_console.log import setup_logging
from prime_sdr_console.server.backend import DemoBackend
from prime_sdr_console.server.routes import router
from prime_sdr_console.server.ws import router as ws_router

DEFAULT_HOST = "127.0.0.1"
DEFAULT_PORT = 8765


def create_app(backend: DemoBackend | None = None) -> FastAPI:
    app = FastAPI(title="PrimeSDR Demo Backend")
    app.state.backend = backend or DemoBackend()
    app.include_router(router)
    app.include_router(ws_router)
    return app


def main() -> int:
    setup_logging()
    uvicorn.run(create_app(), host=DEFAULT_HOST, port=DEFAULT_PORT)
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
