"""REST endpoints of the loopback demo backend."""

from __future__ import annotations

from typing import Any

from fastapi import APIRouter, Request

from prime_sdr_console.server.backend import DemoBackend

router = APIRouter()


def _backend(request: Request) -> DemoBackend:
    return request.app.state.backend


@router.get("/api/status")
def get_status(request: Request) -> dict[str, Any]:
    backend = _backend(request)
    return {
        "config": backend.config(),
        "playing": backend.playing,
        "frames_sent": backend.frames_sent,
        "updates_applied": backend.updates_applied,
    }
