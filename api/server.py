"""
FastAPI front for the resolver. Credentials arrive in the request body
and are used for this one discovery only; nothing is stored.
"""

from __future__ import annotations

import logging

from fastapi import FastAPI, HTTPException
from pydantic import BaseModel, Field

from core.config import settings
from core.errors import ValidationError
from core.validation import validate_request
from pipeline.orchestrator import Orchestrator

log = logging.getLogger(__name__)

app = FastAPI(title="Autodiscover Resolver API", version="1.0")
orch = Orchestrator()


class ResolvePayload(BaseModel):
    email_address: str = ""
    username: str = ""
    password: str = Field("", repr=False)


@app.post("/api/resolve")
def api_resolve(payload: ResolvePayload):
    try:
        request = validate_request(payload.email_address, payload.username, payload.password)
    except ValidationError as exc:
        raise HTTPException(status_code=400, detail=str(exc)) from exc
    try:
        result = orch.resolve(request)
    except Exception as exc:  # noqa: BLE001
        log.exception("resolve failed")
        raise HTTPException(status_code=500, detail="resolve failed") from exc
    if not result.ok:
        raise HTTPException(status_code=502, detail=result.error)
    return result.model_dump()


@app.get("/api/health")
def api_health():
    return {
        "http_timeout_s": orch.timeout_s,
        "max_redirects": orch.max_redirects,
        "verify_tls": settings.verify_tls,
    }
