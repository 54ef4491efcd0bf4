from __future__ import annotations

"""FastAPI surface that lets a browser front-end drive one AdminConsole."""

from typing import Optional, Union

from fastapi import FastAPI, HTTPException, Request
from fastapi.responses import JSONResponse
from pydantic import BaseModel

from . import build_console
from .config import ConsoleConfig, load_config
from .console import AdminConsole
from .errors import AccessDenied, ValidationError
from .invoker import TestStatus
from .store import SaveStatus
from .utils.logger import setup_logger

Number = Union[int, float, str]


class LoginRequest(BaseModel):
    username: str = ""
    password: str = ""


class SettingsPatch(BaseModel):
    """Raw form values; numbers may arrive as text and are coerced on edit."""

    model: Optional[str] = None
    systemPrompt: Optional[str] = None
    temperature: Optional[Number] = None
    maxTokens: Optional[Number] = None
    retrievalDepth: Optional[Number] = None
    rateLimit: Optional[Number] = None


class PromptRequest(BaseModel):
    prompt: str = ""


_TEST_STATUS_CODES = {
    TestStatus.OK: 200,
    TestStatus.BUSY: 409,
    TestStatus.REJECTED: 502,
    TestStatus.NETWORK_ERROR: 502,
}


def create_app(console: AdminConsole | None = None, config: ConsoleConfig | None = None) -> FastAPI:
    config = config or load_config()
    logger = setup_logger(level=config.log_level)
    console = console or build_console(config)

    app = FastAPI(title="Assistant Admin Console", version="0.1.0")
    app.state.console = console

    @app.on_event("startup")
    async def _resume_session():
        result = await console.resume()
        if result is not None:
            logger.info("[startup] resumed open session; settings from %s", result.source.value)

    @app.exception_handler(AccessDenied)
    async def _access_denied(request: Request, exc: AccessDenied):
        return JSONResponse(status_code=401, content={"detail": str(exc)})

    @app.exception_handler(ValidationError)
    async def _invalid(request: Request, exc: ValidationError):
        return JSONResponse(status_code=400, content={"detail": str(exc)})

    # ------------------------------------------------------------------
    @app.get("/")
    async def root():
        return {"message": "Assistant admin console is running. POST /login to begin."}

    @app.get("/status")
    async def status():
        return console.snapshot()

    @app.post("/login")
    async def login(req: LoginRequest):
        if not await console.login(req.username, req.password):
            raise HTTPException(status_code=401, detail=console.error)
        return console.snapshot()

    @app.post("/logout")
    async def logout():
        console.logout()
        return console.snapshot()

    # ------------------------------------------------------------------
    @app.get("/settings")
    async def get_settings():
        console.require_store()
        return console.snapshot()

    @app.patch("/settings")
    async def patch_settings(patch: SettingsPatch):
        edits = patch.model_dump(exclude_none=True)
        console.edit(edits)
        logger.debug("[settings] edited fields=%s", sorted(edits))
        return console.snapshot()

    @app.post("/settings/save")
    async def save_settings():
        outcome = await console.save()
        code = 409 if outcome.status is SaveStatus.BUSY else 200
        return JSONResponse(status_code=code, content=outcome.to_dict())

    @app.post("/settings/reset")
    async def reset_settings():
        console.reset()
        return console.snapshot()

    @app.post("/settings/reload")
    async def reload_settings():
        result = await console.reload()
        return {**console.snapshot(), "fromRemote": result.from_remote}

    # ------------------------------------------------------------------
    @app.post("/test")
    async def run_test(req: PromptRequest):
        outcome = await console.run_test(req.prompt)
        return JSONResponse(status_code=_TEST_STATUS_CODES[outcome.status], content=outcome.to_dict())

    return app
