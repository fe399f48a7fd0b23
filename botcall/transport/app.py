"""
Discovery Registry Application

FastAPI application exposing the registry over HTTP and WebSocket.

Routes:
- POST /v1/register         register or re-register a bot
- GET  /v1/lookup/{agent}   endpoint and liveness of one bot
- GET  /v1/agents           bots currently online
- GET  /health              process liveness probe
- WS   /v1/ws?agent={id}    server-driven heartbeat session

Nothing lives in module globals: create_app() builds the store, service
and handler and hangs them off app.state, so several registries can run
in one process (tests do this).

Run with:
    python -m botcall
    uvicorn --factory botcall.transport.app:create_app
"""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request, WebSocket
from fastapi.responses import JSONResponse
from pydantic import ValidationError

from botcall import __version__
from botcall.attestation import AttestationVerifier, create_verifier
from botcall.config import RegistrySettings, settings_from_env
from botcall.errors import AttestationRejectedError, InvalidRequestError
from botcall.protocol import (
    AgentListResponse,
    HealthResponse,
    LookupResponse,
    RegisterRequest,
    RegisterResponse,
)
from botcall.registry import PresenceStore
from botcall.service import RegistryService
from botcall.transport.handler import HeartbeatHandler

# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s"
)
logger = logging.getLogger(__name__)


def describe_validation_error(error: ValidationError) -> str:
    """One-line 400 detail: malformed JSON, or the fields that failed."""
    errors = error.errors()
    if any(err["type"] == "json_invalid" for err in errors):
        return "Invalid JSON"
    fields = sorted({".".join(str(part) for part in err["loc"]) or "body" for err in errors})
    return f"Invalid field(s): {', '.join(fields)}"


def create_app(
    settings: RegistrySettings | None = None,
    store: PresenceStore | None = None,
    verifier: AttestationVerifier | None = None,
) -> FastAPI:
    """
    Build a registry application.

    Args:
        settings: Registry settings, read from the environment when omitted
        store: Presence store to serve, a fresh one when omitted
        verifier: Attestation verifier, built from settings when omitted

    Returns:
        Configured FastAPI application
    """
    settings = settings or settings_from_env()
    logging.getLogger().setLevel(settings.log_level)

    service = RegistryService(
        store=store or PresenceStore(),
        settings=settings,
        verifier=verifier or create_verifier(settings.attestation_verifier),
    )
    handler = HeartbeatHandler(service)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        """Start and stop background registry tasks."""
        logger.info("Starting BotCall discovery registry...")
        await service.start()
        logger.info(
            f"Registry started (liveness window: {settings.liveness_window_seconds}s, "
            f"heartbeat: {settings.heartbeat_interval_seconds}s)"
        )

        yield

        logger.info("Shutting down BotCall discovery registry...")
        await service.stop()
        logger.info("Registry stopped")

    app = FastAPI(
        title="BotCall Discovery",
        description="Rendezvous registry where bots publish endpoints and callers look them up",
        version=__version__,
        lifespan=lifespan,
    )
    app.state.settings = settings
    app.state.service = service
    app.state.handler = handler

    @app.exception_handler(InvalidRequestError)
    async def invalid_request_handler(request: Request, exc: InvalidRequestError):
        logger.info(f"Rejected {request.method} {request.url.path}: {exc}")
        return JSONResponse(status_code=400, content={"detail": str(exc)})

    @app.exception_handler(AttestationRejectedError)
    async def attestation_rejected_handler(request: Request, exc: AttestationRejectedError):
        logger.warning(f"Attestation rejected for agent {exc.agent_id}: {exc.reason}")
        body = RegisterResponse(confirmed=False, status="rejected").model_dump(exclude_none=True)
        body["detail"] = str(exc)
        return JSONResponse(status_code=403, content=body)

    @app.post("/v1/register", response_model=RegisterResponse, response_model_exclude_none=True)
    async def register(request: Request) -> RegisterResponse:
        """
        Register a bot.

        The body is parsed by hand so malformed JSON is a 400, matching
        the missing-field case, rather than FastAPI's 422.
        """
        body = await request.body()
        try:
            register_request = RegisterRequest.model_validate_json(body)
        except ValidationError as e:
            raise InvalidRequestError(describe_validation_error(e)) from e

        host = request.headers.get("host") or f"{settings.host}:{settings.port}"
        return await service.register(register_request, host)

    @app.get("/v1/lookup/{agent_id:path}", response_model=LookupResponse, response_model_exclude_none=True)
    async def lookup(agent_id: str) -> LookupResponse:
        """Look up a bot; an empty id segment is a 400."""
        return await service.lookup(agent_id)

    @app.get("/v1/agents", response_model=AgentListResponse)
    async def list_agents() -> AgentListResponse:
        """List bots within the liveness window."""
        return await service.list_agents()

    @app.get("/health", response_model=HealthResponse)
    async def health_check() -> HealthResponse:
        """Health check endpoint."""
        return HealthResponse(status="ok", version=__version__)

    @app.websocket("/v1/ws")
    async def websocket_endpoint(websocket: WebSocket):
        """
        Heartbeat WebSocket for one agent.

        Each ping the server manages to send refreshes the agent's liveness.
        """
        await handler.handle_connection(websocket)

    return app
