from __future__ import annotations

import logging
from typing import Any, Callable, Dict, Optional, Tuple

from fastapi import FastAPI, Request
from fastapi.concurrency import run_in_threadpool
from fastapi.responses import JSONResponse
from pydantic import ValidationError

from config.settings import get_settings
from data_validator import validate_discovery_request, validate_introduction_request
from models.discovery import DiscoveryRequest
from models.introductions import IntroductionRequest
from pipelines.discover_network import NetworkDiscoveryService
from services.introductions import IntroductionWriter
from utils.logging_setup import init_logging


ServiceFactory = Callable[[], NetworkDiscoveryService]
WriterFactory = Callable[[], IntroductionWriter]


def build_discovery_service() -> NetworkDiscoveryService:
    """Wire the configured search backend and generation client."""
    from services.llm_client import LLMClient
    from sources import get_search_backend

    settings = get_settings()
    return NetworkDiscoveryService(
        search=get_search_backend(settings=settings),
        llm=LLMClient(settings),
        settings=settings,
    )


def build_introduction_writer() -> IntroductionWriter:
    from services.llm_client import LLMClient

    return IntroductionWriter(LLMClient(get_settings()))


def classify_error(error: Exception) -> Tuple[int, Dict[str, Any]]:
    """Map an exception that escaped the service to (status, body)."""
    message = str(error).lower()
    if "api key" in message or "api_key" in message:
        return 500, {
            "error": "AI service configuration error",
            "code": "API_KEY_ERROR",
            "details": "Please check the API key configuration",
        }
    if "rate limit" in message or "quota" in message:
        return 429, {
            "error": "AI service rate limit exceeded",
            "code": "RATE_LIMIT_ERROR",
            "details": "Please try again later",
        }
    if "timeout" in message or "timed out" in message:
        return 504, {
            "error": "Request timeout",
            "code": "TIMEOUT_ERROR",
            "details": "The analysis took too long. Please try again with shallow search depth.",
        }
    details = str(error) if (get_settings().run_env or "").lower() in ("local", "test") else "An unexpected error occurred"
    return 500, {
        "error": "Internal server error during FWB network discovery",
        "code": "INTERNAL_ERROR",
        "details": details,
    }


def _validation_error(details: list) -> JSONResponse:
    return JSONResponse(
        status_code=400,
        content={"error": "Invalid request data", "details": details, "code": "VALIDATION_ERROR"},
    )


def _pydantic_details(error: ValidationError) -> list:
    return [f"{'.'.join(str(p) for p in err['loc'])}: {err['msg']}" for err in error.errors()]


async def _json_body(request: Request) -> Any:
    try:
        return await request.json()
    except ValueError:
        return None


def create_app(
    service_factory: Optional[ServiceFactory] = None,
    writer_factory: Optional[WriterFactory] = None,
) -> FastAPI:
    init_logging()
    app = FastAPI(title="FWB Network Discovery", version="0.1.0")
    state: Dict[str, Any] = {}
    make_service = service_factory or build_discovery_service
    make_writer = writer_factory or build_introduction_writer

    def service() -> NetworkDiscoveryService:
        # One service per app so its cache is shared across requests
        if "service" not in state:
            state["service"] = make_service()
        return state["service"]

    def writer() -> IntroductionWriter:
        if "writer" not in state:
            state["writer"] = make_writer()
        return state["writer"]

    @app.get("/health")
    def health() -> Dict[str, str]:
        return {"status": "ok"}

    @app.post("/api/discover-fwb-network")
    async def discover_fwb_network(request: Request) -> JSONResponse:
        payload = await _json_body(request)
        errors = validate_discovery_request(payload)
        if errors:
            return _validation_error(errors)
        try:
            discovery_request = DiscoveryRequest.model_validate(payload)
        except ValidationError as e:
            return _validation_error(_pydantic_details(e))
        try:
            result = await run_in_threadpool(service().discover, discovery_request)
        except Exception as e:
            logging.exception(f"Error in FWB network discovery: {e}", extra={"step": "api", "status": "error"})
            status, body = classify_error(e)
            return JSONResponse(status_code=status, content=body)
        return JSONResponse(content=result.to_wire())

    @app.post("/api/introduction-templates")
    async def introduction_templates(request: Request) -> JSONResponse:
        payload = await _json_body(request)
        errors = validate_introduction_request(payload)
        if errors:
            return _validation_error(errors)
        try:
            intro_request = IntroductionRequest.model_validate(payload)
        except ValidationError as e:
            return _validation_error(_pydantic_details(e))
        try:
            templates = await run_in_threadpool(
                writer().generate_templates,
                intro_request.connection,
                intro_request.contact,
                intro_request.requester_profile,
                intro_request.objective,
            )
        except Exception as e:
            logging.exception(f"Error generating introduction templates: {e}", extra={"step": "api", "status": "error"})
            status, body = classify_error(e)
            return JSONResponse(status_code=status, content=body)
        return JSONResponse(content=templates.to_wire())

    return app
