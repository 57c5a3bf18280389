"""FastAPI entrypoint for the photogrammetry service.

Routes:
- GET  /health               liveness probe
- POST /api/photogrammetry   multipart ``photos`` -> base64 mesh/texture/glb
"""

from __future__ import annotations

import logging
from typing import List, Optional

from fastapi import APIRouter, FastAPI, File, Request, UploadFile
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from photomesh.core.config import ServiceConfig, load_service_config
from photomesh.core.errors import PhotomeshError, ValidationError
from photomesh.core.logging import setup_logging
from photomesh.core.pipeline_runner import SessionState, run_session
from photomesh.core.responder import build_error_payload, build_success_payload

logger = logging.getLogger(__name__)

router = APIRouter()

UPLOAD_ERROR_MESSAGE = "Photos must be uploaded as multipart files in the 'photos' field"


def _error_response(error: Exception) -> JSONResponse:
    status_code, payload = build_error_payload(error)
    return JSONResponse(status_code=status_code, content=payload.model_dump(exclude_none=True))


@router.get("/health")
async def health(request: Request):
    return {"status": "ok", "service": request.app.state.config.service_name}


# Plain def: FastAPI runs it in the worker threadpool, so the blocking
# subprocess wait never stalls the event loop.
@router.post("/api/photogrammetry")
def photogrammetry(request: Request, photos: List[UploadFile] = File(default=[])):
    config: ServiceConfig = request.app.state.config
    blobs = [photo.file.read() for photo in photos]
    outcome = run_session(blobs, config)
    payload = build_success_payload(
        outcome.session.session_id, outcome.artifacts, outcome.photo_count
    )
    logger.info(f"[{payload.session_id}] {SessionState.RESPONSE_ASSEMBLED.value}")
    logger.info("Photogrammetry completed successfully")
    return JSONResponse(content=payload.model_dump(mode="json", by_alias=True))


def create_app(config: Optional[ServiceConfig] = None) -> FastAPI:
    """Build the app; config defaults to $PHOTOMESH_CONFIG or built-in defaults."""
    config = config or load_service_config()
    setup_logging(config.log_level)

    app = FastAPI(
        title="photomesh",
        description="Photo set to textured mesh via Meshroom",
        version="0.1.0",
    )
    app.state.config = config
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.exception_handler(PhotomeshError)
    async def photomesh_error_handler(request: Request, exc: PhotomeshError):
        logger.error(f"Photogrammetry request failed ({exc.status_code}): {exc}")
        return _error_response(exc)

    @app.exception_handler(RequestValidationError)
    async def request_validation_handler(request: Request, exc: RequestValidationError):
        details = "; ".join(
            f"{'.'.join(str(part) for part in err['loc'])}: {err['msg']}" for err in exc.errors()
        )
        return await photomesh_error_handler(request, ValidationError(UPLOAD_ERROR_MESSAGE, details))

    # Starlette runs Exception handlers in ServerErrorMiddleware and
    # re-raises once the response is sent.
    @app.exception_handler(Exception)
    async def unexpected_error_handler(request: Request, exc: Exception):
        logger.exception("Photogrammetry API error", exc_info=exc)
        return _error_response(exc)

    app.include_router(router)
    return app


app = create_app()
