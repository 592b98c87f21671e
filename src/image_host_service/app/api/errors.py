import traceback

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from loguru import logger
from starlette.exceptions import HTTPException as StarletteHTTPException

from ..core.config import Settings
from ..schemas import ErrorResponse
from ..services.domain import ClientInputError


def error_response(
    status_code: int, error: str, details: str | None = None
) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content=ErrorResponse(error=error, details=details).model_dump(
            exclude_none=True
        ),
    )


def _original_url(request: Request) -> str:
    if request.url.query:
        return f"{request.url.path}?{request.url.query}"
    return request.url.path


def setup_exception_handlers(app: FastAPI, settings: Settings) -> None:
    """
    Register the JSON error handlers shared by every route.

    Every error body has the shape ``{"success": false, "error": ...}``.
    """

    @app.exception_handler(ClientInputError)
    async def client_input_error_handler(request: Request, exc: ClientInputError):
        logger.warning(f"Rejected upload request: {exc}")
        return error_response(400, str(exc))

    @app.exception_handler(StarletteHTTPException)
    async def http_exception_handler(request: Request, exc: StarletteHTTPException):
        # Unknown path, or known path with another method
        if exc.status_code in (404, 405) and exc.detail in (
            "Not Found",
            "Method Not Allowed",
        ):
            return error_response(
                404, f"Route non trouvée: {request.method} {_original_url(request)}"
            )

        logger.error(f"HTTP Exception: {exc.detail} (Status: {exc.status_code})")
        return error_response(exc.status_code, str(exc.detail))

    @app.exception_handler(RequestValidationError)
    async def validation_exception_handler(
        request: Request, exc: RequestValidationError
    ):
        messages = [error["msg"] for error in exc.errors()]
        logger.warning(f"Validation Error: {messages}")
        return error_response(400, "; ".join(messages) or "Requête invalide")

    @app.exception_handler(Exception)
    async def general_exception_handler(request: Request, exc: Exception):
        logger.exception(f"Unhandled Exception: {str(exc)}")
        details = None
        if settings.DEBUG:
            details = "".join(
                traceback.format_exception(type(exc), exc, exc.__traceback__)
            )
        return error_response(500, f"Erreur serveur: {str(exc)}", details)
