import logging

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from activity_graph.graph.errors import GraphError

logger = logging.getLogger(__name__)


def domain_error_handler(request: Request, exc: GraphError) -> JSONResponse:
    if exc.status_code >= 500:
        logger.error(f"[Routes] {exc.error_name} on {request.url.path}: {exc}")
    else:
        logger.warning(f"[Routes] {exc.error_name} on {request.url.path}: {exc}")
    return JSONResponse(status_code=exc.status_code, content=exc.to_dict())


def unexpected_error_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.exception(f"[Routes] Unhandled error on {request.url.path}")
    return JSONResponse(
        status_code=500,
        content={"error": "InternalServerError", "message": "Something went wrong"},
    )


def register_error_handlers(app: FastAPI) -> None:
    app.add_exception_handler(GraphError, domain_error_handler)
    app.add_exception_handler(Exception, unexpected_error_handler)
