"""FastAPI service exposing the article-to-infographic pipeline."""

from __future__ import annotations

import logging
from typing import Any, Dict, Optional

from fastapi import FastAPI, Request, Response, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from pydantic import ValidationError

from .config import get_settings
from .errors import ContentTooShort, InvalidRequest, ScrapeError
from .workflow import ArticlePipeline, PipelineResult

logger = logging.getLogger(__name__)

PROCESS_PATH = "/api/process-article"
SCRAPE_FAILED_MESSAGE = "Failed to scrape article. Please try pasting the text directly."
PROCESS_FAILED_MESSAGE = "Failed to process article"

app = FastAPI(title="Article Infographics")


def cors_headers() -> Dict[str, str]:
    """Permissive CORS headers attached to every response."""
    return {
        "Access-Control-Allow-Origin": get_settings().cors_allow_origin,
        "Access-Control-Allow-Headers": "Content-Type",
        "Access-Control-Allow-Methods": "POST, OPTIONS",
    }


@app.middleware("http")
async def _add_cors_headers(request: Request, call_next):
    response = await call_next(request)
    for key, value in cors_headers().items():
        response.headers.setdefault(key, value)
    return response


def _error_response(
    status_code: int, error: str, details: Optional[str] = None
) -> JSONResponse:
    body: Dict[str, Any] = {"error": error}
    if details:
        body["details"] = details
    return JSONResponse(status_code=status_code, content=body)


@app.exception_handler(RequestValidationError)
async def _invalid_body(request: Request, exc: RequestValidationError) -> JSONResponse:
    return _error_response(
        status.HTTP_400_BAD_REQUEST, "Invalid request body", str(exc.errors())
    )


def _build_pipeline() -> ArticlePipeline:
    """Factory hook; tests swap in a pipeline with fake collaborators."""
    return ArticlePipeline(get_settings())


def _run_article_pipeline(payload: Dict[str, Any]) -> PipelineResult:
    return _build_pipeline().run(payload)


@app.get("/health")
def health() -> Dict[str, str]:
    return {"status": "ok"}


@app.options(PROCESS_PATH)
def process_article_preflight() -> Response:
    return Response(status_code=status.HTTP_200_OK)


@app.api_route(PROCESS_PATH, methods=["GET", "HEAD", "PUT", "PATCH", "DELETE"])
def process_article_wrong_method() -> JSONResponse:
    return _error_response(status.HTTP_405_METHOD_NOT_ALLOWED, "Method not allowed")


@app.post(PROCESS_PATH)
def process_article(payload: Dict[str, Any]) -> JSONResponse:
    """
    Scrape (or accept pasted text), generate slides and posts, return ProcessedContent.

    Input problems map to 400; completion failures and anything unexpected to 500.
    """
    try:
        result = _run_article_pipeline(payload)
    except InvalidRequest as exc:
        return _error_response(status.HTTP_400_BAD_REQUEST, str(exc))
    except ScrapeError as exc:
        return _error_response(status.HTTP_400_BAD_REQUEST, SCRAPE_FAILED_MESSAGE, str(exc))
    except ContentTooShort as exc:
        return _error_response(status.HTTP_400_BAD_REQUEST, str(exc))
    except ValidationError as exc:
        return _error_response(
            status.HTTP_400_BAD_REQUEST, "Invalid request body", str(exc)
        )
    except Exception as exc:
        logger.exception("Processing error")
        return _error_response(
            status.HTTP_500_INTERNAL_SERVER_ERROR, PROCESS_FAILED_MESSAGE, str(exc)
        )

    return JSONResponse(status_code=status.HTTP_200_OK, content=result.content)


if __name__ == "__main__":
    import uvicorn

    from .logging_config import setup_logging

    settings = get_settings()
    setup_logging(settings.log_level)
    uvicorn.run(
        "article_infographics.server:app",
        host="0.0.0.0",
        port=8000,
    )
