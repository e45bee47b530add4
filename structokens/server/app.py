"""FastAPI application exposing the converter over HTTP.

WHY: Dataset builders running on other machines (or in other languages)
need the same token streams the CLI produces without shelling out per
file. FastAPI gives request validation and OpenAPI docs for free.

HOW: A single FastAPI app with tokenize endpoints (inline JSON and
multipart upload), vocabulary and format listings, and a health check.
Endpoints are plain ``def`` functions, so FastAPI runs each conversion in
its threadpool; nothing is shared between requests except the read-only
vocabulary and grammar.

RULES:
- Response records match the CLI's JSON output exactly
- Sources larger than MAX_SOURCE_BYTES → 413
- Uploads that are not valid in SOURCE_ENCODING → 400
- Sources that fail both strict and lenient parsing → 422
- An optional ``format`` query parameter returns the raw formatter output
- Invariant violations are not mapped; they surface as 500s and are logged
"""

from __future__ import annotations

import logging
import sys
from contextlib import asynccontextmanager
from typing import Annotated, List, Optional, Union

from fastapi import FastAPI, File, HTTPException, Query, UploadFile
from fastapi.responses import Response

from structokens import __version__
from structokens.config import (
    API_HOST,
    API_PORT,
    MAX_SOURCE_BYTES,
    RECURSION_LIMIT,
    SOURCE_ENCODING,
    configure_logging,
)
from structokens.core.ir import Token
from structokens.core.vocabulary import amount, mapping
from structokens.formatters import FORMATTERS
from structokens.parsing.parser import ParseError
from structokens.pipeline import tokenize_source
from structokens.server.models import (
    ErrorResponse,
    FormatInfo,
    HealthResponse,
    TokenizeRequest,
    TokenizeResponse,
    TokenRecord,
    VocabularyResponse,
)

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Raise the recursion limit once for deeply nested sources."""
    if sys.getrecursionlimit() < RECURSION_LIMIT:
        sys.setrecursionlimit(RECURSION_LIMIT)
    yield


app = FastAPI(
    lifespan=lifespan,
    title="structokens API",
    description=(
        "Convert JavaScript source into a reading-order stream of structural "
        "tokens (loops, functions, branches, assignments, calls). Send source "
        "inline or as a file upload, and query the token vocabulary."
    ),
    version=__version__,
    docs_url="/docs",
    redoc_url="/redoc",
)

_ERRORS = {
    400: {"model": ErrorResponse, "description": "Source is not valid text in the configured encoding"},
    413: {"model": ErrorResponse, "description": "Source exceeds the configured size limit"},
    422: {"model": ErrorResponse, "description": "Source could not be parsed as JavaScript"},
}

FormatQuery = Annotated[
    Optional[str],
    Query(
        description=(
            "Return the raw stream in this format instead of the JSON envelope. "
            "Available: {}.".format(", ".join(sorted(FORMATTERS.keys())))
        ),
    ),
]


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def _check_size(size: int) -> None:
    if size > MAX_SOURCE_BYTES:
        raise HTTPException(
            status_code=413,
            detail="Source too large ({} bytes, max {})".format(size, MAX_SOURCE_BYTES),
        )


def _check_format(format_key: Optional[str]) -> None:
    if format_key is not None and format_key not in FORMATTERS:
        available = ", ".join(sorted(FORMATTERS.keys()))
        raise HTTPException(
            status_code=400,
            detail="Unknown format '{}'. Available: {}".format(format_key, available),
        )


def _tokenize(source: str, filename: Optional[str]) -> List[Token]:
    try:
        return tokenize_source(source)
    except ParseError as exc:
        logger.info("Rejected unparseable source %s: %s", filename or "<inline>", exc)
        raise HTTPException(status_code=422, detail="Parse error: {}".format(exc))


def _respond(
    tokens: List[Token],
    filename: Optional[str],
    format_key: Optional[str],
) -> Union[TokenizeResponse, Response]:
    if format_key is not None:
        output = FORMATTERS[format_key]().format(tokens)
        return Response(content=output.content, media_type=output.media_type)
    return TokenizeResponse(
        filename=filename,
        count=len(tokens),
        tokens=[TokenRecord.from_token(token) for token in tokens],
    )


# ---------------------------------------------------------------------------
# Endpoints: Tokenize
# ---------------------------------------------------------------------------


@app.post(
    "/tokenize",
    response_model=TokenizeResponse,
    tags=["tokenize"],
    summary="Convert inline source",
    description=(
        "Convert JavaScript source sent in a JSON body. Returns the token "
        "stream sorted by (line, column)."
    ),
    responses=_ERRORS,
)
def tokenize(request: TokenizeRequest, format: FormatQuery = None):
    _check_format(format)
    _check_size(len(request.source.encode(SOURCE_ENCODING, errors="replace")))
    tokens = _tokenize(request.source, request.filename)
    return _respond(tokens, request.filename, format)


@app.post(
    "/tokenize/file",
    response_model=TokenizeResponse,
    tags=["tokenize"],
    summary="Convert an uploaded file",
    description=(
        "Upload a JavaScript file as multipart form data. The file is decoded "
        "with the configured source encoding before conversion."
    ),
    responses=_ERRORS,
)
def tokenize_file(
    file: Annotated[UploadFile, File(description="JavaScript source file to convert")],
    format: FormatQuery = None,
):
    _check_format(format)
    filename = file.filename or None
    data = file.file.read(MAX_SOURCE_BYTES + 1)
    _check_size(len(data))

    try:
        source = data.decode(SOURCE_ENCODING)
    except UnicodeDecodeError as exc:
        raise HTTPException(
            status_code=400,
            detail="File is not valid {}: {}".format(SOURCE_ENCODING, exc.reason),
        )

    tokens = _tokenize(source, filename)
    return _respond(tokens, filename, format)


# ---------------------------------------------------------------------------
# Endpoints: Vocabulary
# ---------------------------------------------------------------------------


@app.get(
    "/vocabulary",
    response_model=VocabularyResponse,
    tags=["vocabulary"],
    summary="Token vocabulary",
    description="Returns the vocabulary amount and the id → kind name mapping.",
)
def vocabulary() -> VocabularyResponse:
    return VocabularyResponse(amount=amount(), mapping=mapping())


@app.get(
    "/formats",
    response_model=List[FormatInfo],
    tags=["vocabulary"],
    summary="List available stream formats",
    description="Returns the formats accepted by the 'format' query parameter.",
)
def list_formats() -> List[FormatInfo]:
    result = []
    for key, formatter_cls in sorted(FORMATTERS.items()):
        formatter = formatter_cls()
        result.append(FormatInfo(
            key=key,
            name=formatter.name,
            media_type=formatter.format([]).media_type,
        ))
    return result


# ---------------------------------------------------------------------------
# Endpoints: Health
# ---------------------------------------------------------------------------


@app.get(
    "/health",
    response_model=HealthResponse,
    tags=["health"],
    summary="Health check",
    description="Liveness and readiness check for load balancers and orchestrators.",
)
def health_check() -> HealthResponse:
    return HealthResponse(status="ok", version=__version__)


def run_api():
    """Entry point for the structokens-api console script."""
    import uvicorn

    configure_logging()
    uvicorn.run(app, host=API_HOST, port=API_PORT)
