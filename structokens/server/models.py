"""Pydantic request/response models for the HTTP API.

WHY: The FastAPI endpoints need typed schemas for request validation,
response serialization, and automatic OpenAPI documentation. The token
record shape must match the CLI's JSON output exactly so clients can
switch between the two without a second decoder.

HOW: One model per request/response body. TokenRecord mirrors
Token.to_dict(). All models include Field descriptions for the /docs UI.

RULES:
- All models use Field(description=...) for OpenAPI documentation
- TokenRecord field names match Token.to_dict() keys exactly
- Mapping keys are decimal strings (JSON object keys)
"""

from __future__ import annotations

from typing import Dict, List, Optional

from pydantic import BaseModel, Field

from structokens.core.ir import Token


# ---------------------------------------------------------------------------
# Request models
# ---------------------------------------------------------------------------


class TokenizeRequest(BaseModel):
    """JavaScript source sent inline as JSON."""

    source: str = Field(description="JavaScript source text to convert.")
    filename: Optional[str] = Field(
        default=None,
        description="Optional name echoed back in the response (e.g. 'app.js').",
    )


# ---------------------------------------------------------------------------
# Response models
# ---------------------------------------------------------------------------


class TokenRef(BaseModel):
    """Name and numeric id of a token kind."""

    key: str = Field(description="Token kind name, e.g. 'FOR_BEGIN'.")
    value: int = Field(description="Numeric token id (1-based).")


class TokenRecord(BaseModel):
    """One structural token with its source position.

    RULES:
    - line is 1-based, column is 0-based (characters)
    - length is always >= 1
    """

    token: TokenRef = Field(description="Kind of the token.")
    line: int = Field(description="1-based line of the token's anchor.")
    column: int = Field(description="0-based character column of the token's anchor.")
    length: int = Field(description="Number of characters the token covers (>= 1).")

    @classmethod
    def from_token(cls, token: Token) -> "TokenRecord":
        return cls(**token.to_dict())


class TokenizeResponse(BaseModel):
    """Reading-order token stream for one source."""

    filename: Optional[str] = Field(
        default=None, description="Filename from the request or upload, if any."
    )
    count: int = Field(description="Number of tokens in the stream.")
    tokens: List[TokenRecord] = Field(description="Tokens sorted by (line, column).")


class VocabularyResponse(BaseModel):
    """Vocabulary size and id→name table."""

    amount: int = Field(description="Number of token kinds plus one.")
    mapping: Dict[str, str] = Field(
        description="Token id (decimal string) to token kind name."
    )


class FormatInfo(BaseModel):
    """Metadata about an available stream format."""

    key: str = Field(description="Format identifier used in the 'format' query parameter.")
    name: str = Field(description="Human-readable format name.")
    media_type: str = Field(description="MIME type of the serialized stream.")


class ErrorResponse(BaseModel):
    """Standard error response body."""

    detail: str = Field(description="Human-readable error description.")


class HealthResponse(BaseModel):
    """Health check response."""

    status: str = Field(description="Service health status.", json_schema_extra={"example": "ok"})
    version: str = Field(description="API version string.", json_schema_extra={"example": "0.1.0"})
