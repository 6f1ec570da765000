import json
import logging
import math
import time
import uuid
from typing import Any, Awaitable, Callable, Optional, Type, TypeVar
from fastapi import Depends, Request, status
from fastapi.encoders import jsonable_encoder
from fastapi.responses import JSONResponse
from pydantic import BaseModel, ValidationError as SchemaValidationError
from sqlalchemy.ext.asyncio import AsyncSession
from app.database import get_db
from app.models.api_call_log import UNKNOWN_CALLER
from app.schemas.api_key import AuthResult
from app.schemas.api_log import ApiCallEntry
from app.services.api_key_service import ApiKeyService
from app.services.api_log_service import ApiLogService
from app.config import settings
from app.core.exceptions import (
    AuthenticationError,
    InternalError,
    MarketplaceError,
    PayloadTooLargeError,
    ValidationError,
)
from app.core.logging_utils import sanitize_log_message, get_request_id

logger = logging.getLogger(__name__)

SchemaT = TypeVar("SchemaT", bound=BaseModel)

# An operation receives the authenticated context and returns the JSON payload
Operation = Callable[["ApiCallContext"], Awaitable[Any]]


class NonFiniteNumber(ValueError):
    """A JSON number that would not survive being written back out as JSON."""


def _reject_constant(name: str) -> float:
    raise NonFiniteNumber(name)


def _finite_float(text: str) -> float:
    value = float(text)
    if math.isinf(value):
        raise NonFiniteNumber(text)
    return value


def schema_errors_to_validation_error(exc: SchemaValidationError) -> ValidationError:
    """Translate pydantic errors into a 400 naming the offending fields."""
    missing, invalid = [], []
    for error in exc.errors():
        field = ".".join(str(part) for part in error.get("loc", ())) or "body"
        target = missing if error.get("type") == "missing" else invalid
        if field not in target:
            target.append(field)
    return ValidationError(missing=missing, invalid=invalid)


class ApiCallContext:
    """
    Request-scoped context for API-key protected endpoints.

    Every request handled through ``handle`` ends in exactly one call log
    entry whose status code is the status code of the response, on the
    unauthenticated, business-failure and success paths alike.
    """

    def __init__(self, request: Request, db: AsyncSession):
        self.started_at = time.perf_counter()

        if not hasattr(request.state, "request_id"):
            request.state.request_id = str(uuid.uuid4())

        self.request_id: str = request.state.request_id
        self.request = request
        self.db = db
        self.auth = AuthResult(valid=False)
        self.request_body: Optional[Any] = None

    @property
    def agent_id(self) -> str:
        return self.auth.agent_id or UNKNOWN_CALLER

    @property
    def key_id(self) -> str:
        return self.auth.key_id or UNKNOWN_CALLER

    def elapsed_ms(self) -> float:
        """Wall-clock milliseconds since the request was received."""
        return (time.perf_counter() - self.started_at) * 1000

    async def json_body(self) -> dict:
        """
        Parse the request body as a JSON object.

        An empty body is treated as ``{}``. The parsed body is kept as the
        call log's payload snapshot.

        Raises:
            PayloadTooLargeError if the body exceeds MAX_REQUEST_SIZE
            ValidationError if the body is not a JSON object or holds
                NaN or infinite numbers
        """
        raw = await self._read_body()
        if not raw.strip():
            body: Any = {}
        else:
            try:
                body = json.loads(raw, parse_constant=_reject_constant, parse_float=_finite_float)
            except NonFiniteNumber:
                raise ValidationError("Request body must not contain NaN or infinite numbers")
            except (UnicodeDecodeError, json.JSONDecodeError):
                raise ValidationError("Request body must be valid JSON")

        if not isinstance(body, dict):
            raise ValidationError("Request body must be a JSON object")

        self.request_body = body
        return body

    async def _read_body(self) -> bytes:
        # Content-Length is checked by middleware; chunked bodies are capped here
        chunks, size = [], 0
        async for chunk in self.request.stream():
            size += len(chunk)
            if size > settings.MAX_REQUEST_SIZE:
                raise PayloadTooLargeError()
            chunks.append(chunk)
        return b"".join(chunks)

    async def parse(self, schema: Type[SchemaT]) -> SchemaT:
        """Parse the JSON body into ``schema``, raising a 400 ValidationError on failure."""
        body = await self.json_body()
        try:
            return schema.model_validate(body)
        except SchemaValidationError as e:
            raise schema_errors_to_validation_error(e)

    def query_int(self, name: str, default: int, minimum: int, maximum: int) -> int:
        """Read an integer query parameter, clamped to [minimum, maximum]."""
        raw = self.request.query_params.get(name)
        if raw is None or raw == "":
            return default
        try:
            value = int(raw)
        except ValueError:
            raise ValidationError(invalid=[name])
        return max(minimum, min(value, maximum))

    async def handle(
        self,
        operation: Operation,
        success_status: int = status.HTTP_200_OK
    ) -> JSONResponse:
        """
        Authenticate, run ``operation``, and record the outcome.

        Args:
            operation: Coroutine function taking this context and returning
                a JSON-serialisable payload
            success_status: Status code for a successful operation

        Returns:
            JSONResponse carrying the payload or an ``{"error": ...}`` body
        """
        try:
            self.auth = await ApiKeyService.authenticate_request(self.db, self.request)
            if not self.auth.valid:
                raise AuthenticationError(self.auth.error or "Unauthorized")

            payload = await operation(self)
            response = JSONResponse(status_code=success_status, content=jsonable_encoder(payload))

        except MarketplaceError as e:
            await self.db.rollback()
            headers = {"WWW-Authenticate": "ApiKey"} if isinstance(e, AuthenticationError) else None
            response = JSONResponse(status_code=e.status_code, content=e.to_body(), headers=headers)

        except Exception as e:
            await self.db.rollback()
            logger.exception(
                sanitize_log_message(
                    f"Unhandled error in {self.request.method} {self.request.url.path}",
                    RequestID=self.request_id,
                    AgentID=self.agent_id,
                    ExceptionType=type(e).__name__,
                    ExceptionMessage=str(e)
                )
            )
            error = InternalError()
            response = JSONResponse(status_code=error.status_code, content=error.to_body())

        await self.record(response.status_code)
        return response

    async def record(self, status_code: int) -> None:
        """Write this request's call log entry."""
        await ApiLogService.record(
            self.db,
            ApiCallEntry(
                api_key_id=self.key_id,
                agent_id=self.agent_id,
                endpoint=self.request.url.path,
                method=self.request.method,
                status_code=status_code,
                response_time=self.elapsed_ms(),
                request_body=self.request_body,
                request_id=self.request_id
            )
        )


async def get_api_call_context(
    request: Request,
    db: AsyncSession = Depends(get_db)
) -> ApiCallContext:
    """
    Get the request-scoped API call context.

    Usage:
        @router.get("")
        async def endpoint(call: ApiCallContext = Depends(get_api_call_context)):
            async def operation(call: ApiCallContext):
                ...
            return await call.handle(operation)
    """
    return ApiCallContext(request=request, db=db)


async def record_rejected_request(request: Request, status_code: int) -> None:
    """
    Write the call log entry for an API request refused by middleware.

    Rate-limited and oversized requests never reach ``ApiCallContext``, so
    they are logged here against the unknown caller. Paths outside the API
    prefix (health, docs) are not call-logged.

    Args:
        request: Rejected request
        status_code: Status code of the rejection response
    """
    path = request.url.path
    if not path.startswith(settings.API_V1_STR) or path.endswith(("/docs", "/redoc", "/openapi.json")):
        return

    # Same session source the endpoints would have used
    provider = request.app.dependency_overrides.get(get_db, get_db)
    sessions = provider()
    db = await sessions.__anext__()
    try:
        await ApiLogService.record(
            db,
            ApiCallEntry(
                api_key_id=UNKNOWN_CALLER,
                agent_id=UNKNOWN_CALLER,
                endpoint=path,
                method=request.method,
                status_code=status_code,
                response_time=0.0,
                request_id=get_request_id(request)
            )
        )
    finally:
        await sessions.aclose()
