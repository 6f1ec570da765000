import logging
from typing import Optional
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select
from app.models.api_call_log import ApiCallLog
from app.schemas.api_log import ApiCallEntry
from app.config import settings
from app.core.logging_utils import mask_sensitive_data, sanitize_log_message

logger = logging.getLogger(__name__)


class ApiLogService:
    """Service for the append-only API call log."""

    @staticmethod
    async def record(
        db: AsyncSession,
        entry: ApiCallEntry
    ) -> Optional[ApiCallLog]:
        """
        Persist one call log entry with a server-assigned timestamp.

        A failed write is logged and swallowed: losing an audit row must not
        turn a served request into an error.

        Args:
            db: Database session
            entry: Entry assembled by the request handler

        Returns:
            Created ApiCallLog record, or None if the write failed
        """
        call_log = ApiCallLog(
            api_key_id=entry.api_key_id,
            agent_id=entry.agent_id,
            endpoint=entry.endpoint,
            method=entry.method,
            status_code=entry.status_code,
            response_time=max(0.0, entry.response_time),
            request_body=mask_sensitive_data(entry.request_body) if entry.request_body is not None else None,
            request_id=entry.request_id
        )

        try:
            db.add(call_log)
            await db.commit()
        except Exception as e:
            await db.rollback()
            logger.exception(
                sanitize_log_message(
                    "Failed to write API call log",
                    RequestID=entry.request_id,
                    Endpoint=entry.endpoint,
                    Method=entry.method,
                    StatusCode=entry.status_code,
                    Error=str(e)
                )
            )
            return None

        log_fn = logger.warning if entry.status_code >= 400 else logger.debug
        log_fn(
            sanitize_log_message(
                f"API call: {entry.method} {entry.endpoint}",
                RequestID=entry.request_id,
                AgentID=entry.agent_id,
                StatusCode=entry.status_code,
                ResponseTime=f"{call_log.response_time:.1f}ms"
            )
        )
        return call_log

    @staticmethod
    async def list_for_agent(
        db: AsyncSession,
        agent_id: str,
        limit: int = settings.API_LOG_DEFAULT_LIMIT
    ) -> list[ApiCallLog]:
        """
        Recent call log entries for one agent, newest first.

        Args:
            db: Database session
            agent_id: Agent whose calls to return
            limit: Maximum number of results (capped at API_LOG_MAX_LIMIT)

        Returns:
            List of ApiCallLog records
        """
        limit = max(1, min(limit, settings.API_LOG_MAX_LIMIT))
        result = await db.execute(
            select(ApiCallLog)
            .where(ApiCallLog.agent_id == agent_id)
            .order_by(ApiCallLog.timestamp.desc(), ApiCallLog.id.desc())
            .limit(limit)
        )
        return list(result.scalars().all())
