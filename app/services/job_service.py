import logging
from typing import Optional
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select, and_, or_
from app.models.job import Job, JobStatus, can_transition
from app.schemas.job import JobCreateRequest
from app.core.exceptions import NotFoundError, InvalidTransitionError
from app.core.logging_utils import sanitize_log_message

logger = logging.getLogger(__name__)


class JobService:
    """Service for job creation, lookup, filtering, and status transitions."""

    @staticmethod
    async def create_job(
        db: AsyncSession,
        data: JobCreateRequest,
        request_id: Optional[str] = None
    ) -> Job:
        """
        Create a new job posting.

        The job always starts open with no proposals, whatever the caller sends.

        Args:
            db: Database session
            data: Validated job fields
            request_id: Request ID (UUID) for request tracing

        Returns:
            Created Job record
        """
        job = Job(
            title=data.title,
            description=data.description,
            category=data.category,
            payment_type=data.payment_type,
            budget_min=data.budget_min,
            budget_max=data.budget_max,
            currency=data.currency,
            client_id=data.client_id,
            tags=list(data.tags or []),
            requirements=data.requirements,
            permissions=data.permissions,
            attachments=data.attachments,
            deadline=data.deadline,
            status=JobStatus.OPEN,
            proposal_count=0
        )

        db.add(job)
        await db.commit()
        await db.refresh(job)

        logger.info(
            sanitize_log_message(
                "Job created",
                RequestID=request_id,
                JobID=job.id,
                ClientID=job.client_id,
                Category=job.category
            )
        )

        return job

    @staticmethod
    async def get_job(
        db: AsyncSession,
        job_id: str
    ) -> Optional[Job]:
        """
        Get job by ID.

        Args:
            db: Database session
            job_id: Job ID

        Returns:
            Job record or None
        """
        # Counters are updated with SQL expressions; reload rather than trust the identity map
        return await db.get(Job, job_id, populate_existing=True)

    @staticmethod
    async def list_jobs(
        db: AsyncSession,
        status: Optional[JobStatus] = None,
        category: Optional[str] = None,
        client_id: Optional[str] = None,
        freelancer_id: Optional[str] = None,
        query: Optional[str] = None,
        limit: Optional[int] = None
    ) -> list[Job]:
        """
        Query jobs with equality filters, newest first.

        Filters are ANDed together. ``query`` is a case-insensitive substring
        match over title and description, run in the database.

        Args:
            db: Database session
            status: Filter by status
            category: Filter by category
            client_id: Filter by owning client
            freelancer_id: Filter by assigned freelancer
            query: Text to look for in title or description
            limit: Maximum number of results

        Returns:
            List of Job records
        """
        conditions = []

        if status:
            conditions.append(Job.status == status)
        if category:
            conditions.append(Job.category == category)
        if client_id:
            conditions.append(Job.client_id == client_id)
        if freelancer_id:
            conditions.append(Job.freelancer_id == freelancer_id)
        if query and query.strip():
            pattern = f"%{query.strip()}%"
            conditions.append(or_(Job.title.ilike(pattern), Job.description.ilike(pattern)))

        stmt = select(Job)
        if conditions:
            stmt = stmt.where(and_(*conditions))

        stmt = stmt.order_by(Job.created_at.desc(), Job.id.desc())
        if limit:
            stmt = stmt.limit(limit)

        result = await db.execute(stmt.execution_options(populate_existing=True))
        return list(result.scalars().all())

    @staticmethod
    async def update_job_status(
        db: AsyncSession,
        job_id: str,
        status: JobStatus,
        request_id: Optional[str] = None
    ) -> Job:
        """
        Move a job to a new status.

        Allowed moves are forward along open → assigned → in_progress →
        review → completed, or to cancelled from any non-terminal status.
        Setting the current status again only refreshes updated_at.
        Authorization is the caller's job.

        Args:
            db: Database session
            job_id: Job ID
            status: Target status
            request_id: Request ID (UUID) for request tracing

        Returns:
            Updated Job record

        Raises:
            NotFoundError if the job does not exist
            InvalidTransitionError if the move is not allowed
        """
        job = await JobService.get_job(db, job_id)
        if not job:
            raise NotFoundError("Job not found")

        if job.status != status and not can_transition(job.status, status):
            raise InvalidTransitionError(job.status.value, status.value)

        previous = job.status
        job.status = status
        job.touch()
        await db.commit()

        logger.info(
            sanitize_log_message(
                "Job status updated",
                RequestID=request_id,
                JobID=job.id,
                From=previous.value,
                To=status.value
            )
        )

        return job
