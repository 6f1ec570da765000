import logging
from typing import Optional
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select, update
from app.models.job import Job, JobStatus, can_transition
from app.models.proposal import Proposal, ProposalStatus
from app.models.mixins import utcnow
from app.database import commit_with_retry
from app.core.exceptions import (
    ValidationError,
    NotFoundError,
    PermissionDeniedError,
    InvalidTransitionError,
)
from app.core.logging_utils import sanitize_log_message
from app.services.job_service import JobService

logger = logging.getLogger(__name__)


def _count_delta(job_id: str, delta: int):
    """SQL-side adjustment of a job's proposal counter."""
    return (
        update(Job)
        .where(Job.id == job_id)
        .values(proposal_count=Job.proposal_count + delta, updated_at=utcnow())
        .execution_options(synchronize_session=False)
    )


class ProposalService:
    """Service for proposal submission, listing, and status changes."""

    @staticmethod
    async def submit_proposal(
        db: AsyncSession,
        job_id: str,
        freelancer_id: str,
        bid_amount: float,
        cover_letter: str,
        estimated_duration: str,
        freelancer_name: str,
        freelancer_avatar: Optional[str] = None,
        request_id: Optional[str] = None
    ) -> Proposal:
        """
        Submit a proposal for a job.

        The job's client_id is copied onto the proposal so clients can list
        proposals on their jobs without a join. The proposal insert and the
        proposal_count increment commit together; the increment is computed
        by the database so concurrent submissions never lose a count.

        Args:
            db: Database session
            job_id: Job being bid on
            freelancer_id: Bidding agent
            bid_amount: Bid, must be positive
            cover_letter: Pitch text
            estimated_duration: Free-form estimate, e.g. "3 days"
            freelancer_name: Display name snapshot
            freelancer_avatar: Avatar URL snapshot
            request_id: Request ID (UUID) for request tracing

        Returns:
            Created Proposal record

        Raises:
            ValidationError if a required field is empty or bid_amount <= 0
            NotFoundError if the job does not exist
        """
        missing = [
            name for name, value in (
                ("jobId", job_id),
                ("freelancerId", freelancer_id),
                ("coverLetter", cover_letter),
                ("estimatedDuration", estimated_duration),
            )
            if not value
        ]
        if bid_amount is None:
            missing.append("bidAmount")
        if missing:
            raise ValidationError(missing=missing)
        if bid_amount <= 0:
            raise ValidationError(invalid=["bidAmount"])

        job = await JobService.get_job(db, job_id)
        if not job:
            raise NotFoundError("Job not found")

        client_id = job.client_id

        async def stage() -> Proposal:
            proposal = Proposal(
                job_id=job_id,
                client_id=client_id,
                freelancer_id=freelancer_id,
                freelancer_name=freelancer_name,
                freelancer_avatar=freelancer_avatar,
                cover_letter=cover_letter,
                bid_amount=bid_amount,
                estimated_duration=estimated_duration,
                status=ProposalStatus.PENDING
            )
            db.add(proposal)
            await db.flush()
            await db.execute(_count_delta(job_id, 1))
            return proposal

        proposal = await commit_with_retry(db, stage, "submit_proposal")
        await db.refresh(proposal)

        logger.info(
            sanitize_log_message(
                "Proposal submitted",
                RequestID=request_id,
                ProposalID=proposal.id,
                JobID=job_id,
                FreelancerID=freelancer_id,
                BidAmount=bid_amount
            )
        )

        return proposal

    @staticmethod
    async def get_proposal(
        db: AsyncSession,
        proposal_id: str
    ) -> Optional[Proposal]:
        """Get proposal by ID."""
        return await db.get(Proposal, proposal_id, populate_existing=True)

    @staticmethod
    async def list_proposals_for_job(
        db: AsyncSession,
        job_id: str,
        require_owner_id: Optional[str] = None
    ) -> list[Proposal]:
        """
        Proposals on a job, newest first.

        Args:
            db: Database session
            job_id: Job ID
            require_owner_id: If given, only proposals whose denormalized
                client_id matches. Handlers must pass the authenticated
                caller's id here, never a value taken from the request.

        Returns:
            List of Proposal records
        """
        stmt = select(Proposal).where(Proposal.job_id == job_id)
        if require_owner_id:
            stmt = stmt.where(Proposal.client_id == require_owner_id)

        result = await db.execute(
            stmt.order_by(Proposal.created_at.desc(), Proposal.id.desc())
        )
        return list(result.scalars().all())

    @staticmethod
    async def list_proposals_for_freelancer(
        db: AsyncSession,
        freelancer_id: str
    ) -> list[Proposal]:
        """Proposals submitted by a freelancer, newest first."""
        result = await db.execute(
            select(Proposal)
            .where(Proposal.freelancer_id == freelancer_id)
            .order_by(Proposal.created_at.desc(), Proposal.id.desc())
        )
        return list(result.scalars().all())

    @staticmethod
    async def update_proposal_status(
        db: AsyncSession,
        proposal_id: str,
        status: ProposalStatus,
        actor_id: str,
        request_id: Optional[str] = None
    ) -> Proposal:
        """
        Resolve a pending proposal.

        - withdrawn: only the freelancer who submitted it; the job's
          proposal_count is decremented in the same transaction.
        - accepted: only the job's client; the job is assigned to the
          freelancer and moves to ``assigned``.
        - rejected: only the job's client.

        Args:
            db: Database session
            proposal_id: Proposal ID
            status: Target status (not pending)
            actor_id: Authenticated caller
            request_id: Request ID (UUID) for request tracing

        Returns:
            Updated Proposal record

        Raises:
            NotFoundError if the proposal (or, on accept, its job) does not exist
            PermissionDeniedError if actor_id may not make this change
            InvalidTransitionError if the proposal is no longer pending
        """
        proposal = await ProposalService.get_proposal(db, proposal_id)
        if not proposal:
            raise NotFoundError("Proposal not found")

        if status == ProposalStatus.WITHDRAWN:
            if actor_id != proposal.freelancer_id:
                raise PermissionDeniedError("Only the submitting agent can withdraw a proposal")
        elif actor_id != proposal.client_id:
            raise PermissionDeniedError("Only the job owner can accept or reject a proposal")

        if proposal.status != ProposalStatus.PENDING or status == ProposalStatus.PENDING:
            raise InvalidTransitionError(proposal.status.value, status.value, resource="Proposal")

        job = None
        if status == ProposalStatus.ACCEPTED:
            job = await JobService.get_job(db, proposal.job_id)
            if not job:
                raise NotFoundError("Job not found")
            if not can_transition(job.status, JobStatus.ASSIGNED):
                raise InvalidTransitionError(job.status.value, JobStatus.ASSIGNED.value)

        async def stage() -> Proposal:
            proposal.status = status
            proposal.touch()
            if status == ProposalStatus.WITHDRAWN:
                await db.execute(_count_delta(proposal.job_id, -1))
            elif job is not None:
                job.status = JobStatus.ASSIGNED
                job.freelancer_id = proposal.freelancer_id
                job.touch()
            return proposal

        await commit_with_retry(db, stage, "update_proposal_status")

        logger.info(
            sanitize_log_message(
                "Proposal status updated",
                RequestID=request_id,
                ProposalID=proposal.id,
                JobID=proposal.job_id,
                Status=status.value,
                ActorID=actor_id
            )
        )

        return proposal
