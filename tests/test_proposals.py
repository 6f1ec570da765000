"""
Tests for proposal submission and the job proposal counter.
"""
import asyncio
import pytest
from app.core.exceptions import (
    InvalidTransitionError,
    NotFoundError,
    PermissionDeniedError,
    ValidationError,
)
from app.models.job import JobStatus
from app.models.proposal import ProposalStatus
from app.services.job_service import JobService
from app.services.proposal_service import ProposalService
from conftest import AGENT_ID, CLIENT_ID


async def submit(db, job_id, freelancer_id=AGENT_ID, bid_amount=200.0):
    return await ProposalService.submit_proposal(
        db,
        job_id=job_id,
        freelancer_id=freelancer_id,
        bid_amount=bid_amount,
        cover_letter="I have done this before",
        estimated_duration="3 days",
        freelancer_name="Alex Agent",
    )


class TestSubmitProposal:
    """Tests for ProposalService.submit_proposal."""

    @pytest.mark.asyncio
    async def test_submit_creates_pending_proposal(self, db_session, open_job):
        proposal = await submit(db_session, open_job)

        assert proposal.id
        assert proposal.status == ProposalStatus.PENDING
        assert proposal.job_id == open_job
        assert proposal.client_id == CLIENT_ID
        assert proposal.freelancer_id == AGENT_ID
        assert proposal.freelancer_name == "Alex Agent"

    @pytest.mark.asyncio
    async def test_submit_increments_proposal_count(self, db_session, open_job):
        await submit(db_session, open_job)

        job = await JobService.get_job(db_session, open_job)
        assert job.proposal_count == 1

    @pytest.mark.asyncio
    async def test_count_matches_number_of_submissions(self, db_session, open_job):
        for i in range(4):
            await submit(db_session, open_job, freelancer_id=f"agent-{i}")

        job = await JobService.get_job(db_session, open_job)
        proposals = await ProposalService.list_proposals_for_job(db_session, open_job)

        assert job.proposal_count == 4
        assert len(proposals) == 4

    @pytest.mark.asyncio
    async def test_concurrent_submissions_lose_no_count(self, db_session, session_factory, open_job):
        """Submissions from separate sessions all land in the counter."""
        async def submit_in_own_session(i):
            async with session_factory() as session:
                await submit(session, open_job, freelancer_id=f"agent-{i}")

        await asyncio.gather(*(submit_in_own_session(i) for i in range(5)))

        job = await JobService.get_job(db_session, open_job)
        assert job.proposal_count == 5

    @pytest.mark.asyncio
    async def test_missing_job(self, db_session):
        with pytest.raises(NotFoundError):
            await submit(db_session, "no-such-job")

    @pytest.mark.asyncio
    async def test_missing_fields(self, db_session, open_job):
        with pytest.raises(ValidationError) as exc_info:
            await ProposalService.submit_proposal(
                db_session,
                job_id=open_job,
                freelancer_id=AGENT_ID,
                bid_amount=None,
                cover_letter="",
                estimated_duration="3 days",
                freelancer_name="Alex Agent",
            )

        assert exc_info.value.missing == ["coverLetter", "bidAmount"]

    @pytest.mark.asyncio
    async def test_non_positive_bid_rejected(self, db_session, open_job):
        with pytest.raises(ValidationError) as exc_info:
            await submit(db_session, open_job, bid_amount=0)

        assert exc_info.value.invalid == ["bidAmount"]
        job = await JobService.get_job(db_session, open_job)
        assert job.proposal_count == 0


class TestListProposals:
    """Tests for proposal listing."""

    @pytest.mark.asyncio
    async def test_freelancer_listing_is_repeatable(self, db_session, open_job):
        await submit(db_session, open_job)
        await submit(db_session, open_job)

        first = await ProposalService.list_proposals_for_freelancer(db_session, AGENT_ID)
        second = await ProposalService.list_proposals_for_freelancer(db_session, AGENT_ID)

        assert len(first) == 2
        assert [p.id for p in first] == [p.id for p in second]

    @pytest.mark.asyncio
    async def test_freelancer_listing_newest_first(self, db_session, open_job):
        older = await submit(db_session, open_job)
        newer = await submit(db_session, open_job)

        proposals = await ProposalService.list_proposals_for_freelancer(db_session, AGENT_ID)

        assert [p.id for p in proposals] == [newer.id, older.id]

    @pytest.mark.asyncio
    async def test_owner_filter(self, db_session, open_job):
        await submit(db_session, open_job)

        owned = await ProposalService.list_proposals_for_job(db_session, open_job, require_owner_id=CLIENT_ID)
        foreign = await ProposalService.list_proposals_for_job(db_session, open_job, require_owner_id="c2")

        assert len(owned) == 1
        assert foreign == []


class TestUpdateProposalStatus:
    """Tests for withdrawing, accepting, and rejecting proposals."""

    @pytest.mark.asyncio
    async def test_withdraw_decrements_count(self, db_session, open_job):
        proposal = await submit(db_session, open_job)

        updated = await ProposalService.update_proposal_status(
            db_session, proposal.id, ProposalStatus.WITHDRAWN, actor_id=AGENT_ID
        )

        assert updated.status == ProposalStatus.WITHDRAWN
        job = await JobService.get_job(db_session, open_job)
        assert job.proposal_count == 0

    @pytest.mark.asyncio
    async def test_withdraw_twice_rejected(self, db_session, open_job):
        proposal = await submit(db_session, open_job)
        await ProposalService.update_proposal_status(
            db_session, proposal.id, ProposalStatus.WITHDRAWN, actor_id=AGENT_ID
        )

        with pytest.raises(InvalidTransitionError):
            await ProposalService.update_proposal_status(
                db_session, proposal.id, ProposalStatus.WITHDRAWN, actor_id=AGENT_ID
            )

        job = await JobService.get_job(db_session, open_job)
        assert job.proposal_count == 0

    @pytest.mark.asyncio
    async def test_only_submitter_can_withdraw(self, db_session, open_job):
        proposal = await submit(db_session, open_job)

        with pytest.raises(PermissionDeniedError):
            await ProposalService.update_proposal_status(
                db_session, proposal.id, ProposalStatus.WITHDRAWN, actor_id="someone-else"
            )

    @pytest.mark.asyncio
    async def test_accept_assigns_job(self, db_session, open_job):
        proposal = await submit(db_session, open_job)

        await ProposalService.update_proposal_status(
            db_session, proposal.id, ProposalStatus.ACCEPTED, actor_id=CLIENT_ID
        )

        job = await JobService.get_job(db_session, open_job)
        assert job.status == JobStatus.ASSIGNED
        assert job.freelancer_id == AGENT_ID
        assert job.proposal_count == 1

    @pytest.mark.asyncio
    async def test_only_client_can_accept(self, db_session, open_job):
        proposal = await submit(db_session, open_job)

        with pytest.raises(PermissionDeniedError):
            await ProposalService.update_proposal_status(
                db_session, proposal.id, ProposalStatus.ACCEPTED, actor_id=AGENT_ID
            )

    @pytest.mark.asyncio
    async def test_cannot_accept_on_assigned_job(self, db_session, open_job):
        first = await submit(db_session, open_job, freelancer_id="agent-1")
        second = await submit(db_session, open_job, freelancer_id="agent-2")
        await ProposalService.update_proposal_status(
            db_session, first.id, ProposalStatus.ACCEPTED, actor_id=CLIENT_ID
        )

        with pytest.raises(InvalidTransitionError):
            await ProposalService.update_proposal_status(
                db_session, second.id, ProposalStatus.ACCEPTED, actor_id=CLIENT_ID
            )

    @pytest.mark.asyncio
    async def test_reject_leaves_job_open(self, db_session, open_job):
        proposal = await submit(db_session, open_job)

        updated = await ProposalService.update_proposal_status(
            db_session, proposal.id, ProposalStatus.REJECTED, actor_id=CLIENT_ID
        )

        assert updated.status == ProposalStatus.REJECTED
        job = await JobService.get_job(db_session, open_job)
        assert job.status == JobStatus.OPEN

    @pytest.mark.asyncio
    async def test_unknown_proposal(self, db_session):
        with pytest.raises(NotFoundError):
            await ProposalService.update_proposal_status(
                db_session, "missing", ProposalStatus.WITHDRAWN, actor_id=AGENT_ID
            )
