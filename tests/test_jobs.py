"""
Tests for job creation, filtering, and the status lifecycle.
"""
import pytest
from pydantic import ValidationError as SchemaValidationError
from app.core.exceptions import InvalidTransitionError, NotFoundError
from app.models.job import JobStatus, PaymentType, can_transition
from app.schemas.job import JobCreateRequest, JobResponse
from app.services.job_service import JobService
from conftest import CLIENT_ID, make_job_request


class TestCanTransition:
    """Tests for the job status rules."""

    @pytest.mark.parametrize("current,target", [
        (JobStatus.OPEN, JobStatus.ASSIGNED),
        (JobStatus.ASSIGNED, JobStatus.IN_PROGRESS),
        (JobStatus.IN_PROGRESS, JobStatus.REVIEW),
        (JobStatus.REVIEW, JobStatus.COMPLETED),
        (JobStatus.OPEN, JobStatus.IN_PROGRESS),
    ])
    def test_forward_moves_allowed(self, current, target):
        assert can_transition(current, target) is True

    @pytest.mark.parametrize("current", [
        JobStatus.OPEN, JobStatus.ASSIGNED, JobStatus.IN_PROGRESS, JobStatus.REVIEW,
    ])
    def test_cancel_from_non_terminal(self, current):
        assert can_transition(current, JobStatus.CANCELLED) is True

    @pytest.mark.parametrize("current,target", [
        (JobStatus.REVIEW, JobStatus.OPEN),
        (JobStatus.ASSIGNED, JobStatus.OPEN),
        (JobStatus.COMPLETED, JobStatus.OPEN),
        (JobStatus.COMPLETED, JobStatus.CANCELLED),
        (JobStatus.CANCELLED, JobStatus.OPEN),
    ])
    def test_backward_and_terminal_moves_rejected(self, current, target):
        assert can_transition(current, target) is False


class TestCreateJob:
    """Tests for JobService.create_job."""

    @pytest.mark.asyncio
    async def test_new_job_is_open_with_no_proposals(self, db_session):
        job = await JobService.create_job(db_session, make_job_request())

        assert job.id
        assert job.status == JobStatus.OPEN
        assert job.proposal_count == 0
        assert job.client_id == CLIENT_ID
        assert job.created_at is not None
        assert job.updated_at is not None

    @pytest.mark.asyncio
    async def test_job_ids_are_unique(self, db_session):
        first = await JobService.create_job(db_session, make_job_request())
        second = await JobService.create_job(db_session, make_job_request())

        assert first.id != second.id

    def test_missing_fields_rejected(self):
        with pytest.raises(SchemaValidationError):
            JobCreateRequest.model_validate({"title": "Scrape site"})

    def test_accepts_camel_case_payload(self):
        request = JobCreateRequest.model_validate({
            "title": "Scrape site",
            "description": "Prices",
            "category": "Data",
            "clientId": "c1",
            "currency": "USD",
            "paymentType": "hourly",
            "budgetMin": 10,
        })

        assert request.client_id == "c1"
        assert request.payment_type == PaymentType.HOURLY
        assert request.budget_min == 10

    @pytest.mark.asyncio
    async def test_wire_format_is_camel_case(self, db_session):
        job = await JobService.create_job(db_session, make_job_request(tags=["python"]))

        wire = JobResponse.model_validate(job).to_wire()

        assert wire["clientId"] == CLIENT_ID
        assert wire["proposalCount"] == 0
        assert wire["status"] == "open"
        assert wire["paymentType"] == "fixed"
        assert wire["tags"] == ["python"]
        assert "client_id" not in wire


class TestListJobs:
    """Tests for JobService.list_jobs filters."""

    @pytest.mark.asyncio
    async def test_status_filter(self, db_session):
        open_job = await JobService.create_job(db_session, make_job_request())
        assigned = await JobService.create_job(db_session, make_job_request())
        await JobService.update_job_status(db_session, assigned.id, JobStatus.ASSIGNED)

        jobs = await JobService.list_jobs(db_session, status=JobStatus.OPEN)

        assert [job.id for job in jobs] == [open_job.id]

    @pytest.mark.asyncio
    async def test_filters_are_anded(self, db_session):
        match = await JobService.create_job(db_session, make_job_request(category="Writing"))
        await JobService.create_job(db_session, make_job_request(category="Data"))
        await JobService.create_job(db_session, make_job_request(category="Writing", client_id="c2"))

        jobs = await JobService.list_jobs(db_session, category="Writing", client_id=CLIENT_ID)

        assert [job.id for job in jobs] == [match.id]

    @pytest.mark.asyncio
    async def test_newest_first(self, db_session):
        first = await JobService.create_job(db_session, make_job_request())
        second = await JobService.create_job(db_session, make_job_request())

        jobs = await JobService.list_jobs(db_session)

        assert [job.id for job in jobs] == [second.id, first.id]

    @pytest.mark.asyncio
    async def test_limit(self, db_session):
        for _ in range(3):
            await JobService.create_job(db_session, make_job_request())

        jobs = await JobService.list_jobs(db_session, limit=2)

        assert len(jobs) == 2

    @pytest.mark.asyncio
    async def test_text_query_matches_title_or_description(self, db_session):
        by_title = await JobService.create_job(db_session, make_job_request(title="Translate README"))
        by_description = await JobService.create_job(
            db_session, make_job_request(description="Needs a careful translation pass")
        )
        await JobService.create_job(db_session, make_job_request())

        jobs = await JobService.list_jobs(db_session, query="TRANSLAT")

        assert {job.id for job in jobs} == {by_title.id, by_description.id}

    @pytest.mark.asyncio
    async def test_freelancer_filter(self, db_session):
        job = await JobService.create_job(db_session, make_job_request())
        job.freelancer_id = "a1"
        await db_session.commit()
        await JobService.create_job(db_session, make_job_request())

        jobs = await JobService.list_jobs(db_session, freelancer_id="a1")

        assert [j.id for j in jobs] == [job.id]


class TestUpdateJobStatus:
    """Tests for JobService.update_job_status."""

    @pytest.mark.asyncio
    async def test_forward_transition(self, db_session):
        job = await JobService.create_job(db_session, make_job_request())

        updated = await JobService.update_job_status(db_session, job.id, JobStatus.ASSIGNED)

        assert updated.status == JobStatus.ASSIGNED
        stored = await JobService.get_job(db_session, job.id)
        assert stored.status == JobStatus.ASSIGNED

    @pytest.mark.asyncio
    async def test_full_lifecycle(self, db_session):
        job = await JobService.create_job(db_session, make_job_request())

        for status in (JobStatus.ASSIGNED, JobStatus.IN_PROGRESS, JobStatus.REVIEW, JobStatus.COMPLETED):
            job = await JobService.update_job_status(db_session, job.id, status)

        assert job.status == JobStatus.COMPLETED

    @pytest.mark.asyncio
    async def test_backward_transition_rejected(self, db_session):
        """review -> open is not a legal move."""
        job = await JobService.create_job(db_session, make_job_request())
        await JobService.update_job_status(db_session, job.id, JobStatus.REVIEW)

        with pytest.raises(InvalidTransitionError) as exc_info:
            await JobService.update_job_status(db_session, job.id, JobStatus.OPEN)

        assert exc_info.value.status_code == 409
        stored = await JobService.get_job(db_session, job.id)
        assert stored.status == JobStatus.REVIEW

    @pytest.mark.asyncio
    async def test_cancelled_is_terminal(self, db_session):
        job = await JobService.create_job(db_session, make_job_request())
        await JobService.update_job_status(db_session, job.id, JobStatus.CANCELLED)

        with pytest.raises(InvalidTransitionError):
            await JobService.update_job_status(db_session, job.id, JobStatus.ASSIGNED)

    @pytest.mark.asyncio
    async def test_same_status_is_a_noop(self, db_session):
        job = await JobService.create_job(db_session, make_job_request())

        updated = await JobService.update_job_status(db_session, job.id, JobStatus.OPEN)

        assert updated.status == JobStatus.OPEN

    @pytest.mark.asyncio
    async def test_unknown_job(self, db_session):
        with pytest.raises(NotFoundError):
            await JobService.update_job_status(db_session, "missing", JobStatus.ASSIGNED)
