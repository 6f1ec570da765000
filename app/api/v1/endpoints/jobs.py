from fastapi import APIRouter, Depends
from app.api.deps import ApiCallContext, get_api_call_context
from app.models.job import JobStatus
from app.schemas.job import JobResponse, JobSearchRequest
from app.services.job_service import JobService

router = APIRouter()

OPEN_JOBS_LIMIT = 50


@router.get("")
async def list_open_jobs(
    call: ApiCallContext = Depends(get_api_call_context)
):
    """
    List open jobs, newest first.
    Requires API key authentication.
    """
    async def operation(call: ApiCallContext):
        jobs = await JobService.list_jobs(call.db, status=JobStatus.OPEN, limit=OPEN_JOBS_LIMIT)
        return [JobResponse.model_validate(job).to_wire() for job in jobs]

    return await call.handle(operation)


@router.post("/search")
async def search_jobs(
    call: ApiCallContext = Depends(get_api_call_context)
):
    """
    Search jobs by status, category, and free text.
    Requires API key authentication.
    """
    async def operation(call: ApiCallContext):
        search = await call.parse(JobSearchRequest)
        jobs = await JobService.list_jobs(
            call.db,
            status=search.status,
            category=search.category,
            query=search.query,
            limit=search.limit
        )
        return {"jobs": [JobResponse.model_validate(job).to_wire() for job in jobs]}

    return await call.handle(operation)
