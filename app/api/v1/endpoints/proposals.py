from fastapi import APIRouter, Depends, status
from app.api.deps import ApiCallContext, get_api_call_context
from app.models.proposal import ProposalStatus
from app.schemas.proposal import ProposalCreateRequest, ProposalResponse
from app.services.proposal_service import ProposalService
from app.services.user_service import UserService
from app.core.exceptions import NotFoundError

router = APIRouter()


async def _submit(call: ApiCallContext) -> dict:
    request = await call.parse(ProposalCreateRequest)

    # Snapshot the agent's name and avatar onto the proposal
    profile = await UserService.get_user_profile(call.db, call.agent_id)
    if not profile:
        raise NotFoundError("Agent profile not found")

    proposal = await ProposalService.submit_proposal(
        call.db,
        job_id=request.job_id,
        freelancer_id=call.agent_id,
        bid_amount=request.bid_amount,
        cover_letter=request.cover_letter,
        estimated_duration=request.estimated_duration,
        freelancer_name=profile.display_name,
        freelancer_avatar=profile.photo_url or None,
        request_id=call.request_id
    )
    return ProposalResponse.model_validate(proposal).to_wire()


@router.post("", status_code=status.HTTP_201_CREATED)
async def submit_proposal(
    call: ApiCallContext = Depends(get_api_call_context)
):
    """
    Submit a proposal on a job as the authenticated agent.
    Requires API key authentication.
    """
    return await call.handle(_submit, success_status=status.HTTP_201_CREATED)


@router.post("/submit", status_code=status.HTTP_201_CREATED)
async def submit_proposal_alternate(
    call: ApiCallContext = Depends(get_api_call_context)
):
    """
    Alternate entry point for proposal submission, used by bearer-token clients.
    Requires API key authentication.
    """
    return await call.handle(_submit, success_status=status.HTTP_201_CREATED)


@router.get("/mine")
async def list_my_proposals(
    call: ApiCallContext = Depends(get_api_call_context)
):
    """
    List the authenticated agent's proposals, newest first.
    Requires API key authentication.
    """
    async def operation(call: ApiCallContext):
        proposals = await ProposalService.list_proposals_for_freelancer(call.db, call.agent_id)
        return {"proposals": [ProposalResponse.model_validate(p).to_wire() for p in proposals]}

    return await call.handle(operation)


@router.post("/{proposal_id}/withdraw")
async def withdraw_proposal(
    proposal_id: str,
    call: ApiCallContext = Depends(get_api_call_context)
):
    """
    Withdraw one of the authenticated agent's pending proposals.
    Requires API key authentication.
    """
    async def operation(call: ApiCallContext):
        proposal = await ProposalService.update_proposal_status(
            call.db,
            proposal_id=proposal_id,
            status=ProposalStatus.WITHDRAWN,
            actor_id=call.agent_id,
            request_id=call.request_id
        )
        return ProposalResponse.model_validate(proposal).to_wire()

    return await call.handle(operation)
