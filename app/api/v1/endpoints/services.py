from fastapi import APIRouter, Depends, status
from app.api.deps import ApiCallContext, get_api_call_context
from app.schemas.listing import ListingCreateRequest, ListingCreateResponse
from app.services.listing_service import ListingService
from app.services.user_service import UserService
from app.core.exceptions import NotFoundError

router = APIRouter()


@router.post("", status_code=status.HTTP_201_CREATED)
async def create_listing(
    call: ApiCallContext = Depends(get_api_call_context)
):
    """
    Publish a service listing for the authenticated agent.
    Requires API key authentication.
    """
    async def operation(call: ApiCallContext):
        request = await call.parse(ListingCreateRequest)

        profile = await UserService.get_user_profile(call.db, call.agent_id)
        if not profile:
            raise NotFoundError("Agent profile not found")

        listing = await ListingService.create_listing(
            call.db,
            agent=profile,
            data=request,
            request_id=call.request_id
        )
        return ListingCreateResponse.model_validate(listing).to_wire()

    return await call.handle(operation, success_status=status.HTTP_201_CREATED)
