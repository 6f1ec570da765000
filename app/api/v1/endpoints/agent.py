from fastapi import APIRouter, Depends
from app.api.deps import ApiCallContext, get_api_call_context
from app.config import settings
from app.schemas.api_key import ApiKeyResponse, ApiKeyRevokeResponse
from app.schemas.api_log import ApiCallLogResponse
from app.schemas.profile import ProfileResponse, ProfileUpdateRequest
from app.services.api_key_service import ApiKeyService
from app.services.api_log_service import ApiLogService
from app.services.user_service import UserService
from app.core.exceptions import NotFoundError

router = APIRouter()


@router.get("/profile")
async def get_profile(
    call: ApiCallContext = Depends(get_api_call_context)
):
    """
    Get the authenticated agent's profile.
    Requires API key authentication.
    """
    async def operation(call: ApiCallContext):
        profile = await UserService.get_user_profile(call.db, call.agent_id)
        if not profile:
            raise NotFoundError("Profile not found")
        return ProfileResponse.model_validate(profile).to_wire()

    return await call.handle(operation)


@router.patch("/profile")
async def update_profile(
    call: ApiCallContext = Depends(get_api_call_context)
):
    """
    Update the authenticated agent's profile. Role stays agent.
    Requires API key authentication.
    """
    async def operation(call: ApiCallContext):
        updates = await call.parse(ProfileUpdateRequest)
        profile = await UserService.update_agent_profile(
            call.db,
            uid=call.agent_id,
            updates=updates,
            request_id=call.request_id
        )
        return ProfileResponse.model_validate(profile).to_wire()

    return await call.handle(operation)


@router.get("/logs")
async def list_call_logs(
    call: ApiCallContext = Depends(get_api_call_context)
):
    """
    Recent API calls made with the authenticated agent's keys, newest first.
    Requires API key authentication.
    """
    async def operation(call: ApiCallContext):
        limit = call.query_int(
            "limit",
            default=settings.API_LOG_DEFAULT_LIMIT,
            minimum=1,
            maximum=settings.API_LOG_MAX_LIMIT
        )
        logs = await ApiLogService.list_for_agent(call.db, call.agent_id, limit=limit)
        return {"logs": [ApiCallLogResponse.model_validate(entry).to_wire() for entry in logs]}

    return await call.handle(operation)


@router.get("/keys")
async def list_keys(
    call: ApiCallContext = Depends(get_api_call_context)
):
    """
    List the authenticated agent's API keys. Hashes are never returned.
    Requires API key authentication.
    """
    async def operation(call: ApiCallContext):
        keys = await ApiKeyService.list_for_agent(call.db, call.agent_id)
        return {"keys": [ApiKeyResponse.model_validate(key).to_wire() for key in keys]}

    return await call.handle(operation)


@router.delete("/keys/{key_id}")
async def revoke_key(
    key_id: str,
    call: ApiCallContext = Depends(get_api_call_context)
):
    """
    Revoke one of the authenticated agent's API keys. Idempotent.
    Requires API key authentication.
    """
    async def operation(call: ApiCallContext):
        api_key = await ApiKeyService.get_key(call.db, key_id)
        # Other agents' keys look exactly like missing ones
        if not api_key or api_key.agent_id != call.agent_id:
            raise NotFoundError("API key not found")
        await ApiKeyService.revoke(call.db, key_id)
        return ApiKeyRevokeResponse(id=key_id).to_wire()

    return await call.handle(operation)
