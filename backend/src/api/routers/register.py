"""Invite-key registration endpoint."""
import logging
from uuid import UUID

from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse
from sqlalchemy.ext.asyncio import AsyncSession

from api.dependencies import get_async_session, get_auth_client
from core.auth_client import SupabaseAuthClient
from schemas.registration import RegistrationRequest, RegistrationResult
from services import registration_service
from services.exceptions import RegistrationError

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/register", tags=["register"])


def _result(status_code: int, result: RegistrationResult) -> JSONResponse:
    return JSONResponse(status_code=status_code, content=result.model_dump(exclude_none=True))


@router.post("", response_model=RegistrationResult)
async def register(
    data: RegistrationRequest,
    db: AsyncSession = Depends(get_async_session),
    auth_client: SupabaseAuthClient = Depends(get_auth_client),
) -> JSONResponse:
    """
    Complete registration of a signed-up user with an invite key.

    The key decides the user's role. Returns 400 with a reason when the key or
    user is rejected.
    """
    if not data.registration_key or not data.user_id or not data.display_name:
        return _result(400, RegistrationResult(success=False, message="Missing required fields"))

    try:
        user_id = UUID(data.user_id)
    except ValueError:
        return _result(
            400, RegistrationResult(success=False, message="User not found in authentication system"),
        )

    try:
        user = await registration_service.register_user_with_key(
            db,
            auth_client,
            registration_key=data.registration_key,
            user_id=user_id,
            display_name=data.display_name,
        )
    except RegistrationError as e:
        return _result(400, RegistrationResult(success=False, message=str(e)))
    except Exception:
        logger.exception("Registration API error")
        await db.rollback()
        return _result(500, RegistrationResult(success=False, message="Registration failed"))

    return _result(
        200,
        RegistrationResult(success=True, message="User registered successfully", role=user.role),
    )
