"""Service layer for invite-key registration."""
import logging
from uuid import UUID

from sqlalchemy import select, update
from sqlalchemy.ext.asyncio import AsyncSession

from core.auth_client import SupabaseAuthClient
from models.registration_key import RegistrationKey
from models.user import User
from services.exceptions import (
    AuthUserNotFoundError,
    InvalidRegistrationKeyError,
    RegistrationKeyExhaustedError,
    UserAlreadyRegisteredError,
)

logger = logging.getLogger(__name__)


async def get_active_key(db: AsyncSession, key: str) -> RegistrationKey | None:
    """Get an active registration key by its value."""
    result = await db.execute(
        select(RegistrationKey).where(
            RegistrationKey.key == key,
            RegistrationKey.is_active.is_(True),
        ),
    )
    return result.scalar_one_or_none()


async def register_user_with_key(
    db: AsyncSession,
    auth_client: SupabaseAuthClient,
    registration_key: str,
    user_id: UUID,
    display_name: str,
) -> User:
    """
    Create or complete a user's profile using an invite key.

    The profile gets the key's role, school and teacher. A profile that already
    exists but lacks an email or display name is completed rather than rejected.

    Args:
        db: Database session.
        auth_client: Auth store client (service role lookup of the user).
        registration_key: The invite key value.
        user_id: Auth store id of the user who signed up.
        display_name: Name to show in the dashboard.

    Returns:
        The created or updated User.

    Raises:
        RegistrationError: If the key is invalid or used up, the user is unknown
            to the auth store, or the user is already registered.
        AuthStoreError: If the auth store lookup fails.

    Note:
        Does not commit. Caller (session generator) handles commit at request end.
    """
    key = await get_active_key(db, registration_key)
    if key is None:
        raise InvalidRegistrationKeyError()
    if key.uses >= key.max_uses:
        raise RegistrationKeyExhaustedError()

    auth_user = await auth_client.get_user_by_id(str(user_id))
    if auth_user is None:
        raise AuthUserNotFoundError()

    user = await db.get(User, user_id)
    if user is not None and user.email and user.display_name:
        raise UserAlreadyRegisteredError()

    await _claim_key_use(db, key)

    if user is None:
        user = User(id=user_id)
        db.add(user)
        operation = "insert"
    else:
        operation = "update"

    user.email = auth_user.get("email")
    user.role = key.role
    user.display_name = display_name
    user.school_id = key.school_id
    user.teacher_id = key.teacher_id

    await db.flush()

    logger.info(
        "registration_complete user_id=%s role=%s operation=%s",
        user_id,
        key.role,
        operation,
    )
    return user


async def _claim_key_use(db: AsyncSession, key: RegistrationKey) -> None:
    """
    Count one use of the key, unless it's used up by now.

    The check and the increment are a single conditional UPDATE, so concurrent
    registrations can't redeem the same last use twice.

    Raises:
        RegistrationKeyExhaustedError: If no uses were left at update time.
    """
    result = await db.execute(
        update(RegistrationKey)
        .where(
            RegistrationKey.id == key.id,
            RegistrationKey.uses < RegistrationKey.max_uses,
        )
        .values(uses=RegistrationKey.uses + 1)
        .execution_options(synchronize_session=False),
    )
    if result.rowcount == 0:
        raise RegistrationKeyExhaustedError()
    await db.refresh(key, attribute_names=["uses"])
