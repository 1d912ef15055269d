from fastapi import Depends, Header, HTTPException, status
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from sqlalchemy.orm import Session
from finance_tracker.core.security import extract_user_id
from finance_tracker.core.exceptions import UnauthorizedException
from finance_tracker.database import get_db
from finance_tracker.models.membership_context import MembershipContext
from finance_tracker.repositories.user_repository import UserRepository
from finance_tracker.models.user import User
from finance_tracker.services.tenant_directory import TenantDirectory

security = HTTPBearer(auto_error=False)


async def get_current_user(
    credentials: HTTPAuthorizationCredentials | None = Depends(security),
    db: Session = Depends(get_db),
) -> User:
    """
    FastAPI dependency to validate JWT and load the calling user.

    Flow:
    1. Extract token from Authorization: Bearer <token>
    2. Validate JWT using shared SECRET_KEY
    3. Extract user id from 'sub' claim
    4. Load the User row (soft-deleted users are rejected)

    Raises:
        HTTPException 401: If token missing, invalid or expired, or the user is unknown
    """
    try:
        if credentials is None:
            raise UnauthorizedException("Not authenticated")

        user_id = extract_user_id(credentials.credentials)

        user = UserRepository(db).get_by_id(user_id)
        if user is None:
            raise UnauthorizedException("User not found")

        return user

    except UnauthorizedException as e:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail=str(e),
            headers={"WWW-Authenticate": "Bearer"},
        )


async def get_membership(
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
    x_organization_id: int | None = Header(None),
) -> MembershipContext:
    """
    FastAPI dependency resolving the organization the request acts in.

    X-Organization-Id selects one of the caller's organizations; without it
    the oldest membership is used. Resolved once per request.

    Raises:
        NoOrganizationException: If the caller has no active membership (403)
    """
    return TenantDirectory(db).resolve_membership(user, x_organization_id)
