"""FastAPI 의존성 — 요청자 프로필 확인 및 관리자 권한 검사.

FastAPI dependencies resolving the calling profile from the bearer token
and gating admin routes on ``role == "admin"``.
"""

from typing import Annotated

from fastapi import Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.ext.asyncio import AsyncSession

from shiftboard.database import get_db
from shiftboard.models.user import Profile
from shiftboard.repositories.profile_repository import profile_repository
from shiftboard.utils.exceptions import ForbiddenError, UnauthorizedError
from shiftboard.utils.jwt import InvalidAccessToken, read_access_token

# auto_error=False — 헤더 누락도 401로 통일 (missing header answers 401 like a bad token)
security: HTTPBearer = HTTPBearer(auto_error=False)


async def get_current_user(
    credentials: Annotated[HTTPAuthorizationCredentials | None, Depends(security)],
    db: Annotated[AsyncSession, Depends(get_db)],
) -> Profile:
    """토큰의 "sub"로 요청자 프로필을 조회합니다.

    Args:
        credentials: Bearer 토큰 (Bearer credentials, None when the header is absent)
        db: 비동기 DB 세션 (Async database session)

    Returns:
        Profile: 요청자 프로필 (Calling profile)

    Raises:
        UnauthorizedError: 토큰 누락·무효 또는 프로필 없음 (Missing/invalid token, unknown profile)
    """
    if credentials is None:
        raise UnauthorizedError()
    try:
        profile_id = read_access_token(credentials.credentials)
    except InvalidAccessToken:
        raise UnauthorizedError("Invalid or expired token")

    user: Profile | None = await profile_repository.get_by_id(db, profile_id)
    if user is None:
        raise UnauthorizedError("User not found")
    return user


async def require_admin(
    current_user: Annotated[Profile, Depends(get_current_user)],
) -> Profile:
    """관리자만 허용 (403 unless role == "admin")."""
    if current_user.role != "admin":
        raise ForbiddenError()
    return current_user
