"""JWT 액세스 토큰 검증 유틸리티.

Access-token helpers. Tokens are issued by the identity provider with the
profile id in "sub"; this service only verifies them.

JWT Payload Structure:
    {
        "sub": "profile_uuid",      # 프로필 ID (Profile identifier)
        "role": "admin",            # 역할 (admin | employee), 참고용
        "exp": 1234567890,          # 만료 시간 UNIX timestamp (Expiration)
        "type": "access"            # 토큰 유형 (Token type discriminator)
    }
"""

from typing import Any
from uuid import UUID

import jwt

from shiftboard.config import settings


class InvalidAccessToken(Exception):
    """서명·만료·형식 검사 실패 (Signature, expiry or payload shape check failed)."""


def read_access_token(token: str) -> UUID:
    """액세스 토큰을 검증하고 프로필 ID를 반환합니다.

    Verify signature and expiry, require ``type == "access"`` and a UUID ``sub``.

    Args:
        token: Bearer 토큰 문자열 (Raw bearer token)

    Returns:
        UUID: 토큰 주체 프로필 ID (Profile id from "sub")

    Raises:
        InvalidAccessToken: 검증 실패 시 (Any verification failure)
    """
    try:
        payload: dict[str, Any] = jwt.decode(token, settings.JWT_SECRET_KEY, algorithms=[settings.JWT_ALGORITHM])
    except jwt.ExpiredSignatureError as exc:
        raise InvalidAccessToken("Token expired") from exc
    except jwt.InvalidTokenError as exc:
        raise InvalidAccessToken("Invalid token") from exc

    # 리프레시 토큰 등 다른 유형 거부 — only access tokens authenticate requests
    if payload.get("type") != "access":
        raise InvalidAccessToken("Invalid token type")
    try:
        return UUID(str(payload["sub"]))
    except (KeyError, ValueError) as exc:
        raise InvalidAccessToken("Invalid token subject") from exc
