from datetime import datetime, timedelta, timezone
from typing import Optional

from jose import jwt, JWTError
from pydantic import BaseModel, ValidationError

from coachapi.config import settings
from coachapi.core.exceptions import AuthenticationError


class TokenPayload(BaseModel):
    sub: str  # 사용자 ID (인증 제공자가 발급)
    exp: Optional[int] = None


def create_access_token(subject: str, expires_delta: Optional[timedelta] = None) -> str:
    """사용자 ID를 sub 클레임으로 담은 액세스 토큰 생성"""
    if expires_delta:
        expire = datetime.now(timezone.utc) + expires_delta
    else:
        expire = datetime.now(timezone.utc) + timedelta(
            minutes=settings.ACCESS_TOKEN_EXPIRE_MINUTES
        )
    to_encode = {"sub": subject, "exp": expire}
    return jwt.encode(to_encode, settings.SECRET_KEY, algorithm=settings.JWT_ALGORITHM)


def decode_access_token(token: str) -> TokenPayload:
    """JWT 토큰을 검증하고 페이로드를 반환합니다."""
    try:
        payload = jwt.decode(
            token, settings.SECRET_KEY, algorithms=[settings.JWT_ALGORITHM]
        )
        token_data = TokenPayload.model_validate(payload)
    except (JWTError, ValidationError):
        raise AuthenticationError("Invalid or expired token")

    if not token_data.sub.strip():
        raise AuthenticationError("Token has no subject")
    return token_data
