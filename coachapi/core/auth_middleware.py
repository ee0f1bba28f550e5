from typing import Optional

from fastapi import Depends
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials

from coachapi.core.exceptions import AuthenticationError
from coachapi.core.security import decode_access_token
from coachapi.schemas.user import CurrentUser

# JWT Bearer 토큰 스킴
security = HTTPBearer(auto_error=False)


def get_current_user(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security),
) -> CurrentUser:
    """필수 사용자 인증 - 유효한 토큰이 필요함

    신원 확인은 인증 제공자의 책임이며, 여기서는 서명 검증 후
    sub 클레임을 사용자 ID로 사용합니다.
    """
    if not credentials or not credentials.credentials:
        raise AuthenticationError(
            "Authentication required", details={"scheme": "Bearer"}
        )

    payload = decode_access_token(credentials.credentials)
    return CurrentUser(id=payload.sub)
