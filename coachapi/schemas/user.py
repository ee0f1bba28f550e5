from pydantic import BaseModel, Field


class CurrentUser(BaseModel):
    """인증된 사용자 (토큰의 sub 클레임)"""

    id: str = Field(..., min_length=1, description="사용자 ID")
