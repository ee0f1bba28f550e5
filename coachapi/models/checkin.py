import datetime
from decimal import Decimal
from typing import Optional

from sqlalchemy import Date, Integer, Numeric, String, Text
from sqlalchemy.orm import Mapped, mapped_column
from sqlalchemy.schema import UniqueConstraint

from coachapi.models.base import BaseModel, BigIntegerPK


class Checkin(BaseModel):
    __tablename__ = "checkins"
    __table_args__ = (
        UniqueConstraint("user_id", "date", name="uq_checkin_user_date"),
    )

    id: Mapped[int] = mapped_column(BigIntegerPK, primary_key=True, autoincrement=True)
    user_id: Mapped[str] = mapped_column(String(64), nullable=False, index=True)
    date: Mapped[datetime.date] = mapped_column(Date, nullable=False)  # 체크인 날짜
    weight_kg: Mapped[Optional[Decimal]] = mapped_column(
        Numeric(5, 2), nullable=True
    )
    adherence_pct: Mapped[Optional[int]] = mapped_column(
        Integer, nullable=True
    )  # 0..100
    hunger_lvl: Mapped[Optional[int]] = mapped_column(Integer, nullable=True)  # 1..10
    notes: Mapped[Optional[str]] = mapped_column(Text, nullable=True)

    def __repr__(self):
        return f"<Checkin(id={self.id}, user_id={self.user_id}, date={self.date})>"
