from sqlalchemy import BigInteger, Column, DateTime, Integer, MetaData, func
from sqlalchemy.orm import declarative_base, declared_attr

# 제약 조건 이름 고정 (명시 이름이 없는 인덱스/제약에도 일관된 이름 부여)
NAMING_CONVENTION = {
    "ix": "ix_%(table_name)s_%(column_0_name)s",
    "uq": "uq_%(table_name)s_%(column_0_name)s",
    "pk": "pk_%(table_name)s",
}

Base = declarative_base(metadata=MetaData(naming_convention=NAMING_CONVENTION))

# SQLite는 INTEGER PRIMARY KEY만 자동 증가하므로 변형 타입 사용
BigIntegerPK = BigInteger().with_variant(Integer, "sqlite")


class TimestampMixin:
    """타임스탬프 필드를 위한 믹스인"""

    @declared_attr
    def created_at(cls):
        return Column(DateTime(timezone=True), server_default=func.now())

    @declared_attr
    def updated_at(cls):
        return Column(
            DateTime(timezone=True), server_default=func.now(), onupdate=func.now()
        )


class BaseModel(Base, TimestampMixin):
    """모든 모델의 베이스 클래스 (user_id로 소유자 구분)"""

    __abstract__ = True

    def __repr__(self):
        return f"<{type(self).__name__}(id={getattr(self, 'id', None)}, user_id={getattr(self, 'user_id', None)})>"
