from abc import ABC
from typing import TypeVar, Generic, Optional, List, Dict, Any, Iterable, Type
from sqlalchemy.orm import Query, Session
from pydantic import BaseModel

T = TypeVar("T")
SchemaType = TypeVar("SchemaType", bound=BaseModel)


class BaseRepository(Generic[T, SchemaType], ABC):
    """모든 리포지토리의 베이스 클래스 - Pydantic 응답 보장

    리포지토리 메서드는 커밋하지 않습니다. 트랜잭션 경계는 서비스가 정합니다.
    모든 테이블은 user_id 컬럼으로 사용자별로 구분됩니다.
    """

    def __init__(
        self, model_class: Type[T], schema_class: Type[SchemaType], db: Session
    ):
        self.model_class = model_class
        self.schema_class = schema_class
        self.db = db

    def _to_schema(self, model_instance: Any) -> Optional[SchemaType]:
        """SQLAlchemy 모델을 Pydantic 스키마로 변환"""
        if model_instance is None:
            return None

        # Pydantic v2의 model_validate를 사용하여 from_attributes 활용
        return self.schema_class.model_validate(model_instance)

    def _to_schemas(self, model_instances: Iterable[Any]) -> List[SchemaType]:
        return [self.schema_class.model_validate(row) for row in model_instances]

    def _for_user(self, user_id: str) -> Query:
        """사용자 범위 기본 쿼리"""
        return self.db.query(self.model_class).filter(
            getattr(self.model_class, "user_id") == user_id
        )

    def ensure_clean_session(self) -> None:
        """이전 작업 단위에서 남은 트랜잭션을 정리하여 세션을 정상화

        서비스가 새 작업 단위를 시작할 때 호출합니다.
        (진행 중인 작업 단위 내부에서 호출하면 안 됨)
        """
        if self.db.in_transaction():
            self.db.rollback()

    def find_all(
        self,
        filters: Optional[Dict[str, Any]] = None,
        order_by: Optional[str] = None,
        limit: Optional[int] = None,
    ) -> List[SchemaType]:
        """컬럼 동등 조건으로 조회 - 모델에 없는 컬럼 이름은 ValueError"""
        query = self.db.query(self.model_class)

        for key, value in (filters or {}).items():
            if not hasattr(self.model_class, key):
                raise ValueError(f"Unknown filter column: {key}")
            query = query.filter(getattr(self.model_class, key) == value)

        if order_by is not None:
            if not hasattr(self.model_class, order_by):
                raise ValueError(f"Unknown order_by column: {order_by}")
            query = query.order_by(getattr(self.model_class, order_by))

        if limit:
            query = query.limit(limit)

        return self._to_schemas(query.all())
