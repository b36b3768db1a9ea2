"""
Base repository with standardized CRUD operations, transaction management, and error handling.

Provides foundation for all domain repositories. Low-level SQLAlchemy
errors are translated into application exceptions here so that services
only deal with ``app.core.exceptions`` types.
"""

import math
from contextlib import contextmanager
from dataclasses import dataclass
from typing import Any, Dict, Generic, Iterator, List, Optional, Sequence, Type, TypeVar

from sqlalchemy import func, select
from sqlalchemy.exc import IntegrityError, OperationalError, SQLAlchemyError
from sqlalchemy.orm import Session
from sqlalchemy.sql import Select

from app.core.exceptions import DatabaseError, EntityAlreadyExistsError, RepositoryError
from app.core.logging import get_logger
from app.models.base import BaseModel, SoftDeleteModel

logger = get_logger(__name__)

# Type variable for model classes
ModelType = TypeVar("ModelType", bound=BaseModel)


@dataclass
class PageResult(Generic[ModelType]):
    """One page of a query plus the pagination metadata."""

    items: List[ModelType]
    total: int
    page: int
    limit: int

    @property
    def pages(self) -> int:
        return math.ceil(self.total / self.limit) if self.limit else 0

    @property
    def count(self) -> int:
        return len(self.items)


class BaseRepository(Generic[ModelType]):
    """
    Base repository with standardized operations.

    Provides CRUD operations, transaction management, and error handling
    for all domain repositories.
    """

    def __init__(self, model: Type[ModelType], db: Session):
        """
        Args:
            model: SQLAlchemy model class
            db: Database session
        """
        self.model = model
        self.db = db
        self._is_soft_delete = issubclass(model, SoftDeleteModel)

    # ==================== Transaction Management ====================

    @contextmanager
    def transaction(self) -> Iterator[Session]:
        """
        Transaction context manager with automatic rollback.

        Usage:
            with repository.transaction():
                repository.create(entity, commit=False)
        """
        try:
            yield self.db
            self.db.commit()
        except OperationalError as e:
            self.db.rollback()
            logger.error("Transaction rollback: database unavailable", extra={"error": str(e)})
            raise DatabaseError() from e
        except Exception:
            self.db.rollback()
            raise

    def commit(self) -> None:
        try:
            self.db.commit()
        except IntegrityError as e:
            self.db.rollback()
            raise EntityAlreadyExistsError(f"{self.model.__name__} already exists") from e
        except OperationalError as e:
            self.db.rollback()
            raise DatabaseError() from e
        except SQLAlchemyError as e:
            self.db.rollback()
            raise RepositoryError(f"Commit failed: {e}") from e

    def rollback(self) -> None:
        self.db.rollback()

    # ==================== Create Operations ====================

    def create(self, entity: ModelType, commit: bool = True) -> ModelType:
        """
        Persist a new entity.

        Raises:
            EntityAlreadyExistsError: If a unique constraint rejects the row
        """
        self.db.add(entity)
        if commit:
            self.commit()
        else:
            self._flush()

        logger.info(f"Created {self.model.__name__}", extra={"entity_id": entity.id})
        return entity

    # ==================== Read Operations ====================

    def _base_query(self, include_deleted: bool = False) -> Select:
        stmt = select(self.model)
        if self._is_soft_delete and not include_deleted:
            stmt = stmt.where(self.model.is_deleted.is_(False))
        return stmt

    def find_by_id(self, entity_id: Any, include_deleted: bool = False) -> Optional[ModelType]:
        stmt = self._base_query(include_deleted).where(self.model.id == str(entity_id))
        return self._scalar(stmt)

    def find_by_criteria(
        self,
        criteria: Optional[Dict[str, Any]] = None,
        order_by: Optional[Sequence[Any]] = None,
        skip: int = 0,
        limit: Optional[int] = None,
    ) -> List[ModelType]:
        """
        Find entities whose columns equal the given values.

        Args:
            criteria: Column name to value mapping
            order_by: Column expressions to sort by
            skip: Rows to skip
            limit: Maximum rows to return
        """
        stmt = self._base_query()
        for field, value in (criteria or {}).items():
            stmt = stmt.where(getattr(self.model, field) == value)
        if order_by:
            stmt = stmt.order_by(*order_by)
        if skip:
            stmt = stmt.offset(skip)
        if limit is not None:
            stmt = stmt.limit(limit)
        return self._scalars(stmt)

    def find_one_by_criteria(self, criteria: Dict[str, Any]) -> Optional[ModelType]:
        found = self.find_by_criteria(criteria, limit=1)
        return found[0] if found else None

    def count(self, stmt: Optional[Select] = None) -> int:
        stmt = stmt if stmt is not None else self._base_query()
        count_stmt = select(func.count()).select_from(stmt.order_by(None).subquery())
        try:
            return self.db.execute(count_stmt).scalar_one()
        except OperationalError as e:
            raise DatabaseError() from e
        except SQLAlchemyError as e:
            raise RepositoryError(f"Count failed: {e}") from e

    def paginate(self, stmt: Select, page: int, limit: int) -> PageResult[ModelType]:
        """Run ``stmt`` for one page, 1-based."""
        total = self.count(stmt)
        items = self._scalars(stmt.offset((page - 1) * limit).limit(limit))
        return PageResult(items=items, total=total, page=page, limit=limit)

    # ==================== Update / Delete Operations ====================

    def update(self, entity: ModelType, data: Dict[str, Any], commit: bool = True) -> ModelType:
        """Apply ``data`` to the entity's attributes and persist."""
        for key, value in data.items():
            if hasattr(entity, key):
                setattr(entity, key, value)
        if commit:
            self.commit()
        else:
            self._flush()
        return entity

    def delete(self, entity: ModelType, commit: bool = True) -> None:
        """Soft delete when the model supports it, hard delete otherwise."""
        if self._is_soft_delete:
            entity.soft_delete()
        else:
            self.db.delete(entity)
        if commit:
            self.commit()
        else:
            self._flush()
        logger.info(f"Deleted {self.model.__name__}", extra={"entity_id": entity.id})

    # ==================== Execution helpers ====================

    def _flush(self) -> None:
        try:
            self.db.flush()
        except IntegrityError as e:
            self.db.rollback()
            raise EntityAlreadyExistsError(f"{self.model.__name__} already exists") from e
        except OperationalError as e:
            self.db.rollback()
            raise DatabaseError() from e

    def _scalar(self, stmt: Select) -> Optional[Any]:
        try:
            return self.db.execute(stmt).unique().scalars().first()
        except OperationalError as e:
            raise DatabaseError() from e
        except SQLAlchemyError as e:
            raise RepositoryError(f"Query failed: {e}") from e

    def _scalars(self, stmt: Select) -> List[Any]:
        try:
            return list(self.db.execute(stmt).unique().scalars().all())
        except OperationalError as e:
            raise DatabaseError() from e
        except SQLAlchemyError as e:
            raise RepositoryError(f"Query failed: {e}") from e
