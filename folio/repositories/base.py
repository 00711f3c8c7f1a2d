"""
Generic repository over a SQLModel table.

Every public method is wrapped by `handle_store_errors`, which rolls the
session back and translates SQLAlchemy exceptions into the content-layer
taxonomy in `folio.core.exceptions`.
"""
import logging
from functools import wraps
from typing import Any, Callable, Dict, Generic, List, Optional, Tuple, Type, TypeVar
from sqlalchemy import and_, func
from sqlalchemy.exc import IntegrityError, NoResultFound, SQLAlchemyError
from sqlmodel import Session, SQLModel, select
from folio.core.exceptions import (
    BlogError,
    DuplicateKeyError,
    ForeignKeyViolationError,
    NotFoundError,
    PermissionDeniedError,
    StoreError,
)
from folio.models.common import utcnow
from folio.models.post import PostStatus

logger = logging.getLogger(__name__)

ModelT = TypeVar("ModelT", bound=SQLModel)

# (column name, ascending)
OrderBy = Tuple[str, bool]

UNIQUE_VIOLATION = "23505"
FOREIGN_KEY_VIOLATION = "23503"
INSUFFICIENT_PRIVILEGE = "42501"


def _sqlstate(error: SQLAlchemyError) -> Optional[str]:
    orig = getattr(error, "orig", None)
    # psycopg2 exposes pgcode, psycopg 3 exposes sqlstate
    return getattr(orig, "pgcode", None) or getattr(orig, "sqlstate", None)


def translate_error(error: SQLAlchemyError) -> BlogError:
    """Map a SQLAlchemy exception onto the content-layer error taxonomy."""
    code = _sqlstate(error)
    message = str(getattr(error, "orig", None) or error)

    if isinstance(error, NoResultFound):
        return NotFoundError("Record not found")
    if code == UNIQUE_VIOLATION or "UNIQUE constraint failed" in message:
        return DuplicateKeyError("A record with this value already exists")
    if code == FOREIGN_KEY_VIOLATION or "FOREIGN KEY constraint failed" in message:
        return ForeignKeyViolationError("Referenced record does not exist")
    if code == INSUFFICIENT_PRIVILEGE:
        return PermissionDeniedError("You do not have permission to perform this action")
    if isinstance(error, IntegrityError):
        return StoreError(f"Data integrity violation: {message}")
    return StoreError(message)


def handle_store_errors(function: Callable) -> Callable:
    """
    Decorator for repository methods.

    Rolls back the repository's session on any SQLAlchemy failure, logs it
    against the table name and re-raises it as a `BlogError`. Errors that are
    already `BlogError`s pass through untouched.
    """

    @wraps(function)
    def wrapper(self, *args, **kwargs):
        try:
            return function(self, *args, **kwargs)
        except SQLAlchemyError as e:
            self.session.rollback()
            translated = translate_error(e)
            logger.error(
                "[Repository Error] %s.%s: %s",
                self.table_name,
                function.__name__,
                translated.message,
            )
            raise translated from e

    return wrapper


class BaseRepository(Generic[ModelT]):
    model: Type[ModelT]

    def __init__(self, session: Session, model: Optional[Type[ModelT]] = None):
        self.session = session
        if model is not None:
            self.model = model

    @property
    def table_name(self) -> str:
        return self.model.__tablename__

    def _column(self, name: str):
        column = getattr(self.model, name, None)
        if column is None:
            raise StoreError(f"Unknown column {self.table_name}.{name}")
        return column

    def _apply_filters(self, statement, filters: Optional[Dict[str, Any]]):
        for key, value in (filters or {}).items():
            # None means "no constraint", not "IS NULL"
            if value is not None:
                statement = statement.where(self._column(key) == value)
        return statement

    def text_match(self, column, term: str):
        """Full-text match on PostgreSQL, word-by-word ILIKE elsewhere."""
        if self.session.get_bind().dialect.name == "postgresql":
            return column.match(term)
        words = term.split()
        if not words:
            return column.ilike(f"%{term}%")
        return and_(*[column.ilike(f"%{word}%") for word in words])

    @handle_store_errors
    def find_by_id(self, id: str) -> Optional[ModelT]:
        return self.session.get(self.model, id)

    def get(self, id: str) -> ModelT:
        record = self.find_by_id(id)
        if record is None:
            raise NotFoundError(f"{self.model.__name__} not found")
        return record

    @handle_store_errors
    def find_many(
        self,
        filters: Optional[Dict[str, Any]] = None,
        limit: Optional[int] = None,
        offset: int = 0,
        order_by: Optional[OrderBy] = None,
    ) -> List[ModelT]:
        statement = self._apply_filters(select(self.model), filters)

        if order_by:
            column, ascending = order_by
            column = self._column(column)
            statement = statement.order_by(column.asc() if ascending else column.desc())

        if offset:
            statement = statement.offset(offset)
        if limit:
            statement = statement.limit(limit)

        return list(self.session.exec(statement).all())

    @handle_store_errors
    def create(self, values: Dict[str, Any]) -> ModelT:
        record = self.model(**values)
        self.session.add(record)
        self.session.commit()
        self.session.refresh(record)
        return record

    @handle_store_errors
    def update(self, id: str, values: Dict[str, Any]) -> ModelT:
        record = self.session.get(self.model, id)
        if record is None:
            raise NotFoundError(f"{self.model.__name__} not found")

        for key, value in values.items():
            setattr(record, key, value)
        if hasattr(record, "updated_at"):
            record.updated_at = utcnow()

        self.session.add(record)
        self.session.commit()
        self.session.refresh(record)
        return record

    @handle_store_errors
    def delete(self, id: str) -> None:
        record = self.session.get(self.model, id)
        if record is None:
            raise NotFoundError(f"{self.model.__name__} not found")
        self.session.delete(record)
        self.session.commit()

    def soft_delete(self, id: str) -> ModelT:
        return self.update(id, {"status": PostStatus.ARCHIVED})

    @handle_store_errors
    def count(self, filters: Optional[Dict[str, Any]] = None) -> int:
        statement = self._apply_filters(select(func.count()).select_from(self.model), filters)
        return self.session.exec(statement).one()

    @handle_store_errors
    def exists(self, id: str) -> bool:
        return self.session.get(self.model, id) is not None

    @handle_store_errors
    def search(self, term: str, column: str = "title") -> List[ModelT]:
        statement = select(self.model).where(self.text_match(self._column(column), term))
        return list(self.session.exec(statement).all())
