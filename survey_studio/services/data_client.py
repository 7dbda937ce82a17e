"""Generic data-access client over a SQLAlchemy session.

Every call is an independent round trip: mutations commit on their own and
roll back on failure, so no transaction spans two calls. Backend failures of
any kind surface as PersistenceError.
"""

from typing import Any, Optional, Sequence, Type, TypeVar

from sqlalchemy import select, update
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session, selectinload

from survey_studio.errors import NotFoundError, PersistenceError
from survey_studio.models.database import Base
from survey_studio.logging_config import get_logger

logger = get_logger(__name__)

ModelT = TypeVar("ModelT", bound=Base)


class DataClient:
    """Table-level query interface used by every service.

    Filters are equality matches keyed by column name. ``with_children``
    names relationships to load alongside the parent rows in the same fetch.
    """

    def __init__(self, db: Session):
        """Initialize client.

        Args:
            db: SQLAlchemy database session
        """
        self.db = db

    def _build_select(
        self,
        model: Type[ModelT],
        filters: Optional[dict] = None,
        order_by: Optional[str] = None,
        descending: bool = False,
        limit: Optional[int] = None,
        with_children: Sequence[str] = (),
    ):
        stmt = select(model)
        for column, value in (filters or {}).items():
            stmt = stmt.where(getattr(model, column) == value)
        for relation in with_children:
            stmt = stmt.options(selectinload(getattr(model, relation)))
        if order_by is not None:
            column = getattr(model, order_by)
            stmt = stmt.order_by(column.desc() if descending else column.asc())
        if limit is not None:
            stmt = stmt.limit(limit)
        # Always refresh objects already in the identity map
        return stmt.execution_options(populate_existing=True)

    def select(
        self,
        model: Type[ModelT],
        filters: Optional[dict] = None,
        order_by: Optional[str] = None,
        descending: bool = False,
        limit: Optional[int] = None,
        with_children: Sequence[str] = (),
    ) -> list[ModelT]:
        """Fetch rows matching filters.

        Raises:
            PersistenceError: If the query fails
        """
        stmt = self._build_select(model, filters, order_by, descending, limit, with_children)
        try:
            return list(self.db.execute(stmt).scalars().all())
        except SQLAlchemyError as e:
            logger.error(f"Select on {model.__tablename__} failed: {e}")
            self.db.rollback()
            raise PersistenceError(f"Failed to load {model.__tablename__}: {e}") from e

    def fetch_one(
        self,
        model: Type[ModelT],
        filters: dict,
        with_children: Sequence[str] = (),
    ) -> ModelT:
        """Fetch exactly one row or fail.

        Raises:
            NotFoundError: If no row matches
            PersistenceError: If the query fails
        """
        rows = self.select(model, filters, limit=1, with_children=with_children)
        if not rows:
            raise NotFoundError(f"No {model.__tablename__} row matching {filters}")
        return rows[0]

    def insert(self, model: Type[ModelT], rows: list[dict]) -> list[ModelT]:
        """Insert rows and return the created objects.

        Raises:
            PersistenceError: If the insert fails (constraint violation etc.)
        """
        if not rows:
            return []

        objects = [model(**row) for row in rows]
        try:
            self.db.add_all(objects)
            self.db.commit()
        except SQLAlchemyError as e:
            logger.error(f"Insert into {model.__tablename__} failed: {e}")
            self.db.rollback()
            raise PersistenceError(f"Failed to save {model.__tablename__}: {e}") from e

        logger.debug(f"Inserted {len(objects)} row(s) into {model.__tablename__}")
        return objects

    def update(self, model: Type[ModelT], filters: dict, patch: dict[str, Any]) -> int:
        """Apply a patch to every matching row.

        Returns:
            Number of rows updated

        Raises:
            PersistenceError: If the update fails
        """
        stmt = update(model)
        for column, value in filters.items():
            stmt = stmt.where(getattr(model, column) == value)
        stmt = stmt.values(**patch).execution_options(synchronize_session="fetch")

        try:
            result = self.db.execute(stmt)
            self.db.commit()
        except SQLAlchemyError as e:
            logger.error(f"Update on {model.__tablename__} failed: {e}")
            self.db.rollback()
            raise PersistenceError(f"Failed to update {model.__tablename__}: {e}") from e

        return result.rowcount

    def delete(self, model: Type[ModelT], filters: dict) -> int:
        """Delete every matching row, cascading to owned children.

        Returns:
            Number of rows deleted

        Raises:
            PersistenceError: If the delete fails
        """
        rows = self.select(model, filters)
        try:
            for row in rows:
                self.db.delete(row)
            self.db.commit()
        except SQLAlchemyError as e:
            logger.error(f"Delete on {model.__tablename__} failed: {e}")
            self.db.rollback()
            raise PersistenceError(f"Failed to delete {model.__tablename__}: {e}") from e

        return len(rows)
