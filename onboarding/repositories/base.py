"""
Generic async CRUD shared by every repository.

Repositories never commit. They flush so generated keys and server defaults
are visible, and leave the transaction boundary to the request handler.
"""

from __future__ import annotations
from typing import Generic, TypeVar, Type, Optional, Sequence
from uuid import UUID
from sqlalchemy import select, func, delete as sql_delete
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
import logging

logger = logging.getLogger(__name__)

T = TypeVar("T")


class BaseRepository(Generic[T]):
    """
    CRUD operations for one mapped class.

    Type Parameters:
        T: The SQLAlchemy model type this repository manages

    Example:
        class ProfileRepository(BaseRepository[Profile]):
            def __init__(self):
                super().__init__(Profile)
    """

    def __init__(self, model: Type[T]):
        self.model = model

    async def get(self, db: AsyncSession, id: UUID) -> Optional[T]:
        """
        Fetch one row by primary key.

        Returns:
            Model instance if found, None otherwise
        """
        try:
            stmt = select(self.model).where(self.model.id == id)
            result = await db.execute(stmt)
            return result.scalar_one_or_none()
        except SQLAlchemyError as e:
            logger.error(f"Error fetching {self.model.__name__} by id {id}: {e}")
            raise

    async def get_many(self, db: AsyncSession, ids: Sequence[UUID]) -> list[T]:
        """Fetch every row whose id is in ``ids`` (missing ids are skipped)."""
        if not ids:
            return []
        try:
            stmt = select(self.model).where(self.model.id.in_(list(ids)))
            result = await db.execute(stmt)
            return list(result.scalars().all())
        except SQLAlchemyError as e:
            logger.error(f"Error fetching {len(ids)} {self.model.__name__} rows: {e}")
            raise

    async def create(self, db: AsyncSession, obj_in: dict) -> T:
        """
        Insert a row and flush it.

        Args:
            db: Active database session
            obj_in: Column values for the new row

        Returns:
            The persisted instance, refreshed so server defaults are loaded

        Raises:
            IntegrityError: If a constraint is violated
        """
        try:
            db_obj = self.model(**obj_in)
            db.add(db_obj)
            await db.flush()
            await db.refresh(db_obj)
            return db_obj
        except IntegrityError as e:
            logger.warning(f"Integrity error creating {self.model.__name__}: {e}")
            await db.rollback()
            raise
        except SQLAlchemyError as e:
            logger.error(f"Error creating {self.model.__name__}: {e}")
            await db.rollback()
            raise

    async def update(self, db: AsyncSession, db_obj: T, obj_in: dict) -> T:
        """
        Set the given attributes, flush and refresh.

        Keys that are not attributes of the model are ignored.
        """
        try:
            for field, value in obj_in.items():
                if hasattr(db_obj, field):
                    setattr(db_obj, field, value)

            await db.flush()
            await db.refresh(db_obj)
            return db_obj
        except IntegrityError as e:
            logger.warning(f"Integrity error updating {self.model.__name__}: {e}")
            await db.rollback()
            raise
        except SQLAlchemyError as e:
            logger.error(f"Error updating {self.model.__name__}: {e}")
            await db.rollback()
            raise

    async def delete(self, db: AsyncSession, id: UUID) -> bool:
        """
        Delete a row by primary key.

        Returns:
            True if a row was deleted, False if none matched
        """
        try:
            stmt = sql_delete(self.model).where(self.model.id == id)
            result = await db.execute(stmt)
            await db.flush()
            return result.rowcount > 0
        except SQLAlchemyError as e:
            logger.error(f"Error deleting {self.model.__name__} with id {id}: {e}")
            await db.rollback()
            raise

    async def exists(self, db: AsyncSession, id: UUID) -> bool:
        try:
            stmt = select(func.count()).select_from(self.model).where(self.model.id == id)
            result = await db.execute(stmt)
            return result.scalar_one() > 0
        except SQLAlchemyError as e:
            logger.error(f"Error checking existence of {self.model.__name__} with id {id}: {e}")
            raise
