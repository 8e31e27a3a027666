"""
Common repository behaviour: lookups by primary key and staged inserts.
"""

from abc import ABC, abstractmethod
from typing import Generic, TypeVar

from sqlalchemy import Select, select
from sqlalchemy.orm import Session


ModelT = TypeVar("ModelT")


class BaseRepository(ABC, Generic[ModelT]):
    """
    Repository over one model.

    Subclasses name the model and may override _base_query() to add the
    eager loading their callers need. Repositories never commit; the
    calling service owns the transaction.
    """

    def __init__(self, db: Session):
        self._db = db

    @property
    @abstractmethod
    def model(self) -> type[ModelT]:
        ...

    def _base_query(self) -> Select:
        return select(self.model)

    def find_by_id(self, entity_id: str) -> ModelT | None:
        return self._db.scalar(self._base_query().where(self.model.id == entity_id))

    def exists(self, entity_id: str) -> bool:
        query = select(self.model.id).where(self.model.id == entity_id)
        return self._db.scalar(query) is not None

    def add(self, entity: ModelT) -> ModelT:
        """Stage a new row and flush so defaults and the primary key are set."""
        self._db.add(entity)
        self._db.flush()
        return entity
