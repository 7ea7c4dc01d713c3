"""
Read-side base class.

Selectors turn rows into frozen snapshots and never write.  Sessions are
created with ``expire_on_commit=False``, so an object already in the
identity map keeps whatever values it was loaded with; every selector
query goes through ``_fresh`` to overwrite them with what the database
holds now.
"""

from typing import Generic, TypeVar

from sqlalchemy import Select
from sqlalchemy.orm import Session

from production_kernel.db.base import Base

ModelType = TypeVar("ModelType", bound=Base)


class BaseSelector(Generic[ModelType]):
    """Holds the caller's session; the caller owns its transaction."""

    def __init__(self, session: Session):
        self.session = session

    def _fresh(self, stmt: Select) -> Select:
        return stmt.execution_options(populate_existing=True)
