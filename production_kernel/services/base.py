"""
Shared plumbing for the write-side kernel services.

Kernel services flush; they do not commit.  Whoever built the session
(ProductionService, a seeding script, a test) decides whether the work
is kept, which is what lets a rejected settlement leave stock untouched.
"""

from typing import Generic, TypeVar
from uuid import UUID

from sqlalchemy.orm import Session

from production_kernel.db.base import Base

ModelType = TypeVar("ModelType", bound=Base)


def parse_uuid(value: UUID | str) -> UUID | None:
    """Coerce an identifier to UUID, returning None when it cannot be one."""
    if isinstance(value, UUID):
        return value
    try:
        return UUID(str(value))
    except (TypeError, ValueError):
        return None


class BaseService(Generic[ModelType]):
    """
    Base for services that mutate ``ModelType`` rows.

    Subclasses call ``self.session.flush()`` to surface constraint and
    version errors early, and leave commit/rollback to the caller.
    """

    def __init__(self, session: Session):
        self.session = session
