"""
Change-set inspection and atomic commit.

A session's staged inserts, updates and deletes are flushed in one
transaction. When the database rejects the flush, the transaction is rolled
back and the staged change-set is put back exactly as the caller left it, so
it can be inspected, corrected and committed again.
"""

from dataclasses import dataclass, field
from typing import Any, Dict, List

from sqlalchemy import inspect
from sqlalchemy.exc import IntegrityError, OperationalError
from sqlalchemy.orm import Session
from sqlalchemy.orm.exc import FlushError

from ..domain.exceptions import ConnectivityException, ConstraintViolationException
from ..logging_config import get_logger

logger = get_logger(__name__)


@dataclass
class ChangeSet:
    """
    Snapshot of the changes staged on a session.

    Attributes:
        added: Entities staged for insert
        updated: Persistent entities with modified attributes
        deleted: Entities staged for removal
    """

    added: List[Any] = field(default_factory=list)
    updated: List[Any] = field(default_factory=list)
    deleted: List[Any] = field(default_factory=list)

    @classmethod
    def from_session(cls, session: Session) -> "ChangeSet":
        """Collect the pending changes of ``session``."""
        return cls(
            added=list(session.new),
            updated=[obj for obj in session.dirty if session.is_modified(obj)],
            deleted=list(session.deleted),
        )

    @property
    def count(self) -> int:
        """Number of entity rows the change-set touches."""
        return len(self.added) + len(self.updated) + len(self.deleted)

    def is_empty(self) -> bool:
        return self.count == 0

    def entity_names(self) -> List[str]:
        """Sorted, distinct class names of the staged entities."""
        objs = self.added + self.updated + self.deleted
        return sorted({type(obj).__name__ for obj in objs})


def _snapshot(obj: Any) -> Dict[str, Any]:
    """Capture loaded column values and relationship collections of ``obj``."""
    state = inspect(obj)
    values: Dict[str, Any] = {}
    for attr in state.mapper.column_attrs:
        if attr.key not in state.unloaded:
            values[attr.key] = getattr(obj, attr.key)
    for rel in state.mapper.relationships:
        if rel.key in state.unloaded:
            continue
        value = getattr(obj, rel.key)
        values[rel.key] = list(value) if rel.uselist else value
    return values


def _restore(obj: Any, values: Dict[str, Any]) -> None:
    for key, value in values.items():
        setattr(obj, key, value)


def _restage(session: Session, changes: ChangeSet, snapshots: Dict[int, Dict[str, Any]]) -> None:
    """Put a rolled-back change-set back on ``session``."""
    for obj in changes.added:
        values = snapshots[id(obj)]
        _restore(obj, values)
        # Keys generated by the failed flush go back to unassigned
        for column in inspect(obj).mapper.primary_key:
            key = inspect(obj).mapper.get_property_by_column(column).key
            if key not in values:
                setattr(obj, key, None)
        session.add(obj)
    for obj in changes.updated:
        _restore(obj, snapshots[id(obj)])
    for obj in changes.deleted:
        session.delete(obj)


def commit_session(session: Session) -> int:
    """
    Commit every change staged on ``session`` as one transaction.

    Args:
        session: Session holding the staged change-set

    Returns:
        Number of entity rows inserted, updated or deleted

    Raises:
        ConstraintViolationException: If the database rejects the change-set
        ConnectivityException: If the database cannot be reached
    """
    changes = ChangeSet.from_session(session)
    snapshots = {id(obj): _snapshot(obj) for obj in changes.added + changes.updated}

    try:
        session.commit()
    except (IntegrityError, FlushError) as e:
        session.rollback()
        _restage(session, changes, snapshots)
        entities = ", ".join(changes.entity_names()) or "unknown"
        reason = str(e.orig) if isinstance(e, IntegrityError) else str(e)
        logger.warning(
            "Commit rejected, change-set kept", changes=changes.count, reason=reason
        )
        raise ConstraintViolationException(entities, reason) from e
    except OperationalError as e:
        session.rollback()
        _restage(session, changes, snapshots)
        logger.error("Commit failed, database unavailable", error=str(e.orig))
        raise ConnectivityException("commit", str(e.orig)) from e

    logger.info(
        "Committed changes",
        added=len(changes.added),
        updated=len(changes.updated),
        deleted=len(changes.deleted),
    )
    return changes.count
