"""
Dense 1-based sibling ordering (columns within a board, tasks within a column).

All helpers assume the caller has already locked the container row in the
current transaction: board row for columns, column row for tasks.
"""
from sqlalchemy import func
from sqlalchemy.orm import Session

from app.application.errors import KanbanValidationError
from app.infrastructure.db.models import ColumnModel, TaskModel


class SiblingOrder:
    def __init__(self, db: Session, model, container_attr):
        self.db = db
        self.model = model
        self.container_attr = container_attr

    def _siblings(self, container_id: str):
        return self.db.query(self.model).filter(self.container_attr == container_id)

    def count(self, container_id: str) -> int:
        return self._siblings(container_id).count()

    def next_position(self, container_id: str, exclude_id: str | None = None) -> int:
        """
        Append slot: ``COALESCE(MAX(position), 0) + 1``.

        ``exclude_id`` skips a row that is being re-slotted in this same
        container, so it is not counted against itself.
        """
        q = self.db.query(func.coalesce(func.max(self.model.position), 0)).filter(
            self.container_attr == container_id
        )
        if exclude_id is not None:
            q = q.filter(self.model.id != exclude_id)
        return q.scalar() + 1

    def compact(self, container_id: str, vacated: int) -> int:
        """Close the gap left at ``vacated``. Returns the number of rows shifted."""
        return self._siblings(container_id).filter(
            self.model.position > vacated,
        ).update(
            {self.model.position: self.model.position - 1},
            synchronize_session="fetch",
        )

    def reposition(self, entity, new_position: int) -> int:
        """
        Move ``entity`` to ``new_position`` inside its own container.

        Positions past the end are clamped to the last slot. Returns the
        resulting position.
        """
        if new_position < 1:
            raise KanbanValidationError("position must be >= 1")

        container_id = getattr(entity, self.container_attr.key)
        old = entity.position
        target = min(new_position, self.count(container_id))
        if target == old:
            return old

        others = self._siblings(container_id).filter(self.model.id != entity.id)
        if target > old:
            others.filter(
                self.model.position > old,
                self.model.position <= target,
            ).update(
                {self.model.position: self.model.position - 1},
                synchronize_session="fetch",
            )
        else:
            others.filter(
                self.model.position >= target,
                self.model.position < old,
            ).update(
                {self.model.position: self.model.position + 1},
                synchronize_session="fetch",
            )

        entity.position = target
        return target


def column_order(db: Session) -> SiblingOrder:
    return SiblingOrder(db, ColumnModel, ColumnModel.board_id)


def task_order(db: Session) -> SiblingOrder:
    return SiblingOrder(db, TaskModel, TaskModel.column_id)
