"""
Task use-cases: create/update/delete inside a column and the cross-column move.

Lock order, shared by every path here: column row(s) first, ascending id,
then the task row. Task create/update/delete lock the column, move locks
source and destination columns. Keeping one order means concurrent movers
queue up instead of deadlocking.
"""
import logging
from typing import List

from sqlalchemy import func
from sqlalchemy.orm import Session

from app.application.boards import clean_name
from app.application.errors import KanbanValidationError, TransientError
from app.application.ownership import OwnershipGuard
from app.application.positions import task_order
from app.application.unit_of_work import UnitOfWork
from app.infrastructure.db.models import TaskModel

logger = logging.getLogger(__name__)

# How many times a move re-resolves its source column when another mover
# relocated the task between the unlocked read and the locked one.
MOVE_RESOLVE_ATTEMPTS = 3


def _clean_description(description: str | None) -> str:
    return (description or "").strip()


class CreateTaskUseCase:
    """Append a task at the end of a column."""

    def __init__(self, db: Session, timeout_ms: int | None = None):
        self.db = db
        self.timeout_ms = timeout_ms

    def execute(
        self,
        owner_id: str,
        board_id: str,
        column_id: str,
        title: str,
        description: str | None = None,
    ) -> TaskModel:
        title = clean_name(title, "title")
        with UnitOfWork(self.db, self.timeout_ms) as uow:
            column = OwnershipGuard(self.db).column(board_id, column_id, owner_id, lock=True)
            uow.checkpoint()
            position = task_order(self.db).next_position(column.id)
            task = TaskModel(
                board_id=column.board_id,
                column_id=column.id,
                title=title,
                description=_clean_description(description),
                position=position,
            )
            self.db.add(task)
            self.db.flush()
            self.db.refresh(task)
        return task


class UpdateTaskUseCase:
    """
    Change title/description. ``position`` is optional: when given, the task
    is re-slotted inside its current column, siblings shift to stay dense.
    """

    def __init__(self, db: Session, timeout_ms: int | None = None):
        self.db = db
        self.timeout_ms = timeout_ms

    def execute(
        self,
        owner_id: str,
        board_id: str,
        column_id: str,
        task_id: str,
        title: str | None = None,
        description: str | None = None,
        position: int | None = None,
    ) -> TaskModel:
        if title is not None:
            title = clean_name(title, "title")

        with UnitOfWork(self.db, self.timeout_ms) as uow:
            guard = OwnershipGuard(self.db)
            guard.column(board_id, column_id, owner_id, lock=True)
            task = guard.task(board_id, task_id, owner_id, column_id=column_id, lock=True)

            if title is not None:
                task.title = title
            if description is not None:
                task.description = _clean_description(description)
            if position is not None:
                uow.checkpoint()
                task_order(self.db).reposition(task, position)
            self.db.flush()
            self.db.refresh(task)
        return task


class DeleteTaskUseCase:
    def __init__(self, db: Session, timeout_ms: int | None = None):
        self.db = db
        self.timeout_ms = timeout_ms

    def execute(self, owner_id: str, board_id: str, column_id: str, task_id: str) -> None:
        with UnitOfWork(self.db, self.timeout_ms) as uow:
            guard = OwnershipGuard(self.db)
            column = guard.column(board_id, column_id, owner_id, lock=True)
            task = guard.task(board_id, task_id, owner_id, column_id=column_id, lock=True)
            vacated = task.position

            self.db.delete(task)
            self.db.flush()
            uow.checkpoint()
            task_order(self.db).compact(column.id, vacated)
        logger.info("Task %s deleted from column %s (pos %d)", task_id, column_id, vacated)


class MoveTaskUseCase:
    """
    Relocate a task to the end of another column of the same board.

    Steps, all in one transaction:
      1. resolve the task by (id, board_id) through the ownership chain
      2. lock source and destination column rows; destination must be on
         the same board
      3. lock the task row and confirm it still sits in the source column
      4. compact the source column after the old position
      5. allocate the append slot in the destination
      6. update column_id/position/updated_at and read the row back

    Any failure rolls everything back: the task is never missing from both
    columns or present in both.
    """

    def __init__(self, db: Session, timeout_ms: int | None = None):
        self.db = db
        self.timeout_ms = timeout_ms

    def execute(self, owner_id: str, board_id: str, task_id: str, column_id: str) -> TaskModel:
        if not column_id:
            raise KanbanValidationError("column_id is required")
        with UnitOfWork(self.db, self.timeout_ms) as uow:
            task = self._lock(uow, owner_id, board_id, task_id, column_id)
            source_id, old_position = task.column_id, task.position

            order = task_order(self.db)
            uow.checkpoint()
            order.compact(source_id, old_position)

            uow.checkpoint()
            # source == destination: the task itself must not count toward MAX
            new_position = order.next_position(column_id, exclude_id=task.id)

            task.column_id = column_id
            task.position = new_position
            task.updated_at = func.now()
            self.db.flush()
            self.db.refresh(task)

        logger.info(
            "Task %s moved: column %s#%d -> column %s#%d",
            task_id, source_id, old_position, column_id, new_position,
        )
        return task

    def _lock(
        self, uow: UnitOfWork, owner_id: str, board_id: str, task_id: str, column_id: str
    ) -> TaskModel:
        guard = OwnershipGuard(self.db)
        for _ in range(MOVE_RESOLVE_ATTEMPTS):
            task = guard.task(board_id, task_id, owner_id)
            source_id = task.column_id

            for cid in sorted({source_id, column_id}):
                uow.checkpoint()
                guard.column(board_id, cid, owner_id, lock=True)

            uow.checkpoint()
            task = guard.task(board_id, task_id, owner_id, lock=True)
            if task.column_id == source_id:
                return task
            logger.info("Task %s left column %s concurrently, re-resolving", task_id, source_id)

        raise TransientError(f"task {task_id} kept moving, gave up after {MOVE_RESOLVE_ATTEMPTS} attempts")


class TaskReadService:
    def __init__(self, db: Session):
        self.db = db

    def list_column_tasks(self, owner_id: str, board_id: str, column_id: str) -> List[TaskModel]:
        column = OwnershipGuard(self.db).column(board_id, column_id, owner_id)
        return (
            self.db.query(TaskModel)
            .filter(TaskModel.column_id == column.id)
            .order_by(TaskModel.position, TaskModel.created_at)
            .all()
        )
