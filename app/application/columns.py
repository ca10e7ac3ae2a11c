"""
Column use-cases: create/rename/reorder/delete within a board.

Every mutation locks the board row first, which serializes all changes to
one board's column ordering.
"""
import logging
from typing import List

from sqlalchemy.orm import Session

from app.application.boards import clean_name
from app.application.ownership import OwnershipGuard
from app.application.positions import column_order
from app.application.unit_of_work import UnitOfWork
from app.infrastructure.db.models import ColumnModel, TaskModel

logger = logging.getLogger(__name__)


class CreateColumnUseCase:
    """Append a column at the end of the board."""

    def __init__(self, db: Session, timeout_ms: int | None = None):
        self.db = db
        self.timeout_ms = timeout_ms

    def execute(self, owner_id: str, board_id: str, name: str) -> ColumnModel:
        name = clean_name(name)
        with UnitOfWork(self.db, self.timeout_ms) as uow:
            board = OwnershipGuard(self.db).board(board_id, owner_id, lock=True)
            uow.checkpoint()
            position = column_order(self.db).next_position(board.id)
            column = ColumnModel(board_id=board.id, name=name, position=position)
            self.db.add(column)
            self.db.flush()
            self.db.refresh(column)
        return column


class UpdateColumnUseCase:
    """Rename and/or move a column to another slot of the same board."""

    def __init__(self, db: Session, timeout_ms: int | None = None):
        self.db = db
        self.timeout_ms = timeout_ms

    def execute(
        self,
        owner_id: str,
        board_id: str,
        column_id: str,
        name: str | None = None,
        position: int | None = None,
    ) -> ColumnModel:
        if name is not None:
            name = clean_name(name)

        with UnitOfWork(self.db, self.timeout_ms) as uow:
            guard = OwnershipGuard(self.db)
            if position is not None:
                guard.board(board_id, owner_id, lock=True)
                uow.checkpoint()
            column = guard.column(board_id, column_id, owner_id, lock=True)

            if name is not None:
                column.name = name
            if position is not None:
                uow.checkpoint()
                column_order(self.db).reposition(column, position)
            self.db.flush()
            self.db.refresh(column)
        return column


class DeleteColumnUseCase:
    """Delete a column with its tasks and close the gap on the board."""

    def __init__(self, db: Session, timeout_ms: int | None = None):
        self.db = db
        self.timeout_ms = timeout_ms

    def execute(self, owner_id: str, board_id: str, column_id: str) -> None:
        with UnitOfWork(self.db, self.timeout_ms) as uow:
            guard = OwnershipGuard(self.db)
            board = guard.board(board_id, owner_id, lock=True)
            column = guard.column(board_id, column_id, owner_id, lock=True)
            vacated = column.position

            uow.checkpoint()
            n_tasks = self.db.query(TaskModel).filter(
                TaskModel.column_id == column.id,
            ).delete(synchronize_session="fetch")
            self.db.delete(column)
            self.db.flush()

            uow.checkpoint()
            shifted = column_order(self.db).compact(board.id, vacated)
        logger.info(
            "Column %s deleted from board %s (pos %d, %d task(s)), %d column(s) shifted",
            column_id, board_id, vacated, n_tasks, shifted,
        )


class ColumnReadService:
    def __init__(self, db: Session):
        self.db = db

    def list_columns(self, owner_id: str, board_id: str) -> List[ColumnModel]:
        board = OwnershipGuard(self.db).board(board_id, owner_id)
        return (
            self.db.query(ColumnModel)
            .filter(ColumnModel.board_id == board.id)
            .order_by(ColumnModel.position, ColumnModel.created_at)
            .all()
        )
