"""
Board use-cases and read service.
"""
import logging
from typing import List

from sqlalchemy.orm import Session

from app.application.errors import KanbanValidationError
from app.application.ownership import OwnershipGuard
from app.application.unit_of_work import UnitOfWork
from app.infrastructure.db.models import BoardModel, ColumnModel, TaskModel

logger = logging.getLogger(__name__)

NAME_MAX_LEN = 255


def clean_name(name: str | None, what: str = "name") -> str:
    name = (name or "").strip()
    if not name:
        raise KanbanValidationError(f"{what} is required")
    if len(name) > NAME_MAX_LEN:
        raise KanbanValidationError(f"{what} is too long (max {NAME_MAX_LEN})")
    return name


# ── Use Cases ──

class CreateBoardUseCase:
    def __init__(self, db: Session, timeout_ms: int | None = None):
        self.db = db
        self.timeout_ms = timeout_ms

    def execute(self, owner_id: str, name: str) -> BoardModel:
        name = clean_name(name)
        with UnitOfWork(self.db, self.timeout_ms):
            board = BoardModel(owner_id=owner_id, name=name)
            self.db.add(board)
            self.db.flush()
            self.db.refresh(board)
        return board


class UpdateBoardUseCase:
    def __init__(self, db: Session, timeout_ms: int | None = None):
        self.db = db
        self.timeout_ms = timeout_ms

    def execute(self, owner_id: str, board_id: str, name: str) -> BoardModel:
        name = clean_name(name)
        with UnitOfWork(self.db, self.timeout_ms):
            board = OwnershipGuard(self.db).board(board_id, owner_id, lock=True)
            board.name = name
            self.db.flush()
            self.db.refresh(board)
        return board


class DeleteBoardUseCase:
    """
    Hard delete: tasks, then columns, then the board itself.

    Column rows are locked (ascending id) before any task row is touched,
    the same order a move takes them.
    """

    def __init__(self, db: Session, timeout_ms: int | None = None):
        self.db = db
        self.timeout_ms = timeout_ms

    def execute(self, owner_id: str, board_id: str) -> None:
        with UnitOfWork(self.db, self.timeout_ms) as uow:
            board = OwnershipGuard(self.db).board(board_id, owner_id, lock=True)
            uow.checkpoint()
            self.db.query(ColumnModel).filter(
                ColumnModel.board_id == board.id,
            ).order_by(ColumnModel.id).with_for_update().all()

            uow.checkpoint()
            n_tasks = self.db.query(TaskModel).filter(
                TaskModel.board_id == board.id,
            ).delete(synchronize_session="fetch")
            n_columns = self.db.query(ColumnModel).filter(
                ColumnModel.board_id == board.id,
            ).delete(synchronize_session="fetch")
            self.db.delete(board)
        logger.info(
            "Board %s deleted with %d column(s) and %d task(s)", board_id, n_columns, n_tasks
        )


# ── Read Service ──

class BoardReadService:
    """Read-only queries, always scoped to the acting owner."""

    def __init__(self, db: Session):
        self.db = db

    def list_boards(self, owner_id: str) -> List[BoardModel]:
        return (
            self.db.query(BoardModel)
            .filter(BoardModel.owner_id == owner_id)
            .order_by(BoardModel.created_at, BoardModel.id)
            .all()
        )

    def get_board(self, owner_id: str, board_id: str) -> BoardModel:
        return OwnershipGuard(self.db).board(board_id, owner_id)

    def list_board_tasks(self, owner_id: str, board_id: str) -> List[TaskModel]:
        """All tasks of the board, column by column, each column in position order."""
        board = OwnershipGuard(self.db).board(board_id, owner_id)
        return (
            self.db.query(TaskModel)
            .join(ColumnModel, TaskModel.column_id == ColumnModel.id)
            .filter(TaskModel.board_id == board.id)
            .order_by(ColumnModel.position, TaskModel.position, TaskModel.created_at)
            .all()
        )
