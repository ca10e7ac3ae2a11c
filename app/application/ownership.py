"""
Ownership chain resolution: board -> owner, column -> board -> owner,
task -> board -> owner (optionally pinned to a column).

One guard for every read and write path so the checks cannot drift apart.
"""
import enum

from sqlalchemy.orm import Query, Session

from app.application.errors import NotFoundError
from app.infrastructure.db.models import BoardModel, ColumnModel, TaskModel


class EntityKind(str, enum.Enum):
    BOARD = "board"
    COLUMN = "column"
    TASK = "task"


class OwnershipGuard:
    def __init__(self, db: Session):
        self.db = db

    def resolve(
        self,
        kind: EntityKind,
        owner_id: str,
        board_id: str,
        column_id: str | None = None,
        task_id: str | None = None,
        lock: bool = False,
    ):
        """
        Load the entity only if its chain ends at a board owned by ``owner_id``.

        With ``lock=True`` the row is read ``FOR UPDATE`` (entity table only,
        the joined board is not locked) and any copy already in the session is
        overwritten with the locked version.

        Raises:
            NotFoundError: entity missing, on another board, or foreign owner
        """
        if kind is EntityKind.BOARD:
            model = BoardModel
            q = self.db.query(BoardModel).filter(
                BoardModel.id == board_id,
                BoardModel.owner_id == owner_id,
            )
        elif kind is EntityKind.COLUMN:
            model = ColumnModel
            q = self._owned(ColumnModel, owner_id).filter(
                ColumnModel.id == column_id,
                ColumnModel.board_id == board_id,
            )
        else:
            model = TaskModel
            q = self._owned(TaskModel, owner_id).filter(
                TaskModel.id == task_id,
                TaskModel.board_id == board_id,
            )
            if column_id is not None:
                q = q.filter(TaskModel.column_id == column_id)

        if lock:
            q = q.with_for_update(of=model).populate_existing()

        entity = q.first()
        if entity is None:
            raise NotFoundError(f"{kind.value} not found")
        return entity

    def board(self, board_id: str, owner_id: str, lock: bool = False) -> BoardModel:
        return self.resolve(EntityKind.BOARD, owner_id, board_id, lock=lock)

    def column(
        self, board_id: str, column_id: str, owner_id: str, lock: bool = False
    ) -> ColumnModel:
        return self.resolve(EntityKind.COLUMN, owner_id, board_id, column_id=column_id, lock=lock)

    def task(
        self,
        board_id: str,
        task_id: str,
        owner_id: str,
        column_id: str | None = None,
        lock: bool = False,
    ) -> TaskModel:
        return self.resolve(
            EntityKind.TASK, owner_id, board_id,
            column_id=column_id, task_id=task_id, lock=lock,
        )

    def _owned(self, model, owner_id: str) -> Query:
        return self.db.query(model).join(
            BoardModel, model.board_id == BoardModel.id
        ).filter(BoardModel.owner_id == owner_id)
