"""
Response models shared by the kanban routers
"""
from datetime import datetime

from pydantic import BaseModel

from app.infrastructure.db.models import BoardModel, ColumnModel, TaskModel


class BoardResponse(BaseModel):
    id: str
    owner_id: str
    name: str
    created_at: datetime
    updated_at: datetime


class ColumnResponse(BaseModel):
    id: str
    board_id: str
    name: str
    position: int
    created_at: datetime
    updated_at: datetime


class TaskResponse(BaseModel):
    id: str
    board_id: str
    column_id: str
    title: str
    description: str
    position: int
    created_at: datetime
    updated_at: datetime


def board_out(b: BoardModel) -> BoardResponse:
    return BoardResponse(
        id=b.id,
        owner_id=b.owner_id,
        name=b.name,
        created_at=b.created_at,
        updated_at=b.updated_at,
    )


def column_out(c: ColumnModel) -> ColumnResponse:
    return ColumnResponse(
        id=c.id,
        board_id=c.board_id,
        name=c.name,
        position=c.position,
        created_at=c.created_at,
        updated_at=c.updated_at,
    )


def task_out(t: TaskModel) -> TaskResponse:
    return TaskResponse(
        id=t.id,
        board_id=t.board_id,
        column_id=t.column_id,
        title=t.title,
        description=t.description,
        position=t.position,
        created_at=t.created_at,
        updated_at=t.updated_at,
    )
