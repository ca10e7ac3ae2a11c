"""
Task API endpoints: CRUD inside a column plus the cross-column move
"""
from fastapi import APIRouter, Depends, Response
from pydantic import BaseModel
from sqlalchemy.orm import Session

from app.api.deps import get_db, get_current_user_id, get_tx_timeout_ms
from app.api.v1.schemas import TaskResponse, task_out
from app.application.tasks import (
    CreateTaskUseCase, UpdateTaskUseCase, DeleteTaskUseCase, MoveTaskUseCase, TaskReadService,
)


router = APIRouter(prefix="/api/v1/boards/{board_id}", tags=["tasks"])


# === Request models ===

class CreateTaskRequest(BaseModel):
    title: str
    description: str = ""


class UpdateTaskRequest(BaseModel):
    title: str | None = None
    description: str | None = None
    position: int | None = None  # reorder within the same column


class MoveTaskRequest(BaseModel):
    column_id: str


# === Endpoints ===

@router.get("/columns/{column_id}/tasks/", response_model=list[TaskResponse])
def list_tasks(
    board_id: str,
    column_id: str,
    user_id: str = Depends(get_current_user_id),
    db: Session = Depends(get_db),
):
    tasks = TaskReadService(db).list_column_tasks(user_id, board_id, column_id)
    return [task_out(t) for t in tasks]


@router.post("/columns/{column_id}/tasks/", response_model=TaskResponse, status_code=201)
def create_task(
    board_id: str,
    column_id: str,
    req: CreateTaskRequest,
    user_id: str = Depends(get_current_user_id),
    db: Session = Depends(get_db),
    timeout_ms: int = Depends(get_tx_timeout_ms),
):
    task = CreateTaskUseCase(db, timeout_ms).execute(
        owner_id=user_id,
        board_id=board_id,
        column_id=column_id,
        title=req.title,
        description=req.description,
    )
    return task_out(task)


@router.put("/columns/{column_id}/tasks/{task_id}", response_model=TaskResponse)
def update_task(
    board_id: str,
    column_id: str,
    task_id: str,
    req: UpdateTaskRequest,
    user_id: str = Depends(get_current_user_id),
    db: Session = Depends(get_db),
    timeout_ms: int = Depends(get_tx_timeout_ms),
):
    task = UpdateTaskUseCase(db, timeout_ms).execute(
        owner_id=user_id,
        board_id=board_id,
        column_id=column_id,
        task_id=task_id,
        title=req.title,
        description=req.description,
        position=req.position,
    )
    return task_out(task)


@router.delete("/columns/{column_id}/tasks/{task_id}", status_code=204)
def delete_task(
    board_id: str,
    column_id: str,
    task_id: str,
    user_id: str = Depends(get_current_user_id),
    db: Session = Depends(get_db),
    timeout_ms: int = Depends(get_tx_timeout_ms),
):
    DeleteTaskUseCase(db, timeout_ms).execute(
        owner_id=user_id, board_id=board_id, column_id=column_id, task_id=task_id,
    )
    return Response(status_code=204)


@router.patch("/tasks/{task_id}/move", response_model=TaskResponse)
def move_task(
    board_id: str,
    task_id: str,
    req: MoveTaskRequest,
    user_id: str = Depends(get_current_user_id),
    db: Session = Depends(get_db),
    timeout_ms: int = Depends(get_tx_timeout_ms),
):
    """Move the task to the end of another column of the same board"""
    task = MoveTaskUseCase(db, timeout_ms).execute(
        owner_id=user_id, board_id=board_id, task_id=task_id, column_id=req.column_id.strip(),
    )
    return task_out(task)
