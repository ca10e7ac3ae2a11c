"""
Board API endpoints
"""
from fastapi import APIRouter, Depends, Response
from pydantic import BaseModel
from sqlalchemy.orm import Session

from app.api.deps import get_db, get_current_user_id, get_tx_timeout_ms
from app.api.v1.schemas import BoardResponse, TaskResponse, board_out, task_out
from app.application.boards import (
    CreateBoardUseCase, UpdateBoardUseCase, DeleteBoardUseCase, BoardReadService,
)


router = APIRouter(prefix="/api/v1/boards", tags=["boards"])


class BoardRequest(BaseModel):
    name: str


@router.get("/", response_model=list[BoardResponse])
def list_boards(
    user_id: str = Depends(get_current_user_id),
    db: Session = Depends(get_db),
):
    """Boards of the current user, oldest first"""
    return [board_out(b) for b in BoardReadService(db).list_boards(user_id)]


@router.post("/", response_model=BoardResponse, status_code=201)
def create_board(
    req: BoardRequest,
    user_id: str = Depends(get_current_user_id),
    db: Session = Depends(get_db),
    timeout_ms: int = Depends(get_tx_timeout_ms),
):
    board = CreateBoardUseCase(db, timeout_ms).execute(owner_id=user_id, name=req.name)
    return board_out(board)


@router.get("/{board_id}", response_model=BoardResponse)
def get_board(
    board_id: str,
    user_id: str = Depends(get_current_user_id),
    db: Session = Depends(get_db),
):
    return board_out(BoardReadService(db).get_board(user_id, board_id))


@router.put("/{board_id}", response_model=BoardResponse)
def update_board(
    board_id: str,
    req: BoardRequest,
    user_id: str = Depends(get_current_user_id),
    db: Session = Depends(get_db),
    timeout_ms: int = Depends(get_tx_timeout_ms),
):
    """Rename a board"""
    board = UpdateBoardUseCase(db, timeout_ms).execute(
        owner_id=user_id, board_id=board_id, name=req.name,
    )
    return board_out(board)


@router.delete("/{board_id}", status_code=204)
def delete_board(
    board_id: str,
    user_id: str = Depends(get_current_user_id),
    db: Session = Depends(get_db),
    timeout_ms: int = Depends(get_tx_timeout_ms),
):
    DeleteBoardUseCase(db, timeout_ms).execute(owner_id=user_id, board_id=board_id)
    return Response(status_code=204)


@router.get("/{board_id}/tasks", response_model=list[TaskResponse])
def list_board_tasks(
    board_id: str,
    user_id: str = Depends(get_current_user_id),
    db: Session = Depends(get_db),
):
    """Every task of the board, grouped by column order"""
    return [task_out(t) for t in BoardReadService(db).list_board_tasks(user_id, board_id)]
