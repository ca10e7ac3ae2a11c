"""
Column API endpoints (nested under a board)
"""
from fastapi import APIRouter, Depends, Response
from pydantic import BaseModel
from sqlalchemy.orm import Session

from app.api.deps import get_db, get_current_user_id, get_tx_timeout_ms
from app.api.v1.schemas import ColumnResponse, column_out
from app.application.columns import (
    CreateColumnUseCase, UpdateColumnUseCase, DeleteColumnUseCase, ColumnReadService,
)


router = APIRouter(prefix="/api/v1/boards/{board_id}/columns", tags=["columns"])


class CreateColumnRequest(BaseModel):
    name: str


class UpdateColumnRequest(BaseModel):
    name: str | None = None
    position: int | None = None  # 1-based slot within the board


@router.get("/", response_model=list[ColumnResponse])
def list_columns(
    board_id: str,
    user_id: str = Depends(get_current_user_id),
    db: Session = Depends(get_db),
):
    """Columns of the board in position order"""
    return [column_out(c) for c in ColumnReadService(db).list_columns(user_id, board_id)]


@router.post("/", response_model=ColumnResponse, status_code=201)
def create_column(
    board_id: str,
    req: CreateColumnRequest,
    user_id: str = Depends(get_current_user_id),
    db: Session = Depends(get_db),
    timeout_ms: int = Depends(get_tx_timeout_ms),
):
    """New column goes last"""
    column = CreateColumnUseCase(db, timeout_ms).execute(
        owner_id=user_id, board_id=board_id, name=req.name,
    )
    return column_out(column)


@router.put("/{column_id}", response_model=ColumnResponse)
def update_column(
    board_id: str,
    column_id: str,
    req: UpdateColumnRequest,
    user_id: str = Depends(get_current_user_id),
    db: Session = Depends(get_db),
    timeout_ms: int = Depends(get_tx_timeout_ms),
):
    """Rename and/or reorder a column"""
    column = UpdateColumnUseCase(db, timeout_ms).execute(
        owner_id=user_id,
        board_id=board_id,
        column_id=column_id,
        name=req.name,
        position=req.position,
    )
    return column_out(column)


@router.delete("/{column_id}", status_code=204)
def delete_column(
    board_id: str,
    column_id: str,
    user_id: str = Depends(get_current_user_id),
    db: Session = Depends(get_db),
    timeout_ms: int = Depends(get_tx_timeout_ms),
):
    """Delete the column with its tasks; later columns shift left"""
    DeleteColumnUseCase(db, timeout_ms).execute(
        owner_id=user_id, board_id=board_id, column_id=column_id,
    )
    return Response(status_code=204)
