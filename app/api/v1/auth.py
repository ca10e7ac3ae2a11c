"""
Authentication routes (register, login, logout)
"""
from fastapi import APIRouter, Depends, HTTPException, Request
from pydantic import BaseModel
from sqlalchemy.orm import Session

from app.api.deps import get_db, get_tx_timeout_ms
from app.application.users import RegisterUserUseCase
from app.auth import authenticate


router = APIRouter(prefix="/api/v1/auth", tags=["auth"])


class CredentialsRequest(BaseModel):
    email: str
    password: str


class UserResponse(BaseModel):
    id: str
    email: str


@router.post("/register", response_model=UserResponse, status_code=201)
def register(
    req: CredentialsRequest,
    db: Session = Depends(get_db),
    timeout_ms: int = Depends(get_tx_timeout_ms),
):
    """Create an account"""
    user = RegisterUserUseCase(db, timeout_ms).execute(email=req.email, password=req.password)
    return UserResponse(id=user.id, email=user.email)


@router.post("/login", response_model=UserResponse)
def login(request: Request, req: CredentialsRequest, db: Session = Depends(get_db)):
    """Check credentials and start a session"""
    user = authenticate(db, req.email, req.password)
    if not user:
        raise HTTPException(status_code=401, detail="Invalid email or password")

    request.session["user_id"] = user.id
    return UserResponse(id=user.id, email=user.email)


@router.post("/logout", status_code=204)
def logout(request: Request):
    request.session.clear()
