"""User registration."""
from sqlalchemy.orm import Session

from app.application.errors import ConflictError, KanbanValidationError
from app.application.unit_of_work import UnitOfWork
from app.auth import get_user_by_email, hash_password
from app.infrastructure.db.models import User

PASSWORD_MIN_LEN = 8


class RegisterUserUseCase:
    def __init__(self, db: Session, timeout_ms: int | None = None):
        self.db = db
        self.timeout_ms = timeout_ms

    def execute(self, email: str, password: str) -> User:
        email = (email or "").strip().lower()
        if not email or "@" not in email:
            raise KanbanValidationError("valid email is required")
        if len(password or "") < PASSWORD_MIN_LEN:
            raise KanbanValidationError(f"password must be at least {PASSWORD_MIN_LEN} characters")

        with UnitOfWork(self.db, self.timeout_ms):
            # the unique index still catches a concurrent duplicate (-> ConflictError)
            if get_user_by_email(self.db, email):
                raise ConflictError("email already registered")
            user = User(email=email, password_hash=hash_password(password))
            self.db.add(user)
            self.db.flush()
            self.db.refresh(user)
        return user
