"""
Pytest fixtures for testing
"""
import pytest
from sqlalchemy.orm import Session

from app.infrastructure.db.session import Base, build_engine, make_session_factory
from app.infrastructure.db.models import User, ColumnModel, TaskModel


@pytest.fixture
def db_engine():
    """In-memory SQLite engine with the full schema"""
    engine = build_engine("sqlite://")
    Base.metadata.create_all(engine)
    yield engine
    engine.dispose()


@pytest.fixture
def db_session(db_engine) -> Session:
    """Create database session for tests"""
    SessionLocal = make_session_factory(db_engine)
    session = SessionLocal()
    try:
        yield session
    finally:
        session.rollback()
        session.close()


def _add_user(db, email: str) -> str:
    user = User(email=email, password_hash="x")
    db.add(user)
    db.commit()
    return user.id


@pytest.fixture
def owner_id(db_session):
    """Acting user who owns the boards under test"""
    return _add_user(db_session, "owner@example.com")


@pytest.fixture
def stranger_id(db_session):
    """Another user who owns nothing of owner_id's"""
    return _add_user(db_session, "stranger@example.com")


@pytest.fixture
def column_positions(db_session):
    """board_id -> [(name, position), ...] in position order"""
    def _positions(board_id):
        rows = (
            db_session.query(ColumnModel.name, ColumnModel.position)
            .filter(ColumnModel.board_id == board_id)
            .order_by(ColumnModel.position)
            .all()
        )
        return [(r.name, r.position) for r in rows]
    return _positions


@pytest.fixture
def task_positions(db_session):
    """column_id -> [(title, position), ...] in position order"""
    def _positions(column_id):
        rows = (
            db_session.query(TaskModel.title, TaskModel.position)
            .filter(TaskModel.column_id == column_id)
            .order_by(TaskModel.position)
            .all()
        )
        return [(r.title, r.position) for r in rows]
    return _positions


@pytest.fixture
def other_session(db_engine) -> Session:
    """Second session on the same database, a concurrent writer"""
    session = make_session_factory(db_engine)()
    try:
        yield session
    finally:
        session.rollback()
        session.close()
