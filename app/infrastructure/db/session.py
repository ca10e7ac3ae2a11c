"""
Database session management (SQLAlchemy)
"""
from sqlalchemy import create_engine, event, text
from sqlalchemy.engine import Engine
from sqlalchemy.orm import DeclarativeBase, sessionmaker, Session
from sqlalchemy.pool import StaticPool

from app.config import get_settings


class Base(DeclarativeBase):
    """
    SQLAlchemy declarative base for all ORM models
    """
    pass


# Singleton engine and session factory
_engine = None
_SessionLocal = None


def _is_memory_sqlite(url: str) -> bool:
    return url in ("sqlite://", "sqlite:///:memory:") or "mode=memory" in url


def build_engine(url: str, busy_timeout_ms: int | None = None) -> Engine:
    """
    Create an engine for ``url``.

    SQLite has no row locks, so every transaction is opened with
    ``BEGIN IMMEDIATE``: writers serialize on the database write lock, which
    gives allocate-under-lock the same guarantee ``SELECT ... FOR UPDATE``
    gives on PostgreSQL. Foreign keys are switched on for cascades.

    ``busy_timeout_ms`` bounds how long a SQLite writer waits for that lock
    (pysqlite's own default is 5 s). A caller deadline shorter than this is
    only noticed at the next ``UnitOfWork.checkpoint()``.
    """
    if not url.startswith("sqlite"):
        return create_engine(url, pool_pre_ping=True)

    connect_args = {"check_same_thread": False}
    if busy_timeout_ms is not None:
        connect_args["timeout"] = busy_timeout_ms / 1000
    kwargs = {"connect_args": connect_args}
    if _is_memory_sqlite(url):
        # one shared connection, otherwise every thread sees its own empty DB
        kwargs["poolclass"] = StaticPool
    engine = create_engine(url, **kwargs)

    @event.listens_for(engine, "connect")
    def _set_sqlite_pragma(dbapi_conn, connection_record):
        # pysqlite must not emit its own BEGIN
        dbapi_conn.isolation_level = None
        cursor = dbapi_conn.cursor()
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.close()

    @event.listens_for(engine, "begin")
    def _begin_immediate(conn):
        conn.exec_driver_sql("BEGIN IMMEDIATE")

    return engine


def get_engine() -> Engine:
    """Get or create SQLAlchemy engine (singleton)"""
    global _engine
    if _engine is None:
        settings = get_settings()
        _engine = build_engine(
            settings.get_sqlalchemy_url(),
            busy_timeout_ms=settings.TX_TIMEOUT_MS,
        )
    return _engine


def get_session_factory():
    """Get or create session factory (singleton)"""
    global _SessionLocal
    if _SessionLocal is None:
        engine = get_engine()
        _SessionLocal = make_session_factory(engine)
    return _SessionLocal


def make_session_factory(engine: Engine) -> sessionmaker:
    """
    Sessions keep loaded state after commit: a use case returns the entity
    exactly as its own transaction left it, without a re-read that could
    observe a later writer.
    """
    return sessionmaker(bind=engine, autoflush=False, autocommit=False, expire_on_commit=False)


def get_db() -> Session:
    """
    FastAPI dependency: opens a session per request and always closes it

    Usage:
        @router.get("/boards")
        def list_boards(db: Session = Depends(get_db)):
            ...
    """
    SessionLocal = get_session_factory()
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


def check_db_connection() -> None:
    """
    Health check - database is reachable

    Raises:
        sqlalchemy.exc.OperationalError: if the database is down
    """
    with get_engine().connect() as conn:
        conn.execute(text("SELECT 1"))
