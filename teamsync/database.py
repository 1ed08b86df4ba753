from contextlib import contextmanager
from typing import Iterator

from sqlalchemy import create_engine, event
from sqlalchemy.orm import sessionmaker, Session
from teamsync.config import settings


def enable_sqlite_foreign_keys(dbapi_connection, connection_record) -> None:
    """
    Turn on foreign key enforcement for a new SQLite connection.

    SQLite ignores FOREIGN KEY clauses (ON DELETE CASCADE included)
    unless the pragma is set on every connection.
    """
    cursor = dbapi_connection.cursor()
    cursor.execute("PRAGMA foreign_keys=ON")
    cursor.close()


engine_options: dict = {
    "pool_pre_ping": True,  # Verify connections before using
    "echo": settings.DEBUG,  # Log SQL queries in debug mode
}
if settings.DATABASE_URL.startswith("sqlite"):
    engine_options["connect_args"] = {"check_same_thread": False}
else:
    engine_options["pool_size"] = settings.DB_POOL_SIZE
    engine_options["max_overflow"] = settings.DB_MAX_OVERFLOW

# Create SQLAlchemy engine
engine = create_engine(settings.DATABASE_URL, **engine_options)
if engine.dialect.name == "sqlite":
    event.listen(engine, "connect", enable_sqlite_foreign_keys)

# Create session factory
SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


def get_db() -> Iterator[Session]:
    """
    FastAPI dependency for database sessions.

    Yields a database session and ensures it's closed after use.

    Usage:
        @app.get("/items")
        def get_items(db: Session = Depends(get_db)):
            return db.query(Item).all()
    """
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


@contextmanager
def transaction(db: Session) -> Iterator[Session]:
    """
    Group several writes into one unit of work.

    Commits when the block exits normally. Any exception rolls back every
    statement issued inside the block and is re-raised.

    Usage:
        with transaction(db):
            client_repo.add(client)
            contract_repo.add(contract)
    """
    try:
        yield db
        db.commit()
    except Exception:
        db.rollback()
        raise
