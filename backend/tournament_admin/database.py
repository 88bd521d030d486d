import os
from pathlib import Path

from dotenv import load_dotenv
from sqlalchemy import event
from sqlalchemy.engine import Engine
from sqlmodel import SQLModel, create_engine

load_dotenv()

DATABASE_URL = os.getenv("DATABASE_URL", "sqlite:///./tournament.db")
DB_BUSY_TIMEOUT_SECONDS = float(os.getenv("DB_BUSY_TIMEOUT_SECONDS", "30"))

_echo = os.getenv("SQL_ECHO", "false").lower() in ("true", "1", "yes")

# Execution option marking transactions that must hold the write lock from their first statement.
# Postgres/MySQL get the same guarantee per row from SELECT ... FOR UPDATE; SQLite ignores FOR UPDATE.
BEGIN_IMMEDIATE = "begin_immediate"


def _install_sqlite_transaction_hooks(engine: Engine) -> None:
    """
    Take over transaction control from the sqlite3 driver.

    pysqlite defers BEGIN until the first DML statement, so a transaction that reads a
    count and then inserts would hold no lock during the read. Connections opened with
    the BEGIN_IMMEDIATE execution option start with BEGIN IMMEDIATE (database write lock);
    everything else gets a plain deferred BEGIN.
    """

    @event.listens_for(engine, "connect")
    def _on_connect(dbapi_connection, connection_record):
        dbapi_connection.isolation_level = None
        cursor = dbapi_connection.cursor()
        cursor.execute("PRAGMA foreign_keys=ON")
        # Readers never block the writer in WAL mode (no-op for :memory:)
        cursor.execute("PRAGMA journal_mode=WAL")
        cursor.close()

    @event.listens_for(engine, "begin")
    def _on_begin(conn):
        if conn.get_execution_options().get(BEGIN_IMMEDIATE):
            conn.exec_driver_sql("BEGIN IMMEDIATE")
        else:
            conn.exec_driver_sql("BEGIN")


def create_db_engine(database_url: str, echo: bool = _echo) -> Engine:
    """Build an engine for DATABASE_URL-style strings. Callers own the returned handle."""
    is_sqlite = database_url.startswith("sqlite")
    connect_args = {"check_same_thread": False, "timeout": DB_BUSY_TIMEOUT_SECONDS} if is_sqlite else {}

    if is_sqlite and ":memory:" not in database_url:
        db_path = database_url.replace("sqlite:///", "", 1)
        Path(db_path).parent.mkdir(parents=True, exist_ok=True)

    engine = create_engine(database_url, echo=echo, connect_args=connect_args)
    if is_sqlite:
        _install_sqlite_transaction_hooks(engine)
    return engine


engine: Engine = create_db_engine(DATABASE_URL)


def get_engine() -> Engine:
    """FastAPI dependency: the process store handle (overridden in tests)."""
    return engine


def init_db(target: Engine = None) -> None:
    """Initialize database - create all tables"""
    # Import all models to ensure they're registered with SQLModel metadata
    from tournament_admin.models.event import Event  # noqa: F401
    from tournament_admin.models.game_log import GameLog  # noqa: F401
    from tournament_admin.models.match import Match  # noqa: F401
    from tournament_admin.models.match_participant import MatchParticipant  # noqa: F401
    from tournament_admin.models.player import Player  # noqa: F401
    from tournament_admin.models.registration import Registration  # noqa: F401
    from tournament_admin.models.team import Team  # noqa: F401

    SQLModel.metadata.create_all(target if target is not None else engine)
