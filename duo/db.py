# duo/db.py
import logging
import shutil
import sqlite3
from contextlib import closing, contextmanager
from datetime import datetime
from pathlib import Path

from fncli import cli

from . import config
from .lib.errors import echo

logger = logging.getLogger(__name__)

MIGRATIONS_TABLE = "_migrations"
MIGRATIONS_DIR = Path(__file__).parent / "migrations"

_LEDGER_DDL = (
    f"CREATE TABLE IF NOT EXISTS {MIGRATIONS_TABLE} ("
    "id INTEGER PRIMARY KEY AUTOINCREMENT, "
    "name TEXT NOT NULL UNIQUE, "
    "applied_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP)"
)

Migration = tuple[str, str]


@contextmanager
def get_db(db_path: Path | None = None):
    """One write transaction: commit on success, roll back on error.

    SQLite's writer lock serializes concurrent writers, so every caller reads
    and writes a consistent snapshot.
    """
    conn = sqlite3.connect(db_path or config.DB_PATH, timeout=30)
    conn.execute("PRAGMA journal_mode=WAL")
    try:
        yield conn
        conn.commit()
    except Exception:
        conn.rollback()
        raise
    finally:
        conn.close()


def _create_backup(db_path: Path) -> Path:
    target_dir = config.BACKUP_DIR / "migrations"
    target_dir.mkdir(parents=True, exist_ok=True)
    backup_path = target_dir / f"duo.{datetime.now():%Y%m%d_%H%M%S}.backup"
    try:
        with closing(sqlite3.connect(db_path, timeout=30)) as src, closing(sqlite3.connect(backup_path)) as dst:
            src.backup(dst)
    except Exception:
        backup_path.unlink(missing_ok=True)
        raise
    return backup_path


def _table_count(conn: sqlite3.Connection, table: str) -> int:
    try:
        return conn.execute(f'SELECT COUNT(*) FROM "{table}"').fetchone()[0]  # noqa: S608
    except sqlite3.OperationalError:
        return 0


def _row_counts(conn: sqlite3.Connection) -> dict[str, int]:
    names = conn.execute(
        "SELECT name FROM sqlite_master WHERE type = 'table' AND name NOT IN (?, 'sqlite_sequence')",
        (MIGRATIONS_TABLE,),
    ).fetchall()
    return {name: _table_count(conn, name) for (name,) in names}


def _check_data_loss(conn: sqlite3.Connection, before: dict[str, int]) -> None:
    for table, had in before.items():
        has = _table_count(conn, table)
        if has < had:
            raise ValueError(f"migration data loss: {table} had {had} rows, now {has}")


def load_migrations() -> list[Migration]:
    """SQL files under migrations/, ordered by filename stem."""
    if not MIGRATIONS_DIR.exists():
        return []
    return sorted((path.stem, path.read_text()) for path in MIGRATIONS_DIR.glob("*.sql"))


def _apply_migrations(conn: sqlite3.Connection, db_path: Path) -> list[str]:
    conn.execute(_LEDGER_DDL)
    conn.commit()
    seen = {name for (name,) in conn.execute(f"SELECT name FROM {MIGRATIONS_TABLE}")}  # noqa: S608
    pending = [(name, sql) for name, sql in load_migrations() if name not in seen]
    if not pending:
        return []

    backup_path = _create_backup(db_path) if db_path.exists() else None
    applied: list[str] = []
    for name, sql in pending:
        before = _row_counts(conn)
        try:
            conn.executescript(sql)
            _check_data_loss(conn, before)
            conn.execute(f"INSERT OR IGNORE INTO {MIGRATIONS_TABLE} (name) VALUES (?)", (name,))  # noqa: S608
            conn.commit()
        except Exception:
            conn.rollback()
            if backup_path is not None:
                conn.close()
                shutil.copy2(backup_path, db_path)
                logger.warning("migration %s failed, restored %s", name, backup_path.name)
            raise
        logger.info("applied migration %s", name)
        applied.append(name)

    if backup_path is not None:
        backup_path.unlink(missing_ok=True)
    return applied


def init(db_path: Path | None = None) -> list[str]:
    """Create the database if needed and apply pending migrations."""
    db_path = db_path or config.DB_PATH
    db_path.parent.mkdir(parents=True, exist_ok=True)
    with closing(sqlite3.connect(db_path)) as conn:
        conn.execute("PRAGMA journal_mode=WAL")
        return _apply_migrations(conn, db_path)


@cli("duo db", name="migrate")
def db_migrate():
    """Run pending database migrations"""
    applied = init()
    echo(f"migrations applied: {len(applied)}")
