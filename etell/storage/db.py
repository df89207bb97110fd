import os
import sqlite3
from etell.utils.log import get_logger

logger = get_logger(__name__)

# bump together with schema.sql
SCHEMA_VERSION = 1

SCHEMA_PATH = os.path.join(os.path.dirname(__file__), "schema.sql")


def get_connection(db_path: str) -> sqlite3.Connection:
    """
    Open a session database with foreign keys enforced (sample rows are
    deleted with their session) and rows returned as sqlite3.Row.
    """
    conn = sqlite3.connect(db_path)
    conn.row_factory = sqlite3.Row
    conn.execute("PRAGMA foreign_keys = ON;")
    return conn


def schema_version(conn: sqlite3.Connection) -> int:
    return conn.execute("PRAGMA user_version;").fetchone()[0]


def init_db(db_path: str) -> sqlite3.Connection:
    """
    Open `db_path`, creating the sessions/samples tables on first use.

    Databases already at SCHEMA_VERSION are opened as-is.
    """
    conn = get_connection(db_path)
    current = schema_version(conn)
    if current >= SCHEMA_VERSION:
        return conn
    logger.debug("Applying schema v%d to %s (was v%d)", SCHEMA_VERSION, db_path, current)
    with open(SCHEMA_PATH, "r", encoding="utf-8") as f:
        conn.executescript(f.read())
    conn.execute(f"PRAGMA user_version = {SCHEMA_VERSION};")
    conn.commit()
    return conn
