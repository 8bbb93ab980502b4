import logging
import sqlite3
import threading
from datetime import datetime, timezone

from .config import DATABASE_PATH

logger = logging.getLogger(__name__)


# =============================================================================
# SQLite3 datetime adapter (Python 3.12 compatibility)
# =============================================================================
def _adapt_datetime(dt: datetime) -> str:
    """Adapt datetime to ISO 8601 string for SQLite."""
    return dt.isoformat()


def _convert_datetime(val: bytes) -> datetime:
    """Convert ISO 8601 string from SQLite to datetime."""
    return datetime.fromisoformat(val.decode())


sqlite3.register_adapter(datetime, _adapt_datetime)
sqlite3.register_converter("TIMESTAMP", _convert_datetime)


# Thread-local storage for database connections
_local = threading.local()

# Every connection handed out by get_db(), so shutdown can close them all
_connections: list[sqlite3.Connection] = []
_connections_lock = threading.Lock()
_generation = 0


def create_connection(path=None) -> sqlite3.Connection:
    """Open a new connection with row access by column name."""
    conn = sqlite3.connect(
        path or DATABASE_PATH,
        detect_types=sqlite3.PARSE_DECLTYPES,
        check_same_thread=False
    )
    conn.row_factory = sqlite3.Row
    return conn


def _forget(conn: sqlite3.Connection) -> bool:
    with _connections_lock:
        if conn in _connections:
            _connections.remove(conn)
            return True
    return False


def get_db() -> sqlite3.Connection:
    """Get thread-local database connection.

    The connection is reopened when DATABASE_PATH changes, so worker
    threads never keep talking to a previous database file. It is also
    reopened after close_all_db().
    """
    conn = getattr(_local, "connection", None)
    stale = (
        getattr(_local, "path", None) != DATABASE_PATH
        or getattr(_local, "generation", None) != _generation
    )
    if conn is None or stale:
        if conn is not None and _forget(conn):
            conn.close()
        conn = create_connection(DATABASE_PATH)
        with _connections_lock:
            _connections.append(conn)
        _local.connection = conn
        _local.path = DATABASE_PATH
        _local.generation = _generation
    return _local.connection


def close_db() -> None:
    """Close the connection held by the current thread, if any."""
    conn = getattr(_local, "connection", None)
    if conn is not None and _forget(conn):
        conn.close()
    _local.connection = None
    _local.path = None


def close_all_db() -> int:
    """Close the connections opened by every thread.

    Threads that call get_db() afterwards get a new connection.

    Returns:
        Number of connections closed
    """
    global _generation
    with _connections_lock:
        closing = list(_connections)
        _connections.clear()
        _generation += 1
    for conn in closing:
        conn.close()
    _local.connection = None
    _local.path = None
    if closing:
        logger.debug("Closed %d database connections", len(closing))
    return len(closing)


def open_connection_count() -> int:
    """Number of get_db() connections that are still open."""
    with _connections_lock:
        return len(_connections)


SCHEMA = (
    """
    CREATE TABLE IF NOT EXISTS clients (
        id INTEGER PRIMARY KEY AUTOINCREMENT,
        name TEXT NOT NULL,
        cpf TEXT NOT NULL,
        income REAL NOT NULL,
        birth_date TIMESTAMP NOT NULL,
        children INTEGER NOT NULL DEFAULT 0
    )
    """,
    "CREATE INDEX IF NOT EXISTS idx_clients_cpf ON clients(cpf)",
    "CREATE INDEX IF NOT EXISTS idx_clients_income ON clients(income)",
)


def init_db(conn: sqlite3.Connection = None):
    """Initialize database schema"""
    db = conn or get_db()
    for statement in SCHEMA:
        db.execute(statement)
    db.commit()
    logger.debug("Schema ready at %s", DATABASE_PATH)


# Sample clients inserted by seed_clients()
SEED_CLIENTS = [
    ("Conceição Evaristo", "10619244881", 1500.0, "2020-07-13T20:50:00Z", 2),
    ("Lázaro Ramos", "10619244881", 2500.0, "1996-12-23T07:00:00Z", 2),
    ("Clarice Lispector", "10919444522", 3800.0, "1960-04-13T07:50:00Z", 2),
    ("Carolina Maria de Jesus", "10419244771", 7500.0, "1996-12-23T07:00:00Z", 0),
    ("Gilberto Gil", "10419344882", 2500.0, "1949-05-05T07:00:00Z", 4),
    ("Djamila Ribeiro", "10619244884", 4500.0, "1975-11-10T07:00:00Z", 1),
    ("Jorge Amado", "10219344681", 1500.0, "1912-08-10T10:50:00Z", 0),
    ("Toni Morrison", "10219444681", 10000.0, "1940-02-23T07:00:00Z", 0),
    ("Chimamanda Adichie", "10114274861", 1500.0, "1956-09-23T07:00:00Z", 2),
    ("Silvio Almeida", "10164334861", 4500.0, "1970-09-23T07:00:00Z", 2),
    ("Zumbi dos Palmares", "10619244885", 3000.0, "1981-10-20T07:00:00Z", 3),
    ("Machado de Assis", "10619244886", 5000.0, "1939-06-21T07:00:00Z", 0),
]


def seed_clients(conn: sqlite3.Connection = None) -> int:
    """Insert sample clients when the table is empty.

    Returns:
        Number of rows inserted (0 if clients already existed)
    """
    db = conn or get_db()
    count = db.execute("SELECT COUNT(*) AS count FROM clients").fetchone()["count"]
    if count:
        logger.info("Skipping seed: %d clients already present", count)
        return 0

    rows = [
        (name, cpf, income, datetime.fromisoformat(birth.replace("Z", "+00:00")).astimezone(timezone.utc), children)
        for name, cpf, income, birth, children in SEED_CLIENTS
    ]
    db.executemany(
        "INSERT INTO clients (name, cpf, income, birth_date, children) VALUES (?, ?, ?, ?, ?)",
        rows
    )
    db.commit()
    logger.info("Seeded %d sample clients", len(rows))
    return len(rows)
