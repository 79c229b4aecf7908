"""
Expression Registry - SQLite persistent storage for named cron expressions.

Stores a name, an already-validated expression and a free-text description
under a store-assigned integer id, with creation and update timestamps.
Callers validate expressions with cronops.engine before persisting; the
registry never parses them.

One table (cron_expressions) plus a meta table holding the schema version.
The file location comes from CRONOPS_DB_PATH unless a path is passed in.
"""

import logging
import sqlite3
import threading
from dataclasses import asdict, dataclass
from datetime import datetime
from pathlib import Path
from typing import Any, Dict, List, Optional

from cronops.infra import metrics
from cronops.infra.settings import get_db_path

logger = logging.getLogger(__name__)

SCHEMA_VERSION = "1.0.0"

# Inserted on a fresh database when seeding is requested
PRESETS = [
    ("Daily at midnight", "0 0 * * *", "Runs every day at midnight"),
    ("Hourly", "0 * * * *", "Runs at the beginning of every hour"),
    ("Every 15 minutes", "*/15 * * * *", "Runs every 15 minutes"),
    ("Weekdays at 9am", "0 9 * * 1-5", "Runs at 9am on weekdays"),
    ("Monthly backup", "0 0 1 * *", "Runs at midnight on the first day of each month"),
]


# =============================================================================
# Exceptions
# =============================================================================

class RegistryError(Exception):
    """Base exception for registry errors."""
    pass


class ExpressionNotFoundError(RegistryError):
    """Raised when a requested expression does not exist."""

    def __init__(self, expression_id: int):
        self.expression_id = expression_id
        super().__init__(f"Expression not found: {expression_id}")


# =============================================================================
# Data Classes
# =============================================================================

@dataclass
class ExpressionRecord:
    """A named cron expression in the persistent registry."""
    id: int
    name: str
    expression: str
    description: str
    created_at: str
    updated_at: str

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


# =============================================================================
# Expression Registry Class
# =============================================================================

class ExpressionRegistry:
    """
    Persistent registry of named cron expressions using SQLite.

    Provides:
    - Schema versioning for future migrations
    - CRUD operations keyed by integer id
    - Optional preset seeding on first creation

    One connection per instance, shared across FastAPI's threadpool and
    serialized with a lock.
    """

    def __init__(self, db_path: Optional[str] = None, seed_presets: bool = False):
        """
        Initialize the expression registry.

        Args:
            db_path: Path to SQLite database file. If None, uses env var or default.
            seed_presets: Insert PRESETS when the schema is created.
        """
        self.db_path = db_path or get_db_path()
        self._conn: Optional[sqlite3.Connection] = None
        self._lock = threading.Lock()

        logger.info(f"[Registry] Initializing expression registry: {self.db_path}")

        self._ensure_directory()
        self._init_db(seed_presets)

    def _ensure_directory(self) -> None:
        """Create parent directory if it doesn't exist."""
        if self.db_path == ":memory:":
            return
        db_dir = Path(self.db_path).parent
        if not db_dir.exists():
            db_dir.mkdir(parents=True, exist_ok=True)
            logger.info(f"[Registry] Created directory: {db_dir}")

    def _get_connection(self) -> sqlite3.Connection:
        """Get or create database connection."""
        if self._conn is None:
            try:
                self._conn = sqlite3.connect(self.db_path, check_same_thread=False)
            except sqlite3.Error as e:
                metrics.db_connection_errors_total.inc()
                logger.error(f"[Registry] Failed to connect to {self.db_path}: {e}")
                raise
            self._conn.row_factory = sqlite3.Row
        return self._conn

    def _init_db(self, seed_presets: bool) -> None:
        """Initialize database schema with version tracking."""
        with self._lock:
            conn = self._get_connection()
            cursor = conn.cursor()

            cursor.execute("""
                CREATE TABLE IF NOT EXISTS meta (
                    key TEXT PRIMARY KEY,
                    value TEXT
                )
            """)

            cursor.execute("SELECT value FROM meta WHERE key = 'schema_version'")
            row = cursor.fetchone()
            current_version = row["value"] if row else None

            if current_version is None:
                self._create_schema(cursor)
                cursor.execute(
                    "INSERT INTO meta (key, value) VALUES ('schema_version', ?)",
                    (SCHEMA_VERSION,)
                )
                logger.info(f"[Registry] Schema created (v{SCHEMA_VERSION})")
                if seed_presets:
                    self._seed(cursor)
            elif current_version != SCHEMA_VERSION:
                logger.warning(
                    f"[Registry] Unknown schema version {current_version}, expected {SCHEMA_VERSION}"
                )
            else:
                logger.debug(f"[Registry] Schema version check: v{current_version}")

            conn.commit()

    def _create_schema(self, cursor: sqlite3.Cursor) -> None:
        """Create the database schema."""
        cursor.execute("""
            CREATE TABLE IF NOT EXISTS cron_expressions (
                id INTEGER PRIMARY KEY AUTOINCREMENT,
                name TEXT NOT NULL,
                expression TEXT NOT NULL,
                description TEXT NOT NULL DEFAULT '',
                created_at TEXT NOT NULL,
                updated_at TEXT NOT NULL
            )
        """)

        cursor.execute("""
            CREATE INDEX IF NOT EXISTS idx_cron_expressions_name
            ON cron_expressions(name)
        """)

        cursor.execute("""
            CREATE INDEX IF NOT EXISTS idx_cron_expressions_created_at
            ON cron_expressions(created_at DESC)
        """)

    def _seed(self, cursor: sqlite3.Cursor) -> None:
        now = datetime.now().isoformat()
        cursor.executemany("""
            INSERT INTO cron_expressions (name, expression, description, created_at, updated_at)
            VALUES (?, ?, ?, ?, ?)
        """, [(name, expression, description, now, now) for name, expression, description in PRESETS])
        logger.info(f"[Registry] Seeded {len(PRESETS)} preset expressions")

    @staticmethod
    def _to_record(row: sqlite3.Row) -> ExpressionRecord:
        return ExpressionRecord(
            id=row["id"],
            name=row["name"],
            expression=row["expression"],
            description=row["description"] or "",
            created_at=row["created_at"],
            updated_at=row["updated_at"],
        )

    def _fetch(self, cursor: sqlite3.Cursor, expression_id: int) -> Optional[ExpressionRecord]:
        cursor.execute("""
            SELECT id, name, expression, description, created_at, updated_at
            FROM cron_expressions
            WHERE id = ?
        """, (expression_id,))
        row = cursor.fetchone()
        return self._to_record(row) if row else None

    def create(self, name: str, expression: str, description: str = "") -> ExpressionRecord:
        """
        Store a named expression.

        Args:
            name: Display name
            expression: Validated five-field cron expression
            description: Free text

        Returns:
            The stored record with its assigned id and timestamps
        """
        now = datetime.now().isoformat()
        with self._lock:
            conn = self._get_connection()
            cursor = conn.cursor()
            cursor.execute("""
                INSERT INTO cron_expressions (name, expression, description, created_at, updated_at)
                VALUES (?, ?, ?, ?, ?)
            """, (name, expression, description, now, now))
            conn.commit()
            record = self._fetch(cursor, cursor.lastrowid)

        logger.info(f"[Registry] Stored expression {record.id}: {name!r} ({expression})")
        return record

    def get(self, expression_id: int) -> ExpressionRecord:
        """
        Get a single expression.

        Raises:
            ExpressionNotFoundError: Unknown id
        """
        with self._lock:
            record = self._fetch(self._get_connection().cursor(), expression_id)
        if record is None:
            raise ExpressionNotFoundError(expression_id)
        return record

    def list_all(self) -> List[ExpressionRecord]:
        """All expressions, newest first."""
        with self._lock:
            cursor = self._get_connection().cursor()
            cursor.execute("""
                SELECT id, name, expression, description, created_at, updated_at
                FROM cron_expressions
                ORDER BY created_at DESC, id DESC
            """)
            rows = cursor.fetchall()
        return [self._to_record(row) for row in rows]

    def update(
        self,
        expression_id: int,
        name: str,
        expression: str,
        description: str = "",
    ) -> ExpressionRecord:
        """
        Replace name, expression and description of an existing record.

        Raises:
            ExpressionNotFoundError: Unknown id
        """
        now = datetime.now().isoformat()
        with self._lock:
            conn = self._get_connection()
            cursor = conn.cursor()
            cursor.execute("""
                UPDATE cron_expressions
                SET name = ?, expression = ?, description = ?, updated_at = ?
                WHERE id = ?
            """, (name, expression, description, now, expression_id))
            conn.commit()
            if cursor.rowcount == 0:
                raise ExpressionNotFoundError(expression_id)
            record = self._fetch(cursor, expression_id)

        logger.info(f"[Registry] Updated expression {expression_id}: {name!r} ({expression})")
        return record

    def delete(self, expression_id: int) -> None:
        """
        Delete an expression.

        Raises:
            ExpressionNotFoundError: Unknown id
        """
        with self._lock:
            conn = self._get_connection()
            cursor = conn.cursor()
            cursor.execute("DELETE FROM cron_expressions WHERE id = ?", (expression_id,))
            conn.commit()
            deleted = cursor.rowcount

        if deleted == 0:
            raise ExpressionNotFoundError(expression_id)
        logger.info(f"[Registry] Deleted expression {expression_id}")

    def count(self) -> int:
        with self._lock:
            cursor = self._get_connection().cursor()
            cursor.execute("SELECT COUNT(*) AS cnt FROM cron_expressions")
            return cursor.fetchone()["cnt"]

    def close(self) -> None:
        """Close database connection."""
        with self._lock:
            if self._conn:
                self._conn.close()
                self._conn = None
                logger.info("[Registry] Connection closed")


# =============================================================================
# Module-level convenience functions
# =============================================================================

_registry: Optional[ExpressionRegistry] = None


def init_registry(db_path: Optional[str] = None, seed_presets: bool = False) -> ExpressionRegistry:
    """
    Initialize the global expression registry.

    Called from the API lifespan at startup.
    """
    global _registry
    _registry = ExpressionRegistry(db_path=db_path, seed_presets=seed_presets)
    return _registry


def get_registry() -> ExpressionRegistry:
    """Get the global registry, creating it from settings on first use."""
    global _registry
    if _registry is None:
        _registry = ExpressionRegistry()
    return _registry


def close_registry() -> None:
    """Close the global expression registry."""
    global _registry
    if _registry:
        _registry.close()
        _registry = None
