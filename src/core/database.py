"""
SQLite database operations: schema setup and the label -> client mapping store.
"""

import sqlite3
from datetime import datetime, timezone
from pathlib import Path

from core.config import DB_PATH
from models.matching import ClientMappings

SCHEMA = [
    """
    CREATE TABLE IF NOT EXISTS client_mappings (
        normalized_label TEXT PRIMARY KEY,
        label TEXT NOT NULL,
        client_id TEXT NOT NULL,
        created_at TEXT NOT NULL
    )
    """,
    "CREATE INDEX IF NOT EXISTS idx_client_mappings_client ON client_mappings(client_id)",
    """
    CREATE TABLE IF NOT EXISTS api_requests (
        id INTEGER PRIMARY KEY AUTOINCREMENT,
        request_id TEXT UNIQUE NOT NULL,
        timestamp TEXT NOT NULL,
        endpoint TEXT NOT NULL,
        method TEXT NOT NULL,
        client_ip TEXT,
        status_code INTEGER NOT NULL,
        error_code TEXT,
        error_message TEXT,
        processing_time_ms INTEGER NOT NULL,
        item_count INTEGER
    )
    """,
    """
    CREATE TABLE IF NOT EXISTS api_request_details (
        id INTEGER PRIMARY KEY AUTOINCREMENT,
        request_id TEXT NOT NULL,
        detail_type TEXT NOT NULL CHECK(detail_type IN ('validation_error', 'conflict', 'warning')),
        message TEXT NOT NULL,
        FOREIGN KEY (request_id) REFERENCES api_requests(request_id)
    )
    """,
    "CREATE INDEX IF NOT EXISTS idx_api_requests_timestamp ON api_requests(timestamp)",
    "CREATE INDEX IF NOT EXISTS idx_api_requests_status ON api_requests(status_code)",
    "CREATE INDEX IF NOT EXISTS idx_api_request_details_request ON api_request_details(request_id)",
]


def get_connection(db_path: Path | None = None) -> sqlite3.Connection:
    """Get a database connection."""
    return sqlite3.connect(db_path or DB_PATH)


def create_tables(conn: sqlite3.Connection) -> None:
    """Create all tables if they don't exist."""
    cursor = conn.cursor()
    for statement in SCHEMA:
        cursor.execute(statement)
    conn.commit()


class MappingStore:
    """
    Persisted label -> client id table.

    Keys are already-normalized labels (services.client_matching.normalize_label).
    Each operation opens its own short-lived connection.
    """

    def __init__(self, db_path: Path | None = None):
        self.db_path = db_path or DB_PATH

    def _connect(self) -> sqlite3.Connection:
        return sqlite3.connect(self.db_path)

    def load(self) -> ClientMappings:
        """Snapshot of every mapping."""
        conn = self._connect()
        try:
            rows = conn.execute("SELECT normalized_label, client_id FROM client_mappings").fetchall()
        finally:
            conn.close()
        return ClientMappings(dict(rows))

    def get(self, normalized_label: str) -> str | None:
        conn = self._connect()
        try:
            row = conn.execute(
                "SELECT client_id FROM client_mappings WHERE normalized_label = ?",
                (normalized_label,),
            ).fetchone()
        finally:
            conn.close()
        return row[0] if row else None

    def set(self, normalized_label: str, client_id: str, label: str) -> None:
        conn = self._connect()
        try:
            conn.execute(
                """
                INSERT INTO client_mappings (normalized_label, label, client_id, created_at)
                VALUES (?, ?, ?, ?)
                ON CONFLICT(normalized_label) DO UPDATE SET
                    label = excluded.label,
                    client_id = excluded.client_id,
                    created_at = excluded.created_at
                """,
                (normalized_label, label, client_id, datetime.now(timezone.utc).isoformat()),
            )
            conn.commit()
        finally:
            conn.close()

    def remove(self, normalized_label: str) -> None:
        conn = self._connect()
        try:
            conn.execute("DELETE FROM client_mappings WHERE normalized_label = ?", (normalized_label,))
            conn.commit()
        finally:
            conn.close()

    def remove_for_client(self, client_id: str) -> None:
        conn = self._connect()
        try:
            conn.execute("DELETE FROM client_mappings WHERE client_id = ?", (client_id,))
            conn.commit()
        finally:
            conn.close()

    def clear(self) -> None:
        conn = self._connect()
        try:
            conn.execute("DELETE FROM client_mappings")
            conn.commit()
        finally:
            conn.close()
