"""Storage - domain models and namespaced record persistence"""

from __future__ import annotations

import json
from datetime import UTC, datetime
from pathlib import Path
from typing import Any, Protocol

from paperlib.infrastructure.database import db_transaction, get_db_connection, init_database
from paperlib.observability.logging import get_logger
from paperlib.observability.telemetry import counter

logger = get_logger(__name__)


class RecordStore(Protocol):
    """Namespaced persistence of opaque JSON-serialisable records."""

    def load(self, namespace: str) -> Any | None:
        """Return the records saved under ``namespace``, or None."""
        ...

    def save(self, namespace: str, records: Any) -> None:
        """Replace the records saved under ``namespace``."""
        ...


class SQLiteRecordStore:
    """
    RecordStore backed by the ``records`` table: one JSON payload per namespace.

    A payload that fails to decode loads as None (logged), so a damaged
    namespace starts empty instead of blocking startup.
    """

    def __init__(self, db_path: Path | None = None) -> None:
        self.db_path = db_path
        init_database(db_path)

    def load(self, namespace: str) -> Any | None:
        with get_db_connection(self.db_path) as conn:
            row = conn.execute(
                "SELECT payload FROM records WHERE namespace = ?", (namespace,)
            ).fetchone()

        if row is None:
            return None

        try:
            return json.loads(row["payload"])
        except json.JSONDecodeError as e:
            logger.error("Failed to load namespace %s: %s", namespace, e)
            counter("storage.corrupt_payloads")
            return None

    def save(self, namespace: str, records: Any) -> None:
        """
        Upsert the namespace payload.

        Side Effects:
            - Writes to the records table
        """
        payload = json.dumps(records, ensure_ascii=False)
        with db_transaction(self.db_path) as conn:
            conn.execute(
                """
                INSERT INTO records (namespace, payload, updated_at) VALUES (?, ?, ?)
                ON CONFLICT(namespace) DO UPDATE SET
                    payload = excluded.payload,
                    updated_at = excluded.updated_at
                """,
                (namespace, payload, datetime.now(UTC).isoformat()),
            )
        counter("storage.saves")


__all__ = ["RecordStore", "SQLiteRecordStore"]
