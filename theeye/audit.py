"""
Audit Chain — SHA-256 Tamper-Evident Log of Analyses

Every analysis, batch and classification served through the API is
recorded in an append-only hash chain. Each entry commits to the hash
of the entry before it, so editing any stored row after the fact is
detectable via verify_chain().

The chain stores summaries (report id, score, priority, counts), never
the analyzed text itself.
"""

import hashlib
import json
import sqlite3
import threading
from datetime import datetime, timezone
from typing import Any, Optional

from theeye.config import ANALYZER_VERSION

GENESIS_HASH = "0" * 64

EVENT_TYPES = ("analyze", "analyze_batch", "classify", "classify_report")


def _entry_hash(prev_hash: str, event_type: str, data_str: str,
                timestamp: str, analyzer_version: str) -> str:
    chain_input = f"{prev_hash}{event_type}{data_str}{timestamp}{analyzer_version}"
    return hashlib.sha256(chain_input.encode()).hexdigest()


class AuditChain:
    """Append-only, hash-chained audit log backed by SQLite."""

    def __init__(self, db_path: str = "theeye_audit.db"):
        self.db_path = db_path
        self._lock = threading.Lock()
        self._init_db()

    def _init_db(self):
        with self._get_conn() as conn:
            conn.execute("""
                CREATE TABLE IF NOT EXISTS audit_chain (
                    id INTEGER PRIMARY KEY AUTOINCREMENT,
                    prev_hash TEXT NOT NULL,
                    hash TEXT NOT NULL,
                    event_type TEXT NOT NULL,
                    data TEXT NOT NULL,
                    timestamp TEXT NOT NULL,
                    analyzer_version TEXT NOT NULL
                )
            """)
            conn.execute("""
                CREATE INDEX IF NOT EXISTS idx_audit_event_type
                ON audit_chain(event_type)
            """)
            conn.commit()

    def _get_conn(self) -> sqlite3.Connection:
        return sqlite3.connect(self.db_path)

    def _get_prev_hash(self, conn: sqlite3.Connection) -> str:
        row = conn.execute(
            "SELECT hash FROM audit_chain ORDER BY id DESC LIMIT 1"
        ).fetchone()
        return row[0] if row else GENESIS_HASH

    def log(self, event_type: str, data: Any,
            analyzer_version: str = ANALYZER_VERSION) -> str:
        """
        Append an event and return its SHA-256 hash.

        Event types:
          - analyze:          single document analyzed
          - analyze_batch:    batch of documents analyzed
          - classify:         single item rights-classified
          - classify_report:  aggregate rights report built
        """
        if event_type not in EVENT_TYPES:
            raise ValueError(f"Unknown audit event type: {event_type!r}")

        with self._lock:
            with self._get_conn() as conn:
                prev_hash = self._get_prev_hash(conn)
                timestamp = datetime.now(timezone.utc).isoformat()
                data_str = json.dumps(data, default=str, sort_keys=True)
                new_hash = _entry_hash(prev_hash, event_type, data_str,
                                       timestamp, analyzer_version)

                conn.execute(
                    """INSERT INTO audit_chain
                       (prev_hash, hash, event_type, data, timestamp, analyzer_version)
                       VALUES (?, ?, ?, ?, ?, ?)""",
                    (prev_hash, new_hash, event_type, data_str, timestamp, analyzer_version),
                )
                conn.commit()
                return new_hash

    def get_recent(self, limit: int = 20, event_type: Optional[str] = None) -> list[dict]:
        """Newest entries first, optionally filtered by event type."""
        query = ("SELECT id, prev_hash, hash, event_type, data, timestamp, analyzer_version "
                 "FROM audit_chain")
        params: tuple = ()
        if event_type:
            query += " WHERE event_type = ?"
            params = (event_type,)
        query += " ORDER BY id DESC LIMIT ?"

        with self._get_conn() as conn:
            rows = conn.execute(query, params + (limit,)).fetchall()

        return [
            {
                "id": r[0], "prev_hash": r[1], "hash": r[2],
                "event_type": r[3], "data": json.loads(r[4]),
                "timestamp": r[5], "analyzer_version": r[6],
            }
            for r in rows
        ]

    def verify_chain(self, limit: int = 100) -> dict:
        """Recompute hashes and links for the oldest `limit` entries."""
        with self._get_conn() as conn:
            rows = conn.execute(
                """SELECT id, prev_hash, hash, event_type, data, timestamp, analyzer_version
                   FROM audit_chain ORDER BY id ASC LIMIT ?""",
                (limit,),
            ).fetchall()

        broken = []
        expected_prev = GENESIS_HASH
        for entry_id, prev_hash, stored_hash, event_type, data_str, timestamp, version in rows:
            computed = _entry_hash(prev_hash, event_type, data_str, timestamp, version)
            if computed != stored_hash:
                broken.append({
                    "id": entry_id,
                    "issue": "hash_mismatch",
                    "expected": computed,
                    "stored": stored_hash,
                })
            if prev_hash != expected_prev:
                broken.append({
                    "id": entry_id,
                    "issue": "chain_break",
                    "expected_prev": expected_prev,
                    "stored_prev": prev_hash,
                })
            expected_prev = stored_hash

        return {
            "verified": not broken,
            "entries_checked": len(rows),
            "broken_links": broken,
        }

    def get_count(self) -> int:
        with self._get_conn() as conn:
            row = conn.execute("SELECT COUNT(*) FROM audit_chain").fetchone()
            return row[0] if row else 0


def _get_audit_chain() -> AuditChain:
    """Factory — reads db path from config."""
    from theeye.config import settings
    return AuditChain(db_path=settings.AUDIT_DB_PATH)


audit_chain = _get_audit_chain()
