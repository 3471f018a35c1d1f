"""
Storage module - Journey and stage persistence for the stage explorer.

The orchestrator treats this store as best effort: the in-memory context
stays authoritative, so callers log and swallow failures from here.
"""

import json
import secrets
import sqlite3
import time
from contextlib import contextmanager
from datetime import datetime
from pathlib import Path
from typing import Optional

from shared.logging import get_logger

from ..models.stage import JourneyStatus, Stage

log = get_logger("explorer", "storage.db")


def generate_journey_id() -> str:
    return f"journey_{int(time.time() * 1000)}_{secrets.token_hex(3)}"


class JourneyDatabase:
    """SQLite database for journeys and their stages."""

    def __init__(self, db_path: Path):
        self.db_path = Path(db_path)
        self.db_path.parent.mkdir(parents=True, exist_ok=True)
        self._init_db()

    @contextmanager
    def _get_conn(self):
        """Get database connection."""
        conn = sqlite3.connect(self.db_path)
        conn.row_factory = sqlite3.Row
        try:
            yield conn
            conn.commit()
        finally:
            conn.close()

    def _init_db(self):
        """Initialize database schema."""
        with self._get_conn() as conn:
            conn.executescript("""
                CREATE TABLE IF NOT EXISTS journeys (
                    id TEXT PRIMARY KEY,
                    input TEXT,
                    status TEXT,
                    max_stages INTEGER,
                    stage_count INTEGER DEFAULT 0,
                    created_at TEXT,
                    updated_at TEXT
                );

                CREATE TABLE IF NOT EXISTS stages (
                    id TEXT PRIMARY KEY,
                    journey_id TEXT,
                    stage_number INTEGER,
                    type TEXT,
                    is_summary INTEGER DEFAULT 0,
                    status TEXT,
                    quality_score REAL,
                    created_at TEXT,
                    completed_at TEXT,
                    data TEXT
                );

                CREATE INDEX IF NOT EXISTS idx_journeys_status ON journeys(status);
                CREATE INDEX IF NOT EXISTS idx_stages_journey ON stages(journey_id, stage_number);
            """)

    def create_journey(
        self,
        input_text: str,
        max_stages: Optional[int] = None,
        journey_id: Optional[str] = None,
    ) -> str:
        """Create a running journey and return its id."""
        journey_id = journey_id or generate_journey_id()
        now = datetime.now().isoformat()
        with self._get_conn() as conn:
            conn.execute(
                "INSERT INTO journeys (id, input, status, max_stages, created_at, updated_at) "
                "VALUES (?, ?, ?, ?, ?, ?)",
                (journey_id, input_text, JourneyStatus.RUNNING.value, max_stages, now, now),
            )
        log.info("storage.journey.created", journey_id=journey_id, max_stages=max_stages)
        return journey_id

    def get_journey(self, journey_id: str) -> Optional[dict]:
        with self._get_conn() as conn:
            row = conn.execute(
                "SELECT * FROM journeys WHERE id = ?", (journey_id,)
            ).fetchone()
            return dict(row) if row else None

    def list_journeys(self, limit: int = 20) -> list[dict]:
        """Most recently updated journeys first."""
        with self._get_conn() as conn:
            rows = conn.execute(
                "SELECT * FROM journeys ORDER BY updated_at DESC LIMIT ?", (limit,)
            ).fetchall()
            return [dict(row) for row in rows]

    def update_journey(self, journey_id: str, **kwargs):
        """Update journey columns; updated_at is always refreshed."""
        kwargs["updated_at"] = datetime.now().isoformat()
        sets = ", ".join(f"{k} = ?" for k in kwargs.keys())
        with self._get_conn() as conn:
            conn.execute(
                f"UPDATE journeys SET {sets} WHERE id = ?",
                list(kwargs.values()) + [journey_id],
            )

    def get_journey_status(self, journey_id: str) -> Optional[JourneyStatus]:
        journey = self.get_journey(journey_id)
        if not journey or not journey.get("status"):
            return None
        return JourneyStatus(journey["status"])

    def set_journey_status(self, journey_id: str, status: JourneyStatus):
        self.update_journey(journey_id, status=JourneyStatus(status).value)
        log.info("storage.journey.status", journey_id=journey_id, status=JourneyStatus(status).value)

    def create_stage(self, stage: Stage):
        """Store a stage (replacing any earlier copy) and bump the journey's stage count."""
        with self._get_conn() as conn:
            conn.execute(
                "INSERT OR REPLACE INTO stages "
                "(id, journey_id, stage_number, type, is_summary, status, quality_score, "
                "created_at, completed_at, data) VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?)",
                (
                    stage.id,
                    stage.journey_id,
                    stage.stage_number,
                    stage.type.value,
                    int(stage.is_summary),
                    stage.status.value,
                    stage.quality_score,
                    stage.created_at.isoformat(),
                    stage.completed_at.isoformat() if stage.completed_at else None,
                    json.dumps(stage.to_dict()),
                ),
            )
            conn.execute(
                "UPDATE journeys SET stage_count = "
                "(SELECT COUNT(*) FROM stages WHERE journey_id = ?), updated_at = ? WHERE id = ?",
                (stage.journey_id, datetime.now().isoformat(), stage.journey_id),
            )

    def get_stages(self, journey_id: str) -> list[Stage]:
        with self._get_conn() as conn:
            rows = conn.execute(
                "SELECT data FROM stages WHERE journey_id = ? ORDER BY stage_number",
                (journey_id,),
            ).fetchall()
            return [Stage.from_dict(json.loads(row["data"])) for row in rows]

    def get_stats(self) -> dict:
        """Journey counts by status and total stages."""
        with self._get_conn() as conn:
            rows = conn.execute(
                "SELECT status, COUNT(*) as count FROM journeys GROUP BY status"
            ).fetchall()
            stats = {"journeys": {row["status"]: row["count"] for row in rows}}
            row = conn.execute("SELECT COUNT(*) as count FROM stages").fetchone()
            stats["stages"] = row["count"]
            return stats
