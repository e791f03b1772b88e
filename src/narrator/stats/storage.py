"""SQLite listening stats storage implementation."""

import sqlite3
from dataclasses import dataclass
from datetime import datetime
from pathlib import Path

from . import get_data_dir


@dataclass
class ListeningStats:
    """Cumulative listening record for one user.

    Attributes:
        user_id: Listener identifier
        total_seconds: Cumulative listening time in seconds
        sessions: Number of sessions that contributed time
        last_active: When time was last added
    """

    user_id: str
    total_seconds: float
    sessions: int
    last_active: datetime


class StatsStore:
    """SQLite-based store for cumulative listening time."""

    def __init__(self, data_dir: Path | None = None):
        """Initialize stats storage with database in given directory.

        Args:
            data_dir: Directory containing the database
                (defaults to ~/.local/share/narrator)
        """
        self.data_dir = data_dir or get_data_dir()
        self.data_dir.mkdir(parents=True, exist_ok=True)

        self.db_path = self.data_dir / "stats.db"
        self._init_db()

    def _get_connection(self) -> sqlite3.Connection:
        """Get a new database connection with WAL mode for concurrency."""
        conn = sqlite3.connect(
            str(self.db_path),
            timeout=30.0,
            check_same_thread=False,  # Updates run in worker threads
        )
        conn.row_factory = sqlite3.Row
        conn.execute("PRAGMA journal_mode=WAL")
        conn.execute("PRAGMA busy_timeout=30000")
        return conn

    def _init_db(self) -> None:
        """Initialize database schema."""
        conn = self._get_connection()
        try:
            conn.execute("""
                CREATE TABLE IF NOT EXISTS listening_stats (
                    user_id TEXT PRIMARY KEY,
                    total_seconds REAL NOT NULL DEFAULT 0,
                    sessions INTEGER NOT NULL DEFAULT 0,
                    last_active TEXT NOT NULL
                )
            """)
            conn.commit()
        finally:
            conn.close()

    def add_listening_seconds(self, user_id: str, seconds: float) -> None:
        """Add one session's listening time to a user's total.

        Args:
            user_id: Listener identifier
            seconds: Elapsed listening time, must be non-negative

        Raises:
            ValueError: If seconds is negative or user_id is empty
            sqlite3.Error: If the update fails
        """
        if not user_id:
            raise ValueError("user_id cannot be empty")
        if seconds < 0:
            raise ValueError(f"seconds must be non-negative, got {seconds}")

        conn = self._get_connection()
        try:
            conn.execute(
                """
                INSERT INTO listening_stats (user_id, total_seconds, sessions, last_active)
                VALUES (?, ?, 1, ?)
                ON CONFLICT(user_id) DO UPDATE SET
                    total_seconds = total_seconds + excluded.total_seconds,
                    sessions = sessions + 1,
                    last_active = excluded.last_active
            """,
                (user_id, seconds, datetime.now().isoformat()),
            )
            conn.commit()
        finally:
            conn.close()

    def get(self, user_id: str) -> ListeningStats | None:
        """Retrieve the listening record for a user.

        Args:
            user_id: Listener identifier

        Returns:
            ListeningStats if the user has listened before, None otherwise
        """
        conn = self._get_connection()
        try:
            row = conn.execute(
                """
                SELECT user_id, total_seconds, sessions, last_active
                FROM listening_stats
                WHERE user_id = ?
            """,
                (user_id,),
            ).fetchone()
        finally:
            conn.close()
        if row is None:
            return None

        return ListeningStats(
            user_id=row["user_id"],
            total_seconds=row["total_seconds"],
            sessions=row["sessions"],
            last_active=datetime.fromisoformat(row["last_active"]),
        )

    def get_listening_seconds(self, user_id: str) -> float:
        """Cumulative listening time for a user, 0.0 if unknown."""
        stats = self.get(user_id)
        return stats.total_seconds if stats else 0.0
