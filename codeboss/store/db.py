"""SQLite storage for bossification records.

Schema:
    CREATE TABLE bossifications (
        tree_hash TEXT NOT NULL,
        author_name TEXT NOT NULL,
        author_email TEXT NOT NULL,
        author_timestamp INTEGER NOT NULL,
        template TEXT NOT NULL,
        created_at INTEGER NOT NULL,
        PRIMARY KEY (tree_hash, author_name, author_email, author_timestamp)
    );

Records are keyed by commit identity rather than commit id, so a record
written before a rewrite is still found after the commit id has changed.
"""

import logging
import sqlite3
import time
from pathlib import Path
from typing import Optional

from codeboss.store.models import Bossification, CommitIdentity

logger = logging.getLogger(__name__)

_COLUMNS = "tree_hash, author_name, author_email, author_timestamp, template, created_at"


class BossificationStore:
    """Persistent map from commit identity to the template used for it.

    The connection is opened on first use and must be closed once with
    close(); the store is also a context manager.
    """

    def __init__(self, db_path: Path):
        self.db_path = Path(db_path)
        self._conn: Optional[sqlite3.Connection] = None

    def _connection(self) -> sqlite3.Connection:
        if self._conn is None:
            self.db_path.parent.mkdir(parents=True, exist_ok=True)
            logger.debug("Opening bossification store at %s", self.db_path)
            self._conn = sqlite3.connect(self.db_path)
            self._conn.execute(
                """
                CREATE TABLE IF NOT EXISTS bossifications (
                    tree_hash TEXT NOT NULL,
                    author_name TEXT NOT NULL,
                    author_email TEXT NOT NULL,
                    author_timestamp INTEGER NOT NULL,
                    template TEXT NOT NULL,
                    created_at INTEGER NOT NULL,
                    PRIMARY KEY (tree_hash, author_name, author_email, author_timestamp)
                )
            """
            )
            self._conn.commit()
        return self._conn

    @property
    def is_open(self) -> bool:
        return self._conn is not None

    def upsert(self, identity: CommitIdentity, template: str, created_at: Optional[int] = None) -> None:
        """Save or replace the template for a commit identity."""
        if created_at is None:
            created_at = int(time.time())
        conn = self._connection()
        conn.execute(
            f"INSERT OR REPLACE INTO bossifications ({_COLUMNS}) VALUES (?, ?, ?, ?, ?, ?)",
            (
                identity.tree_hash,
                identity.author_name,
                identity.author_email,
                identity.author_timestamp,
                template,
                created_at,
            ),
        )
        conn.commit()

    def lookup(self, identity: CommitIdentity) -> Optional[Bossification]:
        """Look up the saved template for a commit, if it exists."""
        row = self._connection().execute(
            f"""
            SELECT {_COLUMNS} FROM bossifications
            WHERE tree_hash = ? AND author_name = ? AND author_email = ? AND author_timestamp = ?
            """,
            (identity.tree_hash, identity.author_name, identity.author_email, identity.author_timestamp),
        ).fetchone()
        return _row_to_model(row) if row else None

    def list_all(self) -> list[Bossification]:
        """Get all bossifications, newest first."""
        rows = self._connection().execute(
            f"SELECT {_COLUMNS} FROM bossifications ORDER BY created_at DESC, rowid DESC"
        ).fetchall()
        return [_row_to_model(row) for row in rows]

    def close(self) -> None:
        """Close the connection if it was opened."""
        if self._conn is not None:
            self._conn.close()
            self._conn = None

    def __enter__(self) -> "BossificationStore":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()


def _row_to_model(row: tuple) -> Bossification:
    tree_hash, author_name, author_email, author_timestamp, template, created_at = row
    return Bossification(
        tree_hash=tree_hash,
        author_name=author_name,
        author_email=author_email,
        author_timestamp=author_timestamp,
        template=template,
        created_at=created_at,
    )
