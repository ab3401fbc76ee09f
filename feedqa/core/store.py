"""
Feed storage for feedqa.
"""
import json
import sqlite3
from pathlib import Path
from typing import List, Optional

from feedqa.config import get_config
from feedqa.core.article import Article, Feed

class FeedStore:
    """
    Persists fetched feeds in SQLite, keyed by feed URL.
    """
    def __init__(self, path: Optional[str] = None):
        """
        Initialize the FeedStore.

        Args:
            path: SQLite database file, defaults to the ``store.path`` setting
        """
        self.path = Path(path or get_config('store.path'))
        self._init_db()

    def _init_db(self):
        """Initialize the SQLite database for feeds."""
        if self.path.parent != Path('.'):
            self.path.parent.mkdir(parents=True, exist_ok=True)
        with sqlite3.connect(self.path) as conn:
            conn.execute("""
                CREATE TABLE IF NOT EXISTS feeds (
                    url TEXT PRIMARY KEY,
                    title TEXT,
                    articles TEXT,
                    added_at REAL
                )
            """)

    @staticmethod
    def _to_feed(row) -> Feed:
        url, title, articles, added_at = row
        return Feed(
            url=url,
            title=title,
            articles=tuple(Article.from_dict(a) for a in json.loads(articles)),
            added_at=added_at,
        )

    def get(self, url: str) -> Optional[Feed]:
        """
        Get a stored feed.

        Args:
            url: The feed URL

        Returns:
            The feed if stored, None otherwise
        """
        with sqlite3.connect(self.path) as conn:
            cursor = conn.execute(
                """
                SELECT url, title, articles, added_at
                FROM feeds
                WHERE url = ?
                """,
                (url,)
            )
            row = cursor.fetchone()
        return self._to_feed(row) if row else None

    def all(self) -> List[Feed]:
        """Return every stored feed in the order it was first added."""
        with sqlite3.connect(self.path) as conn:
            rows = conn.execute(
                "SELECT url, title, articles, added_at FROM feeds ORDER BY rowid"
            ).fetchall()
        return [self._to_feed(row) for row in rows]

    def put(self, feed: Feed):
        """
        Store a feed, replacing any feed stored under the same URL.

        Args:
            feed: The feed to store
        """
        articles = json.dumps([a.to_dict() for a in feed.articles])
        with sqlite3.connect(self.path) as conn:
            conn.execute(
                """
                INSERT INTO feeds (url, title, articles, added_at)
                VALUES (?, ?, ?, ?)
                ON CONFLICT(url) DO UPDATE SET
                    title = excluded.title,
                    articles = excluded.articles,
                    added_at = excluded.added_at
                """,
                (feed.url, feed.title, articles, feed.added_at)
            )

    def delete(self, url: str) -> bool:
        """
        Remove a stored feed.

        Returns:
            True if a feed was removed
        """
        with sqlite3.connect(self.path) as conn:
            cursor = conn.execute("DELETE FROM feeds WHERE url = ?", (url,))
            return cursor.rowcount > 0
