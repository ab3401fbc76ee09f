"""
Article and feed data models for feedqa.
"""
import time
from dataclasses import asdict, dataclass, field, fields
from typing import Any, Dict, Tuple

UNTITLED_FEED = "Untitled Feed"
UNTITLED_ARTICLE = "Untitled"

@dataclass(frozen=True)
class Article:
    """
    One feed entry normalized from RSS 2.0 or Atom.

    Every field is a string; a missing value is the empty string.
    """
    feed_title: str = UNTITLED_FEED
    title: str = UNTITLED_ARTICLE
    link: str = ""
    description: str = ""
    content: str = ""
    pub_date: str = ""
    author: str = ""
    guid: str = ""

    def to_dict(self) -> Dict[str, str]:
        return asdict(self)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Article":
        values = {}
        for f in fields(cls):
            value = data.get(f.name)
            values[f.name] = "" if value is None else str(value)
        return cls(**values)


@dataclass(frozen=True)
class Feed:
    """
    A fetched feed: its URL, title and articles in document order.
    """
    url: str
    title: str
    articles: Tuple[Article, ...] = ()
    added_at: float = field(default_factory=time.time)

    @classmethod
    def from_articles(cls, url: str, articles) -> "Feed":
        articles = tuple(articles)
        title = articles[0].feed_title if articles else UNTITLED_FEED
        return cls(url=url, title=title or UNTITLED_FEED, articles=articles)
