"""
Reader: ties fetching, parsing, storage and question answering together.
"""
import asyncio
import logging
from dataclasses import dataclass
from typing import Callable, List, Optional

from feedqa.core.article import Article, Feed
from feedqa.core.errors import FeedQAError
from feedqa.core.parser import parse_feed
from feedqa.core.session import InferenceSession, SessionState
from feedqa.core.store import FeedStore
from feedqa.fetchers.feed import FeedFetcher
from feedqa.utils.text import article_context

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ChatMessage:
    role: str  # "user" or "assistant"
    content: str


class Reader:
    """
    Holds the feeds, the selected article and its question history.

    The Reader owns a single InferenceSession, created on the first question.
    Questions are answered one at a time.
    """
    def __init__(
        self,
        fetcher: Optional[FeedFetcher] = None,
        store: Optional[FeedStore] = None,
        session_factory: Optional[Callable[[], InferenceSession]] = None,
    ):
        self.fetcher = fetcher or FeedFetcher()
        self.store = store
        self.session_factory = session_factory or InferenceSession
        self.session: Optional[InferenceSession] = None
        self.feeds: List[Feed] = store.all() if store is not None else []
        self.current_article: Optional[Article] = None
        self.chat_history: List[ChatMessage] = []
        self._question_lock = asyncio.Lock()

    async def add_feed(self, url: str) -> Feed:
        """
        Fetch, parse and store a feed.

        Args:
            url: The feed URL

        Returns:
            The new feed
        """
        url = url.strip()
        logger.info(f"Fetching feed: {url}")
        markup = await self.fetcher.fetch_feed(url)
        feed = Feed.from_articles(url, parse_feed(markup))
        logger.info(f"Extracted {len(feed.articles)} articles from {feed.title}")

        if self.store is not None:
            self.store.put(feed)
        # A re-added feed keeps its position, matching the store's row order
        for i, existing in enumerate(self.feeds):
            if existing.url == url:
                self.feeds[i] = feed
                break
        else:
            self.feeds.append(feed)
        return feed

    def remove_feed(self, feed_index: int) -> Feed:
        """
        Forget a feed and delete it from the store.

        Clears the selection if the selected article belonged to the feed.

        Raises:
            IndexError: If the index is out of range
        """
        if not 0 <= feed_index < len(self.feeds):
            raise IndexError(f"No feed at index {feed_index}")

        feed = self.feeds.pop(feed_index)
        if self.store is not None:
            self.store.delete(feed.url)
        if self.current_article in feed.articles:
            self.current_article = None
            self.chat_history = []
        logger.info(f"Removed feed {feed.title}")
        return feed

    def select_article(self, feed_index: int, article_index: int) -> Article:
        """
        Make an article the subject of the following questions.

        Indices are zero-based. Selecting an article clears the chat history.

        Raises:
            IndexError: If either index is out of range
        """
        if not 0 <= feed_index < len(self.feeds):
            raise IndexError(f"No feed at index {feed_index}")
        articles = self.feeds[feed_index].articles
        if not 0 <= article_index < len(articles):
            raise IndexError(f"No article at index {article_index}")

        self.current_article = articles[article_index]
        self.chat_history = []
        return self.current_article

    def _ready_session(self) -> InferenceSession:
        if self.session is None or self.session.state is SessionState.FAILED:
            self.session = self.session_factory()
        return self.session

    async def ask(self, question: str) -> str:
        """
        Answer a question about the selected article.

        Args:
            question: Natural-language question

        Returns:
            The formatted answer

        Raises:
            ValueError: If the question is empty or no article is selected
            FeedQAError: If the model cannot be loaded or fails to answer
        """
        question = question.strip()
        if not question:
            raise ValueError("Question is empty")
        if self.current_article is None:
            raise ValueError("No article selected")

        async with self._question_lock:
            self.chat_history.append(ChatMessage("user", question))
            context = article_context(self.current_article)
            try:
                session = self._ready_session()
                await session.initialize()
                answer = await session.ask_question(context, question)
            except FeedQAError as e:
                self.chat_history.append(ChatMessage("assistant", f"Error: {e}"))
                raise

            self.chat_history.append(ChatMessage("assistant", answer))
            return answer

    async def close(self):
        await self.fetcher.close()
