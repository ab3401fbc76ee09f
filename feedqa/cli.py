"""
Command-line interface for feedqa.
"""
import argparse
import asyncio
import logging
import os
import sys
from typing import List, Optional

from dotenv import load_dotenv

from feedqa import config as feedqa_config
from feedqa.core.errors import FeedQAError
from feedqa.core.reader import Reader
from feedqa.core.store import FeedStore
from feedqa.utils.text import article_context, sanitize_html

logger = logging.getLogger(__name__)

LOG_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'

def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    """
    Parse command-line arguments.

    Returns:
        Parsed arguments
    """
    parser = argparse.ArgumentParser(description="feedqa - ask questions about feed articles")
    parser.add_argument("--config", help="Path to a YAML or JSON config file")
    parser.add_argument("--db", help="Path to the feed database")
    parser.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging")

    commands = parser.add_subparsers(dest="command", required=True)

    add = commands.add_parser("add", help="Fetch a feed and store it")
    add.add_argument("url", help="RSS 2.0 or Atom feed URL")

    commands.add_parser("feeds", help="List stored feeds")

    articles = commands.add_parser("articles", help="List the articles of a feed")
    articles.add_argument("feed", type=int, help="Feed number as shown by 'feeds'")

    remove = commands.add_parser("remove", help="Delete a stored feed")
    remove.add_argument("feed", type=int, help="Feed number")

    show = commands.add_parser("show", help="Print an article as plain text")
    show.add_argument("feed", type=int, help="Feed number")
    show.add_argument("article", type=int, help="Article number as shown by 'articles'")
    show.add_argument("--html", action="store_true", help="Print the sanitized HTML body instead of plain text")

    ask = commands.add_parser("ask", help="Ask a question about an article")
    ask.add_argument("feed", type=int, help="Feed number")
    ask.add_argument("article", type=int, help="Article number")
    ask.add_argument("question", nargs="+", help="The question")

    return parser.parse_args(argv)

def setup_logging(verbose: bool = False):
    """
    Configure the root logger from the ``logging`` settings.
    """
    level = logging.DEBUG if verbose else feedqa_config.get_config('logging.level', 'INFO')
    handlers = [logging.StreamHandler()]
    log_file = feedqa_config.get_config('logging.file')
    if log_file:
        handlers.append(logging.FileHandler(log_file))
    logging.basicConfig(level=level, format=LOG_FORMAT, handlers=handlers, force=True)

def _select(reader: Reader, feed: int, article: int):
    # Numbers on the command line are 1-based
    return reader.select_article(feed - 1, article - 1)

async def async_main(args: argparse.Namespace) -> int:
    """
    Run one command.
    """
    reader = Reader(store=FeedStore(args.db))
    try:
        if args.command == "add":
            feed = await reader.add_feed(args.url)
            print(f"Added '{feed.title}' with {len(feed.articles)} articles")

        elif args.command == "feeds":
            if not reader.feeds:
                print("No feeds yet. Add one with 'feedqa add URL'.")
            for i, feed in enumerate(reader.feeds, 1):
                print(f"{i:3d}. {feed.title} ({len(feed.articles)} articles) - {feed.url}")

        elif args.command == "articles":
            if not 1 <= args.feed <= len(reader.feeds):
                raise IndexError(f"No feed number {args.feed}")
            for i, article in enumerate(reader.feeds[args.feed - 1].articles, 1):
                date = f" [{article.pub_date}]" if article.pub_date else ""
                print(f"{i:3d}. {article.title}{date}")

        elif args.command == "remove":
            feed = reader.remove_feed(args.feed - 1)
            print(f"Removed '{feed.title}'")

        elif args.command == "show":
            article = _select(reader, args.feed, args.article)
            if args.html:
                print(sanitize_html(article.content or article.description))
            else:
                print(article_context(article))
            if article.link:
                print(f"\nRead original: {article.link}")

        elif args.command == "ask":
            _select(reader, args.feed, args.article)
            logger.info("Loading AI model... (this may take a minute)")
            answer = await reader.ask(" ".join(args.question))
            print(answer)

        return 0
    finally:
        await reader.close()

def main(argv: Optional[List[str]] = None) -> int:
    """
    Entry point for the command-line script.
    """
    load_dotenv(override=True)
    args = parse_args(argv)
    # Values loaded from .env take precedence over the import-time config
    feedqa_config.load_config(args.config or os.getenv("FEEDQA_CONFIG_PATH"))
    setup_logging(args.verbose)

    try:
        return asyncio.run(async_main(args))
    except (FeedQAError, IndexError, ValueError) as e:
        logger.error(str(e))
        return 1
    except KeyboardInterrupt:
        logger.info("Process interrupted by user")
        return 1

if __name__ == "__main__":
    sys.exit(main())
