"""Shared fixtures for feedqa tests."""

import sys
from pathlib import Path

import pytest

# Make the package importable when running from a source checkout
ROOT = Path(__file__).resolve().parent.parent
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from feedqa.core.article import Article, Feed  # noqa: E402

# The first import of transformers.pipelines re-executes transformers/__init__
# and replaces sys.modules["transformers"], which would discard a
# patch("transformers.pipeline") applied before it; import it up front so
# tests patch the module object the code under test will see.
import transformers.pipelines  # noqa: E402,F401


SAMPLE_RSS = """<?xml version="1.0" encoding="UTF-8"?>
<rss version="2.0">
    <channel>
        <title>Test Feed</title>
        <item>
            <title>Test Article</title>
            <link>https://example.com/article</link>
            <description>Test description</description>
            <pubDate>Mon, 01 Jan 2024 00:00:00 GMT</pubDate>
        </item>
    </channel>
</rss>"""


@pytest.fixture
def sample_rss():
    return SAMPLE_RSS


@pytest.fixture
def article():
    return Article(
        feed_title="Test Feed",
        title="Solar power record",
        link="https://example.com/solar",
        description="Solar output hit a record.",
        content="<p>Solar output hit a record of <b>42 GW</b> on Tuesday.</p>",
        pub_date="Mon, 01 Jan 2024 00:00:00 GMT",
        author="Jane Doe",
        guid="https://example.com/solar",
    )


@pytest.fixture
def feed(article):
    return Feed(url="https://example.com/feed.xml", title="Test Feed", articles=(article,), added_at=1700000000.0)
