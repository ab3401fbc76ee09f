"""Tests for feedqa.cli module."""

import os
from unittest.mock import AsyncMock, patch

import pytest

from feedqa import config as feedqa_config
from feedqa.cli import main, parse_args


@pytest.fixture
def db(tmp_path):
    return str(tmp_path / "feeds.db")


@pytest.fixture(autouse=True)
def no_logging_setup():
    with patch("feedqa.cli.setup_logging"):
        yield


@pytest.fixture(autouse=True)
def isolated_config(monkeypatch):
    monkeypatch.setattr(feedqa_config, "config", feedqa_config.config)
    monkeypatch.setattr("feedqa.cli.load_dotenv", lambda **kwargs: None)


class TestParseArgs:
    def test_ask_joins_question_words(self):
        args = parse_args(["ask", "1", "2", "What", "happened?"])

        assert args.command == "ask"
        assert (args.feed, args.article) == (1, 2)
        assert args.question == ["What", "happened?"]

    def test_command_required(self):
        with pytest.raises(SystemExit):
            parse_args([])


class TestMain:
    def test_no_feeds(self, db, capsys):
        assert main(["--db", db, "feeds"]) == 0

        assert "No feeds yet" in capsys.readouterr().out

    @patch("feedqa.fetchers.feed.FeedFetcher.fetch_feed", new_callable=AsyncMock)
    def test_add_then_list(self, mock_fetch, db, sample_rss, capsys):
        mock_fetch.return_value = sample_rss

        assert main(["--db", db, "add", "https://example.com/rss"]) == 0
        assert main(["--db", db, "feeds"]) == 0
        assert main(["--db", db, "articles", "1"]) == 0
        assert main(["--db", db, "show", "1", "1"]) == 0

        out = capsys.readouterr().out
        assert "Added 'Test Feed' with 1 articles" in out
        assert "Test Feed (1 articles) - https://example.com/rss" in out
        assert "1. Test Article [Mon, 01 Jan 2024 00:00:00 GMT]" in out
        assert "Test Article\n\nTest description" in out
        assert "Read original: https://example.com/article" in out

    @patch("feedqa.fetchers.feed.FeedFetcher.fetch_feed", new_callable=AsyncMock)
    def test_ask(self, mock_fetch, db, sample_rss, capsys):
        mock_fetch.return_value = sample_rss
        qa = AsyncMock(return_value={"answer": "Test description", "score": 0.25})
        main(["--db", db, "add", "https://example.com/rss"])

        with patch("feedqa.core.session.load_pipeline", new=AsyncMock(return_value=qa)):
            assert main(["--db", db, "ask", "1", "1", "What", "is", "it?"]) == 0

        qa.assert_awaited_once_with("What is it?", "Test Article\n\nTest description")
        assert "Test description\n\n(Confidence: 25.0%)" in capsys.readouterr().out

    def test_bad_feed_number(self, db):
        assert main(["--db", db, "articles", "3"]) == 1

    def test_invalid_url(self, db):
        assert main(["--db", db, "add", "not-a-url"]) == 1

    @patch("feedqa.fetchers.feed.FeedFetcher.fetch_feed", new_callable=AsyncMock)
    def test_show_html_is_sanitized(self, mock_fetch, db, capsys):
        mock_fetch.return_value = (
            "<rss><channel><title>F</title><item><title>A</title>"
            "<description><![CDATA[<p>Body</p><script>alert(1)</script>]]></description>"
            "</item></channel></rss>"
        )
        main(["--db", db, "add", "https://example.com/rss"])
        capsys.readouterr()

        assert main(["--db", db, "show", "1", "1", "--html"]) == 0

        out = capsys.readouterr().out
        assert "<p>Body</p>" in out
        assert "script" not in out

    @patch("feedqa.fetchers.feed.FeedFetcher.fetch_feed", new_callable=AsyncMock)
    def test_remove(self, mock_fetch, db, sample_rss, capsys):
        mock_fetch.return_value = sample_rss
        main(["--db", db, "add", "https://example.com/rss"])

        assert main(["--db", db, "remove", "1"]) == 0
        assert main(["--db", db, "feeds"]) == 0

        out = capsys.readouterr().out
        assert "Removed 'Test Feed'" in out
        assert "No feeds yet" in out

    def test_remove_bad_feed_number(self, db):
        assert main(["--db", db, "remove", "1"]) == 1

    def test_dotenv_values_reach_config(self, db, monkeypatch):
        monkeypatch.setenv("FEEDQA_MODEL__NAME", "from-shell")
        monkeypatch.setattr(
            "feedqa.cli.load_dotenv",
            lambda **kwargs: os.environ.update(FEEDQA_MODEL__NAME="from-dotenv"),
        )

        assert main(["--db", db, "feeds"]) == 0

        assert feedqa_config.get_config("model.name") == "from-dotenv"
