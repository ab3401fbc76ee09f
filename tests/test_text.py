"""Tests for feedqa.utils.text module."""

from feedqa.core.article import Article
from feedqa.utils.text import article_context, sanitize_html, strip_html


class TestStripHtml:
    def test_removes_tags(self):
        assert strip_html("<p>Hello <b>world</b></p>") == "Hello world"

    def test_plain_text_unchanged(self):
        assert strip_html("Just text") == "Just text"

    def test_decodes_entities(self):
        assert strip_html("Fish &amp; chips") == "Fish & chips"

    def test_empty(self):
        assert strip_html("") == ""


class TestSanitizeHtml:
    def test_removes_unsafe_elements(self):
        markup = (
            '<p>Keep</p><script>alert(1)</script><iframe src="x"></iframe>'
            '<object data="y"></object><embed src="z">'
        )

        assert sanitize_html(markup) == "<p>Keep</p>"

    def test_keeps_formatting(self):
        assert sanitize_html("<p><em>Hi</em> <a href=\"/x\">link</a></p>") == '<p><em>Hi</em> <a href="/x">link</a></p>'


class TestArticleContext:
    def test_title_and_plain_content(self, article):
        assert article_context(article) == (
            "Solar power record\n\nSolar output hit a record of 42 GW on Tuesday."
        )

    def test_falls_back_to_description(self):
        article = Article(title="T", description="<i>Summary</i>")

        assert article_context(article) == "T\n\nSummary"

    def test_no_body(self):
        assert article_context(Article(title="T")) == "T\n\n"
