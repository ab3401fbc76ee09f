"""
Text helpers that turn article markup into plain question-answering context.
"""
import warnings

from bs4 import BeautifulSoup, MarkupResemblesLocatorWarning

from feedqa.core.article import Article

UNSAFE_TAGS = ['script', 'iframe', 'object', 'embed']


def _soup(markup: str) -> BeautifulSoup:
    # Short plain-text content often looks like a URL or file name to bs4
    with warnings.catch_warnings():
        warnings.simplefilter('ignore', MarkupResemblesLocatorWarning)
        return BeautifulSoup(markup or '', 'html.parser')


def strip_html(markup: str) -> str:
    """
    Return the text content of an HTML fragment.

    Args:
        markup: HTML or plain text

    Returns:
        The fragment's text with all tags removed
    """
    return _soup(markup).get_text()


def sanitize_html(markup: str) -> str:
    """
    Remove script, iframe, object and embed elements from an HTML fragment.
    """
    soup = _soup(markup)
    for elem in soup.find_all(UNSAFE_TAGS):
        elem.decompose()
    return str(soup)


def article_context(article: Article) -> str:
    """
    Build the plain-text passage a question about ``article`` is answered from.

    Args:
        article: The selected article

    Returns:
        The title, a blank line, then the article body without markup
    """
    body = article.content or article.description or ''
    return f"{article.title}\n\n{strip_html(body)}"
