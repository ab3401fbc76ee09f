"""
RSS 2.0 and Atom parsing for feedqa.

Both formats are reduced to :class:`~feedqa.core.article.Article` records.
Each article field is filled from an ordered chain of extractors; the first
extractor returning a non-empty string wins.
"""
import logging
import xml.etree.ElementTree as ET
from typing import Callable, Dict, Iterator, List, Optional, Tuple

from feedqa.core.article import Article, UNTITLED_ARTICLE, UNTITLED_FEED
from feedqa.core.errors import InvalidFeedFormat, MalformedXml

logger = logging.getLogger(__name__)

# Prefixes usable in element selectors, e.g. "content:encoded"
NAMESPACES = {
    'content': 'http://purl.org/rss/1.0/modules/content/',
    'dc': 'http://purl.org/dc/elements/1.1/',
}

Extractor = Callable[[ET.Element], str]


def _split_tag(tag) -> Tuple[Optional[str], str]:
    """
    Split an ElementTree tag into (namespace URI, local name).
    """
    if not isinstance(tag, str):
        # Comments and processing instructions
        return None, ''
    if tag.startswith('{'):
        uri, _, local = tag[1:].partition('}')
        return uri, local
    return None, tag


def _matches(element: ET.Element, selector: str) -> bool:
    uri, local = _split_tag(element.tag)
    if ':' in selector:
        prefix, name = selector.split(':', 1)
        return local == name and uri == NAMESPACES.get(prefix)
    return local == selector


def _descendants(scope: ET.Element) -> Iterator[ET.Element]:
    for element in scope.iter():
        if element is not scope:
            yield element


def find_element(scope: ET.Element, selector: str, **attrs: str) -> Optional[ET.Element]:
    """
    Return the first descendant of ``scope`` matching ``selector``.

    Args:
        scope: Element to search below (the scope itself is not matched)
        selector: Local tag name, or ``prefix:name`` for a namespaced tag
        attrs: Attribute values the element must carry

    Returns:
        The matching element, or None
    """
    for element in _descendants(scope):
        if _matches(element, selector) and all(element.get(k) == v for k, v in attrs.items()):
            return element
    return None


def element_text(scope: ET.Element, selector: str) -> str:
    """
    Trimmed text content of the first element matching ``selector``, or ''.
    """
    element = find_element(scope, selector)
    if element is None:
        return ''
    return ''.join(element.itertext()).strip()


def text(selector: str) -> Extractor:
    return lambda scope: element_text(scope, selector)


def first_non_empty(scope: ET.Element, extractors: Tuple[Extractor, ...]) -> str:
    for extract in extractors:
        value = extract(scope)
        if value:
            return value
    return ''


def _atom_link(entry: ET.Element) -> str:
    link = find_element(entry, 'link', rel='alternate')
    if link is None:
        link = find_element(entry, 'link')
    if link is None:
        return ''
    return (link.get('href') or '').strip()


def _atom_author(entry: ET.Element) -> str:
    for author in _descendants(entry):
        if not _matches(author, 'author'):
            continue
        for child in author:
            if _matches(child, 'name'):
                return ''.join(child.itertext()).strip()
    return ''


RSS_FIELDS: Dict[str, Tuple[Extractor, ...]] = {
    'title': (text('title'),),
    'link': (text('link'),),
    'description': (text('description'),),
    'content': (text('content:encoded'), text('content'), text('description')),
    'pub_date': (text('pubDate'), text('dc:date')),
    'author': (text('author'), text('dc:creator')),
    'guid': (text('guid'), text('link')),
}

ATOM_FIELDS: Dict[str, Tuple[Extractor, ...]] = {
    'title': (text('title'),),
    'link': (_atom_link,),
    'description': (text('summary'),),
    'content': (text('content'), text('summary')),
    'pub_date': (text('published'), text('updated')),
    'author': (_atom_author,),
    'guid': (text('id'), _atom_link),
}


def _build_article(scope: ET.Element, feed_title: str, chains: Dict[str, Tuple[Extractor, ...]]) -> Article:
    values = {name: first_non_empty(scope, chain) for name, chain in chains.items()}
    values['title'] = values['title'] or UNTITLED_ARTICLE
    return Article(feed_title=feed_title, **values)


def _parse_rss(root: ET.Element) -> List[Article]:
    channel = root if _matches(root, 'channel') else find_element(root, 'channel')
    if channel is None:
        raise InvalidFeedFormat("Invalid RSS format: no channel element found")

    feed_title = element_text(channel, 'title') or UNTITLED_FEED
    items = [el for el in root.iter() if _matches(el, 'item')]
    return [_build_article(item, feed_title, RSS_FIELDS) for item in items]


def _parse_atom(feed: ET.Element) -> List[Article]:
    feed_title = element_text(feed, 'title') or UNTITLED_FEED
    entries = [el for el in feed.iter() if _matches(el, 'entry')]
    return [_build_article(entry, feed_title, ATOM_FIELDS) for entry in entries]


def parse_feed(raw_markup: str) -> List[Article]:
    """
    Parse an RSS 2.0 or Atom document into articles.

    Args:
        raw_markup: Feed document as text

    Returns:
        Articles in document order

    Raises:
        MalformedXml: The markup is not well-formed XML
        InvalidFeedFormat: The document has neither an RSS channel nor an Atom feed root
    """
    try:
        root = ET.fromstring(raw_markup.strip())
    except ET.ParseError as e:
        raise MalformedXml(f"Invalid RSS/XML format: {e}") from e

    if _matches(root, 'feed'):
        articles = _parse_atom(root)
        logger.debug(f"Parsed Atom feed with {len(articles)} entries")
    else:
        articles = _parse_rss(root)
        logger.debug(f"Parsed RSS feed with {len(articles)} items")
    return articles


parse_rss = parse_feed
