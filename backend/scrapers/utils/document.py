"""
Queryable page document.

Wraps a parsed BeautifulSoup tree and exposes the small set of
selection/extraction helpers the category scrapers need. Missing
elements and empty text always come back as None (or an empty list),
never as an exception.
"""

from typing import Dict, List, Optional
from bs4 import BeautifulSoup, Tag

from .normalizers import extract_text


class PageDocument:
    """
    A fetched HTML page that can be queried with CSS selectors.

    Every method takes an optional ``scope`` element; when given, the
    selector is evaluated against that element's descendants only.
    """

    def __init__(self, html: str, parser: str = 'html.parser'):
        self.html = html
        self.soup = BeautifulSoup(html, parser)

    def _root(self, scope: Optional[Tag]):
        return self.soup if scope is None else scope

    def select(self, selector: str, scope: Optional[Tag] = None) -> List[Tag]:
        """All elements matching ``selector`` in document order."""
        return self._root(scope).select(selector)

    def first(self, selector: str, scope: Optional[Tag] = None) -> Optional[Tag]:
        """First element matching ``selector`` or None."""
        return self._root(scope).select_one(selector)

    def first_text(self, selector: str, scope: Optional[Tag] = None) -> Optional[str]:
        """Whitespace-collapsed text of the first match, or None if absent/empty."""
        element = self.first(selector, scope)
        if element is None:
            return None
        return extract_text(element.get_text())

    def raw_first_text(self, selector: str, scope: Optional[Tag] = None) -> Optional[str]:
        """Unmodified text of the first match, for callers that clean it themselves."""
        element = self.first(selector, scope)
        if element is None:
            return None
        return element.get_text() or None

    def attr(self, selector: str, name: str, scope: Optional[Tag] = None) -> Optional[str]:
        """Attribute ``name`` of the first match, or None."""
        element = self.first(selector, scope)
        if element is None:
            return None
        value = element.get(name)
        if isinstance(value, list):
            value = ' '.join(value)
        return value or None

    def list_texts(self, selector: str, scope: Optional[Tag] = None) -> List[str]:
        """Collapsed text of every match, skipping elements with no text."""
        texts = []
        for element in self.select(selector, scope):
            text = extract_text(element.get_text())
            if text:
                texts.append(text)
        return texts

    def text(self, scope: Optional[Tag] = None) -> str:
        """Full concatenated text of the scope (or the whole page)."""
        return self._root(scope).get_text()

    def links(self, scope: Optional[Tag] = None) -> List[Dict[str, Optional[str]]]:
        """``{"name", "url"}`` for every ``<a href>`` in scope, href kept as written."""
        links = []
        for anchor in self.select('a', scope):
            href = anchor.get('href')
            if not href:
                continue
            links.append({'name': extract_text(anchor.get_text()), 'url': href})
        return links

    def title(self) -> Optional[str]:
        """Collapsed ``<title>`` text."""
        return self.first_text('title')

    def meta_description(self) -> Optional[str]:
        """Collapsed ``meta[name=description]`` content."""
        return extract_text(self.attr('meta[name="description"]', 'content'))
