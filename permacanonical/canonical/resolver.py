"""Canonical URL resolution: the request's permalink, nothing else.

Maps each page classification to the host's own link function, then
normalizes: ``/page/N/`` for paginated archives, query strings dropped
everywhere but search results.
"""

import html
import logging
from typing import Protocol
from urllib.parse import urlsplit, urlunsplit

from permacanonical.canonical.models import PageContext, PageType

logger = logging.getLogger(__name__)


class LinkProvider(Protocol):
    """Host permalink functions consumed by the resolver."""

    def permalink(self, post_id: int) -> str | None: ...

    def home_url(self, path: str = '/') -> str: ...

    def page_for_posts(self) -> int: ...

    def category_link(self, term_id: int) -> str | None: ...

    def tag_link(self, term_id: int) -> str | None: ...

    def term_link(self, term_id: int, taxonomy: str) -> str | None: ...

    def author_posts_url(self, author_id: int) -> str | None: ...

    def day_link(self, year: int, month: int, day: int) -> str | None: ...

    def month_link(self, year: int, month: int) -> str | None: ...

    def year_link(self, year: int) -> str | None: ...

    def post_type_archive_link(self, post_type: str) -> str | None: ...

    def search_link(self, query: str) -> str | None: ...


def paginate(url: str, page_number: int) -> str:
    """Append ``/page/N/`` to the path of ``url``, keeping any query."""
    parts = urlsplit(url)
    path = parts.path.rstrip('/') + f'/page/{page_number}/'
    return urlunsplit((parts.scheme, parts.netloc, path, parts.query, parts.fragment))


def strip_query(url: str) -> str:
    return url.split('?', 1)[0]


def is_absolute_url(url: str) -> bool:
    if not url or any(c.isspace() for c in url):
        return False
    try:
        parts = urlsplit(url)
    except ValueError:
        return False
    return parts.scheme in ('http', 'https') and bool(parts.netloc)


def render_tag(url: str) -> str:
    return f'<link rel="canonical" href="{html.escape(url, quote=True)}" />\n'


class CanonicalResolver:
    """Computes the single canonical URL for a request."""

    def __init__(self, links: LinkProvider):
        self.links = links
        self._dispatch = {
            PageType.SINGULAR: self._singular,
            PageType.FRONT_PAGE: lambda page: self.links.home_url('/'),
            PageType.HOME: self._blog_index,
            PageType.CATEGORY: lambda page: self.links.category_link(page.queried_object_id),
            PageType.TAG: lambda page: self.links.tag_link(page.queried_object_id),
            PageType.TAXONOMY: lambda page: self.links.term_link(
                page.queried_object_id, page.taxonomy),
            PageType.AUTHOR: lambda page: self.links.author_posts_url(page.queried_object_id),
            PageType.DAY: lambda page: self.links.day_link(page.year, page.monthnum, page.day),
            PageType.MONTH: lambda page: self.links.month_link(page.year, page.monthnum),
            PageType.YEAR: lambda page: self.links.year_link(page.year),
            PageType.POST_TYPE_ARCHIVE: lambda page: self.links.post_type_archive_link(
                page.post_type),
            PageType.SEARCH: lambda page: self.links.search_link(page.search_query),
        }

    def _singular(self, page: PageContext) -> str | None:
        return self.links.permalink(page.queried_object_id)

    def _blog_index(self, page: PageContext) -> str | None:
        posts_page = self.links.page_for_posts()
        if not posts_page:
            return self.links.home_url('/')
        return self.links.permalink(posts_page)

    def resolve(self, page: PageContext) -> str | None:
        """Canonical URL for ``page``, or None if nothing valid applies."""
        handler = self._dispatch.get(page.page_type)
        if handler is None:
            return None

        url = handler(page)
        if not url:
            return None

        if page.is_paged and page.page_number > 1:
            url = paginate(url, page.page_number)

        if page.page_type is not PageType.SEARCH:
            url = strip_query(url)

        if not is_absolute_url(url):
            logger.debug("Discarding invalid canonical URL %r", url)
            return None
        return url

    def canonical_tag(self, page: PageContext) -> str:
        """``<link rel="canonical">`` markup, or '' when there is no URL."""
        url = self.resolve(page)
        return render_tag(url) if url else ''
