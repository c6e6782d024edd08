"""Pretty-permalink link provider for a site with no live host.

Used by the command line to preview canonical URLs. Follows the host's
default pretty structures: numeric post links, ``/category/``, ``/tag/``,
``/author/`` bases and ``/YYYY/MM/DD/`` date archives.
"""

from urllib.parse import quote, quote_plus


class StaticLinkProvider:
    """Builds links from a site URL and a few lookup tables."""

    def __init__(self, site_url: str, posts_page: int = 0,
                 term_slugs: dict[int, str] | None = None,
                 author_slugs: dict[int, str] | None = None):
        self.site_url = site_url.rstrip('/')
        self.posts_page = posts_page
        self.term_slugs = term_slugs or {}
        self.author_slugs = author_slugs or {}

    def _url(self, path: str) -> str:
        return f"{self.site_url}/{path.lstrip('/')}"

    def _slug(self, table: dict[int, str], object_id: int) -> str:
        return quote(table.get(object_id, str(object_id)))

    def permalink(self, post_id: int) -> str | None:
        if not post_id:
            return None
        return self._url(f"archives/{post_id}/")

    def home_url(self, path: str = '/') -> str:
        return self._url(path)

    def page_for_posts(self) -> int:
        return self.posts_page

    def category_link(self, term_id: int) -> str | None:
        return self._url(f"category/{self._slug(self.term_slugs, term_id)}/")

    def tag_link(self, term_id: int) -> str | None:
        return self._url(f"tag/{self._slug(self.term_slugs, term_id)}/")

    def term_link(self, term_id: int, taxonomy: str) -> str | None:
        if not taxonomy:
            return None
        return self._url(f"{quote(taxonomy)}/{self._slug(self.term_slugs, term_id)}/")

    def author_posts_url(self, author_id: int) -> str | None:
        return self._url(f"author/{self._slug(self.author_slugs, author_id)}/")

    def day_link(self, year: int, month: int, day: int) -> str | None:
        return self._url(f"{year:04d}/{month:02d}/{day:02d}/")

    def month_link(self, year: int, month: int) -> str | None:
        return self._url(f"{year:04d}/{month:02d}/")

    def year_link(self, year: int) -> str | None:
        return self._url(f"{year:04d}/")

    def post_type_archive_link(self, post_type: str) -> str | None:
        if not post_type:
            return None
        return self._url(f"{quote(post_type)}/")

    def search_link(self, query: str) -> str | None:
        return self._url(f"?s={quote_plus(query)}")
