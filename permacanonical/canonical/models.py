"""Request classification handed to the canonical resolver."""

from dataclasses import dataclass
from enum import Enum


class PageType(Enum):
    SINGULAR = "singular"
    FRONT_PAGE = "front_page"
    HOME = "home"                       # blog posts index
    CATEGORY = "category"
    TAG = "tag"
    TAXONOMY = "taxonomy"
    AUTHOR = "author"
    DAY = "day"
    MONTH = "month"
    YEAR = "year"
    POST_TYPE_ARCHIVE = "post_type_archive"
    SEARCH = "search"
    OTHER = "other"                     # 404, feeds, etc. have no canonical


@dataclass
class PageContext:
    """What the host knows about the current request."""
    page_type: PageType
    queried_object_id: int = 0          # post / term / author id
    taxonomy: str = ""                  # for PageType.TAXONOMY
    post_type: str = ""                 # for PageType.POST_TYPE_ARCHIVE
    search_query: str = ""              # for PageType.SEARCH

    # Date archive query vars
    year: int = 0
    monthnum: int = 0
    day: int = 0

    # Pagination query vars
    is_paged: bool = False
    paged: int = 0                      # archive page number
    page: int = 0                       # fallback when paged is unset

    @property
    def page_number(self) -> int:
        return self.paged or self.page or 1
