"""Suppression of canonical output produced by anything other than us."""

import re

# Third-party SEO plugin filters whose canonical value is forced to False
SUPPRESSED_SEO_FILTERS = frozenset({
    'wpseo_canonical',                  # Yoast SEO
    'rank_math/frontend/canonical',     # Rank Math
    'aioseop_canonical_url',            # All in One SEO
    'seopress_titles_canonical',        # SEOPress
})

_CANONICAL_LINK = re.compile(
    r'<link\b[^>]*\brel\s*=\s*(["\']?)canonical\1(?=[\s/>])[^>]*>\n?',
    re.IGNORECASE,
)


def strip_canonical_tags(html: str) -> str:
    """Remove every <link rel="canonical"> tag from ``html``."""
    return _CANONICAL_LINK.sub('', html)


def is_suppressed(filter_name: str) -> bool:
    return filter_name in SUPPRESSED_SEO_FILTERS
