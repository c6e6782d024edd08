"""Release notes -> changelog HTML for the plugin details dialog."""

import re

from bs4 import BeautifulSoup, Comment

NO_CHANGELOG = "No changelog available."

# Tag -> permitted attributes, roughly the host's post-content allow-list
ALLOWED_TAGS = {
    'a': {'href', 'title'},
    'p': set(),
    'br': set(),
    'em': set(),
    'strong': set(),
    'b': set(),
    'i': set(),
    'code': set(),
    'pre': set(),
    'ul': set(),
    'ol': set(),
    'li': set(),
    'blockquote': set(),
    'h1': set(), 'h2': set(), 'h3': set(),
    'h4': set(), 'h5': set(), 'h6': set(),
    'hr': set(),
    'del': set(),
    'img': {'src', 'alt'},
}

# Removed together with everything inside them
STRIPPED_WITH_CONTENT = ['script', 'style', 'iframe', 'object', 'embed']

URL_ATTRIBUTES = ('href', 'src')
SAFE_URL_SCHEMES = ('http', 'https', 'mailto')

_BLOCK_START = re.compile(
    r'^<(?:p|ul|ol|li|pre|blockquote|h[1-6]|hr|table|div)\b', re.IGNORECASE
)
_PARAGRAPH_BREAK = re.compile(r'\n\s*\n')


def _is_safe_url(url: str) -> bool:
    url = url.strip()
    match = re.match(r'^([a-zA-Z][a-zA-Z0-9+.-]*):', url)
    if match is None:
        return True     # relative
    return match.group(1).lower() in SAFE_URL_SCHEMES


def sanitize(markup: str) -> str:
    """Strip everything outside ALLOWED_TAGS; text of unwrapped tags is kept."""
    soup = BeautifulSoup(markup, 'html.parser')

    for tag in soup.find_all(STRIPPED_WITH_CONTENT):
        tag.decompose()
    for comment in soup.find_all(string=lambda s: isinstance(s, Comment)):
        comment.extract()

    for tag in soup.find_all(True):
        allowed = ALLOWED_TAGS.get(tag.name)
        if allowed is None:
            tag.unwrap()
            continue
        for attr in list(tag.attrs):
            if attr not in allowed:
                del tag[attr]
            elif attr in URL_ATTRIBUTES and not _is_safe_url(tag[attr]):
                del tag[attr]

    return str(soup)


def autop(text: str) -> str:
    """Wrap blank-line separated blocks in <p>, single newlines become <br />."""
    text = text.replace('\r\n', '\n').replace('\r', '\n').strip()
    if not text:
        return ''

    paragraphs = []
    for block in _PARAGRAPH_BREAK.split(text):
        block = block.strip()
        if not block:
            continue
        if _BLOCK_START.match(block):
            paragraphs.append(block)
        else:
            paragraphs.append('<p>' + block.replace('\n', '<br />\n') + '</p>')
    return '\n'.join(paragraphs) + '\n'


def render_changelog(body: str | None) -> str:
    if not body or not body.strip():
        return NO_CHANGELOG
    return autop(sanitize(body))
