"""Update system data models.

Shapes mirror what the host exchanges with update providers: the GitHub
release payload, the cached copy of it, and the manifest/details records
handed back to the host.
"""

from dataclasses import dataclass, field

STRING_FIELDS = ('tag_name', 'body', 'zipball_url', 'html_url', 'name', 'published_at')


@dataclass(frozen=True)
class ReleaseInfo:
    """Latest release as reported by the GitHub Releases API."""

    tag_name: str | None
    body: str = ""                  # Markdown release notes
    zipball_url: str | None = None
    html_url: str = ""
    name: str = ""
    published_at: str = ""

    @classmethod
    def from_api(cls, data: dict) -> 'ReleaseInfo':
        """Build from a decoded ``releases/latest`` body, ignoring unknown keys.

        Raises ValueError when a known field is present but not a string.
        """
        for key in STRING_FIELDS:
            value = data.get(key)
            if value is not None and not isinstance(value, str):
                raise ValueError(
                    f"Release field {key!r} must be a string, got {type(value).__name__}"
                )
        return cls(
            tag_name=data.get('tag_name'),
            body=data.get('body') or '',
            zipball_url=data.get('zipball_url'),
            html_url=data.get('html_url') or '',
            name=data.get('name') or '',
            published_at=data.get('published_at') or '',
        )

    def to_dict(self) -> dict:
        return {
            'tag_name': self.tag_name,
            'body': self.body,
            'zipball_url': self.zipball_url,
            'html_url': self.html_url,
            'name': self.name,
            'published_at': self.published_at,
        }

    @property
    def version(self) -> str:
        """Tag with a leading ``v``/``V`` removed, e.g. ``v2.0.0`` -> ``2.0.0``."""
        return (self.tag_name or '').lstrip('vV')


@dataclass(frozen=True)
class CachedEntry:
    """A cached release, valid until ``expires_at`` (epoch seconds)."""

    key: str
    value: ReleaseInfo
    expires_at: float

    def is_expired(self, now: float) -> bool:
        return now >= self.expires_at


@dataclass
class UpdateRecord:
    """Per-plugin entry the host stores in its update manifest."""

    slug: str
    plugin: str
    new_version: str
    url: str
    package: str
    tested: str
    requires_php: str
    compatibility: dict = field(default_factory=dict)


@dataclass
class UpdateManifest:
    """Host-maintained record of installed versions and available updates.

    ``checked`` maps plugin basename -> installed version and is only
    populated while the host is running an update check.
    """

    checked: dict[str, str] = field(default_factory=dict)
    response: dict[str, UpdateRecord] = field(default_factory=dict)


@dataclass
class PluginInfoArgs:
    """Arguments of a host plugin-information query."""

    slug: str = ""


@dataclass
class PluginInformation:
    """Payload for the host's "View details" dialog."""

    name: str
    slug: str
    version: str
    author: str
    homepage: str
    requires: str
    tested: str
    requires_php: str
    download_link: str
    sections: dict[str, str] = field(default_factory=dict)
    banners: dict[str, str] = field(default_factory=dict)
