"""Host adapter: the plugin's call sites, in the order the host runs them.

Instead of registering callbacks by hook name and priority, the host calls
these methods directly. Ordering that used to be expressed as priorities
is the order of statements here.
"""

import logging
from typing import Callable, Iterable

from permacanonical.canonical.filters import is_suppressed, strip_canonical_tags
from permacanonical.canonical.models import PageContext
from permacanonical.canonical.resolver import CanonicalResolver
from permacanonical.core.cache import ReleaseCache
from permacanonical.core.models import PluginInfoArgs, UpdateManifest
from permacanonical.core.update_client import UpdateClient

logger = logging.getLogger(__name__)

HeadContributor = Callable[[], str]


class StaticPluginHost:
    """In-memory plugin activation state rooted at a plugins directory."""

    def __init__(self, plugins_dir: str, active: Iterable[str] = ()):
        self.plugins_dir = plugins_dir
        self.active = set(active)

    def is_plugin_active(self, basename: str) -> bool:
        return basename in self.active

    def activate_plugin(self, basename: str) -> None:
        self.active.add(basename)


class HostAdapter:
    """Wires the canonical resolver and update client into host events."""

    def __init__(self, resolver: CanonicalResolver, updater: UpdateClient,
                 cache: ReleaseCache):
        self.resolver = resolver
        self.updater = updater
        self.cache = cache

    # ── Page render ──────────────────────────────────────────────────

    def render_head(self, page: PageContext,
                    contributors: Iterable[HeadContributor] = ()) -> str:
        """Head markup with exactly one canonical tag, ours.

        Every other contributor runs first; their canonical tags are removed
        before the resolver's tag is appended.
        """
        head = ''.join(contribute() for contribute in contributors)
        head = strip_canonical_tags(head)
        return head + self.resolver.canonical_tag(page)

    def apply_filter(self, name: str, value):
        """Answer a third-party SEO filter; canonical filters yield False."""
        if is_suppressed(name):
            return False
        return value

    # ── Updates ──────────────────────────────────────────────────────

    def on_update_check(self, manifest: UpdateManifest) -> UpdateManifest:
        return self.updater.check_update(manifest)

    def on_plugins_api(self, result, action: str, args: PluginInfoArgs):
        return self.updater.plugin_info(result, action, args)

    def on_post_install(self, response, hook_extra: dict, result: dict) -> dict:
        return self.updater.after_install(response, hook_extra, result)

    def on_upgrade_complete(self, upgrader, options: dict):
        self.updater.purge_cache(upgrader, options)

    def clear_cache(self):
        self.cache.clear()
        logger.info("Release cache cleared")
