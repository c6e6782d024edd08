"""Auto-update client: GitHub Releases checker wired into the host's updater.

Architecture:
  UpdateClient: pure Python logic, blocking methods, called by the host
                adapter at its update-check, plugin-details, post-install
                and upgrade-complete call sites
  ReleaseCache: injected expiring store for the latest release payload

Nothing here is fatal to the host: network and decode failures behave as
"no update available" and are retried on the next check since they are
never cached.
"""

import hashlib
import json
import logging
import os
from urllib.request import Request, urlopen
from urllib.error import URLError

from packaging.version import Version, InvalidVersion

from permacanonical.branding import PluginBranding
from permacanonical.core.cache import HOUR_IN_SECONDS, ReleaseCache
from permacanonical.core.changelog import render_changelog
from permacanonical.core.installer import PluginHost, install_directory, relocate
from permacanonical.core.models import (
    PluginInfoArgs,
    PluginInformation,
    ReleaseInfo,
    UpdateManifest,
    UpdateRecord,
)

logger = logging.getLogger(__name__)

API_URL = "https://api.github.com/repos/{owner}/{repo}/releases/latest"
ARCHIVE_URL = "https://github.com/{owner}/{repo}/archive/refs/tags/{tag}.zip"
HOMEPAGE_URL = "https://github.com/{owner}/{repo}"

DEFAULT_TIMEOUT = 10
DEFAULT_CACHE_TTL = 12 * HOUR_IN_SECONDS


class UpdateClient:
    """Checks GitHub Releases and answers the host's update queries."""

    def __init__(self, plugin_basename: str, github_owner: str,
                 github_repo: str, version: str, cache: ReleaseCache,
                 host: PluginHost, timeout: float = DEFAULT_TIMEOUT,
                 cache_enabled: bool = True,
                 cache_ttl: float = DEFAULT_CACHE_TTL):
        self.plugin_basename = plugin_basename
        self.plugin_slug = os.path.dirname(plugin_basename)
        self.github_owner = github_owner
        self.github_repo = github_repo
        self.version = version
        self.cache = cache
        self.host = host
        self.timeout = timeout
        self.cache_enabled = cache_enabled
        self.cache_ttl = cache_ttl
        self.cache_key = (
            'permacanonical_updater_'
            + hashlib.md5(plugin_basename.encode('utf-8')).hexdigest()
        )

    @property
    def homepage(self) -> str:
        return HOMEPAGE_URL.format(owner=self.github_owner, repo=self.github_repo)

    # ── Fetch ────────────────────────────────────────────────────────

    def get_repository_info(self) -> ReleaseInfo | None:
        """Latest release, from cache when fresh, else from the API.

        Only successful fetches are cached.
        """
        if not self.cache_enabled:
            return self.fetch_repository_info()

        cached = self.cache.get(self.cache_key)
        if cached is not None:
            return cached

        remote_info = self.fetch_repository_info()
        if remote_info is not None:
            self.cache.set(self.cache_key, remote_info, self.cache_ttl)
        return remote_info

    def fetch_repository_info(self) -> ReleaseInfo | None:
        """Single GET of ``releases/latest``. Returns None on any failure."""
        url = API_URL.format(owner=self.github_owner, repo=self.github_repo)
        req = Request(url, headers={
            'User-Agent': PluginBranding.user_agent(),
            'Accept': 'application/vnd.github.v3+json',
        })

        try:
            with urlopen(req, timeout=self.timeout) as resp:
                raw = resp.read()
        except (URLError, OSError) as e:
            logger.warning("Failed to fetch latest release: %s", e)
            return None

        if not raw:
            logger.warning("Empty response from %s", url)
            return None

        try:
            data = json.loads(raw.decode('utf-8'))
        except (UnicodeDecodeError, json.JSONDecodeError) as e:
            logger.warning("Undecodable release payload: %s", e)
            return None

        if not isinstance(data, dict) or not data:
            logger.warning("Unexpected release payload from %s", url)
            return None

        try:
            return ReleaseInfo.from_api(data)
        except ValueError as e:
            logger.warning("Malformed release payload from %s: %s", url, e)
            return None

    # ── Check ────────────────────────────────────────────────────────

    def is_newer(self, remote_version: str) -> bool:
        """True only if the installed version is strictly older than remote."""
        try:
            return Version(self.version) < Version(remote_version)
        except InvalidVersion:
            logger.error("Cannot compare versions %r and %r",
                         self.version, remote_version)
            return False

    def check_update(self, manifest: UpdateManifest) -> UpdateManifest:
        """Attach an UpdateRecord to ``manifest`` if a newer release exists."""
        if not manifest.checked:
            return manifest

        remote_info = self.get_repository_info()
        if remote_info is None or not remote_info.tag_name:
            return manifest

        remote_version = remote_info.version
        if not self.is_newer(remote_version):
            logger.debug("Up to date: %s >= %s", self.version, remote_version)
            return manifest

        manifest.response[self.plugin_basename] = UpdateRecord(
            slug=self.plugin_slug,
            plugin=self.plugin_basename,
            new_version=remote_version,
            url=self.homepage,
            package=self.get_download_url(remote_info),
            tested=PluginBranding.TESTED,
            requires_php=PluginBranding.REQUIRES_PHP,
            compatibility={},
        )
        logger.info("Update available: %s -> %s", self.version, remote_version)
        return manifest

    def get_download_url(self, info: ReleaseInfo) -> str:
        if info.zipball_url:
            return info.zipball_url
        return ARCHIVE_URL.format(
            owner=self.github_owner, repo=self.github_repo, tag=info.tag_name,
        )

    # ── Details ──────────────────────────────────────────────────────

    def plugin_info(self, result, action: str, args: PluginInfoArgs):
        """Answer the host's "View details" query for this plugin only."""
        if action != 'plugin_information':
            return result
        if not args.slug or args.slug != self.plugin_slug:
            return result

        remote_info = self.get_repository_info()
        if remote_info is None:
            return result

        return PluginInformation(
            name=PluginBranding.PLUGIN_NAME,
            slug=self.plugin_slug,
            version=remote_info.version,
            author=PluginBranding.author_markup(),
            homepage=self.homepage,
            requires=PluginBranding.REQUIRES,
            tested=PluginBranding.TESTED,
            requires_php=PluginBranding.REQUIRES_PHP,
            download_link=self.get_download_url(remote_info),
            sections={
                'description': PluginBranding.DESCRIPTION,
                'changelog': render_changelog(remote_info.body),
            },
            banners={},
        )

    # ── Install ──────────────────────────────────────────────────────

    def after_install(self, response, hook_extra: dict, result: dict) -> dict:
        """Move the extracted archive into the plugin's own folder.

        Raises RelocationError if the move fails; the previous install is
        restored first.
        """
        if hook_extra.get('plugin') != self.plugin_basename:
            return result

        was_active = self.host.is_plugin_active(self.plugin_basename)
        destination = install_directory(self.host.plugins_dir, self.plugin_slug)

        relocate(result['destination'], destination)
        result['destination'] = destination

        if was_active:
            self.host.activate_plugin(self.plugin_basename)
            logger.info("Reactivated %s", self.plugin_basename)
        return result

    def purge_cache(self, upgrader, options: dict):
        """Drop the cached release after a plugin update completes."""
        if options.get('action') == 'update' and options.get('type') == 'plugin':
            if self.cache.delete(self.cache_key):
                logger.info("Purged release cache for %s", self.plugin_basename)
