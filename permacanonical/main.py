"""PermaCanonical: command-line entry point."""

import argparse
import logging
import os
import sys

from permacanonical.branding import PluginBranding
from permacanonical.canonical.links import StaticLinkProvider
from permacanonical.canonical.models import PageContext, PageType
from permacanonical.canonical.resolver import CanonicalResolver
from permacanonical.config.settings import PluginSettings
from permacanonical.core.cache import ReleaseCache
from permacanonical.core.models import PluginInfoArgs, UpdateManifest
from permacanonical.core.update_client import UpdateClient
from permacanonical.host import HostAdapter, StaticPluginHost


def setup_logging(data_dir: str, verbose: bool = False):
    """Configure logging to file and console."""
    log_dir = os.path.join(data_dir, 'logs')
    os.makedirs(log_dir, exist_ok=True)
    log_file = os.path.join(log_dir, 'permacanonical.log')

    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        format='%(asctime)s [%(levelname)s] %(name)s: %(message)s',
        handlers=[
            logging.FileHandler(log_file, encoding='utf-8'),
            logging.StreamHandler(),
        ],
    )


def build_adapter(settings: PluginSettings,
                  site_url: str = "https://example.com") -> HostAdapter:
    cache = ReleaseCache(settings.cache_path)
    updater = UpdateClient(
        plugin_basename=settings.plugin_basename,
        github_owner=settings.github_owner,
        github_repo=settings.github_repo,
        version=PluginBranding.VERSION,
        cache=cache,
        host=StaticPluginHost(settings.plugins_dir),
        timeout=settings.request_timeout,
        cache_enabled=settings.cache_enabled,
        cache_ttl=settings.cache_ttl_seconds,
    )
    resolver = CanonicalResolver(StaticLinkProvider(site_url))
    return HostAdapter(resolver, updater, cache)


def _cmd_check(adapter: HostAdapter) -> int:
    updater = adapter.updater
    manifest = UpdateManifest(checked={updater.plugin_basename: updater.version})
    manifest = adapter.on_update_check(manifest)
    record = manifest.response.get(updater.plugin_basename)
    if record is None:
        print(f"{PluginBranding.PLUGIN_NAME} {updater.version} is up to date.")
        return 0
    print(f"Update available: {updater.version} -> {record.new_version}")
    print(f"Package: {record.package}")
    return 0


def _cmd_info(adapter: HostAdapter) -> int:
    updater = adapter.updater
    info = adapter.on_plugins_api(
        None, 'plugin_information', PluginInfoArgs(slug=updater.plugin_slug))
    if info is None:
        print("Release information unavailable.", file=sys.stderr)
        return 1
    print(f"{info.name} {info.version}")
    print(f"Homepage: {info.homepage}")
    print(f"Download: {info.download_link}")
    print(f"Requires: {info.requires}  Tested: {info.tested}  "
          f"PHP: {info.requires_php}")
    print()
    print(info.sections['changelog'])
    return 0


def _cmd_canonical(adapter: HostAdapter, args) -> int:
    page = PageContext(
        page_type=PageType(args.page_type),
        queried_object_id=args.object_id,
        taxonomy=args.taxonomy,
        post_type=args.post_type,
        search_query=args.query,
        year=args.year,
        monthnum=args.month,
        day=args.day,
        is_paged=args.paged > 1,
        paged=args.paged,
    )
    tag = adapter.render_head(page)
    if not tag:
        print("No canonical URL for this request.", file=sys.stderr)
        return 1
    print(tag, end='')
    return 0


def parse_args(argv=None):
    parser = argparse.ArgumentParser(
        prog='permacanonical',
        description=PluginBranding.DESCRIPTION,
    )
    parser.add_argument('--settings', help="path to settings.json")
    parser.add_argument('-v', '--verbose', action='store_true')
    sub = parser.add_subparsers(dest='command', required=True)

    sub.add_parser('check', help="check GitHub for a newer release")
    sub.add_parser('info', help="show release details and changelog")
    sub.add_parser('clear-cache', help="forget the cached release")

    canonical = sub.add_parser('canonical', help="preview a canonical tag")
    canonical.add_argument('page_type', choices=[t.value for t in PageType])
    canonical.add_argument('--site-url', default="https://example.com")
    canonical.add_argument('--object-id', type=int, default=0)
    canonical.add_argument('--taxonomy', default="")
    canonical.add_argument('--post-type', default="")
    canonical.add_argument('--query', default="")
    canonical.add_argument('--year', type=int, default=0)
    canonical.add_argument('--month', type=int, default=0)
    canonical.add_argument('--day', type=int, default=0)
    canonical.add_argument('--paged', type=int, default=0)

    return parser.parse_args(argv)


def main(argv=None):
    args = parse_args(argv)

    settings_path = args.settings or PluginSettings.default_path()
    settings = PluginSettings.load(settings_path)
    settings.ensure_dirs()
    if not os.path.isfile(settings_path):
        # First run: leave an editable copy of the defaults
        settings.save(settings_path)

    setup_logging(settings.data_dir, args.verbose)
    logger = logging.getLogger(__name__)
    logger.debug("%s %s starting", PluginBranding.PLUGIN_NAME, PluginBranding.VERSION)

    site_url = getattr(args, 'site_url', "https://example.com")
    adapter = build_adapter(settings, site_url)

    if args.command == 'check':
        code = _cmd_check(adapter)
    elif args.command == 'info':
        code = _cmd_info(adapter)
    elif args.command == 'clear-cache':
        adapter.clear_cache()
        code = 0
    else:
        code = _cmd_canonical(adapter, args)

    sys.exit(code)


if __name__ == '__main__':
    main()
