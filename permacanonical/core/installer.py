"""Post-install relocation of extracted release archives.

GitHub archives extract into ``<owner>-<repo>-<sha>/`` rather than the
plugin's folder name, so the freshly installed tree has to be moved to the
path the host expects before the host looks for the plugin again.

Replacement pattern: rename old dir to .bak -> move new in -> drop .bak.
On failure the old tree is restored and the staged tree is left where the
upgrader put it, so the host always finds a complete plugin.
"""

import logging
import os
import shutil
from typing import Protocol

logger = logging.getLogger(__name__)


class RelocationError(RuntimeError):
    """The staged package could not be moved into the install directory."""


class PluginHost(Protocol):
    """Host-side plugin state the updater needs after an install."""

    plugins_dir: str

    def is_plugin_active(self, basename: str) -> bool: ...

    def activate_plugin(self, basename: str) -> None: ...


def install_directory(plugins_dir: str, slug: str) -> str:
    """Canonical install path for ``slug``, with a trailing separator."""
    return os.path.join(plugins_dir, slug, '')


def relocate(source: str, destination: str) -> str:
    """Move ``source`` to ``destination``, replacing any existing tree.

    Returns the normalized destination. Raises RelocationError if the move
    fails; in that case the previous destination contents are restored.
    """
    source = os.path.normpath(source)
    destination = os.path.normpath(destination)
    if source == destination:
        return destination

    backup = destination + '.bak'
    had_previous = os.path.exists(destination)

    try:
        if os.path.exists(backup):
            shutil.rmtree(backup)
        if had_previous:
            os.rename(destination, backup)
    except OSError as e:
        logger.error("Cannot set aside %s: %s", destination, e)
        raise RelocationError(f"Cannot replace {destination}: {e}") from e

    try:
        shutil.move(source, destination)
    except OSError as e:
        logger.error("Failed to move %s -> %s: %s", source, destination, e)
        _rollback(destination, backup, had_previous)
        raise RelocationError(
            f"Failed to move {source} to {destination}: {e}"
        ) from e

    if had_previous:
        shutil.rmtree(backup, ignore_errors=True)

    logger.info("Relocated package %s -> %s", source, destination)
    return destination


def _rollback(destination: str, backup: str, had_previous: bool):
    if os.path.exists(destination):
        shutil.rmtree(destination, ignore_errors=True)
    if had_previous:
        try:
            os.rename(backup, destination)
        except OSError as e:
            # Old tree still sits at the .bak path
            logger.error("Could not restore %s from %s: %s",
                         destination, backup, e)
