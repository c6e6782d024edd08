"""Tests for post-install relocation of extracted release archives."""

import os
import shutil
from pathlib import Path

import pytest

from permacanonical.core.installer import RelocationError, relocate

BASENAME = "permacanonical/permacanonical.php"


def _staged_package(plugins_dir: Path, version: str) -> Path:
    """Mimic a GitHub zipball extracted into <owner>-<repo>-<sha>/."""
    staged = plugins_dir / "acme-widget-3f9c2e1"
    staged.mkdir()
    (staged / "permacanonical.php").write_text(f"Version: {version}\n")
    (staged / "updater.php").write_text("updater\n")
    return staged


def test_moves_package_into_plugin_folder(client, plugin_host) -> None:
    plugins_dir = Path(plugin_host.plugins_dir)
    staged = _staged_package(plugins_dir, "1.0.5")

    result = client.after_install(True, {"plugin": BASENAME},
                                  {"destination": str(staged)})

    install_dir = plugins_dir / "permacanonical"
    assert result["destination"] == os.path.join(str(install_dir), "")
    assert (install_dir / "permacanonical.php").read_text() == "Version: 1.0.5\n"
    assert not staged.exists()


def test_replaces_previous_install(client, plugin_host) -> None:
    plugins_dir = Path(plugin_host.plugins_dir)
    old = plugins_dir / "permacanonical"
    old.mkdir()
    (old / "permacanonical.php").write_text("Version: 1.0.1\n")
    (old / "removed-in-new.php").write_text("old\n")
    staged = _staged_package(plugins_dir, "1.0.5")

    client.after_install(True, {"plugin": BASENAME}, {"destination": str(staged)})

    assert (old / "permacanonical.php").read_text() == "Version: 1.0.5\n"
    assert not (old / "removed-in-new.php").exists()
    assert not (plugins_dir / "permacanonical.bak").exists()


def test_reactivates_previously_active_plugin(client, plugin_host) -> None:
    plugin_host.active.add(BASENAME)
    calls = []
    plugin_host.activate_plugin = calls.append
    staged = _staged_package(Path(plugin_host.plugins_dir), "1.0.5")

    client.after_install(True, {"plugin": BASENAME}, {"destination": str(staged)})

    assert calls == [BASENAME]


def test_inactive_plugin_stays_inactive(client, plugin_host) -> None:
    staged = _staged_package(Path(plugin_host.plugins_dir), "1.0.5")

    client.after_install(True, {"plugin": BASENAME}, {"destination": str(staged)})

    assert not plugin_host.is_plugin_active(BASENAME)


def test_other_plugin_is_untouched(client, plugin_host) -> None:
    staged = _staged_package(Path(plugin_host.plugins_dir), "1.0.5")
    result = {"destination": str(staged)}

    returned = client.after_install(True, {"plugin": "other/other.php"}, result)

    assert returned is result
    assert returned["destination"] == str(staged)
    assert staged.exists()


def test_theme_install_without_plugin_key_is_untouched(client) -> None:
    result = {"destination": "/tmp/theme"}
    assert client.after_install(True, {"theme": "twentytwenty"}, result) is result


def test_failed_move_restores_previous_install(client, plugin_host, monkeypatch) -> None:
    plugins_dir = Path(plugin_host.plugins_dir)
    old = plugins_dir / "permacanonical"
    old.mkdir()
    (old / "permacanonical.php").write_text("Version: 1.0.1\n")
    staged = _staged_package(plugins_dir, "1.0.5")

    def broken_move(src, dst):
        os.makedirs(dst)
        Path(dst, "partial.php").write_text("half\n")
        raise OSError("disk full")

    monkeypatch.setattr(shutil, "move", broken_move)

    with pytest.raises(RelocationError):
        client.after_install(True, {"plugin": BASENAME},
                             {"destination": str(staged)})

    assert (old / "permacanonical.php").read_text() == "Version: 1.0.1\n"
    assert not (old / "partial.php").exists()
    assert staged.exists()


def test_relocate_same_path_is_noop(tmp_path) -> None:
    target = tmp_path / "permacanonical"
    target.mkdir()

    assert relocate(str(target) + os.sep, str(target)) == str(target)
    assert target.exists()


def test_unrestorable_backup_is_left_in_place(client, plugin_host, monkeypatch) -> None:
    plugins_dir = Path(plugin_host.plugins_dir)
    old = plugins_dir / "permacanonical"
    old.mkdir()
    (old / "permacanonical.php").write_text("Version: 1.0.1\n")
    staged = _staged_package(plugins_dir, "1.0.5")
    real_rename = os.rename
    renames = []

    def rename_once(src, dst):
        renames.append((src, dst))
        if len(renames) > 1:
            raise OSError("permission denied")
        real_rename(src, dst)

    def broken_move(src, dst):
        raise OSError("disk full")

    monkeypatch.setattr(shutil, "move", broken_move)
    monkeypatch.setattr(os, "rename", rename_once)

    with pytest.raises(RelocationError):
        client.after_install(True, {"plugin": BASENAME},
                             {"destination": str(staged)})

    backup = plugins_dir / "permacanonical.bak"
    assert (backup / "permacanonical.php").read_text() == "Version: 1.0.1\n"
    assert not old.exists()
    assert staged.exists()
    assert renames[1] == (str(backup), str(old))
