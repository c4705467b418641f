"""Tests for configuration loading."""

import json
from pathlib import Path

import pytest

from kiosk_installer.config import DEFAULT_URL, KioskConfig, load_config
from kiosk_installer.lib.hwdetect import EDID_PATHS, FALLBACK_MODES


def test_defaults():
    cfg = KioskConfig()

    assert cfg.output == "HDMI-A-1"
    assert cfg.cmdline_path == Path("/boot/firmware/cmdline.txt")
    assert cfg.config_txt_path == Path("/boot/firmware/config.txt")
    assert cfg.greetd_config_path == Path("/etc/greetd/config.toml")
    assert cfg.edid_paths == list(EDID_PATHS)
    assert cfg.fallback_modes == list(FALLBACK_MODES)
    assert cfg.default_url == DEFAULT_URL
    assert cfg.browser_packages == ["chromium", "chromium-browser"]
    assert cfg.answer("10_update_package_list") is None
    assert cfg.params("60_autostart_browser") == {}


def test_no_path_means_defaults():
    assert load_config(None) == KioskConfig()


def test_load_yaml(temp_dir):
    path = temp_dir / "kiosk.yaml"
    path.write_text(
        "settings:\n"
        "  output: HDMI-A-2\n"
        "  boot_dir: /boot\n"
        "answers:\n"
        "  140_reboot: yes\n"
        "  120_cec_remote: false\n"
        "params:\n"
        "  60_autostart_browser:\n"
        "    url: https://example.org\n"
    )

    cfg = load_config(str(path))

    assert cfg.output == "HDMI-A-2"
    assert cfg.cmdline_path == Path("/boot/cmdline.txt")
    assert cfg.answer("140_reboot") is True
    assert cfg.answer("120_cec_remote") is False
    assert cfg.params("60_autostart_browser") == {"url": "https://example.org"}


def test_load_json(temp_dir):
    path = temp_dir / "kiosk.json"
    path.write_text(json.dumps({"settings": {"default_url": "https://kiosk.local"}}))

    assert load_config(str(path)).default_url == "https://kiosk.local"


def test_missing_file(temp_dir):
    with pytest.raises(FileNotFoundError):
        load_config(str(temp_dir / "nope.yaml"))


@pytest.mark.parametrize("text", ["- a\n- b\n", "settings: [1, 2]\n", "answers: yes\n"])
def test_rejects_non_mappings(temp_dir, text):
    path = temp_dir / "kiosk.yml"
    path.write_text(text)

    with pytest.raises(ValueError):
        load_config(str(path))


def test_malformed_yaml_is_a_value_error(temp_dir):
    path = temp_dir / "kiosk.yaml"
    path.write_text("settings: {output: [unclosed\n")

    with pytest.raises(ValueError, match="Cannot read config"):
        load_config(str(path))


def test_directory_is_a_value_error(temp_dir):
    with pytest.raises(ValueError, match="Cannot read config"):
        load_config(str(temp_dir))


def test_malformed_json_is_a_value_error(temp_dir):
    path = temp_dir / "kiosk.json"
    path.write_text("{\"settings\": ")

    with pytest.raises(ValueError):
        load_config(str(path))


@pytest.mark.parametrize("key", ["edid_paths", "fallback_modes", "browser_packages", "browser_binaries"])
def test_list_settings_reject_scalars(temp_dir, key):
    path = temp_dir / "kiosk.yaml"
    path.write_text(f"settings:\n  {key}: /sys/class/drm/card1-HDMI-A-1/edid\n")

    with pytest.raises(ValueError, match=key):
        load_config(str(path))


def test_list_settings_accept_lists(temp_dir):
    path = temp_dir / "kiosk.yaml"
    path.write_text("settings:\n  edid_paths:\n    - /sys/class/drm/card2-HDMI-A-1/edid\n  fallback_modes: [800x480@60]\n")

    cfg = load_config(str(path))

    assert cfg.edid_paths == ["/sys/class/drm/card2-HDMI-A-1/edid"]
    assert cfg.fallback_modes == ["800x480@60"]
