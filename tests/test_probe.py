"""Tests for capability probing."""

import os

import pytest

from kiosk_installer.errors import ProbeUnresolved
from kiosk_installer.lib.probe import (
    UNRESOLVED,
    Capability,
    first_viable,
    is_executable,
    resolve_binary,
    resolve_package,
)


def test_first_viable_keeps_preference_order():
    cap = first_viable(["a", "b", "c"], lambda c: c in {"b", "c"})

    assert cap == Capability(value="b")
    assert cap.resolved and not cap.degraded


def test_first_viable_treats_errors_as_unavailable():
    def test(candidate):
        if candidate == "broken":
            raise OSError("permission denied")
        return True

    assert first_viable(["broken", "ok"], test).value == "ok"


def test_first_viable_nothing_passes():
    cap = first_viable(["a"], lambda c: False)

    assert cap is UNRESOLVED
    assert not cap.resolved


class TestResolvePackage:
    def test_second_candidate(self):
        cap = resolve_package(["chromium", "chromium-browser"], has_package=lambda p: p == "chromium-browser")

        assert cap.value == "chromium-browser"

    def test_unresolved_is_a_value_not_an_error(self):
        cap = resolve_package(["chromium", "chromium-browser"], has_package=lambda p: False)

        assert not cap.resolved
        assert "No package found in APT" in cap.warning
        assert "chromium, chromium-browser" in cap.warning
        with pytest.raises(ProbeUnresolved):
            cap.require()

    def test_require_returns_value(self):
        assert resolve_package(["x"], has_package=lambda p: True).require() == "x"


class TestResolveBinary:
    def test_found_on_path(self):
        paths = {"chromium-browser": "/usr/bin/chromium-browser"}

        cap = resolve_binary(
            ["chromium", "chromium-browser"],
            fallback_paths=[],
            default="/usr/bin/chromium",
            which=paths.get,
        )

        assert cap.value == "/usr/bin/chromium-browser"
        assert cap.source == "probe"

    def test_fixed_path_when_not_on_path(self, temp_dir):
        binary = temp_dir / "chromium"
        binary.write_text("#!/bin/sh\n")
        os.chmod(binary, 0o755)

        cap = resolve_binary(
            ["chromium"],
            fallback_paths=[str(temp_dir / "missing"), str(binary)],
            default="/usr/bin/chromium",
            which=lambda n: None,
        )

        assert cap.value == str(binary)
        assert not cap.degraded

    def test_default_with_warning(self, temp_dir):
        cap = resolve_binary(
            ["chromium", "chromium-browser"],
            fallback_paths=[str(temp_dir / "missing")],
            default="/usr/bin/chromium",
            which=lambda n: None,
        )

        assert cap.value == "/usr/bin/chromium"
        assert cap.degraded
        assert cap.resolved
        assert "chromium or chromium-browser" in cap.warning


def test_is_executable(temp_dir):
    plain = temp_dir / "plain"
    plain.write_text("")
    os.chmod(plain, 0o644)

    assert not is_executable(str(plain))
    assert not is_executable(str(temp_dir))
