from __future__ import annotations


class KioskError(RuntimeError):
    """Base class for provisioning errors."""


class ProbeUnresolved(KioskError):
    """No candidate satisfied a capability probe."""


class TargetMissingAnchor(KioskError):
    """A structured insertion point is absent from the target file."""


class WriteDenied(KioskError):
    """Writing a target file failed (usually insufficient privilege)."""


class ExternalCommandFailed(KioskError):
    def __init__(self, message: str, *, argv: list[str] | None = None, returncode: int | None = None) -> None:
        super().__init__(message)
        self.argv = list(argv or [])
        self.returncode = returncode


class DisallowedPrivilege(KioskError):
    """The installer was started as the superuser."""
