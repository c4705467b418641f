"""Kiosk provisioning for Raspberry Pi OS (labwc + greetd + Chromium).

Core design goals:
- Every file edit is an idempotent directive; re-running converges
- Runtime probing of package names, binaries and display modes
- User-gated steps; one failing step never stops the run
- Centralized logging
"""

__all__ = []
