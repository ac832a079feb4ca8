"""Pytest configuration for bagua."""

from __future__ import annotations

import os


def _flag_enabled(name: str) -> bool:
    """Return True when the boolean-like environment flag is enabled."""

    value = os.getenv(name)
    if value is None:
        return False
    return value.strip().lower() in {"1", "true", "yes", "on"}


def _install_hypothesis_profiles() -> None:
    try:
        from hypothesis import settings
    except ImportError:  # pragma: no cover - hypothesis optional
        return

    settings.register_profile("dev", max_examples=100)
    settings.register_profile("ci", max_examples=500, derandomize=True)
    settings.load_profile("ci" if _flag_enabled("CI") else "dev")


_install_hypothesis_profiles()
