"""Registry of lunar phase sources.

A phase source turns an instant into a lunar phase.  Sources are optional
adapters: the built-in :class:`MeanLunationSource` needs no third-party
packages, and further sources can be registered programmatically or exposed
through the ``bagua.phase_sources`` entry point group.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Mapping, Sequence
from dataclasses import replace
from datetime import datetime
from importlib import metadata as importlib_metadata
from typing import TYPE_CHECKING, Any, Protocol, runtime_checkable

from ..phases import ChineseMoonPhase, MoonPhase

if TYPE_CHECKING:
    from ..config import Settings

LOG = logging.getLogger(__name__)

__all__ = [
    "MeanLunationSource",
    "PhaseSource",
    "PhaseSourceError",
    "get_phase_source",
    "list_phase_sources",
    "load_entry_point_sources",
    "register_phase_source",
    "resolve_phase_source",
    "unregister_phase_source",
]


class PhaseSourceError(RuntimeError):
    """Structured error raised when a phase source cannot satisfy a request."""

    def __init__(
        self,
        message: str,
        *,
        source_id: str | None = None,
        error_code: str | None = None,
        context: Mapping[str, Any] | None = None,
    ) -> None:
        super().__init__(message)
        self.source_id = source_id
        self.error_code = error_code
        self.context = dict(context or {})


@runtime_checkable
class PhaseSource(Protocol):
    """Source contract returning the lunar phase at an instant."""

    source_id: str

    def phase_at(self, moment: datetime) -> MoonPhase | ChineseMoonPhase:
        ...


_REGISTRY: dict[str, PhaseSource] = {}


def register_phase_source(
    name: str,
    source: PhaseSource,
    *,
    aliases: Sequence[str] = (),
) -> None:
    """Register ``source`` under ``name`` and optional ``aliases``."""

    keys = [name, *aliases]
    duplicates = [key for key in keys if key in _REGISTRY]
    if duplicates:
        raise ValueError(f"phase source name(s) already registered: {duplicates}")
    for key in keys:
        _REGISTRY[key] = source
    LOG.debug("registered phase source %s", name, extra={"aliases": list(aliases)})


def unregister_phase_source(name: str) -> bool:
    """Remove ``name`` and every alias of its source; return whether it was present."""

    source = _REGISTRY.pop(name, None)
    if source is None:
        return False
    for key in [key for key, value in _REGISTRY.items() if value is source]:
        del _REGISTRY[key]
    return True


def get_phase_source(name: str) -> PhaseSource:
    try:
        return _REGISTRY[name]
    except KeyError as exc:
        raise PhaseSourceError(
            f"phase source '{name}' not registered; available={list_phase_sources()}",
            source_id=name,
            error_code="PHASE_SOURCE_UNKNOWN",
        ) from exc


def list_phase_sources() -> list[str]:
    return sorted(_REGISTRY)


def resolve_phase_source(settings: Settings | None = None) -> PhaseSource:
    """Return the source selected by ``settings`` (loaded when omitted)."""

    from ..config import load_settings

    cfg = (settings or load_settings()).phase_source
    source = get_phase_source(cfg.name)
    if isinstance(source, MeanLunationSource):
        return replace(
            source,
            synodic_month_days=cfg.synodic_month_days,
            reference_new_moon=cfg.reference_new_moon,
        )
    return source


def _coerce_entrypoint_payload(entry_name: str, payload: Any) -> PhaseSource | None:
    if isinstance(payload, type) or (callable(payload) and not hasattr(payload, "phase_at")):
        obj = payload()
    else:
        obj = payload
    if isinstance(obj, PhaseSource) and not isinstance(obj, type):
        return obj
    LOG.warning(
        "entry point '%s' did not return a PhaseSource",
        entry_name,
        extra={"err_code": "PHASE_SOURCE_ENTRYPOINT_INVALID"},
    )
    return None


def load_entry_point_sources(group: str = "bagua.phase_sources") -> list[str]:
    """Load and register phase sources exposed via entry points."""

    loaded: list[str] = []
    candidates: Iterable[importlib_metadata.EntryPoint] = importlib_metadata.entry_points(
        group=group
    )
    for entry in candidates:
        try:
            source = _coerce_entrypoint_payload(entry.name, entry.load())
        except Exception:
            LOG.exception(
                "failed to load phase source entry point",
                extra={
                    "err_code": "PHASE_SOURCE_ENTRYPOINT_LOAD",
                    "entry_point": entry.name,
                },
            )
            continue

        if source is None:
            continue

        name = getattr(source, "source_id", None) or entry.name
        try:
            register_phase_source(name, source)
        except ValueError:
            LOG.warning(
                "phase source '%s' already registered; skipping entry point",
                name,
                extra={"err_code": "PHASE_SOURCE_ENTRYPOINT_DUPLICATE"},
            )
            continue
        loaded.append(name)

    return loaded


from .mean_lunation import MeanLunationSource  # noqa: E402

register_phase_source(MeanLunationSource.source_id, MeanLunationSource(), aliases=("mean",))
