"""Bagua package bootstrap and curated public API surface."""

from __future__ import annotations

from importlib.metadata import PackageNotFoundError, version as _get_version

from .phases import (
    ChineseMoonPhase,
    MoonPhase,
    PhaseSymbols,
    UnrecognizedPhaseError,
    hexagram_for_phase,
    normalize_phase,
    phase_from_elongation,
    symbols_for_moment,
    symbols_for_phase,
    trigram_for_phase,
)
from .stems import (
    HeavenlyStem,
    UnknownStemError,
    Wuxing,
    affinity,
    clashing_pairs,
    clashing_partner,
    coerce_stem,
    combining_pairs,
    combining_partner,
    stem_for_rank,
)
from .symbols import (
    DUI,
    GEN,
    HEXAGRAMS,
    HOUTIAN_BAGUA,
    KAN,
    KUN,
    LI,
    QIAN,
    SHIER_PIGUA,
    TRIGRAMS,
    XIANTIAN_BAGUA,
    XUN,
    ZHEN,
    Hexagram,
    Polarity,
    SymbolNotFoundError,
    Trigram,
    hexagram_by_name,
    king_wen_number,
    trigram_by_name,
)

try:
    __version__ = _get_version("bagua")
except PackageNotFoundError:  # pragma: no cover - running from a source checkout
    __version__ = "0.0.0"


def get_version() -> str:
    """Return the resolved bagua package version."""

    return __version__


__all__ = [
    "__version__",
    "get_version",
    # symbols
    "Polarity",
    "Trigram",
    "Hexagram",
    "SymbolNotFoundError",
    "QIAN",
    "XUN",
    "KAN",
    "GEN",
    "KUN",
    "ZHEN",
    "LI",
    "DUI",
    "TRIGRAMS",
    "XIANTIAN_BAGUA",
    "HOUTIAN_BAGUA",
    "HEXAGRAMS",
    "SHIER_PIGUA",
    "trigram_by_name",
    "hexagram_by_name",
    "king_wen_number",
    # stems
    "HeavenlyStem",
    "Wuxing",
    "UnknownStemError",
    "affinity",
    "combining_partner",
    "clashing_partner",
    "combining_pairs",
    "clashing_pairs",
    "coerce_stem",
    "stem_for_rank",
    # phases
    "MoonPhase",
    "ChineseMoonPhase",
    "PhaseSymbols",
    "UnrecognizedPhaseError",
    "normalize_phase",
    "phase_from_elongation",
    "trigram_for_phase",
    "hexagram_for_phase",
    "symbols_for_phase",
    "symbols_for_moment",
]
