"""Map lunar phases onto trigram and hexagram symbols.

Two phase classifications are understood: the coarse eight-octile
:class:`MoonPhase` and the finer Chinese :class:`ChineseMoonPhase`.  Two of
the eight octiles (the gibbous phases) carry no symbol and map to ``None``.
Values outside both classifications raise :class:`UnrecognizedPhaseError`.
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass
from datetime import datetime
from enum import StrEnum
from typing import TYPE_CHECKING, Final, Mapping

from .symbols import DUI, GEN, KUN, QIAN, XUN, ZHEN, Hexagram, Trigram, hexagram_by_name

if TYPE_CHECKING:
    from .config import Settings
    from .sources import PhaseSource

LOG = logging.getLogger(__name__)

__all__ = [
    "MoonPhase",
    "ChineseMoonPhase",
    "PhaseLike",
    "PhaseSymbols",
    "UnrecognizedPhaseError",
    "normalize_phase",
    "phase_from_elongation",
    "trigram_for_phase",
    "hexagram_for_phase",
    "symbols_for_phase",
    "symbols_for_moment",
]


class UnrecognizedPhaseError(ValueError):
    """Raised when a value is not part of any supported phase classification."""

    def __init__(self, value: object) -> None:
        super().__init__(f"unrecognized lunar phase: {value!r}")
        self.value = value


class MoonPhase(StrEnum):
    """Eight-octile lunar phase classification."""

    NEW = "new"
    WAXING_CRESCENT = "waxing_crescent"
    FIRST_QUARTER = "first_quarter"
    WAXING_GIBBOUS = "waxing_gibbous"
    FULL = "full"
    WANING_GIBBOUS = "waning_gibbous"
    LAST_QUARTER = "last_quarter"
    WANING_CRESCENT = "waning_crescent"

    @property
    def label(self) -> str:
        return _PHASE_LABELS[self]

    @property
    def octile_index(self) -> int:
        return _OCTILES.index(self)


class ChineseMoonPhase(StrEnum):
    """Traditional Chinese phase names, including the dark-moon day 晦."""

    SHUO = "朔"
    EMEI = "蛾眉月"
    SHANGXIAN = "上弦月"
    JIANYING = "漸盈凸月"
    WANG = "望"
    JIANKUI = "漸虧凸月"
    XIAXIAN = "下弦月"
    CAN = "殘月"
    HUI = "晦"

    @property
    def octile(self) -> MoonPhase:
        return _CHINESE_OCTILES[self]


PhaseLike = MoonPhase | ChineseMoonPhase | str | int

_OCTILES: Final[tuple[MoonPhase, ...]] = tuple(MoonPhase)

_PHASE_LABELS: Final[Mapping[MoonPhase, str]] = {
    MoonPhase.NEW: "New Moon",
    MoonPhase.WAXING_CRESCENT: "Waxing Crescent",
    MoonPhase.FIRST_QUARTER: "First Quarter",
    MoonPhase.WAXING_GIBBOUS: "Waxing Gibbous",
    MoonPhase.FULL: "Full Moon",
    MoonPhase.WANING_GIBBOUS: "Waning Gibbous",
    MoonPhase.LAST_QUARTER: "Last Quarter",
    MoonPhase.WANING_CRESCENT: "Waning Crescent",
}

_CHINESE_OCTILES: Final[Mapping[ChineseMoonPhase, MoonPhase]] = {
    ChineseMoonPhase.SHUO: MoonPhase.NEW,
    ChineseMoonPhase.EMEI: MoonPhase.WAXING_CRESCENT,
    ChineseMoonPhase.SHANGXIAN: MoonPhase.FIRST_QUARTER,
    ChineseMoonPhase.JIANYING: MoonPhase.WAXING_GIBBOUS,
    ChineseMoonPhase.WANG: MoonPhase.FULL,
    ChineseMoonPhase.JIANKUI: MoonPhase.WANING_GIBBOUS,
    ChineseMoonPhase.XIAXIAN: MoonPhase.LAST_QUARTER,
    ChineseMoonPhase.CAN: MoonPhase.WANING_CRESCENT,
    ChineseMoonPhase.HUI: MoonPhase.NEW,
}

_TRIGRAMS_BY_PHASE: Final[Mapping[MoonPhase, Trigram | None]] = {
    MoonPhase.NEW: KUN,
    MoonPhase.WAXING_CRESCENT: ZHEN,
    MoonPhase.FIRST_QUARTER: DUI,
    MoonPhase.WAXING_GIBBOUS: None,
    MoonPhase.FULL: QIAN,
    MoonPhase.WANING_GIBBOUS: None,
    MoonPhase.LAST_QUARTER: XUN,
    MoonPhase.WANING_CRESCENT: GEN,
}

_TRIGRAMS_BY_CHINESE_PHASE: Final[Mapping[ChineseMoonPhase, Trigram | None]] = {
    ChineseMoonPhase.SHUO: KUN,
    ChineseMoonPhase.HUI: KUN,
    ChineseMoonPhase.EMEI: ZHEN,
    ChineseMoonPhase.SHANGXIAN: DUI,
    ChineseMoonPhase.JIANYING: None,
    ChineseMoonPhase.WANG: QIAN,
    ChineseMoonPhase.JIANKUI: None,
    ChineseMoonPhase.XIAXIAN: XUN,
    ChineseMoonPhase.CAN: GEN,
}

# Drawn from the twelve sovereign hexagrams.
_HEXAGRAMS_BY_PHASE: Final[Mapping[MoonPhase, Hexagram | None]] = {
    MoonPhase.NEW: hexagram_by_name("坤"),
    MoonPhase.WAXING_CRESCENT: hexagram_by_name("臨"),
    MoonPhase.FIRST_QUARTER: hexagram_by_name("大壯"),
    MoonPhase.WAXING_GIBBOUS: None,
    MoonPhase.FULL: hexagram_by_name("乾"),
    MoonPhase.WANING_GIBBOUS: None,
    MoonPhase.LAST_QUARTER: hexagram_by_name("遯"),
    MoonPhase.WANING_CRESCENT: hexagram_by_name("觀"),
}


def _phase_key(text: str) -> str:
    return "_".join(text.strip().lower().replace("-", " ").split())


_PHASES_BY_KEY: Final[Mapping[str, MoonPhase]] = {
    **{_phase_key(phase.name): phase for phase in MoonPhase},
    **{_phase_key(phase.label): phase for phase in MoonPhase},
}

_CHINESE_PHASES_BY_KEY: Final[Mapping[str, ChineseMoonPhase]] = {
    **{phase.value: phase for phase in ChineseMoonPhase},
    **{_phase_key(phase.name): phase for phase in ChineseMoonPhase},
}


def normalize_phase(value: PhaseLike) -> MoonPhase | ChineseMoonPhase:
    """Resolve ``value`` to a member of one of the phase classifications.

    Strings may be an enum value (``"waxing_crescent"``), a member name,
    a display label (``"Waxing Crescent"``) or a Chinese phase name.
    Integers are octile indices 0-7 starting at the new moon.
    """

    if isinstance(value, (MoonPhase, ChineseMoonPhase)):
        return value
    if isinstance(value, bool):
        raise UnrecognizedPhaseError(value)
    if isinstance(value, int):
        if 0 <= value < len(_OCTILES):
            return _OCTILES[value]
        raise UnrecognizedPhaseError(value)
    if isinstance(value, str):
        stripped = value.strip()
        chinese = _CHINESE_PHASES_BY_KEY.get(stripped)
        if chinese is not None:
            return chinese
        key = _phase_key(stripped)
        phase = _PHASES_BY_KEY.get(key)
        if phase is not None:
            return phase
        chinese = _CHINESE_PHASES_BY_KEY.get(key)
        if chinese is not None:
            return chinese
    raise UnrecognizedPhaseError(value)


def phase_from_elongation(angle_deg: float) -> MoonPhase:
    """Classify a Moon-Sun elongation in degrees into its octile."""

    if not math.isfinite(angle_deg):
        raise ValueError(f"elongation must be finite, got {angle_deg!r}")
    normalized = angle_deg % 360.0
    index = int((normalized + 22.5) // 45.0) % 8
    return _OCTILES[index]


def trigram_for_phase(phase: PhaseLike) -> Trigram | None:
    """Return the trigram associated with ``phase``, if any."""

    resolved = normalize_phase(phase)
    if isinstance(resolved, ChineseMoonPhase):
        return _TRIGRAMS_BY_CHINESE_PHASE[resolved]
    return _TRIGRAMS_BY_PHASE[resolved]


def hexagram_for_phase(phase: PhaseLike) -> Hexagram | None:
    """Return the sovereign hexagram associated with ``phase``, if any."""

    resolved = normalize_phase(phase)
    if isinstance(resolved, ChineseMoonPhase):
        resolved = resolved.octile
    return _HEXAGRAMS_BY_PHASE[resolved]


@dataclass(frozen=True)
class PhaseSymbols:
    """Trigram and hexagram resolved for a single phase."""

    phase: MoonPhase | ChineseMoonPhase
    trigram: Trigram | None
    hexagram: Hexagram | None

    @property
    def has_symbol(self) -> bool:
        return self.trigram is not None


def symbols_for_phase(phase: PhaseLike) -> PhaseSymbols:
    resolved = normalize_phase(phase)
    symbols = PhaseSymbols(
        phase=resolved,
        trigram=trigram_for_phase(resolved),
        hexagram=hexagram_for_phase(resolved),
    )
    if not symbols.has_symbol:
        LOG.debug("phase %s carries no symbol", resolved.value)
    return symbols


def symbols_for_moment(
    moment: datetime,
    *,
    source: PhaseSource | str | None = None,
    settings: Settings | None = None,
) -> PhaseSymbols:
    """Resolve the symbols for the lunar phase at ``moment``.

    Parameters
    ----------
    moment:
        Instant to classify. Naive datetimes are interpreted as UTC by the
        built-in sources.
    source:
        A :class:`~bagua.sources.PhaseSource` instance or a registered source
        name. When omitted the source named in ``settings`` is used.
    settings:
        Optional :class:`~bagua.config.Settings`; loaded from disk and the
        environment when neither ``source`` nor ``settings`` is given.
    """

    from .sources import get_phase_source, resolve_phase_source

    if source is None:
        phase_source = resolve_phase_source(settings)
    elif isinstance(source, str):
        phase_source = get_phase_source(source)
    else:
        phase_source = source
    return symbols_for_phase(phase_source.phase_at(moment))
