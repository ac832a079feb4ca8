"""Heavenly Stem (天干) relationships.

Stems are ranked 1-10 from 甲 to 癸.  The 合 (combining) and 沖 (clashing)
relations are positional: combining partners sit five ranks apart, clashing
partners six ranks apart, and the two central earth stems (戊, 己) have no
clash partner.
"""

from __future__ import annotations

from enum import IntEnum, StrEnum
from typing import Final, Mapping

from .symbols import Polarity

__all__ = [
    "Wuxing",
    "HeavenlyStem",
    "StemLike",
    "UnknownStemError",
    "STEM_COUNT",
    "stem_for_rank",
    "coerce_stem",
    "affinity",
    "combining_partner",
    "clashing_partner",
    "combining_pairs",
    "clashing_pairs",
]

STEM_COUNT: Final[int] = 10


class Wuxing(StrEnum):
    """The five phases (五行)."""

    MU = "mu"
    HUO = "huo"
    TU = "tu"
    JIN = "jin"
    SHUI = "shui"

    @property
    def character(self) -> str:
        return _WUXING_CHARACTERS[self]

    @property
    def english(self) -> str:
        return _WUXING_ENGLISH[self]


_WUXING_CHARACTERS: Final[Mapping[Wuxing, str]] = {
    Wuxing.MU: "木",
    Wuxing.HUO: "火",
    Wuxing.TU: "土",
    Wuxing.JIN: "金",
    Wuxing.SHUI: "水",
}

_WUXING_ENGLISH: Final[Mapping[Wuxing, str]] = {
    Wuxing.MU: "Wood",
    Wuxing.HUO: "Fire",
    Wuxing.TU: "Earth",
    Wuxing.JIN: "Metal",
    Wuxing.SHUI: "Water",
}


class UnknownStemError(ValueError):
    """Raised when a value cannot be interpreted as a Heavenly Stem."""

    def __init__(self, value: object) -> None:
        super().__init__(f"not a heavenly stem: {value!r}")
        self.value = value


class HeavenlyStem(IntEnum):
    """The ten Heavenly Stems keyed by rank."""

    JIA = 1
    YI = 2
    BING = 3
    DING = 4
    WU = 5
    JI = 6
    GENG = 7
    XIN = 8
    REN = 9
    GUI = 10

    @property
    def rank(self) -> int:
        return int(self)

    @property
    def pinyin(self) -> str:
        return self.name.lower()

    @property
    def character(self) -> str:
        return _STEM_CHARACTERS[self.rank - 1]

    @property
    def element(self) -> Wuxing:
        """Intrinsic element of the stem (甲乙 wood, 丙丁 fire, ...)."""

        return _INTRINSIC_ELEMENTS[(self.rank - 1) // 2]

    @property
    def polarity(self) -> Polarity:
        return Polarity.YANG if self.rank % 2 else Polarity.YIN

    @property
    def affinity(self) -> Wuxing:
        """Element produced when the stem combines with its 合 partner."""

        return _AFFINITY[self]

    @property
    def combining_partner(self) -> HeavenlyStem:
        partner = self.rank + 5 if self.rank <= 5 else self.rank - 5
        return HeavenlyStem(partner)

    @property
    def clashing_partner(self) -> HeavenlyStem | None:
        if 1 <= self.rank <= 4:
            return HeavenlyStem(self.rank + 6)
        if 7 <= self.rank <= 10:
            return HeavenlyStem(self.rank - 6)
        return None


StemLike = HeavenlyStem | int | str

_STEM_CHARACTERS: Final[str] = "甲乙丙丁戊己庚辛壬癸"

_INTRINSIC_ELEMENTS: Final[tuple[Wuxing, ...]] = (
    Wuxing.MU,
    Wuxing.HUO,
    Wuxing.TU,
    Wuxing.JIN,
    Wuxing.SHUI,
)

_AFFINITY: Final[Mapping[HeavenlyStem, Wuxing]] = {
    HeavenlyStem.JIA: Wuxing.TU,
    HeavenlyStem.YI: Wuxing.JIN,
    HeavenlyStem.BING: Wuxing.SHUI,
    HeavenlyStem.DING: Wuxing.MU,
    HeavenlyStem.WU: Wuxing.HUO,
    HeavenlyStem.JI: Wuxing.TU,
    HeavenlyStem.GENG: Wuxing.JIN,
    HeavenlyStem.XIN: Wuxing.SHUI,
    HeavenlyStem.REN: Wuxing.MU,
    HeavenlyStem.GUI: Wuxing.HUO,
}

_STEMS_BY_LABEL: Final[Mapping[str, HeavenlyStem]] = {
    **{stem.pinyin: stem for stem in HeavenlyStem},
    **{stem.character: stem for stem in HeavenlyStem},
    "kui": HeavenlyStem.GUI,
}


def stem_for_rank(rank: int) -> HeavenlyStem:
    """Return the stem for ``rank``, wrapping around the ten-stem cycle."""

    return HeavenlyStem((rank - 1) % STEM_COUNT + 1)


def coerce_stem(value: StemLike) -> HeavenlyStem:
    """Interpret ``value`` as a :class:`HeavenlyStem`.

    Accepts a stem, an integer rank 1-10, a pinyin name (case-insensitive)
    or the stem's Chinese character.
    """

    if isinstance(value, HeavenlyStem):
        return value
    if isinstance(value, bool):
        raise UnknownStemError(value)
    if isinstance(value, int):
        if 1 <= value <= STEM_COUNT:
            return HeavenlyStem(value)
        raise UnknownStemError(value)
    if isinstance(value, str):
        stem = _STEMS_BY_LABEL.get(value.strip().lower())
        if stem is not None:
            return stem
    raise UnknownStemError(value)


def affinity(stem: StemLike) -> Wuxing:
    return coerce_stem(stem).affinity


def combining_partner(stem: StemLike) -> HeavenlyStem:
    return coerce_stem(stem).combining_partner


def clashing_partner(stem: StemLike) -> HeavenlyStem | None:
    """Return the 沖 partner of ``stem``, or ``None`` for 戊 and 己."""

    return coerce_stem(stem).clashing_partner


def combining_pairs() -> tuple[tuple[HeavenlyStem, HeavenlyStem], ...]:
    """Return the five 合 pairs ordered by the lower rank."""

    return tuple((stem, stem.combining_partner) for stem in HeavenlyStem if stem.rank <= 5)


def clashing_pairs() -> tuple[tuple[HeavenlyStem, HeavenlyStem], ...]:
    """Return the four 沖 pairs ordered by the lower rank."""

    pairs = []
    for stem in HeavenlyStem:
        partner = stem.clashing_partner
        if partner is not None and stem.rank < partner.rank:
            pairs.append((stem, partner))
    return tuple(pairs)
