"""Trigram and hexagram lookup tables.

The eight trigrams (八卦) are exposed as module constants together with the
two canonical arrangements: the 先天 (xiantian, Pre-Heaven) order used in
Taoist cosmology and the 后天 (houtian, Post-Heaven) order used in applied
Feng Shui.  The sixty-four hexagrams follow the traditional King Wen order;
:data:`SHIER_PIGUA` is the twelve "sovereign" hexagrams (十二辟卦) that track
the waxing and waning of Yang through the year.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import StrEnum
from typing import Final, Mapping

__all__ = [
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
]


class Polarity(StrEnum):
    """Yin/Yang classification shared by trigrams and stems."""

    YANG = "yang"
    YIN = "yin"


class SymbolNotFoundError(KeyError):
    """Raised when a trigram or hexagram name is not part of the tables."""


_YANG_TRIGRAMS: Final[frozenset[str]] = frozenset({"乾", "巽", "震", "離"})


@dataclass(frozen=True)
class Trigram:
    """One of the eight three-line symbols (八卦).

    ``image`` is the trigram's xiang (象), the natural phenomenon it stands
    for (``"天"`` for heaven, ``"地"`` for earth, ...).
    """

    symbol: str
    name: str
    image: str

    @property
    def id(self) -> str:
        return self.name

    @property
    def polarity(self) -> Polarity:
        if self.name in _YANG_TRIGRAMS:
            return Polarity.YANG
        return Polarity.YIN

    @property
    def is_yang(self) -> bool:
        return self.polarity is Polarity.YANG

    @property
    def is_yin(self) -> bool:
        return not self.is_yang

    def describe(self) -> str:
        """Return ``"symbol (name) – image"`` for display."""

        return f"{self.symbol} ({self.name}) – {self.image}"

    def as_dict(self) -> dict[str, str]:
        return {
            "symbol": self.symbol,
            "name": self.name,
            "image": self.image,
            "polarity": self.polarity.value,
        }


@dataclass(frozen=True)
class Hexagram:
    """One of the sixty-four six-line symbols of the I Ching."""

    symbol: str
    name: str

    @property
    def id(self) -> str:
        return self.name

    def as_dict(self) -> dict[str, str]:
        return {"symbol": self.symbol, "name": self.name}


QIAN: Final[Trigram] = Trigram("☰", "乾", "天")
XUN: Final[Trigram] = Trigram("☴", "巽", "风")
KAN: Final[Trigram] = Trigram("☵", "坎", "水")
GEN: Final[Trigram] = Trigram("☶", "艮", "山")
KUN: Final[Trigram] = Trigram("☷", "坤", "地")
ZHEN: Final[Trigram] = Trigram("☳", "震", "雷")
LI: Final[Trigram] = Trigram("☲", "離", "火")
DUI: Final[Trigram] = Trigram("☱", "兌", "澤")

XIANTIAN_BAGUA: Final[tuple[Trigram, ...]] = (QIAN, XUN, KAN, GEN, KUN, ZHEN, LI, DUI)

HOUTIAN_BAGUA: Final[tuple[Trigram, ...]] = (LI, KUN, DUI, QIAN, KAN, GEN, ZHEN, XUN)

TRIGRAMS: Final[tuple[Trigram, ...]] = XIANTIAN_BAGUA


HEXAGRAMS: Final[tuple[Hexagram, ...]] = (
    Hexagram("䷀", "乾"), Hexagram("䷁", "坤"),
    Hexagram("䷂", "屯"), Hexagram("䷃", "蒙"),
    Hexagram("䷄", "需"), Hexagram("䷅", "訟"),
    Hexagram("䷆", "師"), Hexagram("䷇", "比"),
    Hexagram("䷈", "小畜"), Hexagram("䷉", "履"),
    Hexagram("䷊", "泰"), Hexagram("䷋", "否"),
    Hexagram("䷌", "同人"), Hexagram("䷍", "大有"),
    Hexagram("䷎", "謙"), Hexagram("䷏", "豫"),
    Hexagram("䷐", "隨"), Hexagram("䷑", "蠱"),
    Hexagram("䷒", "臨"), Hexagram("䷓", "觀"),
    Hexagram("䷔", "噬嗑"), Hexagram("䷕", "賁"),
    Hexagram("䷖", "剝"), Hexagram("䷗", "復"),
    Hexagram("䷘", "無妄"), Hexagram("䷙", "大畜"),
    Hexagram("䷚", "頤"), Hexagram("䷛", "大過"),
    Hexagram("䷜", "坎"), Hexagram("䷝", "離"),
    Hexagram("䷞", "咸"), Hexagram("䷟", "恆"),
    Hexagram("䷠", "遯"), Hexagram("䷡", "大壯"),
    Hexagram("䷢", "晉"), Hexagram("䷣", "明夷"),
    Hexagram("䷤", "家人"), Hexagram("䷥", "睽"),
    Hexagram("䷦", "蹇"), Hexagram("䷧", "解"),
    Hexagram("䷨", "損"), Hexagram("䷩", "益"),
    Hexagram("䷪", "夬"), Hexagram("䷫", "姤"),
    Hexagram("䷬", "萃"), Hexagram("䷭", "升"),
    Hexagram("䷮", "困"), Hexagram("䷯", "井"),
    Hexagram("䷰", "革"), Hexagram("䷱", "鼎"),
    Hexagram("䷲", "震"), Hexagram("䷳", "艮"),
    Hexagram("䷴", "漸"), Hexagram("䷵", "歸妹"),
    Hexagram("䷶", "豐"), Hexagram("䷷", "旅"),
    Hexagram("䷸", "巽"), Hexagram("䷹", "兌"),
    Hexagram("䷺", "渙"), Hexagram("䷻", "節"),
    Hexagram("䷼", "中孚"), Hexagram("䷽", "小過"),
    Hexagram("䷾", "既濟"), Hexagram("䷿", "未濟"),
)

_TRIGRAMS_BY_NAME: Final[Mapping[str, Trigram]] = {t.name: t for t in TRIGRAMS}
_HEXAGRAMS_BY_NAME: Final[Mapping[str, Hexagram]] = {h.name: h for h in HEXAGRAMS}
_KING_WEN_NUMBERS: Final[Mapping[Hexagram, int]] = {
    h: index for index, h in enumerate(HEXAGRAMS, start=1)
}


def trigram_by_name(name: str) -> Trigram:
    """Return the trigram whose Chinese name is ``name``."""

    try:
        return _TRIGRAMS_BY_NAME[name]
    except KeyError as exc:
        raise SymbolNotFoundError(
            f"unknown trigram '{name}'; available={list(_TRIGRAMS_BY_NAME)}"
        ) from exc


def hexagram_by_name(name: str) -> Hexagram:
    """Return the hexagram whose Chinese name is ``name``."""

    try:
        return _HEXAGRAMS_BY_NAME[name]
    except KeyError as exc:
        raise SymbolNotFoundError(
            f"unknown hexagram '{name}'; available={list(_HEXAGRAMS_BY_NAME)}"
        ) from exc


def king_wen_number(hexagram: Hexagram) -> int:
    """Return the 1-based position of ``hexagram`` in the King Wen order."""

    number = _KING_WEN_NUMBERS.get(hexagram)
    if number is None:
        raise SymbolNotFoundError(f"hexagram {hexagram!r} is not in the King Wen table")
    return number


# Starts at 泰 (first lunar month) and ends at 臨 (twelfth).
SHIER_PIGUA: Final[tuple[Hexagram, ...]] = tuple(
    _HEXAGRAMS_BY_NAME[name]
    for name in ("泰", "大壯", "夬", "乾", "姤", "遯", "否", "觀", "剝", "坤", "復", "臨")
)
