from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum

HONOR_CODES = ("E", "S", "W", "N", "P", "F", "C")
RED_FIVE_CODES = {"5mr", "5pr", "5sr"}
WIND_NAMES = {"E": "東", "S": "南", "W": "西", "N": "北"}
DRAGON_NAMES = {"P": "白", "F": "發", "C": "中"}

TERMINAL_HONOR_INDICES = (0, 8, 9, 17, 18, 26, 27, 28, 29, 30, 31, 32, 33)
GREEN_INDICES = frozenset({19, 20, 21, 23, 25, 32})  # 2s 3s 4s 6s 8s F


class Suit(str, Enum):
    manzu = "m"
    pinzu = "p"
    souzu = "s"
    wind = "wind"
    dragon = "dragon"


NUMBER_SUITS = (Suit.manzu, Suit.pinzu, Suit.souzu)


def normalize_tile(tile: str) -> str:
    if tile in RED_FIVE_CODES:
        return tile[:2]
    return tile


def tile_to_index(tile: str) -> int:
    t = normalize_tile(tile)
    if len(t) == 2 and t[0].isdigit():
        num = int(t[0])
        base = {"m": 0, "p": 9, "s": 18}[t[1]]
        return base + (num - 1)
    return 27 + HONOR_CODES.index(t)


def index_to_tile(index: int) -> str:
    if index < 27:
        suit = ("m", "p", "s")[index // 9]
        return f"{index % 9 + 1}{suit}"
    return HONOR_CODES[index - 27]


def suit_of(index: int) -> Suit:
    if index < 27:
        return NUMBER_SUITS[index // 9]
    if index < 31:
        return Suit.wind
    return Suit.dragon


def rank_of(index: int) -> int:
    """Rank 1-9 for number tiles, 1-4 for winds (ESWN) and 1-3 for dragons (PFC)."""
    if index < 27:
        return index % 9 + 1
    if index < 31:
        return index - 26
    return index - 30


def is_honor(index: int) -> bool:
    return index >= 27


def is_terminal(index: int) -> bool:
    return index < 27 and index % 9 in (0, 8)


def is_yaochu(index: int) -> bool:
    return is_honor(index) or is_terminal(index)


def is_simple(index: int) -> bool:
    return not is_yaochu(index)


def is_wind(index: int) -> bool:
    return 27 <= index <= 30


def is_dragon(index: int) -> bool:
    return index >= 31


def is_green(index: int) -> bool:
    return index in GREEN_INDICES


def dora_from_indicator(index: int) -> int:
    """The tile an indicator points at: next rank in suit, winds and dragons cycle."""
    if index < 27:
        base = index - index % 9
        return base + (index % 9 + 1) % 9
    if index <= 30:
        return 27 + (index - 27 + 1) % 4
    return 31 + (index - 31 + 1) % 3


@dataclass(frozen=True, order=True)
class Tile:
    """A single tile. Ordered by suit then rank; the red flag does not affect identity."""

    index: int
    red: bool = field(default=False, compare=False)

    @classmethod
    def from_code(cls, code: str) -> Tile:
        return cls(index=tile_to_index(code), red=code in RED_FIVE_CODES)

    @property
    def code(self) -> str:
        base = index_to_tile(self.index)
        return f"{base}r" if self.red else base

    @property
    def suit(self) -> Suit:
        return suit_of(self.index)

    @property
    def rank(self) -> int:
        return rank_of(self.index)

    @property
    def is_honor(self) -> bool:
        return is_honor(self.index)

    @property
    def is_yaochu(self) -> bool:
        return is_yaochu(self.index)


def tile_counts(codes: list[str]) -> list[int]:
    counts = [0] * 34
    for code in codes:
        counts[tile_to_index(code)] += 1
    return counts
