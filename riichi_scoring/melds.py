from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

from riichi_scoring.schemas import Meld, MeldType
from riichi_scoring.tiles import index_to_tile, is_yaochu, tile_to_index


class GroupKind(str, Enum):
    run = "run"
    triplet = "triplet"
    quad = "quad"
    pair = "pair"


class Wait(str, Enum):
    ryanmen = "ryanmen"
    kanchan = "kanchan"
    penchan = "penchan"
    shanpon = "shanpon"
    tanki = "tanki"
    thirteen_sided = "thirteen_sided"


# Waits that add 2 fu.
FU_WAITS = frozenset({Wait.kanchan, Wait.penchan, Wait.tanki})


@dataclass(frozen=True, order=True)
class Group:
    """A run, triplet, quad or pair identified by its lowest tile index."""

    kind: GroupKind
    tile: int
    concealed: bool = True
    declared: bool = False

    @property
    def tiles(self) -> tuple[int, ...]:
        if self.kind == GroupKind.run:
            return (self.tile, self.tile + 1, self.tile + 2)
        size = {GroupKind.triplet: 3, GroupKind.quad: 4, GroupKind.pair: 2}[self.kind]
        return (self.tile,) * size

    @property
    def is_triplet_like(self) -> bool:
        return self.kind in (GroupKind.triplet, GroupKind.quad)

    @property
    def has_yaochu(self) -> bool:
        return any(is_yaochu(t) for t in self.tiles)

    def contains(self, index: int) -> bool:
        return index in self.tiles

    @property
    def label(self) -> str:
        codes = [index_to_tile(t) for t in self.tiles]
        if self.tile < 27:
            return "".join(c[0] for c in codes) + codes[0][1]
        return "".join(codes)


def group_from_meld(meld: Meld) -> Group:
    indices = sorted(tile_to_index(t) for t in meld.tiles)
    if meld.type == MeldType.chi:
        kind = GroupKind.run
    elif meld.type == MeldType.pon:
        kind = GroupKind.triplet
    else:
        kind = GroupKind.quad
    return Group(kind=kind, tile=indices[0], concealed=not meld.open, declared=True)


def classify_wait(group: Group, win_tile: int) -> Wait:
    """Wait shape of the group the winning tile completed."""
    if group.kind == GroupKind.pair:
        return Wait.tanki
    if group.kind != GroupKind.run:
        return Wait.shanpon
    position = win_tile - group.tile
    if position == 1:
        return Wait.kanchan
    rank = group.tile % 9 + 1
    if position == 0 and rank == 7:
        return Wait.penchan
    if position == 2 and rank == 1:
        return Wait.penchan
    return Wait.ryanmen
