from __future__ import annotations

from dataclasses import dataclass
from functools import cached_property

from riichi_scoring.decomposer import Decomposition, StandardDecomposition
from riichi_scoring.melds import Group, GroupKind, Wait
from riichi_scoring.schemas import ContextInput, RuleSet, WinType
from riichi_scoring.tiles import is_dragon, tile_to_index


@dataclass(frozen=True)
class HandView:
    """One arrangement of the hand seen together with the win context."""

    decomposition: Decomposition
    context: ContextInput
    rules: RuleSet

    @property
    def standard(self) -> StandardDecomposition | None:
        if isinstance(self.decomposition, StandardDecomposition):
            return self.decomposition
        return None

    @property
    def groups(self) -> tuple[Group, ...]:
        std = self.standard
        return std.groups if std is not None else ()

    @property
    def pair(self) -> int | None:
        std = self.standard
        return std.pair if std is not None else None

    @cached_property
    def tiles(self) -> tuple[int, ...]:
        return tuple(self.decomposition.tiles)

    @property
    def wait(self) -> Wait:
        return self.decomposition.wait

    @property
    def closed(self) -> bool:
        return all(g.concealed for g in self.groups)

    @property
    def tsumo(self) -> bool:
        return self.context.win_type == WinType.tsumo

    @property
    def seat_wind(self) -> int:
        return tile_to_index(self.context.seat_wind.value)

    @property
    def round_wind(self) -> int:
        return tile_to_index(self.context.round_wind.value)

    @property
    def runs(self) -> list[Group]:
        return [g for g in self.groups if g.kind == GroupKind.run]

    @property
    def sets(self) -> list[Group]:
        return [g for g in self.groups if g.is_triplet_like]

    def is_value_tile(self, index: int) -> bool:
        return is_dragon(index) or index in (self.seat_wind, self.round_wind)

    def counts_as_concealed(self, position: int) -> bool:
        """A triplet finished by a discard is treated as open; a quad never is."""
        std = self.standard
        if std is None:
            return False
        group = std.groups[position]
        if not group.concealed:
            return False
        return not (
            not self.tsumo and group.kind == GroupKind.triplet and std.winning_group == position
        )

    @property
    def concealed_set_count(self) -> int:
        return sum(1 for i, g in enumerate(self.groups) if g.is_triplet_like and self.counts_as_concealed(i))

    @property
    def pinfu_shape(self) -> bool:
        if self.standard is None or not self.closed:
            return False
        if any(g.kind != GroupKind.run for g in self.groups):
            return False
        if self.is_value_tile(self.pair):
            return False
        return self.wait == Wait.ryanmen
