from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import ClassVar, Union

from riichi_scoring.config import settings
from riichi_scoring.errors import InvalidHandShape
from riichi_scoring.melds import Group, GroupKind, Wait, classify_wait, group_from_meld
from riichi_scoring.schemas import HandInput
from riichi_scoring.tiles import TERMINAL_HONOR_INDICES, index_to_tile, tile_counts, tile_to_index

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class StandardDecomposition:
    """Four groups plus a pair. Declared melds come first, in declaration order."""

    shape: ClassVar[str] = "standard"

    groups: tuple[Group, ...]
    pair: int
    win_tile: int
    winning_group: int | None
    wait: Wait

    @property
    def pair_group(self) -> Group:
        return Group(kind=GroupKind.pair, tile=self.pair)

    @property
    def tiles(self) -> list[int]:
        tiles = [t for g in self.groups for t in g.tiles]
        tiles.extend(self.pair_group.tiles)
        return tiles

    @property
    def sort_key(self) -> tuple:
        return (0, self.groups, self.pair, -1 if self.winning_group is None else self.winning_group)

    def describe(self) -> str:
        parts = [g.label + ("" if g.concealed else "*") for g in self.groups]
        parts.append(self.pair_group.label)
        return " ".join(parts)


@dataclass(frozen=True)
class SevenPairsDecomposition:
    shape: ClassVar[str] = "seven_pairs"

    pairs: tuple[int, ...]
    win_tile: int

    @property
    def wait(self) -> Wait:
        return Wait.tanki

    @property
    def tiles(self) -> list[int]:
        return [t for p in self.pairs for t in (p, p)]

    @property
    def sort_key(self) -> tuple:
        return (1, self.pairs)

    def describe(self) -> str:
        return " ".join(Group(kind=GroupKind.pair, tile=p).label for p in self.pairs)


@dataclass(frozen=True)
class ThirteenOrphansDecomposition:
    shape: ClassVar[str] = "thirteen_orphans"

    duplicate: int
    win_tile: int

    @property
    def wait(self) -> Wait:
        # Winning on the duplicated tile means all thirteen kinds were waited on.
        return Wait.thirteen_sided if self.duplicate == self.win_tile else Wait.tanki

    @property
    def tiles(self) -> list[int]:
        return sorted([*TERMINAL_HONOR_INDICES, self.duplicate])

    @property
    def sort_key(self) -> tuple:
        return (2, self.duplicate)

    def describe(self) -> str:
        return f"kokushi (pair {index_to_tile(self.duplicate)})"


Decomposition = Union[StandardDecomposition, SevenPairsDecomposition, ThirteenOrphansDecomposition]


def _take(counts: tuple[int, ...], indices: tuple[int, ...]) -> tuple[int, ...]:
    work = list(counts)
    for i in indices:
        work[i] -= 1
    return tuple(work)


def _search_closed_groups(
    counts: tuple[int, ...],
    needed: int,
    step_limit: int,
    dead: set[tuple[tuple[int, ...], bool]] | None = None,
) -> set[tuple[tuple[Group, ...], int]]:
    """All ways to split concealed tiles into `needed` runs/triplets plus one pair.

    Every step consumes the lowest remaining tile, so the remainder strictly shrinks.
    A remainder whose whole subtree produced no split is recorded in `dead` (keyed by
    the remaining counts and whether the pair is still open) and never expanded again.
    """
    found: set[tuple[tuple[Group, ...], int]] = set()
    if dead is None:
        dead = set()
    successes = 0
    # (remaining, groups, pair, marker); a marker entry closes the subtree opened
    # when `successes` had the stored value.
    work: list[tuple[tuple[int, ...], tuple[Group, ...], int | None, int | None]] = [(counts, (), None, None)]
    steps = 0

    while work:
        remaining, groups, pair, marker = work.pop()
        state = (remaining, pair is None)
        if marker is not None:
            if successes == marker:
                dead.add(state)
            continue

        steps += 1
        if steps > step_limit:
            raise InvalidHandShape(
                "Decomposition search exceeded its step limit",
                details={"step_limit": step_limit},
            )
        if state in dead:
            continue

        head = next((i for i, c in enumerate(remaining) if c > 0), None)
        if head is None:
            if pair is not None and len(groups) == needed:
                found.add((tuple(sorted(groups)), pair))
                successes += 1
            else:
                dead.add(state)
            continue

        children: list[tuple[tuple[int, ...], tuple[Group, ...], int | None, int | None]] = []
        if pair is None and remaining[head] >= 2:
            children.append((_take(remaining, (head, head)), groups, head, None))
        if len(groups) < needed:
            if remaining[head] >= 3:
                triplet = Group(kind=GroupKind.triplet, tile=head)
                children.append((_take(remaining, (head, head, head)), groups + (triplet,), pair, None))
            if head < 27 and head % 9 <= 6 and remaining[head + 1] > 0 and remaining[head + 2] > 0:
                run = Group(kind=GroupKind.run, tile=head)
                children.append((_take(remaining, (head, head + 1, head + 2)), groups + (run,), pair, None))

        if not children:
            dead.add(state)
            continue
        work.append((remaining, groups, pair, successes))
        work.extend(children)

    return found


def _standard_decompositions(
    counts: list[int], fixed: tuple[Group, ...], win_tile: int, step_limit: int
) -> set[StandardDecomposition]:
    needed = 4 - len(fixed)
    if needed < 0 or sum(counts) != needed * 3 + 2:
        return set()

    results: set[StandardDecomposition] = set()
    for closed_groups, pair in _search_closed_groups(tuple(counts), needed, step_limit):
        groups = fixed + closed_groups
        if pair == win_tile:
            results.add(
                StandardDecomposition(groups=groups, pair=pair, win_tile=win_tile, winning_group=None, wait=Wait.tanki)
            )
        seen: set[Group] = set()
        for i, group in enumerate(groups):
            if group.declared or group in seen or not group.contains(win_tile):
                continue
            seen.add(group)
            results.add(
                StandardDecomposition(
                    groups=groups,
                    pair=pair,
                    win_tile=win_tile,
                    winning_group=i,
                    wait=classify_wait(group, win_tile),
                )
            )
    return results


def _seven_pairs(counts: list[int], win_tile: int) -> SevenPairsDecomposition | None:
    if sum(1 for c in counts if c == 2) != 7 or any(c not in (0, 2) for c in counts):
        return None
    pairs = tuple(i for i, c in enumerate(counts) if c == 2)
    return SevenPairsDecomposition(pairs=pairs, win_tile=win_tile)


def _thirteen_orphans(counts: list[int], win_tile: int) -> ThirteenOrphansDecomposition | None:
    if sum(counts) != 14:
        return None
    if any(counts[i] > 0 for i in range(34) if i not in TERMINAL_HONOR_INDICES):
        return None
    if any(counts[i] == 0 for i in TERMINAL_HONOR_INDICES):
        return None
    duplicate = next(i for i in TERMINAL_HONOR_INDICES if counts[i] == 2)
    return ThirteenOrphansDecomposition(duplicate=duplicate, win_tile=win_tile)


def decompose(hand: HandInput, step_limit: int | None = None) -> set[Decomposition]:
    """Every structurally valid arrangement of a winning hand.

    Declared melds are fixed groups; only the concealed tiles are searched.
    Raises InvalidHandShape when no arrangement exists.
    """
    limit = step_limit if step_limit is not None else settings.decompose_step_limit
    counts = tile_counts(hand.closed_tiles)
    win_tile = tile_to_index(hand.win_tile)
    fixed = tuple(group_from_meld(m) for m in hand.melds)

    results: set[Decomposition] = set()
    results.update(_standard_decompositions(counts, fixed, win_tile, limit))
    if not fixed:
        seven_pairs = _seven_pairs(counts, win_tile)
        if seven_pairs is not None:
            results.add(seven_pairs)
        orphans = _thirteen_orphans(counts, win_tile)
        if orphans is not None:
            results.add(orphans)

    if not results:
        raise InvalidHandShape(
            "Hand is not a valid winning shape",
            details={"closed_tiles": list(hand.closed_tiles), "melds": len(hand.melds)},
        )
    logger.debug("decomposed hand into %d arrangement(s)", len(results))
    return results
