from __future__ import annotations

from riichi_scoring.decomposer import Decomposition, SevenPairsDecomposition, ThirteenOrphansDecomposition
from riichi_scoring.hand_view import HandView
from riichi_scoring.melds import FU_WAITS, Group, GroupKind
from riichi_scoring.schemas import ContextInput, FuBreakdownItem, RuleSet
from riichi_scoring.tiles import is_dragon, is_yaochu

CHIITOITSU_FU = 25


def _round_up_10(value: int) -> int:
    return ((value + 9) // 10) * 10


def _pair_fu(pair_tile: int, view: HandView) -> int:
    if is_dragon(pair_tile):
        return 2
    seat = pair_tile == view.seat_wind
    prevalent = pair_tile == view.round_wind
    if seat and prevalent:
        return view.rules.renpu_fu
    if seat or prevalent:
        return 2
    return 0


def _group_fu(group: Group, concealed: bool) -> int:
    if group.kind == GroupKind.run:
        return 0
    fu = 2
    if is_yaochu(group.tile):
        fu *= 2
    if concealed:
        fu *= 2
    if group.kind == GroupKind.quad:
        fu *= 4
    return fu


def fu_breakdown(decomposition: Decomposition, context: ContextInput, rules: RuleSet | None = None) -> list[FuBreakdownItem]:
    """Every fu source of one arrangement, including the rounding step.

    The items sum to the final fu. Thirteen orphans is always yakuman and has none.
    """
    if isinstance(decomposition, ThirteenOrphansDecomposition):
        return []
    if isinstance(decomposition, SevenPairsDecomposition):
        return [FuBreakdownItem(name="七対子", fu=CHIITOITSU_FU)]

    view = HandView(decomposition=decomposition, context=context, rules=rules if rules is not None else RuleSet())
    if view.pinfu_shape and view.tsumo:
        return [FuBreakdownItem(name="副底", fu=20)]

    items = [FuBreakdownItem(name="副底", fu=20)]
    if view.tsumo:
        items.append(FuBreakdownItem(name="ツモ", fu=2))
    elif view.closed:
        items.append(FuBreakdownItem(name="門前ロン", fu=10))

    for position, group in enumerate(decomposition.groups):
        gfu = _group_fu(group, view.counts_as_concealed(position))
        if gfu:
            items.append(FuBreakdownItem(name="面子", fu=gfu))

    pfu = _pair_fu(decomposition.pair, view)
    if pfu:
        items.append(FuBreakdownItem(name="雀頭", fu=pfu))

    if view.wait in FU_WAITS:
        items.append(FuBreakdownItem(name="待ち", fu=2))

    total = sum(item.fu for item in items)
    if total == 20 and not view.closed:
        # open hand with no fu source is scored as 30
        items.append(FuBreakdownItem(name="喰い平和", fu=10))
        return items

    rounded = _round_up_10(total)
    if rounded > total:
        items.append(FuBreakdownItem(name="切り上げ", fu=rounded - total))
    return items


def compute_fu(decomposition: Decomposition, context: ContextInput, rules: RuleSet | None = None) -> int:
    return sum(item.fu for item in fu_breakdown(decomposition, context, rules))
