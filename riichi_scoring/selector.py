from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Iterable

from riichi_scoring.decomposer import Decomposition
from riichi_scoring.errors import NoYakuFound
from riichi_scoring.fu import fu_breakdown
from riichi_scoring.payments import Settlement, translate
from riichi_scoring.schemas import (
    ContextInput,
    DoraBreakdown,
    FuBreakdownItem,
    RuleSet,
    ScoreBreakdown,
    YakuItem,
)
from riichi_scoring.yaku import YakuResult, dora_items, evaluate

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Candidate:
    """One arrangement with its yaku, fu and dora, ready to be ranked."""

    decomposition: Decomposition
    yaku: YakuResult
    fu_items: tuple[FuBreakdownItem, ...]
    dora: DoraBreakdown

    @property
    def fu(self) -> int:
        return sum(item.fu for item in self.fu_items)

    @property
    def han(self) -> int:
        return self.yaku.han + self.dora.total


def score_candidate(
    decomposition: Decomposition, context: ContextInput, rules: RuleSet, dora: DoraBreakdown
) -> Candidate:
    yaku = evaluate(decomposition, context, rules)
    if yaku.is_yakuman:
        return Candidate(decomposition=decomposition, yaku=yaku, fu_items=(), dora=DoraBreakdown())
    items = tuple(fu_breakdown(decomposition, context, rules))
    return Candidate(decomposition=decomposition, yaku=yaku, fu_items=items, dora=dora)


def _settlement(candidate: Candidate, context: ContextInput, rules: RuleSet) -> Settlement:
    if candidate.yaku.is_yakuman:
        return translate(0, 0, context, rules, yakuman_multiple=candidate.yaku.yakuman_multiple)
    return translate(candidate.fu, candidate.han, context, rules)


def _breakdown(candidate: Candidate, settlement: Settlement, considered: int) -> ScoreBreakdown:
    decomposition = candidate.decomposition
    explanation = [
        f"Selected {decomposition.shape} arrangement: {decomposition.describe()}",
        f"{considered} scoreable arrangement(s) considered.",
    ]

    if candidate.yaku.is_yakuman:
        multiple = candidate.yaku.yakuman_multiple
        return ScoreBreakdown(
            han=13 * multiple,
            fu=0,
            yakuman=[hit.name for hit in candidate.yaku.yakuman],
            yakuman_multiple=multiple,
            dora=DoraBreakdown(),
            hand_shape=decomposition.shape,
            wait=decomposition.wait.value,
            base_points=settlement.base_points,
            point_label=settlement.point_label,
            points=settlement.points,
            payments=settlement.payments,
            explanation=explanation,
        )

    yaku = [YakuItem(name=hit.name, han=hit.han) for hit in candidate.yaku.yaku]
    yaku.extend(YakuItem(name=name, han=han) for name, han in dora_items(candidate.dora))
    return ScoreBreakdown(
        han=candidate.han,
        fu=candidate.fu,
        fu_breakdown=list(candidate.fu_items),
        yaku=yaku,
        yakuman_multiple=settlement.yakuman_multiple,
        dora=candidate.dora,
        hand_shape=decomposition.shape,
        wait=decomposition.wait.value,
        base_points=settlement.base_points,
        point_label=settlement.point_label,
        points=settlement.points,
        payments=settlement.payments,
        explanation=explanation,
    )


def select_best(candidates: Iterable[Candidate], context: ContextInput, rules: RuleSet | None = None) -> ScoreBreakdown:
    """Pick the highest scoring arrangement.

    Yakuman beat everything else, larger multiples first. Regular hands are ranked by
    the points they earn, then by han, then by fu. Remaining ties go to the
    arrangement with the smallest sort key so the choice does not depend on order.
    """
    rules = rules if rules is not None else RuleSet()
    scoreable = sorted(
        (c for c in candidates if c.yaku.has_yaku),
        key=lambda c: c.decomposition.sort_key,
    )
    if not scoreable:
        raise NoYakuFound("No Yaku Found")

    settlements = [_settlement(c, context, rules) for c in scoreable]

    def rank(i: int) -> tuple[int, int, int, int, int]:
        c = scoreable[i]
        return (
            1 if c.yaku.is_yakuman else 0,
            c.yaku.yakuman_multiple,
            settlements[i].payments.hand_points_received,
            c.han,
            c.fu,
        )

    best = max(range(len(scoreable)), key=rank)
    logger.debug(
        "selected %s arrangement (%s) out of %d",
        scoreable[best].decomposition.shape,
        scoreable[best].decomposition.describe(),
        len(scoreable),
    )
    return _breakdown(scoreable[best], settlements[best], len(scoreable))
