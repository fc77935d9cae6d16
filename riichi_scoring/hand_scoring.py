from __future__ import annotations

import logging

from riichi_scoring.decomposer import decompose
from riichi_scoring.errors import AmbiguousConfiguration
from riichi_scoring.schemas import ContextInput, HandInput, MeldType, RuleSet, ScoreBreakdown, Wind, WinType
from riichi_scoring.selector import score_candidate, select_best
from riichi_scoring.yaku import count_dora

logger = logging.getLogger(__name__)

KAN_TYPES = {MeldType.kan, MeldType.ankan, MeldType.kakan}


def _context_conflicts(hand: HandInput, context: ContextInput) -> list[str]:
    conflicts: list[str] = []
    ron = context.win_type == WinType.ron
    tsumo = context.win_type == WinType.tsumo
    has_open_meld = any(m.open for m in hand.melds)
    has_kan = any(m.type in KAN_TYPES for m in hand.melds)
    dealer = context.dealer

    if context.is_dealer is not None and context.is_dealer != (context.seat_wind == Wind.E):
        conflicts.append("is_dealer must match seat_wind (the dealer sits East)")
    if context.riichi and context.double_riichi:
        conflicts.append("riichi and double_riichi cannot both be true")
    if context.ippatsu and not context.any_riichi:
        conflicts.append("ippatsu cannot be true when riichi/double_riichi is false")
    if context.any_riichi and has_open_meld:
        conflicts.append("riichi requires a concealed hand")
    if context.haitei and ron:
        conflicts.append("haitei cannot be true on ron")
    if context.houtei and tsumo:
        conflicts.append("houtei cannot be true on tsumo")
    if context.haitei and context.houtei:
        conflicts.append("haitei and houtei cannot both be true")
    if context.rinshan and ron:
        conflicts.append("rinshan cannot be true on ron")
    if context.rinshan and not has_kan:
        conflicts.append("rinshan requires a declared kan")
    if context.chankan and tsumo:
        conflicts.append("chankan cannot be true on tsumo")
    if context.chankan and context.rinshan:
        conflicts.append("chankan and rinshan cannot both be true")
    if context.rinshan and context.haitei:
        conflicts.append("rinshan and haitei cannot both be true")
    if context.chiihou and context.tenhou:
        conflicts.append("chiihou and tenhou cannot both be true")
    if (context.chiihou or context.tenhou) and not tsumo:
        conflicts.append("chiihou/tenhou require tsumo")
    if context.tenhou and not dealer:
        conflicts.append("tenhou requires dealer")
    if context.chiihou and dealer:
        conflicts.append("chiihou requires non-dealer")
    if (context.chiihou or context.tenhou or context.renhou) and hand.melds:
        conflicts.append("tenhou/chiihou/renhou cannot have any declared melds")
    if context.renhou and not ron:
        conflicts.append("renhou requires ron")
    if context.renhou and dealer:
        conflicts.append("renhou requires non-dealer")
    return conflicts


def check_context(hand: HandInput, context: ContextInput) -> None:
    conflicts = _context_conflicts(hand, context)
    if conflicts:
        raise AmbiguousConfiguration(conflicts[0], details={"conflicts": conflicts})


def score_hand_shape(hand: HandInput, context: ContextInput, rules: RuleSet | None = None) -> ScoreBreakdown:
    """Hand shape + context -> best score.

    Raises AmbiguousConfiguration, InvalidHandShape or NoYakuFound.
    """
    rules = rules if rules is not None else RuleSet()
    check_context(hand, context)
    logger.debug("scoring hand: %d concealed tile(s), %d meld(s)", len(hand.closed_tiles), len(hand.melds))

    decompositions = decompose(hand)
    dora = count_dora(hand, context, rules)
    candidates = [score_candidate(d, context, rules, dora) for d in decompositions]
    return select_best(candidates, context, rules)
