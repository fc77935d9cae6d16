import pytest

from riichi_scoring.decomposer import decompose
from riichi_scoring.errors import NoYakuFound
from riichi_scoring.schemas import ContextInput, DoraBreakdown, FuBreakdownItem, HandInput, RuleSet
from riichi_scoring.selector import Candidate, score_candidate, select_best
from riichi_scoring.yaku import YakuHit, YakuResult


def context(**kwargs) -> ContextInput:
    payload = {"win_type": "ron", "round_wind": "E", "seat_wind": "S"}
    payload.update(kwargs)
    return ContextInput.model_validate(payload)


def decompositions(closed: str, win: str):
    hand = HandInput(closed_tiles=closed.split(), melds=[], win_tile=win)
    return sorted(decompose(hand), key=lambda d: d.sort_key)


def test_select_best_prefers_higher_points():
    ds = decompositions("4m 5m 6m 5m 6m 7m 2p 3p 4p 6s 7s 8s N N", "5m")
    ctx = context()
    candidates = [score_candidate(d, ctx, RuleSet(), DoraBreakdown()) for d in ds]
    result = select_best(candidates, ctx)
    assert result.wait == "ryanmen"
    assert [y.name for y in result.yaku] == ["平和"]


def test_select_best_is_order_independent():
    ds = decompositions("1m 1m 1m 2m 3m 4m 5m 6m 7m 8m 9m 9m 9m 5m", "5m")
    ctx = context(win_type="tsumo")
    candidates = [score_candidate(d, ctx, RuleSet(), DoraBreakdown()) for d in ds]
    forward = select_best(candidates, ctx)
    backward = select_best(list(reversed(candidates)), ctx)
    assert forward == backward
    assert select_best(candidates, ctx) == forward


def test_yakuman_outranks_any_regular_hand():
    (d,) = decompositions("1m 2m 3m 4p 5p 6p 7s 8s 9s E E E 2p 2p", "2p")
    regular = Candidate(
        decomposition=d,
        yaku=YakuResult(yaku=(YakuHit("riichi", "立直", 1),)),
        fu_items=(FuBreakdownItem(name="副底", fu=20), FuBreakdownItem(name="門前ロン", fu=10)),
        dora=DoraBreakdown(dora=20),
    )
    yakuman = Candidate(
        decomposition=d,
        yaku=YakuResult(yakuman=(YakuHit("tenhou", "天和", 1),), yakuman_multiple=1),
        fu_items=(),
        dora=DoraBreakdown(),
    )
    result = select_best([regular, yakuman], context())
    assert result.yakuman == ["天和"]
    assert result.point_label == "役満"
    assert result.yaku == []


def test_kazoe_yakuman_reports_multiple():
    (d,) = decompositions("1m 2m 3m 4p 5p 6p 7s 8s 9s E E E 2p 2p", "2p")
    regular = Candidate(
        decomposition=d,
        yaku=YakuResult(yaku=(YakuHit("riichi", "立直", 1),)),
        fu_items=(FuBreakdownItem(name="副底", fu=20), FuBreakdownItem(name="門前ロン", fu=10)),
        dora=DoraBreakdown(dora=12),
    )
    result = select_best([regular], context())
    assert result.han == 13
    assert result.point_label == "数え役満"
    assert result.yakuman_multiple == 1
    assert result.points.ron == 32000


def test_select_best_without_yaku_raises():
    (d,) = decompositions("1m 2m 3m 4p 5p 6p 7s 8s 9s E E E 2p 2p", "2p")
    ctx = context(round_wind="W")
    candidate = score_candidate(d, ctx, RuleSet(), DoraBreakdown(dora=3))
    with pytest.raises(NoYakuFound):
        select_best([candidate], ctx)
    with pytest.raises(NoYakuFound):
        select_best([], ctx)
