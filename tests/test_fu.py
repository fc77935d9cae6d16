from riichi_scoring.decomposer import decompose
from riichi_scoring.fu import compute_fu, fu_breakdown
from riichi_scoring.melds import Wait
from riichi_scoring.schemas import ContextInput, HandInput, RuleSet


def context(**kwargs) -> ContextInput:
    payload = {"win_type": "ron", "round_wind": "E", "seat_wind": "S"}
    payload.update(kwargs)
    return ContextInput.model_validate(payload)


def only(closed: str, win: str, melds=None):
    (d,) = decompose(HandInput(closed_tiles=closed.split(), melds=melds or [], win_tile=win))
    return d


def test_pinfu_ron_is_30_fu():
    d = only("2m 3m 4m 5p 6p 7p 4s 5s 6s 7s 8s 9s N N", "5p")
    assert [(i.name, i.fu) for i in fu_breakdown(d, context())] == [("副底", 20), ("門前ロン", 10)]
    assert compute_fu(d, context()) == 30


def test_pinfu_tsumo_is_20_fu():
    d = only("2m 3m 4m 5p 6p 7p 4s 5s 6s 7s 8s 9s N N", "5p")
    assert compute_fu(d, context(win_type="tsumo")) == 20


def test_seven_pairs_is_fixed_25_fu():
    decompositions = decompose(
        HandInput(closed_tiles="1m 1m 4m 4m 7p 7p 2s 2s 5s 5s E E C C".split(), melds=[], win_tile="C")
    )
    (d,) = decompositions
    assert compute_fu(d, context(win_type="tsumo")) == 25


def test_open_hand_without_fu_is_raised_to_30():
    melds = [{"type": "chi", "tiles": ["1m", "2m", "3m"], "open": True}]
    d = only("4p 5p 6p 7s 8s 9s 2s 3s 4s 5m 5m", "4p", melds=melds)
    assert d.wait == Wait.ryanmen
    items = fu_breakdown(d, context())
    assert [(i.name, i.fu) for i in items] == [("副底", 20), ("喰い平和", 10)]


def test_set_fu_by_kind():
    melds = [
        {"type": "pon", "tiles": ["5m", "5m", "5m"], "open": True},
        {"type": "ankan", "tiles": ["N", "N", "N", "N"], "open": False},
        {"type": "kan", "tiles": ["3s", "3s", "3s", "3s"], "open": True},
    ]
    d = only("9p 9p 9p 2s 2s", "2s", melds=melds)
    sets = [i.fu for i in fu_breakdown(d, context(win_type="tsumo")) if i.name == "面子"]
    assert sets == [2, 32, 8, 8]


def test_ron_completed_triplet_scores_as_open():
    d = only("1m 1m 1m 4p 5p 6p 7s 8s 9s 2m 3m 4m 5p 5p", "1m")
    items = fu_breakdown(d, context())
    assert [i.fu for i in items if i.name == "面子"] == [4]
    assert compute_fu(d, context()) == 40


def test_double_wind_pair_follows_renpu_rule():
    d = only("1m 2m 3m 4p 5p 6p 7s 8s 9s 2m 3m 4m E E", "4m")
    ctx = context(round_wind="E", seat_wind="E")
    pair = [i.fu for i in fu_breakdown(d, ctx) if i.name == "雀頭"]
    assert pair == [4]
    pair = [i.fu for i in fu_breakdown(d, ctx, RuleSet(renpu_fu=2)) if i.name == "雀頭"]
    assert pair == [2]


def test_kanchan_wait_adds_2_and_rounds_up():
    d = only("1m 2m 3m 4p 5p 6p 7s 8s 9s 4m 5m 6m 5p 5p", "5m")
    items = fu_breakdown(d, context())
    assert ("待ち", 2) in [(i.name, i.fu) for i in items]
    assert items[-1].name == "切り上げ"
    assert compute_fu(d, context()) == 40
