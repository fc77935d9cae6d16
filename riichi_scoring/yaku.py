from __future__ import annotations

from collections import Counter
from dataclasses import dataclass
from typing import Callable

from riichi_scoring.decomposer import Decomposition, SevenPairsDecomposition, ThirteenOrphansDecomposition
from riichi_scoring.hand_view import HandView
from riichi_scoring.melds import GroupKind, Wait
from riichi_scoring.schemas import ContextInput, DoraBreakdown, HandInput, RuleSet
from riichi_scoring.tiles import (
    DRAGON_NAMES,
    NUMBER_SUITS,
    WIND_NAMES,
    Suit,
    Tile,
    dora_from_indicator,
    is_dragon,
    is_green,
    is_honor,
    is_simple,
    is_terminal,
    is_wind,
    is_yaochu,
    rank_of,
    suit_of,
    tile_to_index,
)


@dataclass(frozen=True)
class YakuRule:
    """A named scoring condition.

    `open_han` is None for yaku that require a concealed hand. `yakuman` is the
    yakuman multiple (2 for the double variants); regular yaku leave it at 0.
    """

    key: str
    name: str
    han: int
    predicate: Callable[[HandView], bool]
    open_han: int | None = None
    yakuman: int = 0
    supersedes: tuple[str, ...] = ()
    label: Callable[[HandView], str] | None = None

    def han_for(self, view: HandView) -> int | None:
        if view.closed:
            return self.han
        return self.open_han

    def multiple(self, rules: RuleSet) -> int:
        if self.yakuman > 1 and not rules.double_yakuman_ari:
            return 1
        return self.yakuman


@dataclass(frozen=True)
class YakuHit:
    key: str
    name: str
    han: int


@dataclass(frozen=True)
class YakuResult:
    yaku: tuple[YakuHit, ...] = ()
    yakuman: tuple[YakuHit, ...] = ()
    yakuman_multiple: int = 0

    @property
    def is_yakuman(self) -> bool:
        return self.yakuman_multiple > 0

    @property
    def han(self) -> int:
        return sum(hit.han for hit in self.yaku)

    @property
    def has_yaku(self) -> bool:
        return bool(self.yaku) or self.is_yakuman


# --- context-only predicates ---


def _riichi(v: HandView) -> bool:
    return v.context.riichi


def _double_riichi(v: HandView) -> bool:
    return v.context.double_riichi


def _ippatsu(v: HandView) -> bool:
    return v.context.ippatsu


def _menzen_tsumo(v: HandView) -> bool:
    return v.tsumo


def _haitei(v: HandView) -> bool:
    return v.context.haitei and v.tsumo


def _houtei(v: HandView) -> bool:
    return v.context.houtei and not v.tsumo


def _rinshan(v: HandView) -> bool:
    return v.context.rinshan


def _chankan(v: HandView) -> bool:
    return v.context.chankan


# --- standard shape predicates ---


def _has_set_of(v: HandView, index: int) -> bool:
    return any(g.tile == index for g in v.sets)


def _dragon(index: int) -> Callable[[HandView], bool]:
    return lambda v: _has_set_of(v, index)


def _round_wind(v: HandView) -> bool:
    return _has_set_of(v, v.round_wind)


def _seat_wind(v: HandView) -> bool:
    return _has_set_of(v, v.seat_wind)


def _pinfu(v: HandView) -> bool:
    return v.pinfu_shape


def _tanyao(v: HandView) -> bool:
    if not v.closed and not v.rules.kuitan_ari:
        return False
    return all(is_simple(t) for t in v.tiles)


def _identical_run_pairs(v: HandView) -> int:
    counts = Counter(g.tile for g in v.runs)
    return sum(c // 2 for c in counts.values())


def _iipeikou(v: HandView) -> bool:
    return _identical_run_pairs(v) == 1


def _ryanpeikou(v: HandView) -> bool:
    return _identical_run_pairs(v) == 2


def _sanshoku(v: HandView) -> bool:
    starts = {(suit_of(g.tile), rank_of(g.tile)) for g in v.runs}
    return any(all((suit, rank) in starts for suit in NUMBER_SUITS) for rank in range(1, 8))


def _ittsu(v: HandView) -> bool:
    starts = {g.tile for g in v.runs}
    return any({base, base + 3, base + 6} <= starts for base in (0, 9, 18))


def _outside(v: HandView) -> bool:
    if v.standard is None:
        return False
    return is_yaochu(v.pair) and all(g.has_yaochu for g in v.groups)


def _chanta(v: HandView) -> bool:
    return _outside(v)


def _junchan(v: HandView) -> bool:
    return _outside(v) and not any(is_honor(t) for t in v.tiles)


def _toitoi(v: HandView) -> bool:
    return v.standard is not None and len(v.sets) == 4


def _sanankou(v: HandView) -> bool:
    return v.concealed_set_count == 3


def _sanshoku_doukou(v: HandView) -> bool:
    numbered = {(suit_of(g.tile), rank_of(g.tile)) for g in v.sets}
    return any(all((suit, rank) in numbered for suit in NUMBER_SUITS) for rank in range(1, 10))


def _kan_count(v: HandView) -> int:
    return sum(1 for g in v.groups if g.kind == GroupKind.quad)


def _sankantsu(v: HandView) -> bool:
    return _kan_count(v) == 3


def _shousangen(v: HandView) -> bool:
    if v.pair is None or not is_dragon(v.pair):
        return False
    return sum(1 for g in v.sets if is_dragon(g.tile)) == 2


def _honroutou(v: HandView) -> bool:
    return all(is_yaochu(t) for t in v.tiles) and any(is_honor(t) for t in v.tiles)


def _chiitoitsu(v: HandView) -> bool:
    return isinstance(v.decomposition, SevenPairsDecomposition)


def _number_suits(v: HandView) -> set[Suit]:
    return {suit_of(t) for t in v.tiles if not is_honor(t)}


def _honitsu(v: HandView) -> bool:
    return len(_number_suits(v)) == 1 and any(is_honor(t) for t in v.tiles)


def _chinitsu(v: HandView) -> bool:
    return len(_number_suits(v)) == 1 and not any(is_honor(t) for t in v.tiles)


# --- yakuman predicates ---


def _kokushi(v: HandView) -> bool:
    return isinstance(v.decomposition, ThirteenOrphansDecomposition)


def _kokushi_13(v: HandView) -> bool:
    return _kokushi(v) and v.wait == Wait.thirteen_sided


def _suuankou(v: HandView) -> bool:
    return v.concealed_set_count == 4


def _suuankou_tanki(v: HandView) -> bool:
    return _suuankou(v) and v.wait == Wait.tanki


def _daisangen(v: HandView) -> bool:
    return sum(1 for g in v.sets if is_dragon(g.tile)) == 3


def _wind_sets(v: HandView) -> int:
    return sum(1 for g in v.sets if is_wind(g.tile))


def _shousuushii(v: HandView) -> bool:
    return _wind_sets(v) == 3 and v.pair is not None and is_wind(v.pair)


def _daisuushii(v: HandView) -> bool:
    return _wind_sets(v) == 4


def _tsuuiisou(v: HandView) -> bool:
    return all(is_honor(t) for t in v.tiles)


def _chinroutou(v: HandView) -> bool:
    return all(is_terminal(t) for t in v.tiles)


def _ryuuiisou(v: HandView) -> bool:
    return all(is_green(t) for t in v.tiles)


def _suukantsu(v: HandView) -> bool:
    return _kan_count(v) == 4


def _chuuren_extra(v: HandView) -> int | None:
    """The tile added to 1112345678999 of one suit, or None if the hand is not nine gates."""
    if v.standard is None or any(g.declared for g in v.groups):
        return None
    suits = {suit_of(t) for t in v.tiles}
    if len(suits) != 1 or next(iter(suits)) not in NUMBER_SUITS:
        return None
    counts = Counter(rank_of(t) for t in v.tiles)
    required = {1: 3, 2: 1, 3: 1, 4: 1, 5: 1, 6: 1, 7: 1, 8: 1, 9: 3}
    if any(counts[rank] < need for rank, need in required.items()):
        return None
    extra = next(rank for rank, need in required.items() if counts[rank] > need)
    return next(t for t in v.tiles if rank_of(t) == extra)


def _chuuren(v: HandView) -> bool:
    return _chuuren_extra(v) is not None


def _junsei_chuuren(v: HandView) -> bool:
    return _chuuren_extra(v) == v.decomposition.win_tile


def _tenhou(v: HandView) -> bool:
    return v.context.tenhou


def _chiihou(v: HandView) -> bool:
    return v.context.chiihou


def _renhou(v: HandView) -> bool:
    return v.context.renhou


YAKU_RULES: tuple[YakuRule, ...] = (
    YakuRule("riichi", "立直", 1, _riichi),
    YakuRule("double_riichi", "ダブル立直", 2, _double_riichi, supersedes=("riichi",)),
    YakuRule("ippatsu", "一発", 1, _ippatsu),
    YakuRule("menzen_tsumo", "門前清自摸和", 1, _menzen_tsumo),
    YakuRule("haitei", "海底摸月", 1, _haitei, open_han=1),
    YakuRule("houtei", "河底撈魚", 1, _houtei, open_han=1),
    YakuRule("rinshan", "嶺上開花", 1, _rinshan, open_han=1),
    YakuRule("chankan", "槍槓", 1, _chankan, open_han=1),
    YakuRule(
        "round_wind",
        "場風",
        1,
        _round_wind,
        open_han=1,
        label=lambda v: f"場風 {WIND_NAMES[v.context.round_wind.value]}",
    ),
    YakuRule(
        "seat_wind",
        "自風",
        1,
        _seat_wind,
        open_han=1,
        label=lambda v: f"自風 {WIND_NAMES[v.context.seat_wind.value]}",
    ),
    YakuRule("haku", f"役牌 {DRAGON_NAMES['P']}", 1, _dragon(tile_to_index("P")), open_han=1),
    YakuRule("hatsu", f"役牌 {DRAGON_NAMES['F']}", 1, _dragon(tile_to_index("F")), open_han=1),
    YakuRule("chun", f"役牌 {DRAGON_NAMES['C']}", 1, _dragon(tile_to_index("C")), open_han=1),
    YakuRule("pinfu", "平和", 1, _pinfu),
    YakuRule("tanyao", "断么九", 1, _tanyao, open_han=1),
    YakuRule("iipeikou", "一盃口", 1, _iipeikou),
    YakuRule("ryanpeikou", "二盃口", 3, _ryanpeikou, supersedes=("iipeikou",)),
    YakuRule("sanshoku", "三色同順", 2, _sanshoku, open_han=1),
    YakuRule("ittsu", "一気通貫", 2, _ittsu, open_han=1),
    YakuRule("chanta", "混全帯么九", 2, _chanta, open_han=1),
    YakuRule("junchan", "純全帯么九", 3, _junchan, open_han=2, supersedes=("chanta",)),
    YakuRule("toitoi", "対々和", 2, _toitoi, open_han=2),
    YakuRule("sanankou", "三暗刻", 2, _sanankou, open_han=2),
    YakuRule("sanshoku_doukou", "三色同刻", 2, _sanshoku_doukou, open_han=2),
    YakuRule("sankantsu", "三槓子", 2, _sankantsu, open_han=2),
    YakuRule("shousangen", "小三元", 2, _shousangen, open_han=2),
    YakuRule("honroutou", "混老頭", 2, _honroutou, open_han=2, supersedes=("chanta", "junchan")),
    YakuRule("chiitoitsu", "七対子", 2, _chiitoitsu),
    YakuRule("honitsu", "混一色", 3, _honitsu, open_han=2),
    YakuRule("chinitsu", "清一色", 6, _chinitsu, open_han=5, supersedes=("honitsu",)),
)

YAKUMAN_RULES: tuple[YakuRule, ...] = (
    YakuRule("tenhou", "天和", 13, _tenhou, yakuman=1),
    YakuRule("chiihou", "地和", 13, _chiihou, yakuman=1),
    YakuRule("renhou", "人和", 13, _renhou, yakuman=1),
    YakuRule("kokushi", "国士無双", 13, _kokushi, yakuman=1),
    YakuRule("kokushi_13", "国士無双十三面待ち", 13, _kokushi_13, yakuman=2, supersedes=("kokushi",)),
    YakuRule("suuankou", "四暗刻", 13, _suuankou, yakuman=1),
    YakuRule("suuankou_tanki", "四暗刻単騎", 13, _suuankou_tanki, yakuman=2, supersedes=("suuankou",)),
    YakuRule("daisangen", "大三元", 13, _daisangen, open_han=13, yakuman=1),
    YakuRule("shousuushii", "小四喜", 13, _shousuushii, open_han=13, yakuman=1),
    YakuRule("daisuushii", "大四喜", 13, _daisuushii, open_han=13, yakuman=2, supersedes=("shousuushii",)),
    YakuRule("tsuuiisou", "字一色", 13, _tsuuiisou, open_han=13, yakuman=1),
    YakuRule("chinroutou", "清老頭", 13, _chinroutou, open_han=13, yakuman=1),
    YakuRule("ryuuiisou", "緑一色", 13, _ryuuiisou, open_han=13, yakuman=1),
    YakuRule("suukantsu", "四槓子", 13, _suukantsu, open_han=13, yakuman=1),
    YakuRule("chuuren", "九蓮宝燈", 13, _chuuren, yakuman=1),
    YakuRule("junsei_chuuren", "純正九蓮宝燈", 13, _junsei_chuuren, yakuman=2, supersedes=("chuuren",)),
)


def _matching(rules: tuple[YakuRule, ...], view: HandView) -> list[YakuRule]:
    matched = [r for r in rules if r.han_for(view) is not None and r.predicate(view)]
    superseded = {key for r in matched for key in r.supersedes}
    return [r for r in matched if r.key not in superseded]


def _hit(rule: YakuRule, view: HandView, han: int) -> YakuHit:
    name = rule.label(view) if rule.label is not None else rule.name
    return YakuHit(key=rule.key, name=name, han=han)


def evaluate(decomposition: Decomposition, context: ContextInput, rules: RuleSet | None = None) -> YakuResult:
    """Yaku satisfied by one arrangement. Any yakuman suppresses the regular yaku."""
    view = HandView(decomposition=decomposition, context=context, rules=rules if rules is not None else RuleSet())

    yakuman_rules = _matching(YAKUMAN_RULES, view)
    if yakuman_rules:
        multiples = [r.multiple(view.rules) for r in yakuman_rules]
        if view.rules.yakuman_stacking == "max":
            best = max(range(len(yakuman_rules)), key=lambda i: multiples[i])
            yakuman_rules, multiples = [yakuman_rules[best]], [multiples[best]]
        hits = tuple(_hit(r, view, m) for r, m in zip(yakuman_rules, multiples))
        return YakuResult(yakuman=hits, yakuman_multiple=sum(multiples))

    hits = tuple(_hit(r, view, r.han_for(view)) for r in _matching(YAKU_RULES, view))
    return YakuResult(yaku=hits)


def _count_dora(tiles: list[Tile], indicators: list[str]) -> int:
    # Tile equality ignores the red flag, so a red five matches a plain five dora.
    counts = Counter(tiles)
    return sum(counts[Tile(index=dora_from_indicator(tile_to_index(ind)))] for ind in indicators)


def _hand_tile_codes(hand: HandInput) -> list[str]:
    codes = list(hand.closed_tiles)
    for meld in hand.melds:
        codes.extend(meld.tiles)
    return codes


def count_dora(hand: HandInput, context: ContextInput, rules: RuleSet | None = None) -> DoraBreakdown:
    """Dora han for the whole hand. Ura dora only count under riichi."""
    rules = rules if rules is not None else RuleSet()
    tiles = [Tile.from_code(c) for c in _hand_tile_codes(hand)]
    return DoraBreakdown(
        dora=_count_dora(tiles, context.dora_indicators),
        aka_dora=sum(1 for t in tiles if t.red) if rules.aka_ari else 0,
        ura_dora=_count_dora(tiles, context.ura_dora_indicators) if context.any_riichi else 0,
    )


def dora_items(dora: DoraBreakdown) -> list[tuple[str, int]]:
    items = [("ドラ", dora.dora), ("赤ドラ", dora.aka_dora), ("裏ドラ", dora.ura_dora)]
    return [(name, han) for name, han in items if han > 0]

