from __future__ import annotations

from dataclasses import dataclass

from riichi_scoring.schemas import ContextInput, Payments, PlayerPayment, Points, RuleSet, Wind, WinType

YAKUMAN_BASE = 8000
MANGAN_BASE = 2000

# (minimum han, base points, label), highest first
LIMIT_HANDS = (
    (13, 8000, "数え役満"),
    (11, 6000, "三倍満"),
    (8, 4000, "倍満"),
    (6, 3000, "跳満"),
    (5, 2000, "満貫"),
)


@dataclass(frozen=True)
class Settlement:
    base_points: int
    point_label: str
    points: Points
    payments: Payments
    yakuman_multiple: int = 0


def round_up_100(value: int) -> int:
    return ((value + 99) // 100) * 100


def yakuman_label(multiple: int) -> str:
    if multiple <= 1:
        return "役満"
    if multiple == 2:
        return "ダブル役満"
    return f"{multiple}倍役満"


def base_points(han: int, fu: int, rules: RuleSet | None = None) -> tuple[int, str]:
    """Base points and limit label for a regular (non-yakuman) hand."""
    rules = rules if rules is not None else RuleSet()
    for min_han, base, label in LIMIT_HANDS:
        if han < min_han:
            continue
        if min_han == 13 and not rules.kazoe_yakuman_ari:
            return 6000, "三倍満"
        return base, label
    base = fu * (2 ** (han + 2))
    if base >= MANGAN_BASE:
        return MANGAN_BASE, "満貫"
    return base, "通常"


def _other_winds(*excluded: Wind) -> list[Wind]:
    return [w for w in Wind if w not in excluded]


def _settle(base: int, context: ContextInput) -> tuple[Points, Payments]:
    honba_bonus = context.honba * 300
    kyotaku_bonus = context.kyotaku * 1000

    if context.win_type == WinType.ron:
        ron = round_up_100(base * (6 if context.dealer else 4))
        points = Points(ron=ron)
        received = ron
        payers = [PlayerPayment(role="discarder", amount=ron + honba_bonus)]
    elif context.dealer:
        each = round_up_100(base * 2)
        points = Points(tsumo_dealer_pay=each, tsumo_non_dealer_pay=each)
        received = each * 3
        payers = [
            PlayerPayment(role="non_dealer", seat_wind=w, amount=each + context.honba * 100)
            for w in _other_winds(context.seat_wind)
        ]
    else:
        pay_dealer = round_up_100(base * 2)
        pay_non_dealer = round_up_100(base)
        points = Points(tsumo_dealer_pay=pay_dealer, tsumo_non_dealer_pay=pay_non_dealer)
        received = pay_dealer + pay_non_dealer * 2
        payers = [PlayerPayment(role="dealer", seat_wind=Wind.E, amount=pay_dealer + context.honba * 100)]
        payers.extend(
            PlayerPayment(role="non_dealer", seat_wind=w, amount=pay_non_dealer + context.honba * 100)
            for w in _other_winds(Wind.E, context.seat_wind)
        )

    with_honba = received + honba_bonus
    return points, Payments(
        hand_points_received=received,
        hand_points_with_honba=with_honba,
        honba_bonus=honba_bonus,
        kyotaku_bonus=kyotaku_bonus,
        total_received=with_honba + kyotaku_bonus,
        payers=payers,
    )


def translate(
    fu: int,
    han: int,
    context: ContextInput,
    rules: RuleSet | None = None,
    yakuman_multiple: int = 0,
) -> Settlement:
    """Turn fu/han, or a yakuman multiple, into the points each player pays."""
    if yakuman_multiple > 0:
        base, label = YAKUMAN_BASE * yakuman_multiple, yakuman_label(yakuman_multiple)
    else:
        base, label = base_points(han, fu, rules)
        # kazoe yakuman is the only regular hand reaching the yakuman base
        yakuman_multiple = 1 if base == YAKUMAN_BASE else 0
    points, payments = _settle(base, context)
    return Settlement(
        base_points=base,
        point_label=label,
        points=points,
        payments=payments,
        yakuman_multiple=yakuman_multiple,
    )
