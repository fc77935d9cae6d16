from __future__ import annotations

from enum import Enum
from typing import Literal

from pydantic import BaseModel, Field, conint


class Wind(str, Enum):
    E = "E"
    S = "S"
    W = "W"
    N = "N"


class WinType(str, Enum):
    ron = "ron"
    tsumo = "tsumo"


class MeldType(str, Enum):
    chi = "chi"
    pon = "pon"
    kan = "kan"
    ankan = "ankan"
    kakan = "kakan"


TileCode = str


class ErrorBody(BaseModel):
    code: str
    message: str
    details: dict | None = None


class ErrorResponse(BaseModel):
    error: ErrorBody


class Meld(BaseModel):
    type: MeldType
    tiles: list[TileCode]
    open: bool


class HandInput(BaseModel):
    closed_tiles: list[TileCode]
    melds: list[Meld] = Field(default_factory=list)
    win_tile: TileCode


class ContextInput(BaseModel):
    win_type: WinType
    is_dealer: bool | None = None
    round_wind: Wind
    seat_wind: Wind
    riichi: bool = False
    double_riichi: bool = False
    ippatsu: bool = False
    haitei: bool = False
    houtei: bool = False
    rinshan: bool = False
    chankan: bool = False
    chiihou: bool = False
    tenhou: bool = False
    renhou: bool = False
    dora_indicators: list[TileCode] = Field(default_factory=list)
    ura_dora_indicators: list[TileCode] = Field(default_factory=list)
    honba: conint(ge=0) = 0
    kyotaku: conint(ge=0) = 0

    @property
    def dealer(self) -> bool:
        if self.is_dealer is None:
            return self.seat_wind == Wind.E
        return self.is_dealer

    @property
    def any_riichi(self) -> bool:
        return self.riichi or self.double_riichi


class RuleSet(BaseModel):
    aka_ari: bool = True
    kuitan_ari: bool = True
    double_yakuman_ari: bool = True
    kazoe_yakuman_ari: bool = True
    renpu_fu: Literal[2, 4] = 4
    yakuman_stacking: Literal["sum", "max"] = "sum"


class ScoreRequest(BaseModel):
    hand: HandInput
    context: ContextInput
    rules: RuleSet = Field(default_factory=RuleSet)


class YakuItem(BaseModel):
    name: str
    han: int


class FuBreakdownItem(BaseModel):
    name: str
    fu: int


class DoraBreakdown(BaseModel):
    dora: int = 0
    aka_dora: int = 0
    ura_dora: int = 0

    @property
    def total(self) -> int:
        return self.dora + self.aka_dora + self.ura_dora


class Points(BaseModel):
    ron: int = 0
    tsumo_dealer_pay: int = 0
    tsumo_non_dealer_pay: int = 0


class PlayerPayment(BaseModel):
    role: Literal["dealer", "non_dealer", "discarder"]
    seat_wind: Wind | None = None
    amount: int


class Payments(BaseModel):
    hand_points_received: int
    hand_points_with_honba: int
    honba_bonus: int = 0
    kyotaku_bonus: int = 0
    total_received: int
    payers: list[PlayerPayment] = Field(default_factory=list)


class ScoreBreakdown(BaseModel):
    han: int
    fu: int
    fu_breakdown: list[FuBreakdownItem] = Field(default_factory=list)
    yaku: list[YakuItem] = Field(default_factory=list)
    yakuman: list[str] = Field(default_factory=list)
    yakuman_multiple: int = 0
    dora: DoraBreakdown
    hand_shape: Literal["standard", "seven_pairs", "thirteen_orphans"]
    wait: str | None = None
    base_points: int
    point_label: str
    points: Points
    payments: Payments
    explanation: list[str] = Field(default_factory=list)


class ScoreResponse(BaseModel):
    status: Literal["ok"]
    result: ScoreBreakdown
    warnings: list[str] = Field(default_factory=list)
