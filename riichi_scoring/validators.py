import re

from fastapi import HTTPException

from riichi_scoring.schemas import Meld, MeldType, ScoreRequest
from riichi_scoring.tiles import RED_FIVE_CODES, normalize_tile, tile_to_index

TILE_RE = re.compile(r"^(?:[1-9][mps]|5[mps]r|[ESWNPFC])$")


def validate_tile(tile: str) -> None:
    if not TILE_RE.fullmatch(tile):
        raise HTTPException(status_code=422, detail=f"Invalid tile code: {tile}")


def _validate_meld(meld: Meld) -> None:
    if meld.type in {MeldType.chi, MeldType.pon} and len(meld.tiles) != 3:
        raise HTTPException(status_code=422, detail=f"{meld.type.value} must contain exactly 3 tiles")
    if meld.type in {MeldType.kan, MeldType.ankan, MeldType.kakan} and len(meld.tiles) != 4:
        raise HTTPException(status_code=422, detail=f"{meld.type.value} must contain exactly 4 tiles")

    indices = sorted(tile_to_index(t) for t in meld.tiles)
    if meld.type == MeldType.chi:
        first = indices[0]
        if first >= 27 or first % 9 > 6 or indices != [first, first + 1, first + 2]:
            raise HTTPException(status_code=422, detail="chi must be three consecutive tiles of one suit")
    elif len(set(indices)) != 1:
        raise HTTPException(status_code=422, detail=f"{meld.type.value} tiles must be identical")

    if meld.type == MeldType.ankan and meld.open:
        raise HTTPException(status_code=422, detail="ankan must not be open")
    if meld.type != MeldType.ankan and not meld.open:
        raise HTTPException(status_code=422, detail=f"{meld.type.value} must be open")


def validate_score_request(req: ScoreRequest) -> None:
    """Tile legality and hand composition; winning shape is left to the engine."""
    all_tiles = list(req.hand.closed_tiles)
    for meld in req.hand.melds:
        all_tiles.extend(meld.tiles)
    for tile in all_tiles:
        validate_tile(tile)
    validate_tile(req.hand.win_tile)
    for tile in req.context.dora_indicators:
        validate_tile(tile)
    for tile in req.context.ura_dora_indicators:
        validate_tile(tile)

    tile_counts: dict[str, int] = {}
    red_counts: dict[str, int] = {}
    for tile in all_tiles:
        if tile in RED_FIVE_CODES:
            red_counts[tile] = red_counts.get(tile, 0) + 1
            if red_counts[tile] > 1:
                raise HTTPException(status_code=422, detail=f"At most one red five per suit: {tile}")
        normalized = normalize_tile(tile)
        tile_counts[normalized] = tile_counts.get(normalized, 0) + 1
        if tile_counts[normalized] >= 5:
            raise HTTPException(status_code=422, detail=f"Tile appears 5+ times in hand: {normalized}")

    if len(req.hand.melds) > 4:
        raise HTTPException(status_code=422, detail="A hand cannot declare more than 4 melds")
    for meld in req.hand.melds:
        _validate_meld(meld)

    kan_melds = sum(1 for m in req.hand.melds if m.type in {MeldType.kan, MeldType.ankan, MeldType.kakan})
    total_tiles = len(req.hand.closed_tiles) + sum(len(m.tiles) for m in req.hand.melds)
    expected_total_tiles = 14 + kan_melds
    if total_tiles != expected_total_tiles:
        raise HTTPException(
            status_code=422,
            detail=f"Total tiles must be {expected_total_tiles} at win state (14 + number of kans)",
        )

    win = normalize_tile(req.hand.win_tile)
    if win not in {normalize_tile(t) for t in req.hand.closed_tiles}:
        raise HTTPException(status_code=422, detail="win_tile must be one of closed_tiles")
