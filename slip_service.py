import logging
from typing import Optional, Tuple

import config
from models import CanonicalOddsRecord, Game, Market, OddsQuote, Pick, PickSlip, SlipSummary
from odds_engine import InvalidOddsFormat, combine_parlay, parlay_decimal
import standardizer

logger = logging.getLogger(__name__)

def pick_signature(pick: Pick) -> Tuple[str, str, str, Optional[float]]:
    q = pick.quote
    return (pick.game.id, q.market.value, q.side.lower(), q.point)

def pick_from_record(
    record: CanonicalOddsRecord,
    game: Game,
    reasoning: Optional[str] = None,
    stake: Optional[float] = None,
    pick_id: Optional[str] = None,
) -> Pick:
    """Turn a tapped odds quote into a slip leg. Unavailable prices cannot be picked."""
    if not record.is_available:
        raise InvalidOddsFormat(f"{record.provider} has no usable price for this outcome", value=record.price)
    if record.market is None or not record.side:
        raise ValueError(f"Odds record from {record.provider} has no market/side to bet on")

    quote = OddsQuote(
        price=record.price,
        market=record.market,
        side=record.side,
        point=None if record.market == Market.MONEYLINE else record.point,
    )
    return Pick(id=pick_id, game=game, quote=quote, reasoning=reasoning, stake=stake)

def add_pick(slip: PickSlip, pick: Pick) -> bool:
    sig = pick_signature(pick)
    if any(pick_signature(p) == sig for p in slip.picks):
        logger.info(f"Leg already on slip: {standardizer.format_pick_display(pick)}")
        return False
    slip.picks.append(pick)
    return True

def remove_pick(slip: PickSlip, index: int) -> Optional[Pick]:
    if not -len(slip.picks) <= index < len(slip.picks): return None
    return slip.picks.pop(index)

def clear_slip(slip: PickSlip) -> None:
    slip.picks.clear()

def summarize_slip(slip: PickSlip) -> Optional[SlipSummary]:
    """
    Everything the slip/post widgets render. None for an empty slip.

    Bad leg prices are caught here and shown as ODDS_UNAVAILABLE_TEXT
    rather than breaking the post flow.
    """
    if not slip.is_displayable: return None

    parlay_odds = None
    combined = None
    if slip.is_parlay:
        try:
            parlay_odds = combine_parlay(slip.picks)
            combined = parlay_decimal(slip.picks)
        except InvalidOddsFormat as e:
            logger.warning(f"Parlay price unavailable: {e}")
            parlay_odds = config.ODDS_UNAVAILABLE_TEXT

    return SlipSummary(
        kind=slip.kind,
        leg_count=slip.pick_count,
        legs=[standardizer.format_pick_display(p) for p in slip.picks],
        parlay_odds=parlay_odds,
        combined_decimal=combined,
        total_stake=slip.total_stake,
    )

def post_caption(slip: PickSlip) -> str:
    if not slip.is_displayable: return ""
    if slip.is_parlay:
        return f"My {slip.pick_count}-leg parlay"
    return "My pick"
