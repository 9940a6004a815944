import re
import logging
from typing import Any, Optional, Union
from thefuzz import process as fuzz_process

import config
from models import Market, OddsQuote, Pick, CanonicalOddsRecord, Unavailable
from odds_engine import InvalidOddsFormat, parse_american, format_american

logger = logging.getLogger(__name__)

def standardize_market(val: Any) -> Optional[Market]:
    if isinstance(val, Market): return val
    if not isinstance(val, str) or not val.strip(): return None
    val = re.sub(r'[_\-]+', ' ', val.upper().strip())
    val = re.sub(r'\s+', ' ', val)

    if val in config.MARKET_MAP:
        return Market(config.MARKET_MAP[val])
    # TheOddsAPI prop keys: player_points, player_pass_tds, ...
    if val.startswith('PLAYER '):
        return Market.PLAYER_PROP

    for k, v in config.MARKET_MAP.items():
        if len(k) > 3 and k in val:
            return Market(v)

    # Typos like "MONYLINE" or "SPRED"
    best_match, score = fuzz_process.extractOne(val, list(config.MARKET_MAP.keys()))
    if score >= config.FUZZY_LABEL_MATCH_SCORE:
        logger.debug(f"Fuzzy matched market '{val}' to {best_match} ({score})")
        return Market(config.MARKET_MAP[best_match])
    return None

def standardize_side(val: Any, home_team: Optional[str] = None, away_team: Optional[str] = None) -> Optional[str]:
    """home/away/over/under/draw where recognisable, else the cleaned label (prop descriptors)."""
    if val is None or isinstance(val, (dict, list, bool)): return None
    text = re.sub(r'\s+', ' ', str(val)).strip()
    if not text: return None

    lower = text.lower()
    if lower in config.SIDE_MAP:
        return config.SIDE_MAP[lower]
    if home_team and lower == home_team.strip().lower():
        return 'home'
    if away_team and lower == away_team.strip().lower():
        return 'away'
    return text

def format_odds(value: Any) -> str:
    if isinstance(value, Unavailable): return config.ODDS_UNAVAILABLE_TEXT
    try:
        return format_american(parse_american(value))
    except InvalidOddsFormat:
        return config.ODDS_UNAVAILABLE_TEXT

def format_point(point: Optional[float], market: Optional[Market] = None) -> str:
    if point is None: return ''
    text = f"{point:g}"
    if market == Market.TOTAL:
        return text.lstrip('+')
    return f"+{text}" if point > 0 else text

def format_quote(quote: Union[OddsQuote, CanonicalOddsRecord]) -> str:
    """'+150', '+3.5 (-110)' or 'Over 46.5 (-110)'."""
    price = format_odds(quote.price)
    if quote.market == Market.SPREAD and quote.point is not None:
        return f"{format_point(quote.point, quote.market)} ({price})"
    if quote.market == Market.TOTAL and quote.point is not None:
        side = (quote.side or '').capitalize()
        return f"{side} {format_point(quote.point, quote.market)} ({price})".strip()
    return price

def format_pick_display(pick: Pick) -> str:
    quote, game = pick.quote, pick.game
    price = format_odds(quote.price)

    if quote.market == Market.MONEYLINE:
        team = {'home': game.home_team, 'away': game.away_team}.get(quote.side, 'Draw')
        return f"{team} ML ({price})"

    if quote.market == Market.SPREAD:
        team = game.home_team if quote.side == 'home' else game.away_team
        return f"{team} {format_point(quote.point, quote.market)} ({price})"

    if quote.market == Market.TOTAL:
        return f"{quote.side.capitalize()} {format_point(quote.point, quote.market)} ({price})"

    descriptor = quote.side or 'Player Prop'
    if quote.point is not None and f"{quote.point:g}" not in descriptor:
        descriptor = f"{descriptor} {quote.point:g}"
    return f"{descriptor} ({price})"
