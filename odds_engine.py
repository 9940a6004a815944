"""
American/decimal odds conversion and parlay pricing.

All arithmetic is done on exact rationals so that a single
American -> decimal -> American round trip is lossless, and rounding
back to American odds is decided on the exact value (half away from zero).
"""
import math
import logging
import re
from decimal import Decimal
from fractions import Fraction
from numbers import Real
from typing import Any, Optional, Sequence, Union

logger = logging.getLogger(__name__)

# Bounded so an absurd digit run fails the match instead of int conversion
RE_AMERICAN = re.compile(r'^([-+]?)\s*(\d{1,15}(?:\.\d{1,15})?)$')
EVEN_LABELS = {'EVEN', 'EVENS', 'EV'}

class InvalidOddsFormat(ValueError):
    def __init__(self, message: str, value: Any = None, leg: Optional[int] = None):
        super().__init__(message)
        self.value = value
        self.leg = leg

def _round_half_away(x: Fraction) -> int:
    if x >= 0:
        return math.floor(x + Fraction(1, 2))
    return -math.floor(-x + Fraction(1, 2))

def _check_range(exact: Fraction, raw: Any) -> int:
    # Range is judged before rounding: 99.6 is not +100
    if -100 < exact < 100:
        raise InvalidOddsFormat(f"American odds must be <= -100 or >= +100, got {raw!r}", value=raw)
    return _round_half_away(exact)

def parse_american(value: Any) -> int:
    """Coerce an int, float or text like '+150' / '-110' / 'EVEN' to American odds."""
    if isinstance(value, bool) or value is None:
        raise InvalidOddsFormat(f"Not an odds value: {value!r}", value=value)

    if isinstance(value, int):
        return _check_range(Fraction(value), value)

    if isinstance(value, float):
        if not math.isfinite(value):
            raise InvalidOddsFormat(f"Not a finite odds value: {value!r}", value=value)
        return _check_range(Fraction(value), value)

    if isinstance(value, str):
        s = value.strip().replace(',', '')
        if s.upper() in EVEN_LABELS:
            return 100
        m = RE_AMERICAN.match(s)
        if not m:
            raise InvalidOddsFormat(f"Unparseable American odds: {value!r}", value=value)
        try:
            exact = Fraction(m.group(2))
        except ValueError as e:
            raise InvalidOddsFormat(f"Unparseable American odds: {value!r}", value=value) from e
        return _check_range(-exact if m.group(1) == '-' else exact, value)

    raise InvalidOddsFormat(f"Unsupported odds type {type(value).__name__}: {value!r}", value=value)

def _american_fraction(american: int) -> Fraction:
    american = parse_american(american)
    if american > 0:
        return 1 + Fraction(american, 100)
    return 1 + Fraction(100, -american)

def american_to_decimal(american: Union[int, str]) -> float:
    """
    Decimal payout multiplier (stake included) for an American price.

    +150 -> 2.5, -110 -> 1.9090..., -200 -> 1.5. Always > 1.0.
    Raises InvalidOddsFormat for 0 and anything strictly between -100 and +100.
    """
    return float(_american_fraction(american))

def decimal_to_american(decimal: Union[Real, Fraction, Decimal]) -> int:
    """
    Inverse of american_to_decimal. Prices at or above 2.0 are positive,
    prices in (1.0, 2.0) negative. Decimal odds of 1.0 or less are rejected.
    Accepts int, float, Fraction or decimal.Decimal.
    """
    if isinstance(decimal, bool) or not isinstance(decimal, (Real, Decimal)):
        raise InvalidOddsFormat(f"Decimal odds must be a number, got {decimal!r}", value=decimal)
    if isinstance(decimal, Decimal) and not decimal.is_finite():
        raise InvalidOddsFormat(f"Decimal odds must be finite, got {decimal!r}", value=decimal)
    if isinstance(decimal, float) and not math.isfinite(decimal):
        raise InvalidOddsFormat(f"Decimal odds must be finite, got {decimal!r}", value=decimal)

    exact = Fraction(decimal)
    if exact <= 1:
        raise InvalidOddsFormat(f"Decimal odds must be greater than 1.0, got {decimal!r}", value=decimal)

    if exact >= 2:
        return _round_half_away((exact - 1) * 100)
    return -_round_half_away(100 / (exact - 1))

def format_american(american: int) -> str:
    return f"+{american}" if american > 0 else str(american)

def _leg_price(leg: Any) -> Any:
    quote = getattr(leg, 'quote', None)
    if quote is not None:
        return getattr(quote, 'price', None)
    if hasattr(leg, 'price'):
        return leg.price
    if isinstance(leg, dict):
        return leg.get('price')
    return leg

def _parlay_fraction(picks: Sequence[Any]) -> Fraction:
    product = Fraction(1)
    for i, leg in enumerate(picks):
        price = _leg_price(leg)
        try:
            product *= _american_fraction(price)
        except InvalidOddsFormat as e:
            raise InvalidOddsFormat(f"leg {i}: {e}", value=price, leg=i) from e
    return product

def parlay_decimal(picks: Sequence[Any]) -> Optional[float]:
    """Combined decimal price of all legs, or None when there are fewer than two."""
    if len(picks) < 2: return None
    return float(_parlay_fraction(picks))

def combine_parlay(picks: Sequence[Any]) -> Optional[str]:
    """
    Sign-prefixed American price for a multi-leg parlay.

    Legs may be Picks, OddsQuotes, canonical records, dicts with a 'price'
    key, or bare prices. Returns None for fewer than two legs; raises
    InvalidOddsFormat naming the first bad leg otherwise.
    """
    if len(picks) < 2: return None
    combined = decimal_to_american(_parlay_fraction(picks))
    return format_american(combined)
