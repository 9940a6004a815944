from pydantic import BaseModel, Field, field_validator, model_validator, ConfigDict
from typing import List, Optional, Union
from datetime import datetime
from enum import Enum
import logging

from odds_engine import parse_american

logger = logging.getLogger(__name__)

class Market(str, Enum):
    MONEYLINE = 'moneyline'
    SPREAD = 'spread'
    TOTAL = 'total'
    PLAYER_PROP = 'player_prop'

class Unavailable(str, Enum):
    """Marks a price the provider sent but that could not be read as American odds."""
    UNAVAILABLE = 'unavailable'

UNAVAILABLE = Unavailable.UNAVAILABLE

class OddsQuote(BaseModel):
    model_config = ConfigDict(frozen=True)

    price: int
    market: Market
    side: str
    point: Optional[float] = None

    @field_validator('price', mode='before')
    @classmethod
    def validate_price(cls, v):
        # InvalidOddsFormat is a ValueError, so pydantic reports it as a ValidationError
        return parse_american(v)

    @field_validator('side', mode='before')
    @classmethod
    def validate_side(cls, v):
        if v is None: return v
        return str(v).strip()

    @model_validator(mode='after')
    def check_point(self):
        if self.market in (Market.SPREAD, Market.TOTAL) and self.point is None:
            raise ValueError(f"{self.market.value} quotes need a point")
        if self.market == Market.MONEYLINE and self.point is not None:
            raise ValueError("moneyline quotes carry no point")
        return self

class Game(BaseModel):
    id: str
    home_team: str
    away_team: str
    sport: str = 'Unknown'
    start_time: Optional[datetime] = None

class Pick(BaseModel):
    id: Optional[str] = None
    game: Game
    quote: OddsQuote
    reasoning: Optional[str] = None
    stake: Optional[float] = None

    @field_validator('stake', mode='before')
    @classmethod
    def validate_stake(cls, v):
        if v is None: return None
        try:
            val = float(v)
        except (TypeError, ValueError):
            return None
        return val if val >= 0 else None

class PickSlip(BaseModel):
    """Picks gathered while a user builds a post. Insertion order is display order."""
    picks: List[Pick] = Field(default_factory=list)

    @property
    def pick_count(self) -> int:
        return len(self.picks)

    @property
    def is_displayable(self) -> bool:
        return bool(self.picks)

    @property
    def is_parlay(self) -> bool:
        return len(self.picks) > 1

    @property
    def kind(self) -> Optional[str]:
        if not self.picks: return None
        return 'parlay' if self.is_parlay else 'single'

    @property
    def total_stake(self) -> float:
        return sum(p.stake or 0.0 for p in self.picks)

class SlipSummary(BaseModel):
    kind: str
    leg_count: int
    legs: List[str]
    parlay_odds: Optional[str] = None
    combined_decimal: Optional[float] = None
    total_stake: float = 0.0

class CanonicalOddsRecord(BaseModel):
    provider: str = 'Unknown'
    market: Optional[Market] = None
    side: Optional[str] = None
    price: Union[int, Unavailable] = UNAVAILABLE
    point: Optional[float] = None
    last_updated: Optional[datetime] = None

    @property
    def is_available(self) -> bool:
        return self.price is not UNAVAILABLE
