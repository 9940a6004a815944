import sys
import os
import pytest
from datetime import datetime, timezone

# Add root directory to python path
sys.path.append(os.path.abspath(os.path.join(os.path.dirname(__file__), '..')))

from models import Game, OddsQuote, Pick

@pytest.fixture
def sample_game():
    return Game(
        id="401585601",
        home_team="Lakers",
        away_team="Celtics",
        sport="NBA",
        start_time=datetime(2024, 1, 1, 3, 30, tzinfo=timezone.utc)
    )

@pytest.fixture
def make_pick(sample_game):
    def _make(price, market="moneyline", side="home", point=None, stake=None):
        return Pick(
            game=sample_game,
            quote=OddsQuote(price=price, market=market, side=side, point=point),
            stake=stake
        )
    return _make

@pytest.fixture
def espn_payload():
    return {
        "count": 1,
        "items": [
            {
                "provider": {"id": "58", "name": "ESPN BET", "priority": 1},
                "details": "LAL -3.5",
                "overUnder": 228.5,
                "spread": -3.5,
                "overOdds": -110.0,
                "underOdds": -110.0,
                "awayTeamOdds": {
                    "favorite": False,
                    "moneyLine": 135,
                    "spreadOdds": -110.0,
                    "current": {"spread": {"american": "-108"}}
                },
                "homeTeamOdds": {
                    "favorite": True,
                    "moneyLine": "-155",
                    "current": {"spread": {"american": "-112"}}
                },
                "current": {
                    "over": {"american": "-115"},
                    "under": {"american": "EVEN"}
                }
            }
        ]
    }

@pytest.fixture
def the_odds_api_payload():
    return [
        {
            "id": "e912304de2b2ce35b473ce2ecd3d1502",
            "sport_key": "basketball_nba",
            "commence_time": "2024-01-01T03:30:00Z",
            "home_team": "Los Angeles Lakers",
            "away_team": "Boston Celtics",
            "bookmakers": [
                {
                    "key": "fanduel",
                    "title": "FanDuel",
                    "last_update": "2024-01-01T01:00:00Z",
                    "markets": [
                        {
                            "key": "h2h",
                            "outcomes": [
                                {"name": "Boston Celtics", "price": 135},
                                {"name": "Los Angeles Lakers", "price": -155}
                            ]
                        },
                        {
                            "key": "spreads",
                            "outcomes": [
                                {"name": "Boston Celtics", "price": -110, "point": 3.5},
                                {"name": "Los Angeles Lakers", "price": -110, "point": -3.5}
                            ]
                        },
                        {
                            "key": "totals",
                            "outcomes": [
                                {"name": "Over", "price": -112, "point": 228.5},
                                {"name": "Under", "price": -108, "point": 228.5}
                            ]
                        }
                    ]
                },
                {
                    "key": "draftkings",
                    "title": "DraftKings",
                    "last_update": "2024-01-01T01:05:00Z",
                    "markets": [
                        {
                            "key": "h2h",
                            "outcomes": [
                                {"name": "Boston Celtics", "price": 130},
                                {"name": "Los Angeles Lakers", "price": -150}
                            ]
                        }
                    ]
                }
            ]
        }
    ]
