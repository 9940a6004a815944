import os
import logging
from typing import List
from dotenv import load_dotenv

load_dotenv()

logging.basicConfig(
    level=logging.INFO,
    format='%(asctime)s - [%(levelname)s] - %(name)s - %(message)s',
    handlers=[logging.StreamHandler()]
)

def parse_str_list(env_var: str) -> List[str]:
    if not env_var: return []
    clean = env_var.replace('[', '').replace(']', '').replace('"', '').replace("'", "")
    return [x.strip() for x in clean.split(',') if x.strip()]

def parse_int(env_var: str, default: int) -> int:
    if env_var and env_var.strip().lstrip('-').isdigit():
        return int(env_var.strip())
    return default

ODDS_UNAVAILABLE_TEXT = os.getenv('ODDS_UNAVAILABLE_TEXT', 'N/A')

# Sportsbook preference order when a feed quotes several providers
PREFERRED_ODDS_PROVIDERS = parse_str_list(os.getenv('PREFERRED_ODDS_PROVIDERS', 'FanDuel,DraftKings'))

MAX_PAYLOAD_DEPTH = parse_int(os.getenv('MAX_PAYLOAD_DEPTH'), 64)
FUZZY_LABEL_MATCH_SCORE = parse_int(os.getenv('FUZZY_LABEL_MATCH_SCORE'), 85)

# --- MARKETS ---
# Checked in order, so props come before the generic "TOTAL"/"LINE" labels.
MARKET_MAP = {
    'PLAYER PROP': 'player_prop', 'PLAYER PROPS': 'player_prop', 'PROP': 'player_prop',
    'H2H': 'moneyline', 'MONEYLINE': 'moneyline', 'MONEY LINE': 'moneyline',
    'ML': 'moneyline', 'M/L': 'moneyline',
    'SPREADS': 'spread', 'SPREAD': 'spread', 'POINT SPREAD': 'spread',
    'HANDICAP': 'spread', 'RUN LINE': 'spread', 'PUCK LINE': 'spread', 'ATS': 'spread',
    'TOTALS': 'total', 'TOTAL': 'total', 'OVER/UNDER': 'total', 'OVERUNDER': 'total',
    'O/U': 'total',
}

SIDE_MAP = {
    'home': 'home', 'h': 'home', '1': 'home',
    'away': 'away', 'a': 'away', 'road': 'away', 'visitor': 'away', '2': 'away',
    'over': 'over', 'o': 'over',
    'under': 'under', 'u': 'under',
    'draw': 'draw', 'tie': 'draw', 'x': 'draw',
}

# --- PROVIDERS ---
ESPN_PROVIDER_NAMES = {
    38: 'Caesars', 31: 'William Hill', 41: 'SugarHouse', 36: 'Unibet',
    2000: 'Bet365', 25: 'Westgate', 45: 'William Hill NJ',
    58: 'ESPN BET', 59: 'ESPN BET - Live Odds',
    1001: 'AccuScore', 1002: 'TeamRankings', 1003: 'NumberFire', 1004: 'Consensus',
}

BOOKMAKER_NAMES = {
    'fanduel': 'FanDuel', 'draftkings': 'DraftKings', 'betmgm': 'BetMGM',
    'caesars': 'Caesars', 'bovada': 'Bovada', 'betrivers': 'BetRivers',
    'pointsbetus': 'PointsBet', 'barstool': 'Barstool', 'williamhill_us': 'William Hill',
}
