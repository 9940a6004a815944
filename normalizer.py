"""
Normalization of third-party odds payloads (ESPN, TheOddsAPI, hand-built
dicts) into CanonicalOddsRecord.

Provider payloads are not contractually typed: keys vary in casing,
prices arrive as ints, floats, strings or nested objects, and any node may
be missing or of the wrong shape. Everything here is total. A wrong-shaped
node reads as "absent" and an unreadable price becomes UNAVAILABLE; nothing
is raised for bad input.
"""
import re
import math
import logging
from collections.abc import Mapping
from datetime import datetime, timezone
from typing import Any, Callable, Dict, List, Optional, Union

import config
from models import CanonicalOddsRecord, Market, UNAVAILABLE, Unavailable
from odds_engine import InvalidOddsFormat, parse_american
import standardizer

logger = logging.getLogger(__name__)

PROVIDER_KEYS = ('provider', 'sportsbook', 'bookmaker', 'book', 'source')
MARKET_KEYS = ('market', 'markettype', 'marketkey', 'bettype', 'type')
SIDE_KEYS = ('side', 'selection', 'outcome', 'name', 'team', 'label')
PRICE_KEYS = ('price', 'american', 'americanodds', 'odds', 'moneyline')
POINT_KEYS = ('point', 'points', 'line', 'handicap', 'spread', 'total', 'overunder', 'propvalue')
UPDATED_KEYS = ('lastupdated', 'lastupdate', 'lastmodified', 'updatedat', 'timestamp')

RE_NUMBER = re.compile(r'([-+]?\d+(?:\.\d+)?)')

# --- TREE CONVERSION ---

def _string_key(key: Any) -> Optional[str]:
    if key is None: return None
    try:
        s = str(key)
    except Exception as e:
        logger.debug(f"Dropping unprintable key: {e}")
        return None
    return s or None

def fold_key(key: Any) -> Optional[str]:
    """'lastUpdated', 'last_updated' and 'Last-Updated' all fold to 'lastupdated'."""
    s = _string_key(key)
    if s is None: return None
    return re.sub(r'[\s_\-]+', '', s).lower() or None

def _convert_node(node: Any, key_fn: Callable[[Any], Optional[str]], depth: int, path: set) -> Any:
    if isinstance(node, Mapping) or isinstance(node, (list, tuple)):
        if depth > config.MAX_PAYLOAD_DEPTH or id(node) in path:
            return None
        path = path | {id(node)}

    if isinstance(node, Mapping):
        out: Dict[str, Any] = {}
        for k, v in node.items():
            key = key_fn(k)
            if key is None or key in out: continue
            out[key] = _convert_node(v, key_fn, depth + 1, path)
        return out

    if isinstance(node, (list, tuple)):
        return [_convert_node(item, key_fn, depth + 1, path) for item in node]

    return node

def deep_map_convert(data: Any, key_fn: Callable[[Any], Optional[str]] = _string_key) -> Dict[str, Any]:
    """
    Rebuild a nested mapping with string keys all the way down, recursing
    through lists. Keys that stringify to nothing are dropped, and so are
    cycles and nodes nested past MAX_PAYLOAD_DEPTH. Non-mappings give {}.
    """
    if not isinstance(data, Mapping): return {}
    return _convert_node(data, key_fn, 0, set())

def safe_map_convert(data: Any) -> Dict[str, Any]:
    """Shallow variant of deep_map_convert: string keys at the top level only."""
    if not isinstance(data, Mapping): return {}
    out: Dict[str, Any] = {}
    for k, v in data.items():
        key = _string_key(k)
        if key is not None and key not in out:
            out[key] = v
    return out

# --- LEAF EXTRACTION ---

def _dig(tree: Any, *keys: str) -> Any:
    node = tree
    for k in keys:
        if not isinstance(node, dict): return None
        node = node.get(k)
    return node

def _first(tree: Dict[str, Any], keys) -> Any:
    for k in keys:
        if tree.get(k) is not None:
            return tree[k]
    return None

def _as_list(node: Any) -> List[Any]:
    return node if isinstance(node, list) else []

def _to_float(value: Any) -> Optional[float]:
    if value is None or isinstance(value, bool): return None
    if isinstance(value, (int, float)):
        try:
            val = float(value)
        except OverflowError:
            return None
    elif isinstance(value, str):
        m = RE_NUMBER.search(value.replace(',', ''))
        if not m: return None
        val = float(m.group(1))
    else:
        return None
    return val if math.isfinite(val) else None

def _extract_provider(tree: Dict[str, Any]) -> str:
    node = _first(tree, PROVIDER_KEYS)
    if isinstance(node, dict):
        node = _first(node, ('name', 'title', 'displayname', 'key', 'id'))
    if node is None or isinstance(node, (bool, list, dict)):
        return 'Unknown'
    name = (_string_key(node) or '').strip()
    # ESPN ids are short ASCII digit runs
    if name.isascii() and name.isdigit() and len(name) <= 9:
        return config.ESPN_PROVIDER_NAMES.get(int(name), name)
    return config.BOOKMAKER_NAMES.get(name.lower(), name) or 'Unknown'

def _extract_market(tree: Dict[str, Any]) -> Optional[Market]:
    node = _first(tree, MARKET_KEYS)
    if isinstance(node, dict):
        node = _first(node, ('key', 'name', 'type'))
    return standardizer.standardize_market(node)

def _extract_side(tree: Dict[str, Any]) -> Optional[str]:
    node = _first(tree, SIDE_KEYS)
    if isinstance(node, dict):
        node = _first(node, ('name', 'displayname', 'side'))
    if isinstance(node, (int, float)) and not isinstance(node, bool):
        node = _string_key(node)
    home = tree.get('hometeam')
    away = tree.get('awayteam')
    return standardizer.standardize_side(
        node,
        home_team=home if isinstance(home, str) else None,
        away_team=away if isinstance(away, str) else None,
    )

def _extract_price(tree: Dict[str, Any]) -> Union[int, Unavailable]:
    seen = False
    for k in PRICE_KEYS:
        node = tree.get(k)
        if node is None: continue
        if isinstance(node, dict):
            node = node.get('american')
            if node is None: continue
        seen = True
        try:
            return parse_american(node)
        except InvalidOddsFormat as e:
            logger.debug(f"Price under '{k}' unusable: {e}")
    if not seen:
        logger.debug("No price field in payload")
    return UNAVAILABLE

def _extract_point(tree: Dict[str, Any]) -> Optional[float]:
    for k in POINT_KEYS:
        val = _to_float(tree.get(k))
        if val is not None:
            return val
    return None

def _parse_timestamp(value: Any) -> Optional[datetime]:
    if value is None or isinstance(value, bool): return None
    if isinstance(value, datetime): return value
    try:
        if isinstance(value, str):
            s = value.strip()
            if s.lstrip('-').isdigit():
                value = int(s)
            else:
                return datetime.fromisoformat(s.replace('Z', '+00:00'))
        if isinstance(value, (int, float)):
            if not math.isfinite(value): return None
            # Epoch millis from JS-flavoured feeds
            seconds = value / 1000 if abs(value) > 1e11 else value
            return datetime.fromtimestamp(seconds, tz=timezone.utc)
    except (ValueError, OverflowError, OSError) as e:
        logger.debug(f"Unreadable timestamp: {e}")
    return None

def _extract_timestamp(tree: Dict[str, Any]) -> Optional[datetime]:
    return _parse_timestamp(_first(tree, UPDATED_KEYS))

def normalize(raw: Any) -> CanonicalOddsRecord:
    """Canonical record for a single quoted outcome. Never raises for malformed input."""
    tree = deep_map_convert(raw, key_fn=fold_key)
    market = _extract_market(tree)
    return CanonicalOddsRecord(
        provider=_extract_provider(tree),
        market=market,
        side=_extract_side(tree),
        price=_extract_price(tree),
        # Moneylines carry no line even when the payload has a spread field
        point=None if market == Market.MONEYLINE else _extract_point(tree),
        last_updated=_extract_timestamp(tree),
    )

# --- PROVIDER FEEDS ---

def _root_list(payload: Any, key: str) -> List[Any]:
    if isinstance(payload, (list, tuple)):
        return _as_list(_convert_node(payload, fold_key, 0, set()))
    tree = deep_map_convert(payload, key_fn=fold_key)
    return _as_list(tree.get(key))

def normalize_espn_odds(payload: Any) -> List[CanonicalOddsRecord]:
    """
    ESPN core odds ('items' list, or the list itself) to canonical records.

    ESPN quotes the spread from the home side, so the away point is the
    negation. Over/under prices come from current.over/under with the flat
    overOdds/underOdds as fallback.
    """
    records = []
    for item in _root_list(payload, 'items'):
        if not isinstance(item, dict): continue
        base = {
            'provider': item.get('provider'),
            'lastupdated': item.get('lastmodified') or item.get('lastupdated'),
        }

        for side in ('away', 'home'):
            price = _dig(item, f'{side}teamodds', 'moneyline')
            if price is not None:
                records.append(normalize({**base, 'market': 'moneyline', 'side': side, 'price': price}))

        spread = _to_float(item.get('spread'))
        if spread is not None:
            for side, point in (('home', spread), ('away', -spread if spread else 0.0)):
                price = _dig(item, f'{side}teamodds', 'current', 'spread', 'american')
                if price is None:
                    price = _dig(item, f'{side}teamodds', 'spreadodds')
                records.append(normalize({**base, 'market': 'spread', 'side': side, 'point': point, 'price': price}))

        total = _to_float(item.get('overunder'))
        if total is not None:
            for side in ('over', 'under'):
                price = _dig(item, 'current', side, 'american')
                if price is None:
                    price = item.get(f'{side}odds')
                records.append(normalize({**base, 'market': 'total', 'side': side, 'point': total, 'price': price}))

    logger.info(f"ESPN payload flattened to {len(records)} odds records")
    return records

def normalize_the_odds_api(events: Any) -> List[CanonicalOddsRecord]:
    """TheOddsAPI v4 /odds response (list of events) to canonical records."""
    if isinstance(events, Mapping):
        events = [events]

    records = []
    for event in _root_list(events, 'events'):
        if not isinstance(event, dict): continue
        home, away = event.get('hometeam'), event.get('awayteam')

        for book in _as_list(event.get('bookmakers')):
            if not isinstance(book, dict): continue
            provider = book.get('title') or book.get('key')

            for market in _as_list(book.get('markets')):
                if not isinstance(market, dict): continue
                for outcome in _as_list(market.get('outcomes')):
                    if not isinstance(outcome, dict): continue
                    side = outcome.get('name')
                    # Prop outcomes put the player in 'description' and Over/Under in 'name'
                    if isinstance(outcome.get('description'), str):
                        side = f"{outcome['description']} {side or ''}".strip()
                    records.append(normalize({
                        'provider': provider,
                        'market': market.get('key'),
                        'side': side,
                        'price': outcome.get('price'),
                        'point': outcome.get('point'),
                        'lastupdated': market.get('lastupdate') or book.get('lastupdate'),
                        'hometeam': home,
                        'awayteam': away,
                    }))

    logger.info(f"TheOddsAPI payload flattened to {len(records)} odds records")
    return records

def select_provider(records: List[CanonicalOddsRecord], preferred: Optional[List[str]] = None) -> List[CanonicalOddsRecord]:
    """Records of the first preferred sportsbook present, else of the first sportsbook seen."""
    if not records: return []
    if preferred is None:
        preferred = config.PREFERRED_ODDS_PROVIDERS

    by_provider: Dict[str, List[CanonicalOddsRecord]] = {}
    for r in records:
        by_provider.setdefault(r.provider.lower(), []).append(r)

    for name in preferred:
        if name.lower() in by_provider:
            return by_provider[name.lower()]
    return by_provider[records[0].provider.lower()]
