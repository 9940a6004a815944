import argparse
import json
import logging
import sys

import config
from normalizer import normalize, normalize_espn_odds, normalize_the_odds_api
from odds_engine import InvalidOddsFormat, american_to_decimal, combine_parlay

logger = logging.getLogger(__name__)

def _load_json(path: str):
    if path == '-':
        return json.load(sys.stdin)
    with open(path, encoding='utf-8') as f:
        return json.load(f)

def cmd_convert(args) -> int:
    try:
        print(f"{american_to_decimal(args.odds):.4f}")
    except InvalidOddsFormat as e:
        logger.error(f"❌ {e}")
        return 1
    return 0

def cmd_parlay(args) -> int:
    try:
        combined = combine_parlay(args.odds)
    except InvalidOddsFormat as e:
        logger.error(f"❌ {e}")
        print(config.ODDS_UNAVAILABLE_TEXT)
        return 1
    print(combined or config.ODDS_UNAVAILABLE_TEXT)
    return 0

def cmd_normalize(args) -> int:
    try:
        payload = _load_json(args.path)
    except (OSError, ValueError) as e:
        logger.error(f"❌ Could not read {args.path}: {e}")
        return 1

    if args.provider == 'espn':
        records = normalize_espn_odds(payload)
    elif args.provider == 'theoddsapi':
        records = normalize_the_odds_api(payload)
    else:
        records = [normalize(payload)]

    print(json.dumps([r.model_dump(mode='json') for r in records], indent=2))
    return 0

def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Odds conversion and parlay pricing")
    sub = parser.add_subparsers(dest='command', required=True)

    p = sub.add_parser('convert', help="American odds to decimal")
    p.add_argument('odds', help="e.g. -110 or +150")
    p.set_defaults(func=cmd_convert)

    p = sub.add_parser('parlay', help="Combined American price of two or more legs")
    p.add_argument('odds', nargs='+', help="American odds of each leg")
    p.set_defaults(func=cmd_parlay)

    p = sub.add_parser('normalize', help="Canonical odds records from a JSON payload")
    p.add_argument('path', help="JSON file, or - for stdin")
    p.add_argument('--provider', choices=['raw', 'espn', 'theoddsapi'], default='raw')
    p.set_defaults(func=cmd_normalize)

    return parser

def main(argv=None) -> int:
    args = build_parser().parse_args(argv)
    return args.func(args)

if __name__ == "__main__":
    sys.exit(main())
