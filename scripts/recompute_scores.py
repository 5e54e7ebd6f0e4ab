#!/usr/bin/env python3
"""Recompute derived scores for every application of a year.

Needed after bulk imports that write score rows directly, or after changing
criteria outside the admin API.

Run from project root: python scripts/recompute_scores.py 2026 [--rank]
"""
import os
import sys
import argparse

sys.path.append(os.path.abspath(os.path.join(os.path.dirname(__file__), '..')))

from app import create_app
from app.services.aggregator import recompute_year
from app.services.ranking import generate_ranking


def main(argv=None):
    parser = argparse.ArgumentParser(description=__doc__.splitlines()[0])
    parser.add_argument('year', type=int)
    parser.add_argument('--rank', action='store_true', help='regenerate and persist the ranking afterwards')
    args = parser.parse_args(argv)

    app = create_app()
    with app.app_context():
        count = recompute_year(args.year)
        print(f'Recomputed {count} applications for {args.year}.')
        if args.rank:
            groups = generate_ranking(args.year, persist=True)
            for g in groups:
                advancing = sum(1 for e in g['entries'] if e['advancing_to_interview'])
                print(f"  {g['institution_name']}: {len(g['entries'])} ranked, {advancing} advancing")


if __name__ == '__main__':
    main()
