#!/usr/bin/env python3
"""
create_indices.py

Sets up the search index for lib.reviews.

- Creates the index with per-language mappings (run once per cluster)
- --reindex: (re)indexes every current thing and review from the database
- --skip-create: only reindex, e.g. after restoring a database backup
"""
from __future__ import annotations

import argparse
from typing import List, Optional

import search
import settings
from catalog.review import Review
from catalog.thing import Thing
from infra.db import get_conn
from util import debug


def reindex(conn) -> tuple[int, int]:
    """Index all current things, then their reviews. Returns (things, reviews) sent."""
    things = Thing.filter_current(conn)
    for thing in things:
        search.index_thing(thing)
    reviews = Review.filter_current(conn)
    for review in reviews:
        search.index_review(review)
    return len(things), len(reviews)


def main(argv: Optional[List[str]] = None) -> int:
    parser = argparse.ArgumentParser(description="Create and populate the lib.reviews search index.")
    parser.add_argument("--reindex", action="store_true",
                        help="Index all current things and reviews after creating the index.")
    parser.add_argument("--skip-create", action="store_true",
                        help="Don't create the index (it already exists).")
    parser.add_argument("--db", default=None,
                        help="Path to the database (default from LIBREVIEWS_DB_PATH).")
    args = parser.parse_args(argv)

    debug.configure_logging()

    if not args.skip_create:
        print(f"Creating index '{settings.search_index()}' at {settings.search_url()}…")
        if search.create_indices() is None:
            print("Index creation failed; see log for details.")
            return 1
        print("Index created.")

    if args.reindex:
        conn = get_conn(args.db)
        try:
            n_things, n_reviews = reindex(conn)
        finally:
            conn.close()
        print(f"Sent {n_things} things and {n_reviews} reviews to the index.")

    return 0


if __name__ == "__main__":
    raise SystemExit(main())
