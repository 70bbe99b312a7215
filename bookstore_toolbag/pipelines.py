# bookstore_toolbag/pipelines.py
"""
Aggregation pipelines and index key specs for the books collection.

Every group stage is followed by a $project that renames the group key
(``_id``) to a descriptive field, so callers see ``genre``, ``author`` or
``decade`` instead of ``_id``.
"""
from typing import Any, Dict, List, Tuple

from pymongo import ASCENDING, DESCENDING

JsonDict = Dict[str, Any]
IndexKeys = List[Tuple[str, int]]

TITLE_INDEX: IndexKeys = [("title", ASCENDING)]
AUTHOR_YEAR_INDEX: IndexKeys = [("author", ASCENDING), ("published_year", DESCENDING)]


def avg_price_by_genre_pipeline() -> List[JsonDict]:
    return [
        {"$group": {"_id": "$genre", "averagePrice": {"$avg": "$price"}, "count": {"$sum": 1}}},
        {"$sort": {"averagePrice": DESCENDING}},
        {"$project": {"_id": 0, "genre": "$_id", "averagePrice": 1, "count": 1}},
    ]


def author_with_most_books_pipeline() -> List[JsonDict]:
    # Ties on count resolve to the alphabetically first author.
    return [
        {"$group": {"_id": "$author", "count": {"$sum": 1}}},
        {"$sort": {"count": DESCENDING, "_id": ASCENDING}},
        {"$limit": 1},
        {"$project": {"_id": 0, "author": "$_id", "count": 1}},
    ]


def group_by_decade_pipeline() -> List[JsonDict]:
    return [
        {"$project": {"decade": {"$toInt": {"$multiply": [{"$floor": {"$divide": ["$published_year", 10]}}, 10]}}}},
        {"$group": {"_id": "$decade", "count": {"$sum": 1}}},
        {"$sort": {"_id": ASCENDING}},
        {"$project": {"_id": 0, "decade": "$_id", "count": 1}},
    ]
