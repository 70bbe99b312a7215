# bookstore_toolbag/demo.py
import argparse
import asyncio
import logging
from dataclasses import replace
from typing import Any, List, Optional

from bson import json_util

from bookstore_toolbag.book_queries import BookQueries
from bookstore_toolbag.config import BookstoreConfig

logger = logging.getLogger(__name__)


def _show(heading: str, payload: Any) -> None:
    print(f"\n{heading}")
    print(json_util.dumps(payload, indent=2))


async def demo_reads(queries: BookQueries) -> None:
    """Runs every non-destructive query and aggregation."""
    _show('Find 1: Books in genre "Fiction" (projection title/author/price)', await queries.find_by_genre("Fiction"))
    _show("Find 2: Books published after 2000", await queries.find_published_after(2000))
    _show("Find 3: Books by George Orwell", await queries.find_by_author("George Orwell"))
    _show("Advanced Query: In stock & published after 2010", await queries.find_in_stock_and_published_after(2010))
    _show("Sorting: books by price ascending", await queries.sort_by_price("asc"))
    _show("Pagination: page 1 (5 per page)", await queries.paginate(1, 5))
    _show("Aggregation: average price by genre", await queries.aggregate_avg_price_by_genre())
    _show("Aggregation: author with most books", await queries.aggregate_author_with_most_books())
    _show("Aggregation: group books by decade and count", await queries.aggregate_group_by_decade())


async def demo_explain(queries: BookQueries, title: str) -> None:
    """Shows the title lookup plan before and after the indexes are created."""
    _show("Explain before creating indexes for title query:", await queries.explain_find_by_title(title))
    _show("Creating indexes...", await queries.create_indexes())
    _show("Explain after creating indexes for title query:", await queries.explain_find_by_title(title))


async def run_destructive_examples(queries: BookQueries) -> None:
    _show('Updating price of "The Alchemist" to 12.99', await queries.update_price_by_title("The Alchemist", 12.99))
    _show('Deleting book titled "Moby Dick"', await queries.delete_by_title("Moby Dick"))


async def run(config: BookstoreConfig, queries: Optional[BookQueries] = None) -> None:
    queries = queries or BookQueries(config)
    await demo_reads(queries)
    if config.run_explain:
        await demo_explain(queries, config.explain_title)
    if config.run_destructive:
        await run_destructive_examples(queries)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Run the plp_bookstore query and aggregation demos.")
    parser.add_argument("--uri", type=str, default=None, help="MongoDB connection string (default: $MONGO_URI)")
    parser.add_argument("--explain", action="store_true", help="Create indexes and show explain output before/after")
    parser.add_argument("--destructive", action="store_true", help="Run the update and delete examples")
    parser.add_argument("--title", type=str, default=None, help="Title used for the explain demo")
    parser.add_argument("--env-file", type=str, default=None, help="Path to a .env file to load")
    parser.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging")
    return parser


def config_from_args(args: argparse.Namespace) -> BookstoreConfig:
    config = BookstoreConfig.from_env(args.env_file)
    overrides = {}
    if args.uri:
        overrides["mongo_uri"] = args.uri
    if args.explain:
        overrides["run_explain"] = True
    if args.destructive:
        overrides["run_destructive"] = True
    if args.title:
        overrides["explain_title"] = args.title
    return replace(config, **overrides)


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    logging.basicConfig(level=logging.DEBUG if args.verbose else logging.INFO)
    config = config_from_args(args)
    try:
        asyncio.run(run(config))
    except Exception as e:
        logger.error(f"Error running bookstore queries: {e}")
        return 1
    return 0
