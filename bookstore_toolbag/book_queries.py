# bookstore_toolbag/book_queries.py
import logging
import time
from contextlib import asynccontextmanager
from typing import Any, AsyncIterator, Callable, Dict, List, Optional, Union

from motor.motor_asyncio import AsyncIOMotorClient, AsyncIOMotorCollection
from pymongo import ASCENDING, DESCENDING
from pymongo import errors as pymongo_errors
from pymongo.results import DeleteResult, UpdateResult

from bookstore_toolbag.config import BookstoreConfig
from bookstore_toolbag.pipelines import (
    AUTHOR_YEAR_INDEX,
    TITLE_INDEX,
    author_with_most_books_pipeline,
    avg_price_by_genre_pipeline,
    group_by_decade_pipeline,
)

logger = logging.getLogger(__name__)

JsonDict = Dict[str, Any]
Projection = Dict[str, int]

GENRE_PROJECTION: Projection = {"title": 1, "author": 1, "price": 1}
PUBLISHED_AFTER_PROJECTION: Projection = {"title": 1, "author": 1, "published_year": 1}
AUTHOR_PROJECTION: Projection = {"title": 1, "genre": 1, "price": 1}
IN_STOCK_PROJECTION: Projection = {"title": 1, "author": 1, "published_year": 1, "in_stock": 1}
PRICE_SORT_PROJECTION: Projection = {"title": 1, "price": 1}
PAGE_PROJECTION: Projection = {"title": 1, "author": 1, "price": 1}

DEFAULT_PAGE_SIZE = 5


class BookQueries:
    """
    Async query and aggregation facade over the books collection.

    Every operation opens its own client, issues a single request and closes
    the client again, so nothing is shared between concurrent calls. Driver
    errors are logged and re-raised unchanged.
    """

    def __init__(
        self,
        config: Optional[BookstoreConfig] = None,
        client_factory: Callable[[str], AsyncIOMotorClient] = AsyncIOMotorClient,
    ):
        self.config = config if config is not None else BookstoreConfig()
        self._client_factory = client_factory

    @asynccontextmanager
    async def _session(self, operation: str) -> AsyncIterator[Any]:
        """Yield the database handle for one operation and always close the client."""
        client = self._client_factory(self.config.mongo_uri)
        start = time.perf_counter()
        try:
            yield client[self.config.database_name]
        except pymongo_errors.PyMongoError as e:
            logger.error(f"[{operation}] Mongo error: {e}")
            raise
        except Exception as e:
            logger.error(f"[{operation}] error: {e}")
            raise
        else:
            elapsed = time.perf_counter() - start
            logger.debug(f"[PROFILE] {operation} took {elapsed:.4f} seconds")
        finally:
            client.close()
            logger.debug("MongoDB connection closed.")

    def _books(self, db: Any) -> AsyncIOMotorCollection:
        return db[self.config.collection_name]

    async def _find(
        self,
        operation: str,
        query: JsonDict,
        projection: Projection,
        *,
        sort: Optional[List] = None,
        skip: Optional[int] = None,
        limit: Optional[int] = None,
    ) -> List[JsonDict]:
        async with self._session(operation) as db:
            cursor = self._books(db).find(query, projection)
            if sort:
                cursor = cursor.sort(sort)
            if skip is not None:
                cursor = cursor.skip(skip)
            if limit is not None:
                cursor = cursor.limit(limit)
            docs = await cursor.to_list(length=None)
        logger.info(f"{operation} returned {len(docs)} document(s)")
        return docs

    async def _aggregate(self, operation: str, pipeline: List[JsonDict]) -> List[JsonDict]:
        async with self._session(operation) as db:
            cursor = self._books(db).aggregate(pipeline)
            return await cursor.to_list(length=None)

    @staticmethod
    def _parse_mongo_result(res: Union[UpdateResult, DeleteResult]) -> Dict[str, Any]:
        """Converts PyMongo write results into plain dicts."""
        if isinstance(res, UpdateResult):
            return {
                "matched_count": res.matched_count,
                "modified_count": res.modified_count,
                "upserted_id": res.upserted_id,
                "acknowledged": res.acknowledged,
            }
        return {"deleted_count": res.deleted_count, "acknowledged": res.acknowledged}

    # ---------- Filtered reads ----------
    async def find_by_genre(self, genre: str, projection: Optional[Projection] = None) -> List[JsonDict]:
        return await self._find("find_by_genre", {"genre": genre}, projection or GENRE_PROJECTION)

    async def find_published_after(self, year: int, projection: Optional[Projection] = None) -> List[JsonDict]:
        return await self._find(
            "find_published_after",
            {"published_year": {"$gt": year}},
            projection or PUBLISHED_AFTER_PROJECTION,
        )

    async def find_by_author(self, author: str, projection: Optional[Projection] = None) -> List[JsonDict]:
        return await self._find("find_by_author", {"author": author}, projection or AUTHOR_PROJECTION)

    async def find_in_stock_and_published_after(
        self, year: int, projection: Optional[Projection] = None
    ) -> List[JsonDict]:
        return await self._find(
            "find_in_stock_and_published_after",
            {"in_stock": True, "published_year": {"$gt": year}},
            projection or IN_STOCK_PROJECTION,
        )

    # ---------- Sorting and pagination ----------
    async def sort_by_price(self, order: str = "asc", projection: Optional[Projection] = None) -> List[JsonDict]:
        """Whole collection ordered by price; any order other than "asc" sorts descending."""
        direction = ASCENDING if order == "asc" else DESCENDING
        return await self._find(
            "sort_by_price", {}, projection or PRICE_SORT_PROJECTION, sort=[("price", direction)]
        )

    async def paginate(
        self, page: int = 1, per_page: int = DEFAULT_PAGE_SIZE, projection: Optional[Projection] = None
    ) -> List[JsonDict]:
        """
        Return one 1-based page of the collection.

        Pages past the end come back empty. Page numbers below 1 give a
        negative skip, which is passed to the driver as-is. A per_page of 0
        becomes limit(0), which the store reads as "no limit", so the whole
        collection comes back.
        """
        skip = (page - 1) * per_page
        return await self._find("paginate", {}, projection or PAGE_PROJECTION, skip=skip, limit=per_page)

    # ---------- Point writes ----------
    async def update_price_by_title(self, title: str, new_price: float) -> Dict[str, Any]:
        async with self._session("update_price_by_title") as db:
            res = await self._books(db).update_one({"title": title}, {"$set": {"price": new_price}})
        parsed = self._parse_mongo_result(res)
        logger.info(f"update_price_by_title '{title}': matched={parsed.get('matched_count')}")
        return parsed

    async def delete_by_title(self, title: str) -> Dict[str, Any]:
        async with self._session("delete_by_title") as db:
            res = await self._books(db).delete_one({"title": title})
        parsed = self._parse_mongo_result(res)
        logger.info(f"delete_by_title '{title}': deleted={parsed.get('deleted_count')}")
        return parsed

    # ---------- Aggregations ----------
    async def aggregate_avg_price_by_genre(self) -> List[JsonDict]:
        return await self._aggregate("aggregate_avg_price_by_genre", avg_price_by_genre_pipeline())

    async def aggregate_author_with_most_books(self) -> Optional[JsonDict]:
        docs = await self._aggregate("aggregate_author_with_most_books", author_with_most_books_pipeline())
        return docs[0] if docs else None

    async def aggregate_group_by_decade(self) -> List[JsonDict]:
        return await self._aggregate("aggregate_group_by_decade", group_by_decade_pipeline())

    # ---------- Indexes and plans ----------
    async def create_indexes(self) -> Dict[str, str]:
        """Ensure the title and (author, published_year) indexes exist; returns their names."""
        async with self._session("create_indexes") as db:
            books = self._books(db)
            title_index = await books.create_index(TITLE_INDEX)
            author_year_index = await books.create_index(AUTHOR_YEAR_INDEX)
        logger.info(f"Indexes ready on '{self.config.collection_name}': {title_index}, {author_year_index}")
        return {"title_index": title_index, "author_year_index": author_year_index}

    async def explain_find_by_title(self, title: str) -> JsonDict:
        """Raw executionStats explain output for a title lookup."""
        async with self._session("explain_find_by_title") as db:
            return await db.command(
                "explain",
                {"find": self.config.collection_name, "filter": {"title": title}},
                verbosity="executionStats",
            )
