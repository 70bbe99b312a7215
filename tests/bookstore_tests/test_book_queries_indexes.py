import unittest
from unittest.mock import AsyncMock, MagicMock

from bookstore_toolbag.book_queries import BookQueries
from bookstore_toolbag.config import BookstoreConfig


class TestBookQueriesIndexes(unittest.IsolatedAsyncioTestCase):
    async def asyncSetUp(self):
        self.collection = MagicMock()
        self.collection.create_index = AsyncMock(side_effect=lambda keys: "_".join(f"{k}_{d}" for k, d in keys))
        self.db = MagicMock()
        self.db.__getitem__.return_value = self.collection
        self.client = MagicMock()
        self.client.__getitem__.return_value = self.db
        self.queries = BookQueries(BookstoreConfig(), client_factory=MagicMock(return_value=self.client))

    async def test_create_indexes_keys_and_names(self):
        result = await self.queries.create_indexes()

        self.collection.create_index.assert_any_await([("title", 1)])
        self.collection.create_index.assert_any_await([("author", 1), ("published_year", -1)])
        self.assertEqual(result, {"title_index": "title_1", "author_year_index": "author_1_published_year_-1"})

    async def test_create_indexes_twice_reports_same_names(self):
        first = await self.queries.create_indexes()
        second = await self.queries.create_indexes()
        self.assertEqual(first, second)

    async def test_explain_find_by_title_passes_plan_through(self):
        plan = {"executionStats": {"totalDocsExamined": 12}, "queryPlanner": {"winningPlan": {"stage": "COLLSCAN"}}}
        self.db.command = AsyncMock(return_value=plan)

        result = await self.queries.explain_find_by_title("The Hobbit")

        self.assertIs(result, plan)
        self.db.command.assert_awaited_once_with(
            "explain",
            {"find": "books", "filter": {"title": "The Hobbit"}},
            verbosity="executionStats",
        )
        self.client.close.assert_called_once()


if __name__ == "__main__":
    unittest.main()
