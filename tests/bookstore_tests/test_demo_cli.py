import unittest
from unittest.mock import AsyncMock, MagicMock, patch

from bookstore_toolbag import demo
from bookstore_toolbag.config import BookstoreConfig


def fake_queries():
    queries = MagicMock()
    for name in (
        "find_by_genre", "find_published_after", "find_by_author", "find_in_stock_and_published_after",
        "sort_by_price", "paginate", "aggregate_avg_price_by_genre", "aggregate_author_with_most_books",
        "aggregate_group_by_decade", "create_indexes", "explain_find_by_title",
        "update_price_by_title", "delete_by_title",
    ):
        setattr(queries, name, AsyncMock(return_value=[]))
    return queries


class TestDemoRun(unittest.IsolatedAsyncioTestCase):
    @patch("builtins.print")
    async def test_reads_only_by_default(self, _print):
        queries = fake_queries()
        await demo.run(BookstoreConfig(), queries)

        queries.find_by_genre.assert_awaited_once_with("Fiction")
        queries.paginate.assert_awaited_once_with(1, 5)
        queries.aggregate_group_by_decade.assert_awaited_once()
        queries.create_indexes.assert_not_awaited()
        queries.update_price_by_title.assert_not_awaited()
        queries.delete_by_title.assert_not_awaited()

    @patch("builtins.print")
    async def test_explain_and_destructive_flags(self, _print):
        queries = fake_queries()
        config = BookstoreConfig(run_explain=True, run_destructive=True, explain_title="Dune")
        await demo.run(config, queries)

        self.assertEqual(queries.explain_find_by_title.await_count, 2)
        queries.explain_find_by_title.assert_awaited_with("Dune")
        queries.create_indexes.assert_awaited_once()
        queries.update_price_by_title.assert_awaited_once_with("The Alchemist", 12.99)
        queries.delete_by_title.assert_awaited_once_with("Moby Dick")


class TestDemoCli(unittest.TestCase):
    @patch("bookstore_toolbag.config.load_dotenv")
    def test_flags_override_environment(self, _mock_load):
        args = demo.build_parser().parse_args(
            ["--uri", "mongodb://db:27017", "--explain", "--destructive", "--title", "Emma"]
        )
        config = demo.config_from_args(args)

        self.assertEqual(config.mongo_uri, "mongodb://db:27017")
        self.assertTrue(config.run_explain)
        self.assertTrue(config.run_destructive)
        self.assertEqual(config.explain_title, "Emma")

    @patch("bookstore_toolbag.config.load_dotenv")
    @patch("bookstore_toolbag.demo.run", new_callable=AsyncMock)
    def test_main_returns_zero_on_success(self, mock_run, _mock_load):
        self.assertEqual(demo.main([]), 0)
        mock_run.assert_awaited_once()

    @patch("bookstore_toolbag.config.load_dotenv")
    @patch("bookstore_toolbag.demo.run", new_callable=AsyncMock, side_effect=RuntimeError("unreachable"))
    def test_main_returns_one_on_failure(self, _mock_run, _mock_load):
        with self.assertLogs("bookstore_toolbag.demo", level="ERROR") as logs:
            self.assertEqual(demo.main([]), 1)
        self.assertIn("unreachable", logs.output[0])


if __name__ == "__main__":
    unittest.main()
