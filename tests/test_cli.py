# tests/test_cli.py

"""Tests for the headless CLI commands and argument parsing."""

import io
import json
import unittest
from datetime import date
from typing import Any
from unittest.mock import AsyncMock, MagicMock, patch

import main
from howmuch.cli import runner
from howmuch.errors import StoreError
from howmuch.services.scrape_orchestrator import ScrapeResult
from howmuch.storage.base_store import PriceStore


def _printed(mock_err: MagicMock) -> str:
    """Join everything printed to the stderr console double."""
    return "\n".join(str(c.args[0]) for c in mock_err.print.call_args_list)


class _CliTestCase(unittest.IsolatedAsyncioTestCase):
    """Captures stdout JSON and the stderr status console."""

    def setUp(self) -> None:
        self.stdout = io.StringIO()
        stdout_patch = patch("sys.stdout", self.stdout)
        err_patch = patch.object(runner, "_err")
        stdout_patch.start()
        self.err = err_patch.start()
        self.addCleanup(stdout_patch.stop)
        self.addCleanup(err_patch.stop)

    def json_output(self) -> Any:
        return json.loads(self.stdout.getvalue())


class TestServicesCommand(_CliTestCase):

    async def test_category_filter(self) -> None:
        code = await runner.run_services(None, "cleaning", "json")
        self.assertEqual(code, 0)
        ids = {s["id"] for s in self.json_output()}
        self.assertEqual(
            ids, {"junk-removal", "house-cleaning", "window-cleaning"},
        )

    async def test_unknown_category(self) -> None:
        self.assertEqual(await runner.run_services(None, "roofing", "json"), 1)

    async def test_table_output(self) -> None:
        self.assertEqual(await runner.run_services(None, None, "table"), 0)
        self.assertIn("Services", self.stdout.getvalue())


class TestSummaryCommand(_CliTestCase):

    async def test_junk_removal_new_york(self) -> None:
        code = await runner.run_summary(
            None, "junk-removal", "10001", False, "json",
        )
        self.assertEqual(code, 0)
        payload = self.json_output()
        self.assertEqual(payload["local_average"], 275.0)
        self.assertEqual(payload["price_range"], {"min": 250.0, "max": 300.0})
        self.assertEqual(payload["data_points"], 2)
        self.assertEqual(payload["trend"], "stable")
        self.assertEqual(payload["location"]["city"], "New York")

    async def test_no_data_invites_first_submission(self) -> None:
        code = await runner.run_summary(
            None, "pest-control", "99999", False, "json",
        )
        self.assertEqual(code, 1)
        self.assertEqual(self.stdout.getvalue(), "")
        notice = _printed(self.err)
        self.assertIn("No pricing data available", notice)
        self.assertIn("submit pest-control", notice)

    async def test_comprehensive_reports_sources(self) -> None:
        orchestrator = MagicMock()
        orchestrator.scrape_all = AsyncMock(
            return_value=ScrapeResult("junk-removal", "10001")
        )
        with patch(
            "howmuch.services.pricing_service.ScrapeOrchestrator",
            return_value=orchestrator,
        ):
            code = await runner.run_summary(
                None, "junk-removal", "10001", True, "json",
            )
        self.assertEqual(code, 0)
        payload = self.json_output()
        self.assertEqual(
            payload["sources"], {"scraped": 0, "local": 2, "database": 0},
        )


class TestSubmitCommand(_CliTestCase):

    async def test_submit_without_database(self) -> None:
        code = await runner.run_submit(
            None, "lawn-mowing", 60.0, "90210, Beverly Hills, CA",
            date(2024, 1, 12), "",
        )
        self.assertEqual(code, 0)
        self.assertIn("Beverly Hills, CA 90210", _printed(self.err))

    async def test_failed_submission(self) -> None:
        store = MagicMock(spec=PriceStore)
        store.name = "supabase"
        store.insert_observations.side_effect = StoreError("offline")
        code = await runner.run_submit(
            store, "lawn-mowing", 60.0, "90210, Beverly Hills, CA",
            date(2024, 1, 12), "",
        )
        self.assertEqual(code, 1)
        self.assertIn("could not be saved", _printed(self.err))


class TestOtherCommands(_CliTestCase):

    async def test_prices_no_data(self) -> None:
        code = await runner.run_prices(None, "snow-removal", "Denver", "json")
        self.assertEqual(code, 1)

    async def test_prices_json(self) -> None:
        code = await runner.run_prices(None, "house-cleaning", "Miami", "json")
        self.assertEqual(code, 0)
        rows = self.json_output()
        self.assertEqual(rows[0]["price"], 180.0)
        self.assertEqual(rows[0]["date"], "2024-01-08")

    async def test_stats_without_database(self) -> None:
        code = await runner.run_stats(None, "json")
        self.assertEqual(code, 0)
        payload = self.json_output()
        self.assertEqual(payload["total_submissions"], 0)
        self.assertIn("last_updated", payload)

    async def test_scrape_nothing_found(self) -> None:
        orchestrator = MagicMock()
        orchestrator.scrape_all = AsyncMock(
            return_value=ScrapeResult("plumbing", "60601")
        )
        with patch(
            "howmuch.services.pricing_service.ScrapeOrchestrator",
            return_value=orchestrator,
        ):
            code = await runner.run_scrape(None, "plumbing", "60601", "json")
        self.assertEqual(code, 1)
        self.assertFalse(self.json_output()["success"])

    async def test_scrape_single_marketplace(self) -> None:
        orchestrator = MagicMock()
        orchestrator.scrape_all = AsyncMock(
            return_value=ScrapeResult("plumbing", "60601")
        )
        with patch.object(
            runner, "ScrapeOrchestrator", return_value=orchestrator,
        ) as orchestrator_cls:
            await runner.run_scrape(
                None, "plumbing", "60601", "json", "angi",
            )
        (sources,), _ = orchestrator_cls.call_args
        self.assertEqual([s["id"] for s in sources], ["angi"])
        orchestrator.scrape_all.assert_awaited_once_with("plumbing", "60601")
        self.assertIn("Angi", _printed(self.err))

    async def test_scrape_unknown_marketplace(self) -> None:
        code = await runner.run_scrape(
            None, "plumbing", "60601", "json", "craigslist",
        )
        self.assertEqual(code, 2)
        self.assertIn("Unknown marketplace", _printed(self.err))


class TestArgumentParsing(unittest.TestCase):
    """main() wiring and argparse validation."""

    def setUp(self) -> None:
        for name, value in (
            ("setup_logging", MagicMock()),
            ("create_store", MagicMock(return_value=None)),
        ):
            p = patch.object(main, name, value)
            p.start()
            self.addCleanup(p.stop)

    def test_summary_exit_code(self) -> None:
        with patch("sys.stdout", io.StringIO()):
            code = main.main(["-f", "json", "summary", "junk-removal", "10001"])
        self.assertEqual(code, 0)

    def test_no_data_exit_code(self) -> None:
        with patch.object(runner, "_err"):
            code = main.main(["summary", "pest-control", "99999"])
        self.assertEqual(code, 1)

    def test_rejects_non_positive_price(self) -> None:
        with patch("sys.stderr", io.StringIO()):
            with self.assertRaises(SystemExit) as ctx:
                main.main(
                    ["submit", "lawn-mowing", "0", "90210", "2024-01-12"]
                )
        self.assertEqual(ctx.exception.code, 2)

    def test_rejects_bad_date(self) -> None:
        with patch("sys.stderr", io.StringIO()):
            with self.assertRaises(SystemExit):
                main.main(
                    ["submit", "lawn-mowing", "60", "90210", "01/12/2024"]
                )

    def test_scrape_source_option(self) -> None:
        with patch.object(
            runner, "run_scrape", AsyncMock(return_value=0),
        ) as run_scrape:
            code = main.main(
                ["scrape", "plumbing", "60601", "--source", "thumbtack"]
            )
        self.assertEqual(code, 0)
        run_scrape.assert_awaited_once_with(
            None, "plumbing", "60601", "table", "thumbtack",
        )

    def test_scrape_rejects_unknown_source(self) -> None:
        with patch("sys.stderr", io.StringIO()):
            with self.assertRaises(SystemExit):
                main.main(["scrape", "plumbing", "60601", "-s", "nope"])

    def test_command_required(self) -> None:
        with patch("sys.stderr", io.StringIO()):
            with self.assertRaises(SystemExit):
                main.main([])


if __name__ == "__main__":
    unittest.main()
