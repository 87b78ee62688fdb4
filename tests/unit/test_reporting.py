"""
Unit tests for console reporting.
"""

from shopify_import.config import Identity, ImportRecord, RowOutcome, RowResult, VariantData
from shopify_import.reporting import Reporter


class TestReporter:

    def test_counts_outcomes(self, console):
        reporter = Reporter(console)
        reporter.add_result(RowResult(outcome=RowOutcome.CREATED))
        reporter.add_result(RowResult(outcome=RowOutcome.UPDATED, problems=["productCreateMedia: bad url"]))
        reporter.add_result(RowResult(outcome=RowOutcome.SKIPPED))
        reporter.add_result(RowResult(outcome=RowOutcome.ERRORED, error="API error: boom"))

        stats = reporter.stats
        assert (stats.created, stats.updated, stats.skipped, stats.errored) == (1, 1, 1, 1)
        assert stats.with_problems == 1
        assert len(reporter.failures) == 2

    def test_summary_lists_failures(self, console):
        reporter = Reporter(console)
        reporter.add_result(RowResult(row_number=3, title="Mug", outcome=RowOutcome.ERRORED, error="API error: boom"))

        reporter.print_summary()

        output = console.export_text()
        assert "IMPORT SUMMARY" in output
        assert "Mug" in output
        assert "API error: boom" in output

    def test_preview_describes_planned_action(self, console):
        records = [
            ImportRecord(title="Shirt", identity=Identity(handle="shirt-1")),
            ImportRecord(title="Mug", identity=Identity(remote_id="gid://shopify/Product/7")),
            ImportRecord(title="Cap", variant=VariantData(price="5")),
            None,
        ]

        Reporter(console).print_record_preview(records)

        output = console.export_text()
        assert "lookup handle shirt-1" in output
        assert "update gid://shopify/Product/7" in output
        assert "create" in output
        assert "price=5" in output
        assert "(no title)" in output
