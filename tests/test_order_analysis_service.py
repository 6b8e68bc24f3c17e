"""
tests/test_order_analysis_service.py

End-to-end tests for OrderAnalysisService over in-memory rows.

Coverage
--------
- Worked example: two orders across January and February
- Null AOV for an order whose only total is unparseable
- First-seen total wins across duplicated order rows
- Empty keyword and unresolved roles produce empty reports, not errors
- Empty dataset is the single terminal failure
- Determinism across repeated runs
"""

from __future__ import annotations

import pytest

from app.domain.order_analysis import DistributionRow, Report
from app.services.order_analysis_service import (
    AnalysisResult,
    EmptyDatasetError,
    OrderAnalysisService,
)

ALIASES = {
    "order": ["order"],
    "lineitem": ["item"],
    "quantity": ["qty"],
    "total": ["total"],
    "created": ["created"],
}


@pytest.fixture()
def svc() -> OrderAnalysisService:
    """Fresh service instance for each test."""
    return OrderAnalysisService()


@pytest.fixture()
def example_rows() -> list[dict]:
    return [
        {"order": "#1001", "item": "Widget A", "qty": 2, "total": 50, "created": "2024-01-15"},
        {"order": "#1001", "item": "Widget B", "qty": 1, "total": 50, "created": "2024-01-15"},
        {"order": "#1002", "item": "Widget A", "qty": 3, "total": 90, "created": "2024-02-01"},
    ]


class TestWorkedExample:
    @pytest.fixture()
    def result(self, svc: OrderAnalysisService, example_rows: list[dict]) -> AnalysisResult:
        return svc.analyze(example_rows, "Widget A", aliases=ALIASES)

    def test_all_months_report(self, result: AnalysisResult) -> None:
        report = result.all_months

        assert report.total_orders == 2
        assert report.distribution == (
            DistributionRow(quantity=2, order_count=1, percentage=50.0),
            DistributionRow(quantity=3, order_count=1, percentage=50.0),
        )
        assert report.aov == pytest.approx(70.0)

    def test_per_month_reports(self, result: AnalysisResult) -> None:
        assert result.month_keys == ("2024-01", "2024-02")
        assert result.monthly["2024-01"].total_orders == 1
        assert result.monthly["2024-01"].aov == pytest.approx(50.0)
        assert result.monthly["2024-02"].total_orders == 1
        assert result.monthly["2024-02"].aov == pytest.approx(90.0)

    def test_month_over_month_delta(self, result: AnalysisResult) -> None:
        assert result.comparison.cell(2, "2024-01").percentage == 100.0
        assert result.comparison.cell(2, "2024-01").delta is None
        assert result.comparison.cell(2, "2024-02").delta == pytest.approx(-100.0)
        assert result.comparison.cell(3, "2024-02").delta == pytest.approx(100.0)

    def test_column_map_and_products(self, result: AnalysisResult) -> None:
        assert result.column_map.as_dict() == {
            "order": "order",
            "lineitem": "item",
            "quantity": "qty",
            "total": "total",
            "created": "created",
        }
        assert result.mapping_issues == ()
        assert result.product_names == ("Widget A", "Widget B")
        assert result.keyword == "widget a"

    def test_report_for_scope(self, result: AnalysisResult) -> None:
        assert result.report_for() is result.all_months
        assert result.report_for("all") is result.all_months
        assert result.report_for("2024-02").aov == pytest.approx(90.0)
        assert result.report_for("2023-07") == Report.empty()


class TestEdgeCases:
    def test_unparseable_total_gives_null_aov(self, svc: OrderAnalysisService) -> None:
        rows = [{"order": "#2001", "item": "Widget A", "qty": 1, "total": "N/A", "created": "2024-01-02"}]

        result = svc.analyze(rows, "widget a", aliases=ALIASES)

        assert result.all_months.total_orders == 1
        assert result.all_months.aov is None
        assert result.all_months.rows[0].total is None

    def test_first_seen_total_wins(self, svc: OrderAnalysisService) -> None:
        rows = [
            {"order": "#3001", "item": "Widget A", "qty": 1, "total": "40", "created": "2024-01-02"},
            {"order": "#3001", "item": "Widget A", "qty": 2, "total": "400", "created": "2024-01-02"},
        ]

        result = svc.analyze(rows, "widget", aliases=ALIASES)

        assert result.all_months.rows[0].quantity == 3
        assert result.all_months.aov == pytest.approx(40.0)

    def test_empty_keyword_produces_empty_report(self, svc: OrderAnalysisService, example_rows: list[dict]) -> None:
        result = svc.analyze(example_rows, "", aliases=ALIASES)

        assert result.all_months == Report.empty()
        assert result.monthly == {}
        assert result.comparison.rows == ()
        assert result.product_names == ("Widget A", "Widget B")

    def test_unresolved_quantity_role_is_reported_not_raised(self, svc: OrderAnalysisService) -> None:
        rows = [{"order": "#1", "item": "Widget A", "amount": 3}]

        result = svc.analyze(rows, "widget", aliases=ALIASES)

        assert result.all_months == Report.empty()
        unresolved = {issue.role for issue in result.mapping_issues if issue.code == "role_unresolved"}
        assert unresolved == {"quantity", "total", "created"}

    def test_unknown_alias_role_is_reported(self, svc: OrderAnalysisService, example_rows: list[dict]) -> None:
        result = svc.analyze(example_rows, "widget a", aliases={**ALIASES, "sku": ["sku"]})

        assert [issue.role for issue in result.mapping_issues] == ["sku"]
        assert result.all_months.total_orders == 2

    def test_missing_dates_fall_into_unknown_month_last(self, svc: OrderAnalysisService) -> None:
        rows = [
            {"order": "#1", "item": "Widget A", "qty": 1, "total": 10, "created": ""},
            {"order": "#2", "item": "Widget A", "qty": 1, "total": 20, "created": "2024-03-04"},
        ]

        result = svc.analyze(rows, "widget", aliases=ALIASES)

        assert result.month_keys == ("2024-03", "Unknown")
        assert result.comparison.month_keys == ("2024-03", "Unknown")

    def test_unknown_month_can_be_excluded_from_comparison(self) -> None:
        rows = [
            {"order": "#1", "item": "Widget A", "qty": 1, "total": 10, "created": None},
            {"order": "#2", "item": "Widget A", "qty": 1, "total": 20, "created": "2024-03-04"},
        ]

        result = OrderAnalysisService(compare_unknown_month=False).analyze(rows, "widget", aliases=ALIASES)

        assert result.month_keys == ("2024-03", "Unknown")
        assert result.comparison.month_keys == ("2024-03",)

    def test_spreadsheet_serial_dates_bucket_by_month(self, svc: OrderAnalysisService) -> None:
        rows = [
            {"order": 1001.0, "item": "Widget A", "qty": 1.0, "total": 10.0, "created": 45306},
            {"order": 1002.0, "item": "Widget A", "qty": 2.0, "total": 30.0, "created": 45352.5},
        ]

        result = svc.analyze(rows, "widget", aliases=ALIASES)

        assert result.month_keys == ("2024-01", "2024-03")
        assert [row.order_id for row in result.all_months.rows] == ["1001", "1002"]

    def test_shopify_headers_resolve_with_default_aliases(self, svc: OrderAnalysisService) -> None:
        rows = [
            {
                "Name": "#1001",
                "Created at": "2024-05-01 10:00:00 -0400",
                "Lineitem quantity": "2",
                "Lineitem name": "Hexagon Towel - Blue",
                "Total": "39.90",
            },
            {
                "Name": "#1001",
                "Created at": "",
                "Lineitem quantity": "1",
                "Lineitem name": "Hexagon Towel - Pink",
                "Total": "",
            },
        ]

        result = svc.analyze(rows, "hexagon towel")

        assert result.all_months.rows[0].quantity == 3
        assert result.all_months.aov == pytest.approx(39.9)
        assert result.month_keys == ("2024-05",)

    def test_oversized_numbers_are_skipped_not_raised(self, svc: OrderAnalysisService) -> None:
        rows = [
            {"order": "#1", "item": "Widget A", "qty": "1e400", "total": 10**400, "created": 10**400},
            {"order": "#2", "item": "Widget A", "qty": 2, "total": "1e400", "created": "2024-01-05"},
        ]

        result = svc.analyze(rows, "widget", aliases=ALIASES)

        assert [row.order_id for row in result.all_months.rows] == ["#2"]
        assert result.all_months.rows[0].quantity == 2
        assert result.all_months.aov is None
        assert result.month_keys == ("2024-01",)

    def test_non_string_header_keys_index_rows(self, svc: OrderAnalysisService) -> None:
        rows = [
            {"order": "#1", "item": "Widget A", 7: 3, "total": 15, "created": "2024-02-10"},
            {"order": "#2", "item": "Widget A", 7: 1, "total": 25, "created": "2024-02-11"},
        ]

        result = svc.analyze(rows, "widget", aliases={**ALIASES, "quantity": ["7"]})

        assert result.column_map.quantity == 7
        assert [row.quantity for row in result.all_months.rows] == [3, 1]
        assert result.all_months.aov == pytest.approx(20.0)

    def test_empty_dataset_raises(self, svc: OrderAnalysisService) -> None:
        with pytest.raises(EmptyDatasetError):
            svc.analyze([], "widget")


class TestDeterminism:
    def test_repeated_runs_are_identical(self, svc: OrderAnalysisService, example_rows: list[dict]) -> None:
        first = svc.analyze(example_rows, "Widget A", aliases=ALIASES)
        second = svc.analyze(example_rows, "Widget A", aliases=ALIASES)

        assert first == second
