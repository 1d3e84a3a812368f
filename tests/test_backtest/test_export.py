"""Tests for CSV export of backtest rows."""

import csv
import io
from dataclasses import replace
from pathlib import Path

from fxhedge.backtest.export import export_results_csv, write_results_csv
from fxhedge.backtest.models import ForexResult

HEADER = (
    "Date,TimeToMaturity,ForwardRate,RealRate,MonthlyVolume,PremiumPaid,"
    "PayoffFromHedge,HedgedRevenue,UnhedgedRevenue,PnLVsUnhedged,EffectiveRate"
)


def _row() -> ForexResult:
    return ForexResult(
        date="2023-02-01",
        time_to_maturity=0.0876112,
        forward_rate=1.101929,
        real_rate=1.12,
        monthly_volume=1_000_000.0,
        premium_paid=1234.5678,
        payoff_from_hedge=0.0,
        hedged_revenue=1_118_765.4322,
        unhedged_revenue=1_120_000.0,
        pnl_vs_unhedged=-1234.5678,
        effective_rate=1.11876543,
    )


class TestExportResultsCsv:
    """Fixed columns, 4 decimals for rates, 2 for money."""

    def test_header(self) -> None:
        assert export_results_csv([]).splitlines() == [HEADER]

    def test_formatting(self) -> None:
        lines = export_results_csv([_row()]).splitlines()
        assert lines[1] == (
            "2023-02-01,0.0876,1.1019,1.1200,1000000.00,1234.57,0.00,"
            "1118765.43,1120000.00,-1234.57,1.1188"
        )

    def test_parseable_by_csv_reader(self) -> None:
        rows = list(csv.DictReader(io.StringIO(export_results_csv([_row(), _row()]))))
        assert len(rows) == 2
        assert rows[0]["RealRate"] == "1.1200"

    def test_write_file(self, tmp_path: Path) -> None:
        path = write_results_csv([_row()], tmp_path / "backtest.csv")
        assert path.read_text(encoding="utf-8").startswith(HEADER)


class TestExtendedExport:
    """Strategy premium and one premium column per leg."""

    def _legged(self, **leg_premiums: float) -> ForexResult:
        return replace(_row(), strategy_price=0.00123456, leg_premiums=leg_premiums)

    def test_plain_export_unchanged(self) -> None:
        row = self._legged(Leg1_put=0.002)
        assert export_results_csv([row]).splitlines()[0] == HEADER

    def test_headers(self) -> None:
        row = self._legged(Leg1_put=0.002, Leg2_call=-0.00076544)
        header = export_results_csv([row], extended=True).splitlines()[0]
        assert header == HEADER + ",StrategyPremiumPerUnit,Premium_Leg1_put,Premium_Leg2_call"

    def test_values(self) -> None:
        row = self._legged(Leg1_put=0.002, Leg2_call=-0.00076544)
        line = export_results_csv([row], extended=True).splitlines()[1]
        assert line.endswith(",0.00123,0.00200,-0.00077")

    def test_leg_order_is_numeric(self) -> None:
        legs = {f"Leg{i}_call": 0.001 for i in range(1, 12)}
        header = export_results_csv([self._legged(**legs)], extended=True).splitlines()[0]
        columns = header.split(",")
        assert columns[-2:] == ["Premium_Leg10_call", "Premium_Leg11_call"]
        assert columns[-11] == "Premium_Leg1_call"

    def test_missing_leg_is_zero(self) -> None:
        rows = [self._legged(Leg1_put=0.002), self._legged(Leg1_put=0.001, Leg2_put=0.003)]
        lines = export_results_csv(rows, extended=True).splitlines()
        assert lines[1].endswith(",0.00200,0.00000")
        assert lines[2].endswith(",0.00100,0.00300")

    def test_write_extended_file(self, tmp_path: Path) -> None:
        path = write_results_csv(
            [self._legged(Leg1_call=0.01)], tmp_path / "extended.csv", extended=True
        )
        assert "Premium_Leg1_call" in path.read_text(encoding="utf-8").splitlines()[0]
