"""CSV export of backtest rows.

Column order is fixed. Rates are written with 4 decimals, monetary
columns with 2. The extended layout appends the premium per unit and one
column per strategy leg.
"""

import csv
import io
from pathlib import Path

from fxhedge.backtest.models import ForexResult
from fxhedge.logging import get_logger

logger = get_logger(__name__)

CSV_COLUMNS: list[tuple[str, str, int | None]] = [
    ("Date", "date", None),
    ("TimeToMaturity", "time_to_maturity", 4),
    ("ForwardRate", "forward_rate", 4),
    ("RealRate", "real_rate", 4),
    ("MonthlyVolume", "monthly_volume", 2),
    ("PremiumPaid", "premium_paid", 2),
    ("PayoffFromHedge", "payoff_from_hedge", 2),
    ("HedgedRevenue", "hedged_revenue", 2),
    ("UnhedgedRevenue", "unhedged_revenue", 2),
    ("PnLVsUnhedged", "pnl_vs_unhedged", 2),
    ("EffectiveRate", "effective_rate", 4),
]


def format_row(row: ForexResult) -> list[str]:
    """Render one result as CSV cell strings."""
    cells = []
    for _, attr, decimals in CSV_COLUMNS:
        value = getattr(row, attr)
        cells.append(value if decimals is None else f"{value:.{decimals}f}")
    return cells


def leg_premium_headers(results: list[ForexResult]) -> list[str]:
    """Premium_<leg> headers over every leg seen in results, in leg order."""
    labels = {label for row in results for label in row.leg_premiums}
    ordered = sorted(labels, key=lambda label: (int(label[3:].split("_")[0]), label))
    return [f"Premium_{label}" for label in ordered]


def export_results_csv(results: list[ForexResult], extended: bool = False) -> str:
    """Serialize backtest rows to CSV text with a header line.

    Args:
        results: Rows to write, in order.
        extended: Also write StrategyPremiumPerUnit and one premium column
            per leg (5 decimals; 0 for a leg missing from a row).
    """
    leg_headers = leg_premium_headers(results) if extended else []

    buffer = io.StringIO()
    writer = csv.writer(buffer, lineterminator="\n")
    header = [name for name, _, _ in CSV_COLUMNS]
    if extended:
        header += ["StrategyPremiumPerUnit", *leg_headers]
    writer.writerow(header)

    for row in results:
        cells = format_row(row)
        if extended:
            cells.append(f"{row.strategy_price:.5f}")
            cells += [
                f"{row.leg_premiums.get(h.removeprefix('Premium_'), 0.0):.5f}"
                for h in leg_headers
            ]
        writer.writerow(cells)
    return buffer.getvalue()


def write_results_csv(
    results: list[ForexResult], path: str | Path, extended: bool = False
) -> Path:
    """Write backtest rows to a CSV file and return its path."""
    path = Path(path)
    path.write_text(export_results_csv(results, extended), encoding="utf-8")
    logger.info(
        "backtest_results_exported", path=str(path), rows=len(results), extended=extended
    )
    return path
