"""Historical rate ingestion.

Accepts text with one `YYYY-MM-DD,<price>` observation per line. Validation
is all-or-nothing: the first malformed line aborts the whole batch with a
ValidationError carrying its 1-based line number. Blank lines are ignored
but still counted, so reported numbers match the source text.

Decimal-comma exports (`1,0850`) are handled by explicit configuration:
the field separator is then `;` when present, otherwise the first comma.
"""

import math
import re
from datetime import datetime
from pathlib import Path

from fxhedge.backtest.models import HistoricalDataPoint
from fxhedge.config import IngestionSettings
from fxhedge.exceptions import ValidationError
from fxhedge.logging import get_logger

logger = get_logger(__name__)

_DATE_RE = re.compile(r"^\d{4}-\d{2}-\d{2}$")
_PRICE_RE = re.compile(r"^[+-]?(?:\d+(?:\.\d*)?|\.\d+)$")


def _split_line(line: str, decimal_comma: bool) -> tuple[str, str]:
    if decimal_comma:
        if ";" in line:
            fields = line.split(";")
        else:
            fields = line.split(",", 1)
    else:
        fields = line.split(",")

    if len(fields) != 2:
        raise ValueError(f"expected 'YYYY-MM-DD,price', got {line!r}")

    date_text, price_text = (f.strip() for f in fields)
    if decimal_comma:
        price_text = price_text.replace(",", ".")
    return date_text, price_text


def parse_line(line: str, line_number: int, decimal_comma: bool = False) -> HistoricalDataPoint:
    """Parse one non-blank line into a HistoricalDataPoint.

    Raises:
        ValidationError: If the date or price is malformed.
    """
    try:
        date_text, price_text = _split_line(line.strip(), decimal_comma)
    except ValueError as e:
        raise ValidationError(str(e), line_number=line_number) from e

    if not _DATE_RE.match(date_text):
        raise ValidationError(f"invalid date {date_text!r}", line_number=line_number)
    try:
        datetime.strptime(date_text, "%Y-%m-%d")
    except ValueError as e:
        raise ValidationError(f"invalid date {date_text!r}", line_number=line_number) from e

    if not _PRICE_RE.match(price_text):
        raise ValidationError(f"invalid price {price_text!r}", line_number=line_number)
    price = float(price_text)
    if not math.isfinite(price) or price <= 0:
        raise ValidationError(
            f"price must be a positive finite number, got {price_text!r}",
            line_number=line_number,
        )

    return HistoricalDataPoint(date=date_text, price=price)


def looks_like_header(line: str) -> bool:
    """True when a line carries neither an ISO date nor a numeric price.

    A row with a numeric price and a malformed date is data, not a header,
    so it still fails parsing with its line number.
    """
    fields = [f.strip() for f in re.split(r"[,;]", line.strip(), maxsplit=1)]
    if _DATE_RE.match(fields[0]):
        return False
    price_text = fields[1].replace(",", ".") if len(fields) > 1 else ""
    return not _PRICE_RE.match(price_text)


def parse_historical_data(
    text: str,
    *,
    decimal_comma: bool = False,
    skip_header: bool = False,
) -> list[HistoricalDataPoint]:
    """Parse and validate a raw historical series.

    Args:
        text: Raw text, one observation per line.
        decimal_comma: Prices use a comma as decimal separator.
        skip_header: Drop the first non-blank line.

    Returns:
        Data points sorted ascending by date.

    Raises:
        ValidationError: On the first malformed row or a duplicate date.
            No partial result is returned.
    """
    points: list[HistoricalDataPoint] = []
    seen: dict[str, int] = {}
    header_pending = skip_header

    try:
        for line_number, line in enumerate(text.splitlines(), start=1):
            if not line.strip():
                continue
            if header_pending:
                header_pending = False
                continue

            point = parse_line(line, line_number, decimal_comma)
            if point.date in seen:
                raise ValidationError(
                    f"duplicate date {point.date} (first seen on line {seen[point.date]})",
                    line_number=line_number,
                )
            seen[point.date] = line_number
            points.append(point)
    except ValidationError as e:
        logger.warning("historical_data_rejected", line=e.line_number, error=str(e))
        raise

    points.sort(key=lambda p: p.date)
    logger.debug("historical_data_parsed", points=len(points))
    return points


def load_historical_csv(
    path: str | Path,
    settings: IngestionSettings | None = None,
) -> list[HistoricalDataPoint]:
    """Load a historical series from a file.

    The header policy comes from settings.skip_header: "auto" drops the
    first line only when it has neither an ISO date nor a numeric price.

    Args:
        path: CSV file path.
        settings: Ingestion settings. Defaults to IngestionSettings().

    Returns:
        Data points sorted ascending by date.
    """
    if settings is None:
        settings = IngestionSettings()

    text = Path(path).read_text(encoding="utf-8-sig")

    if settings.skip_header == "always":
        skip_header = True
    elif settings.skip_header == "never":
        skip_header = False
    else:
        first_line = next((ln for ln in text.splitlines() if ln.strip()), "")
        skip_header = bool(first_line) and looks_like_header(first_line)

    points = parse_historical_data(
        text,
        decimal_comma=settings.decimal_comma,
        skip_header=skip_header,
    )
    logger.info("historical_data_loaded", path=str(path), points=len(points))
    return points
