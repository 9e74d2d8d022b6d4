"""Query parameter parsing for product endpoints.

``month`` and ``year`` arrive as raw strings so that a missing, malformed or
out-of-range value is reported as a 400 with the endpoint's own message,
rather than FastAPI's generic validation error.
"""

from dataclasses import dataclass
from datetime import MAXYEAR, MINYEAR, date

from fastapi import Depends, Query

from app.core.config import Settings, get_settings
from app.core.exceptions import BadRequestError

INVALID_SEARCH_MONTH = "Invalid month provided. It must be between 1 and 12."
INVALID_PERIOD = "Please provide a valid month (1-12) and year."
INVALID_MONTH = "Please provide a valid month (1-12)."
INVALID_YEAR = "Please provide a valid year."

MONTH_DESCRIPTION = "Calendar month (1-12)."
YEAR_DESCRIPTION = "Four-digit calendar year."


@dataclass(frozen=True)
class ReportPeriod:
    """A validated (month, year) pair."""

    month: int
    year: int


def is_blank(raw: str | None) -> bool:
    """True when a query value is absent or empty."""
    return raw is None or not raw.strip()


def parse_int(raw: str | None) -> int | None:
    """Parse an integer query value.

    Args:
        raw: Raw query string value.

    Returns:
        The integer, or None if the value is blank or not an integer.
    """
    if is_blank(raw):
        return None
    try:
        return int(raw.strip())  # type: ignore[union-attr]
    except ValueError:
        return None


def validate_month(raw: str | None, message: str) -> int:
    """Parse a required month.

    Args:
        raw: Raw query string value.
        message: Error message reported on failure.

    Returns:
        Month number in 1..12.

    Raises:
        BadRequestError: If the month is missing, not an integer or out of range.
    """
    month = parse_int(raw)
    if month is None or not 1 <= month <= 12:
        raise BadRequestError(message=message, details={"month": raw})
    return month


def validate_year(
    raw: str | None,
    message: str,
    minimum: int = MINYEAR,
    maximum: int = MAXYEAR,
) -> int:
    """Parse a required year bounded to ``[minimum, maximum]``.

    Raises:
        BadRequestError: If the year is missing, not an integer or out of range.
    """
    year = parse_int(raw)
    if year is None or not minimum <= year <= maximum:
        raise BadRequestError(
            message=message,
            details={"year": raw, "minimum": minimum, "maximum": maximum},
        )
    return year


# =============================================================================
# FastAPI dependencies
# =============================================================================


def search_month(
    month: str | None = Query(None, description=f"{MONTH_DESCRIPTION} Optional."),
) -> int | None:
    """Optional month filter for product search."""
    if is_blank(month):
        return None
    return validate_month(month, INVALID_SEARCH_MONTH)


def stats_period(
    month: str | None = Query(None, description=MONTH_DESCRIPTION),
    year: str | None = Query(None, description=YEAR_DESCRIPTION),
) -> ReportPeriod:
    """Required month and year for the summary report."""
    return ReportPeriod(
        month=validate_month(month, INVALID_PERIOD),
        year=validate_year(year, INVALID_PERIOD),
    )


def histogram_period(
    month: str | None = Query(None, description=MONTH_DESCRIPTION),
    year: str | None = Query(
        None,
        description=f"{YEAR_DESCRIPTION} Between 1900 and the current year.",
    ),
    settings: Settings = Depends(get_settings),
) -> ReportPeriod:
    """Required month and year for the price histogram.

    The year must not lie in the future.
    """
    return ReportPeriod(
        month=validate_month(month, INVALID_MONTH),
        year=validate_year(
            year,
            INVALID_YEAR,
            minimum=settings.min_year,
            maximum=date.today().year,
        ),
    )


def category_month(
    month: str | None = Query(None, description=MONTH_DESCRIPTION),
) -> int:
    """Required month for the category distribution."""
    return validate_month(month, INVALID_MONTH)
