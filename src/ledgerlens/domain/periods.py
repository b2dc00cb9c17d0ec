"""Period bucketing and comparison window helpers."""

from datetime import date, timedelta

from dateutil.relativedelta import relativedelta

from ledgerlens.domain.entities import CompareOption, Granularity


def week_number(day: date) -> int:
    """Return the simplified week number used for weekly buckets.

    This is not ISO-8601 numbering: the count starts from January 1st,
    offset by that day's weekday with Sunday as 0, so a year starting on a
    Sunday has a week 0.
    """
    start_of_year = date(day.year, 1, 1)
    day_index = (day - start_of_year).days
    offset = (start_of_year.weekday() + 1) % 7
    return -(-(day_index + offset) // 7)


def period_key(day: date, granularity: Granularity) -> str:
    """Format the bucket key of a date for the given granularity."""
    if granularity == Granularity.DAY:
        return day.strftime("%Y-%m-%d")
    if granularity == Granularity.WEEK:
        return f"{day.year}-W{week_number(day)}"
    if granularity == Granularity.MONTH:
        return day.strftime("%Y-%m")
    if granularity == Granularity.QUARTER:
        return f"{day.year}-Q{(day.month - 1) // 3 + 1}"
    if granularity == Granularity.YEAR:
        return f"{day.year:04d}"
    raise ValueError(f"Unknown granularity: {granularity!r}")


def previous_window(
    date_from: date, date_to: date, option: CompareOption
) -> tuple[date, date]:
    """Derive the comparison window preceding ``[date_from, date_to]``.

    Month and year shifts clamp to the last day of the target month, so
    March 31st shifted back one month becomes the end of February.

    Args:
        date_from: Start of the current window (inclusive)
        date_to: End of the current window (inclusive)
        option: Comparison mode

    Returns:
        Tuple of (previous_from, previous_to)
    """
    if option == CompareOption.PREVIOUS_MONTH:
        return date_from - relativedelta(months=1), date_to - relativedelta(months=1)
    if option == CompareOption.PREVIOUS_YEAR:
        return date_from - relativedelta(years=1), date_to - relativedelta(years=1)
    if option == CompareOption.PREVIOUS_PERIOD:
        span = (date_to - date_from).days
        previous_to = date_from - timedelta(days=1)
        return previous_to - timedelta(days=span), previous_to
    raise ValueError(f"Invalid compare period: {option!r}")
