"""Reference-date dependency for read endpoints.

The compliance core never reads the clock; the HTTP layer decides what
"now" is. Clients may pin it with ``?asOf=YYYY-MM-DD``.
"""


from datetime import date

from fastapi import Query


def reference_date(
    as_of: date | None = Query(
        default=None,
        alias="asOf",
        description="Evaluate statuses as of this date (defaults to today)",
    ),
) -> date:
    return as_of or date.today()
