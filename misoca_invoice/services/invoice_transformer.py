"""
Derive next month's invoice from the source invoice.

Everything here is a pure function of the supplied date and invoice.
"""

from __future__ import annotations

import re
from datetime import date, timedelta
from typing import Tuple

from misoca_invoice.schemas import DuplicateInvoiceRequest, SourceInvoice

# ASCII digits only; full-width digits fall through to the append path.
_MONTH_MARKER = re.compile(r"([0-9]{1,2})月分")
# Only full-width parentheses are stripped.
_BRACKETED_MONTH_MARKER = re.compile(r"（.*?月分.*?）")
_SPACE_RUN = re.compile(r" +")


def _last_day_of_month(year: int, month: int) -> date:
    """Day zero of the following month."""
    if month == 12:
        return date(year + 1, 1, 1) - timedelta(days=1)
    return date(year, month + 1, 1) - timedelta(days=1)


def billing_dates(today: date) -> Tuple[str, str]:
    """Return ``(issue_date, payment_due_on)`` as ISO strings.

    The issue date is the last day of ``today``'s month and the due date is
    the last day of the following month.
    """
    issue = _last_day_of_month(today.year, today.month)
    if today.month == 12:
        due = _last_day_of_month(today.year + 1, 1)
    else:
        due = _last_day_of_month(today.year, today.month + 1)
    return issue.isoformat(), due.isoformat()


def rewrite_subject(subject: str, month: int) -> str:
    """Point the subject's ``N月分`` marker at ``month``.

    When the subject has no numeric marker, a full-width parenthesized marker
    such as ``（今月分）`` is removed and `` {month}月分`` is appended.
    """
    marker = f"{month}月分"
    if _MONTH_MARKER.search(subject):
        return _MONTH_MARKER.sub(marker, subject, count=1)

    base = _BRACKETED_MONTH_MARKER.sub("", subject, count=1)
    return _SPACE_RUN.sub(" ", f"{base.strip()} {marker}")


def build_duplicate_request(source: SourceInvoice, today: date) -> DuplicateInvoiceRequest:
    issue_date, due_date = billing_dates(today)
    return DuplicateInvoiceRequest(
        subject=rewrite_subject(source.subject, today.month),
        contact_id=source.contact_id,
        issue_date=issue_date,
        payment_due_on=due_date,
        body=source.body,
        items=source.items,
    )


__all__ = ["billing_dates", "build_duplicate_request", "rewrite_subject"]
