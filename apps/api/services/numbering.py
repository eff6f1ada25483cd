import logging

from psycopg import Connection

from ..repos.sequences import current_sequence_value, next_sequence_value
from ..settings import settings

logger = logging.getLogger(__name__)

PAD_WIDTH = 4


def company_initials(company_name: str | None) -> str:
    """First three characters of the company name, uppercased."""
    name = (company_name or "").strip() or settings.DEFAULT_COMPANY_NAME
    return name[:3].upper()


def sequence_id(prefix: str, company_name: str | None, year: int) -> str:
    return f"{prefix}_{company_initials(company_name)}_{year}"


def format_document_number(prefix: str, company_name: str | None, year: int, value: int) -> str:
    # e.g. PO-ACM-2025-0007; values past 9999 keep every digit
    return f"{prefix}-{company_initials(company_name)}-{year}-{str(value).zfill(PAD_WIDTH)}"


def next_document_number(conn: Connection, prefix: str, company_name: str | None, year: int) -> str:
    """
    Hand out the next number in the (prefix, company, year) series.

    The counter is advanced by one atomic statement in the database, so two
    concurrent callers never receive the same value. A new year is a new
    series and starts again at 1. StorageUnavailable from the repository is
    propagated unchanged; the caller aborts the document it was creating.
    """
    sid = sequence_id(prefix, company_name, year)
    value = next_sequence_value(conn, sid)
    number = format_document_number(prefix, company_name, year, value)
    logger.info("issued %s from sequence %s", number, sid)
    return number


def preview_document_number(conn: Connection, prefix: str, company_name: str | None, year: int) -> str:
    """The number the next call to next_document_number would most likely return."""
    current = current_sequence_value(conn, sequence_id(prefix, company_name, year)) or 0
    return format_document_number(prefix, company_name, year, current + 1)
