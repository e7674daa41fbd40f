import re
from datetime import date, datetime, time

from ..core.exceptions import InvalidInputError
from ..models.constants import DATE_FORMAT, DOCUMENT_ID_PATTERN, TIME_FORMAT, Messages

_document_id_re = re.compile(DOCUMENT_ID_PATTERN)


def validate_document_id(doc_id: str) -> str:
    """Reject ids the store could never have generated."""
    if not doc_id or not _document_id_re.match(doc_id):
        raise InvalidInputError(Messages.INVALID_ID)
    return doc_id


def parse_date(value: str) -> date:
    """Parse an ISO calendar date, raising ValueError when malformed."""
    return datetime.strptime(value, DATE_FORMAT).date()


def parse_time(value: str) -> time:
    """Parse an HH:MM wall-clock time, raising ValueError when malformed."""
    return datetime.strptime(value, TIME_FORMAT).time()


def normalize_date(value: str) -> str:
    return parse_date(value).strftime(DATE_FORMAT)


def normalize_time(value: str) -> str:
    return parse_time(value).strftime(TIME_FORMAT)
