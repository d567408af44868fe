"""
Order Number Sequencer.

Allocates "<BUSINESS_UNIT_CODE>-<N>" numbers per business unit by reading
the most recently created order and incrementing its suffix. Allocation is
optimistic: two concurrent callers may derive the same number, and the
unique constraint on (business_unit_id, order_number) rejects the loser.
OrderService retries the loser with a fresh number.
"""

from sqlalchemy import select
from sqlalchemy.orm import Session

from shared.config.logging import order_logger as logger
from shared.config.settings import settings
from shared.utils.exceptions import BusinessUnitNotFoundError, MalformedOrderNumberError
from pos_api.models import BusinessUnit
from pos_api.repositories import get_order_repository

SEPARATOR = "-"


def format_order_number(code: str, sequence: int) -> str:
    return f"{code}{SEPARATOR}{sequence}"


def parse_sequence(order_number: str, code: str) -> int | None:
    """
    Numeric suffix of ``order_number`` for business unit ``code``.

    Returns None when the number does not belong to the unit or its suffix is
    not purely numeric ("REST01-10A", "REST01-", "REST01-10001-ADD").
    """
    prefix = f"{code}{SEPARATOR}"
    if not order_number.startswith(prefix):
        return None
    suffix = order_number[len(prefix):]
    if not suffix.isascii() or not suffix.isdigit():
        return None
    return int(suffix)


class OrderNumberSequencer:
    """
    Derives the next order number of a business unit.

    With ``strict_suffix`` a malformed latest number raises
    MalformedOrderNumberError; otherwise numbering restarts at ``start``.
    """

    def __init__(
        self,
        db: Session,
        start: int | None = None,
        strict_suffix: bool | None = None,
    ):
        self._db = db
        self._orders = get_order_repository(db)
        self._start = settings.order_number_start if start is None else start
        self._strict = (
            settings.order_number_strict_suffix if strict_suffix is None else strict_suffix
        )

    def get_business_unit_code(self, business_unit_id: str) -> str:
        code = self._db.scalar(
            select(BusinessUnit.code).where(BusinessUnit.id == business_unit_id)
        )
        if code is None:
            raise BusinessUnitNotFoundError(business_unit_id)
        return code

    def next_number(self, business_unit_id: str, code: str | None = None) -> str:
        """
        Next order number for the business unit.

        Raises:
            BusinessUnitNotFoundError: unknown business unit
            MalformedOrderNumberError: latest suffix is not numeric (strict mode)
        """
        if code is None:
            code = self.get_business_unit_code(business_unit_id)

        latest = self._orders.find_latest_number(business_unit_id, f"{code}{SEPARATOR}")
        if latest is None:
            return format_order_number(code, self._start)

        sequence = parse_sequence(latest, code)
        if sequence is None:
            if self._strict:
                raise MalformedOrderNumberError(latest, business_unit_id=business_unit_id)
            logger.warning(
                "Malformed latest order number, restarting sequence",
                business_unit_id=business_unit_id,
                latest=latest,
                start=self._start,
            )
            return format_order_number(code, self._start)

        return format_order_number(code, sequence + 1)
