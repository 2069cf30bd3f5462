"""Order numbers — ``{prefix}{YYYYMMDD}-{NNNN}`` with a random daily suffix.

The suffix space is 9999 numbers per day, so a candidate is checked against
stored orders and redrawn when taken.
"""

import random
from datetime import UTC, datetime

import structlog
from protean.exceptions import ValidationError
from protean.utils.globals import current_domain

from takeaway.settings import get_settings

logger = structlog.get_logger(__name__)

MAX_ATTEMPTS = 10

_random = random.SystemRandom()


def format_order_number(prefix: str, day, suffix: int) -> str:
    return f"{prefix}{day:%Y%m%d}-{suffix:04d}"


def generate_order_number(prefix: str | None = None, now=None, rng=None) -> str:
    prefix = get_settings().order_number_prefix if prefix is None else prefix
    now = now or datetime.now(UTC)
    rng = rng or _random
    return format_order_number(prefix, now, rng.randint(1, 9999))


def order_number_taken(order_number: str) -> bool:
    from takeaway.order.order import Order

    results = current_domain.repository_for(Order)._dao.query.filter(order_number=order_number).all()
    return bool(results and results.items)


def next_order_number(prefix: str | None = None, now=None, rng=None) -> str:
    """Draw order numbers until one is free, up to ``MAX_ATTEMPTS`` times."""
    for attempt in range(1, MAX_ATTEMPTS + 1):
        candidate = generate_order_number(prefix=prefix, now=now, rng=rng)
        if not order_number_taken(candidate):
            return candidate
        logger.warning("Order number already taken, drawing again", order_number=candidate, attempt=attempt)

    raise ValidationError({"order_number": ["Could not allocate a free order number, please retry"]})
