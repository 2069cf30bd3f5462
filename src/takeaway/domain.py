"""Takeaway bounded context — menu, session carts, coupons and orders.

Turns a session-scoped cart into a priced, immutable order record for
delivery or pickup, and keeps order totals consistent when operators edit
line items afterwards.
"""

from protean.domain import Domain

from takeaway.utils.logging import configure_logging, get_logger

# Configure logging for the application
configure_logging()

logger = get_logger(__name__)

# Domain Composition Root
takeaway = Domain(name="takeaway")
