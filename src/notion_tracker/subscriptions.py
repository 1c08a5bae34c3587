import logging
from typing import Iterable

from .models import SubscriptionRow, SubscriptionSummary

LOGGER = logging.getLogger(__name__)

def summarize_subscriptions(rows: Iterable[SubscriptionRow]) -> SubscriptionSummary:
    monthly = 0.0
    count = 0
    for row in rows:
        if row.frequency_months <= 0:
            # a zero frequency would make the monthly cost infinite
            LOGGER.warning("Skipping subscription %r with frequency %s", row.name, row.frequency_months)
            continue
        monthly += row.monthly_cost
        count += 1
    return SubscriptionSummary(monthly=monthly, count=count)
