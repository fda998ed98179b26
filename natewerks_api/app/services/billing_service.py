"""
Business logic for subscriptions.

``subscribe`` links a user to a Stripe customer (creating one on first
use) and starts a subscription to the configured price.  The external
calls and the local save are not atomic.  Customer creation is keyed by
the user id and payment method, so a retry or a concurrent call with
the same card reuses the customer Stripe already created instead of
making a second one, while a retry with a different card is a fresh
request.
"""

import logging
from typing import Any, Dict, Optional

from ..core.db import USER, DocumentStore
from ..core.errors import StoreError, UserNotFound
from ..integrations.stripe_client import StripeGateway

logger = logging.getLogger(__name__)

ACTIVE = "active"


def customer_idempotency_key(user_id: str, payment_method_id: Optional[str]) -> str:
    # Stripe rejects a key reused with different parameters and replays a
    # stored failure, so a new card needs a new key.
    return f"customer-{user_id}-{payment_method_id}"


class BillingService:
    """Creates Stripe customers and subscriptions for users."""

    def __init__(self, store: DocumentStore, gateway: StripeGateway, price_id: str) -> None:
        self.store = store
        self.gateway = gateway
        self.price_id = price_id

    def subscribe(
        self,
        user_id: Optional[str],
        payment_method_id: Optional[str],
        idempotency_key: Optional[str] = None,
    ) -> Dict[str, Any]:
        """Subscribe a user to the configured price and mark them active.

        ``idempotency_key`` is forwarded to the subscription call so a
        client can safely retry the same request.  Raises
        ``UserNotFound``, ``BillingError`` or ``StoreError``.
        """
        user = self.store.find_by_id(USER, user_id)
        if user is None:
            raise UserNotFound()

        created_customer = False
        if not user["stripe_customer_id"]:
            user["stripe_customer_id"] = self.gateway.create_customer(
                user["email"],
                payment_method_id,
                idempotency_key=customer_idempotency_key(user["id"], payment_method_id),
            )
            created_customer = True

        subscription = self.gateway.create_subscription(
            user["stripe_customer_id"],
            self.price_id,
            idempotency_key=idempotency_key,
        )

        # Marked active whatever Stripe reports (e.g. ``incomplete``).
        user["subscription_status"] = ACTIVE
        try:
            self.store.save(USER, user)
        except StoreError:
            if created_customer:
                logger.error(
                    "Stripe customer %s was created for user %s but could not be saved",
                    user["stripe_customer_id"],
                    user["id"],
                )
            raise
        logger.info(
            "User %s subscribed (subscription %s)",
            user["id"],
            subscription.get("id"),
        )
        return subscription
