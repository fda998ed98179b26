"""
Stripe customer and subscription calls used by the billing service.

``StripeGateway`` is built once per process with the secret key and
handed to ``BillingService``.  Credentials are passed on every request
instead of being written into the ``stripe`` module globals, so several
gateways (or a fake in tests) can coexist.  Every ``stripe`` error is
re‑raised as ``BillingError`` carrying the processor's message.
"""

import logging
from typing import Any, Dict, Optional

import stripe

from ..core.errors import BillingError

logger = logging.getLogger(__name__)


class StripeGateway:
    """Thin wrapper around the Stripe customer and subscription APIs."""

    def __init__(self, api_key: str, api_version: Optional[str] = None) -> None:
        self.api_key = api_key
        self.api_version = api_version or None

    def _request_options(self, idempotency_key: Optional[str]) -> Dict[str, Any]:
        options: Dict[str, Any] = {"api_key": self.api_key}
        if self.api_version:
            options["stripe_version"] = self.api_version
        if idempotency_key:
            options["idempotency_key"] = idempotency_key
        return options

    def create_customer(
        self,
        email: Optional[str],
        payment_method_id: Optional[str],
        idempotency_key: Optional[str] = None,
    ) -> str:
        """Create a customer whose default invoice payment method is ``payment_method_id``.

        Returns the new customer's id.  Stripe replays the original
        response for a repeated ``idempotency_key``, so retries and
        concurrent calls with the same key yield the same customer.
        """
        try:
            customer = stripe.Customer.create(
                email=email,
                payment_method=payment_method_id,
                invoice_settings={"default_payment_method": payment_method_id},
                **self._request_options(idempotency_key),
            )
        except stripe.error.StripeError as exc:
            logger.error("Stripe customer creation failed for %s: %s", email, exc)
            raise BillingError(str(exc)) from exc
        logger.info("Created Stripe customer %s", customer.id)
        return customer.id

    def create_subscription(
        self,
        customer_id: str,
        price_id: str,
        idempotency_key: Optional[str] = None,
    ) -> Dict[str, Any]:
        """Subscribe ``customer_id`` to ``price_id``.

        The latest invoice and its payment intent are expanded so the
        client can complete any required authentication.  Returns the
        subscription as a plain dict.
        """
        try:
            subscription = stripe.Subscription.create(
                customer=customer_id,
                items=[{"price": price_id}],
                expand=["latest_invoice.payment_intent"],
                **self._request_options(idempotency_key),
            )
        except stripe.error.StripeError as exc:
            logger.error("Stripe subscription creation failed for %s: %s", customer_id, exc)
            raise BillingError(str(exc)) from exc
        logger.info(
            "Created Stripe subscription %s for %s (status %s)",
            subscription.id,
            customer_id,
            subscription.status,
        )
        return subscription.to_dict_recursive()
