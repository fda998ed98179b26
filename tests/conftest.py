from __future__ import annotations

import itertools
import os
import sys
import tempfile
from pathlib import Path
from typing import Any, Dict, List, Optional, Set, Tuple

import pytest
from fastapi.testclient import TestClient

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

os.environ.setdefault("DATABASE_URL", str(Path(tempfile.gettempdir()) / "natewerks-tests.sqlite3"))
os.environ.setdefault("STRIPE_PRICE_ID", "price_test_monthly")

from natewerks_api.app.core.config import Settings
from natewerks_api.app.core.db import USER, DocumentStore
from natewerks_api.app.core.errors import BillingError
from natewerks_api.app.main import create_app


class FakeGateway:
    """Records Stripe calls instead of making them."""

    def __init__(self) -> None:
        self.customers: List[Dict[str, Any]] = []
        self.subscriptions: List[Dict[str, Any]] = []
        self.fail_customer: Optional[str] = None
        self.declined_methods: Set[str] = set()
        self.fail_subscription: Optional[str] = None
        self.subscription_status = "incomplete"
        self._ids = itertools.count(1)
        # idempotency key -> (request parameters, customer id or error)
        self._customer_keys: Dict[str, Tuple[tuple, Any]] = {}

    def create_customer(self, email, payment_method_id, idempotency_key=None) -> str:
        params = (email, payment_method_id)
        # Stripe replays the first outcome for a repeated idempotency key,
        # failures included, and refuses the key for different parameters.
        if idempotency_key in self._customer_keys:
            first_params, outcome = self._customer_keys[idempotency_key]
            if first_params != params:
                raise BillingError(
                    "Keys for idempotent requests can only be used with the same parameters they were first used with."
                )
            if isinstance(outcome, BillingError):
                raise outcome
            return outcome

        if self.fail_customer:
            outcome = BillingError(self.fail_customer)
        elif payment_method_id in self.declined_methods:
            outcome = BillingError("Your card was declined.")
        else:
            outcome = f"cus_{next(self._ids)}"
            self.customers.append(
                {
                    "id": outcome,
                    "email": email,
                    "payment_method": payment_method_id,
                    "idempotency_key": idempotency_key,
                }
            )
        if idempotency_key:
            self._customer_keys[idempotency_key] = (params, outcome)
        if isinstance(outcome, BillingError):
            raise outcome
        return outcome

    def create_subscription(self, customer_id, price_id, idempotency_key=None) -> Dict[str, Any]:
        if self.fail_subscription:
            raise BillingError(self.fail_subscription)
        subscription = {
            "id": f"sub_{next(self._ids)}",
            "customer": customer_id,
            "items": {"data": [{"price": {"id": price_id}}]},
            "status": self.subscription_status,
            "latest_invoice": {"payment_intent": {"client_secret": "pi_secret"}},
        }
        self.subscriptions.append({**subscription, "idempotency_key": idempotency_key})
        return subscription


@pytest.fixture()
def store(tmp_path: Path) -> DocumentStore:
    db = DocumentStore(str(tmp_path / "natewerks.sqlite3"))
    db.init_db()
    return db


@pytest.fixture()
def gateway() -> FakeGateway:
    return FakeGateway()


@pytest.fixture()
def test_settings() -> Settings:
    return Settings(stripe_secret_key="sk_test_fake", stripe_price_id="price_test_monthly")


@pytest.fixture()
def client(store: DocumentStore, gateway: FakeGateway, test_settings: Settings):
    app = create_app(settings=test_settings, store=store, gateway=gateway)
    with TestClient(app) as test_client:
        yield test_client


@pytest.fixture()
def make_user(store: DocumentStore):
    def _make_user(name="User", email="user@example.com", password="pw", role="user", **extra) -> str:
        return store.insert(USER, {"name": name, "email": email, "password": password, "role": role, **extra})

    return _make_user
