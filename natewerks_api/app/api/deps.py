"""
FastAPI dependencies that hand the process‑wide services to routes.

``create_app`` stores the services on ``app.state``; routes receive
them through ``Depends`` so tests can build an app around fakes.
"""

from fastapi import Request

from ..services.admin_service import AdminService
from ..services.billing_service import BillingService
from ..services.user_service import UserService


def get_user_service(request: Request) -> UserService:
    return request.app.state.user_service


def get_billing_service(request: Request) -> BillingService:
    return request.app.state.billing_service


def get_admin_service(request: Request) -> AdminService:
    return request.app.state.admin_service
