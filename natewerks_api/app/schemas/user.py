"""
Pydantic models for user data.

Request bodies accept every field as optional: a missing field reaches
the service layer as ``None`` rather than being rejected here, and
numbers sent for text fields are read as strings.  JSON
keys are camelCase, Python attributes snake_case.
"""

from typing import Optional

from pydantic import BaseModel, ConfigDict, Field

from .common import RequestBody


class RegisterRequest(RequestBody):
    name: Optional[str] = Field(None, examples=["Jane Doe"])
    email: Optional[str] = Field(None, examples=["jane@example.com"])
    password: Optional[str] = Field(None, examples=["secret"])


class LoginRequest(RequestBody):
    email: Optional[str] = Field(None, examples=["jane@example.com"])
    password: Optional[str] = Field(None, examples=["secret"])


class UserRead(BaseModel):
    """A stored user, returned verbatim (password included)."""

    id: str
    name: Optional[str] = None
    email: Optional[str] = None
    password: Optional[str] = None
    subscription_status: str = Field("inactive", alias="subscriptionStatus")
    stripe_customer_id: Optional[str] = Field(None, alias="stripeCustomerId")
    role: str = "user"

    model_config = ConfigDict(populate_by_name=True)


class LoginResponse(BaseModel):
    message: str
    user: UserRead
