"""
Application package initializer.

The code is split into ``core`` (configuration, storage, security,
errors), ``integrations`` (external payment processor), ``services``
(business logic), ``schemas`` (request and response models) and
``api`` (HTTP routes).
"""

from .main import app  # noqa: F401
