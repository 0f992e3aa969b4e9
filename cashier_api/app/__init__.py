"""
Application package initializer.

The point‑of‑sale backend is organised into a few small layers:
``core`` (configuration, logging, database, security, errors),
``schemas`` (request/response models), ``services`` (dataset storage
and the catalog/ledger business rules) and ``api`` (versioned
routers).  Routers are grouped under ``api/<version>/``.
"""

from .main import app  # noqa: F401
