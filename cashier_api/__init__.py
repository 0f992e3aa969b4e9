"""
Top‑level package for the Cashier API.

This file makes ``cashier_api`` a Python package so that modules
within ``app`` can be imported using fully qualified names like
``cashier_api.app.main``.

The package provides no public exports; all functionality lives in
submodules under ``app``.
"""

__all__ = []
