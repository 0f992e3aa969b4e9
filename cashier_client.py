"""Cashier API client.

A thin wrapper around the Cashier REST API for tills, scripts and
integration tests.  It uses the ``requests`` library and exposes one
method per operation:

* :meth:`login` – exchange credentials for a token (stored on the client).
* :meth:`list_products` – the catalog with ``availableStock``.
* :meth:`add_product`, :meth:`edit_product`, :meth:`delete_product`.
* :meth:`save_sale` – record a transaction.
* :meth:`list_sales` – recorded transactions, newest first.

Every method returns a tuple ``(data, error)``.  HTTP and network
failures never raise; they are reported through ``error``, a dict with
``status_code`` and ``message``.
"""

from __future__ import annotations

import logging
from typing import Any, Dict, List, Optional, Tuple

import requests


logger = logging.getLogger(__name__)

Error = Optional[Dict[str, Any]]


class CashierAPI:
    """Client for the Cashier API."""

    def __init__(
        self,
        *,
        base_url: str,
        api_key: Optional[str] = None,
        session: Optional[requests.Session] = None,
        prefix: str = "/api/v1",
        timeout: float = 15,
    ) -> None:
        """Initialise the API client.

        Args:
            base_url: Server URL, e.g. ``http://localhost:8000``.
            api_key: Optional bearer token.  :meth:`login` sets it too.
            session: Optional requests session.  If not supplied a
                session will be created automatically.
            prefix: Path prefix of the versioned API.
            timeout: Per-request timeout in seconds.
        """
        self.base_url = base_url.rstrip("/") + prefix
        self.api_key = api_key
        self.session = session or requests.Session()
        self.timeout = timeout

    # ------------------------------------------------------------------
    # Low level HTTP helpers
    # ------------------------------------------------------------------
    def _request(self, method: str, path: str, *, json_body: Any | None = None) -> Tuple[Optional[Any], Error]:
        """Perform an HTTP request and return ``(data, error)``."""
        url = f"{self.base_url}{path}"
        headers: Dict[str, str] = {}
        if self.api_key:
            headers["Authorization"] = f"Bearer {self.api_key}"
        try:
            logger.debug("Sending %s request to %s", method, url)
            response = self.session.request(
                method=method,
                url=url,
                json=json_body,
                headers=headers,
                timeout=self.timeout,
            )
            response.raise_for_status()
            if response.content:
                return response.json(), None
            return None, None
        except requests.HTTPError as exc:
            status = exc.response.status_code if exc.response is not None else None
            message = ""
            if exc.response is not None:
                try:
                    err_json = exc.response.json()
                    message = err_json.get("detail") or err_json.get("message") or str(err_json)
                except ValueError:
                    message = exc.response.text
            if not message:
                message = str(exc)
            logger.error("API request failed (%s): %s", status, message)
            return None, {"status_code": status, "message": message}
        except requests.RequestException as exc:
            logger.error("API request failed: %s", exc)
            return None, {"status_code": None, "message": str(exc)}

    # ------------------------------------------------------------------
    # Auth
    # ------------------------------------------------------------------
    def login(self, email: str, password: str) -> Tuple[Optional[str], Error]:
        data, error = self._request("POST", "/auth/login", json_body={"email": email, "password": password})
        if error:
            return None, error
        self.api_key = data["access_token"]
        return self.api_key, None

    # ------------------------------------------------------------------
    # Products
    # ------------------------------------------------------------------
    def list_products(self) -> Tuple[List[Dict[str, Any]], Error]:
        data, error = self._request("GET", "/products")
        if error:
            return [], error
        return data.get("products", []), None

    def add_product(self, product: Dict[str, Any]) -> Tuple[Optional[Dict[str, Any]], Error]:
        data, error = self._request("POST", "/products", json_body={"product": product})
        if error:
            return None, error
        return data.get("product"), None

    def edit_product(self, old_name: str, product: Dict[str, Any]) -> Tuple[Optional[Dict[str, Any]], Error]:
        """Replace the product called ``old_name``; ``product["name"]`` may differ to rename it."""
        data, error = self._request("PUT", "/products", json_body={"oldName": old_name, "product": product})
        if error:
            return None, error
        return data.get("product"), None

    def delete_product(self, name: str) -> Tuple[bool, Error]:
        _, error = self._request("POST", "/products/delete", json_body={"productName": name})
        return error is None, error

    # ------------------------------------------------------------------
    # Sales
    # ------------------------------------------------------------------
    def save_sale(self, transaction: Dict[str, Any]) -> Tuple[bool, Error]:
        _, error = self._request("POST", "/sales", json_body={"transaction": transaction})
        return error is None, error

    def list_sales(self) -> Tuple[List[Dict[str, Any]], Error]:
        data, error = self._request("GET", "/sales")
        if error:
            return [], error
        return data.get("sales", []), None
