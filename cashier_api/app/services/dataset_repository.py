"""
Named JSON blob storage on top of the ``datasets`` table.

A dataset is a single row whose ``data`` column holds a JSON object
mapping string keys to opaque values; it stands in for a table of
products or sales for one organisation.  Dataset names are
``"<organisation name>_<purpose>"``.

The repository works on a connection supplied by the caller, normally
the one yielded by ``core.db.unit_of_work``, so that the read, the
in‑memory computation and the replace of one request all happen inside
the same write transaction.
"""

from __future__ import annotations

import json
import logging
import sqlite3
import uuid
from dataclasses import dataclass, field
from typing import Any, Dict, Optional

from cashier_api.app.core.errors import ConcurrentModificationError, ConflictError, NotFoundError
from cashier_api.app.schemas.organisation import OrganisationRead


logger = logging.getLogger(__name__)

PRODUCTS = "products"
SALES = "sales"


@dataclass
class Dataset:
    """A dataset row with its ``data`` column decoded."""

    id: int
    document_id: str
    name: str
    organisation_id: int
    version: int
    data: Dict[str, Any] = field(default_factory=dict)


class DatasetRepository:
    """Find, lazily create and replace datasets."""

    def __init__(self, conn: sqlite3.Connection) -> None:
        self.conn = conn

    @staticmethod
    def dataset_name(organisation: OrganisationRead, purpose: str) -> str:
        return f"{organisation.name}_{purpose}"

    def find_by_name(self, name: str) -> Optional[Dataset]:
        """Return the dataset called ``name`` or ``None``."""
        row = self.conn.execute(
            "SELECT id, document_id, name, organisation_id, version, data FROM datasets WHERE name = ?",
            (name,),
        ).fetchone()
        if row is None:
            return None
        return self._row_to_dataset(row)

    def find(self, organisation: OrganisationRead, purpose: str) -> Optional[Dataset]:
        """Return the organisation's dataset for ``purpose`` without creating it.

        A row with the right name but another owner means two
        organisation names map onto the same dataset name; that is
        refused rather than shared.
        """
        name = self.dataset_name(organisation, purpose)
        dataset = self.find_by_name(name)
        if dataset is not None and dataset.organisation_id != organisation.id:
            logger.warning(
                "Dataset %s belongs to organisation %s, not %s",
                name,
                dataset.organisation_id,
                organisation.id,
            )
            raise ConflictError(f"Dataset name '{name}' is already used by another organisation")
        return dataset

    def resolve(self, organisation: OrganisationRead, purpose: str) -> Dataset:
        """Return the organisation's dataset for ``purpose``, creating it if absent.

        Creation is an ``INSERT ... ON CONFLICT DO NOTHING`` followed by
        a re‑read, so two first callers racing each other end up with
        the same single row.
        """
        dataset = self.find(organisation, purpose)
        if dataset is not None:
            return dataset
        name = self.dataset_name(organisation, purpose)
        cursor = self.conn.execute(
            """
            INSERT INTO datasets (document_id, name, organisation_id, data)
            VALUES (?, ?, ?, '{}')
            ON CONFLICT(name) DO NOTHING
            """,
            (str(uuid.uuid4()), name, organisation.id),
        )
        if cursor.rowcount:
            logger.info("Created dataset %s for organisation %s", name, organisation.id)
        return self.find(organisation, purpose)

    def replace(self, dataset_id: int, data: Dict[str, Any], expected_version: Optional[int] = None) -> Dataset:
        """Overwrite the whole ``data`` payload and return the updated dataset.

        With ``expected_version`` the write only succeeds if nobody
        replaced the dataset since it was read; otherwise
        ``ConcurrentModificationError`` is raised.
        """
        payload = json.dumps(data)
        if expected_version is None:
            cursor = self.conn.execute(
                "UPDATE datasets SET data = ?, version = version + 1, updated_at = CURRENT_TIMESTAMP WHERE id = ?",
                (payload, dataset_id),
            )
        else:
            cursor = self.conn.execute(
                "UPDATE datasets SET data = ?, version = version + 1, updated_at = CURRENT_TIMESTAMP"
                " WHERE id = ? AND version = ?",
                (payload, dataset_id, expected_version),
            )
        if cursor.rowcount == 0:
            row = self.conn.execute("SELECT version FROM datasets WHERE id = ?", (dataset_id,)).fetchone()
            if row is None:
                raise NotFoundError("Dataset not found")
            raise ConcurrentModificationError(
                f"Dataset {dataset_id} is at version {row['version']}, expected {expected_version}"
            )
        row = self.conn.execute(
            "SELECT id, document_id, name, organisation_id, version, data FROM datasets WHERE id = ?",
            (dataset_id,),
        ).fetchone()
        return self._row_to_dataset(row)

    @staticmethod
    def _row_to_dataset(row: sqlite3.Row) -> Dataset:
        data = json.loads(row["data"]) if row["data"] else {}
        if not isinstance(data, dict):
            data = {}
        return Dataset(
            id=row["id"],
            document_id=row["document_id"],
            name=row["name"],
            organisation_id=row["organisation_id"],
            version=row["version"],
            data=data,
        )
