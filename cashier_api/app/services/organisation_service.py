"""
Organisations and their users.

Every cashier request is scoped to the organisation of the
authenticated user.  This service looks organisations up for the
security dependencies and provisions organisations and users for the
``create_user.py`` script.  There is no HTTP endpoint for provisioning.
"""

from __future__ import annotations

import logging
import sqlite3
import uuid
from typing import Optional

from cashier_api.app.core.db import get_connection
from cashier_api.app.core.errors import ConflictError, ValidationError
from cashier_api.app.core.security import hash_password, verify_password
from cashier_api.app.schemas.organisation import OrganisationRead
from cashier_api.app.schemas.user import UserRead


class OrganisationService:
    """Service for organisations and the users belonging to them."""

    @classmethod
    async def get_organisation_by_name(cls, name: str) -> Optional[OrganisationRead]:
        conn = get_connection()
        try:
            row = conn.execute(
                "SELECT id, document_id, name FROM organisations WHERE name = ?",
                (name,),
            ).fetchone()
            return OrganisationRead(**dict(row)) if row else None
        finally:
            conn.close()

    @classmethod
    async def get_for_user(cls, user_id: int) -> Optional[OrganisationRead]:
        """Return the organisation a user belongs to, if any."""
        conn = get_connection()
        try:
            row = conn.execute(
                """
                SELECT o.id, o.document_id, o.name
                FROM users u JOIN organisations o ON o.id = u.organisation_id
                WHERE u.id = ?
                """,
                (user_id,),
            ).fetchone()
            return OrganisationRead(**dict(row)) if row else None
        finally:
            conn.close()

    @classmethod
    async def create_organisation(cls, name: str) -> OrganisationRead:
        """Create an organisation.  Names must be unique and non‑empty."""
        logger = logging.getLogger(__name__)
        if not name or not name.strip():
            raise ValidationError("Organisation name is required", field="name")
        document_id = str(uuid.uuid4())
        conn = get_connection()
        try:
            cursor = conn.cursor()
            try:
                cursor.execute(
                    "INSERT INTO organisations (document_id, name) VALUES (?, ?)",
                    (document_id, name),
                )
            except sqlite3.IntegrityError:
                raise ConflictError(f"Organisation '{name}' already exists")
            organisation_id = cursor.lastrowid
            conn.commit()
            logger.info("Created organisation %s (%s)", organisation_id, name)
            return OrganisationRead(id=organisation_id, document_id=document_id, name=name)
        finally:
            conn.close()

    @classmethod
    async def create_user(
        cls,
        email: str,
        password: str,
        organisation_id: Optional[int] = None,
        full_name: Optional[str] = None,
    ) -> UserRead:
        """Create a user with a hashed password."""
        logger = logging.getLogger(__name__)
        if not email:
            raise ValidationError("Email is required", field="email")
        if not password:
            raise ValidationError("Password is required", field="password")
        conn = get_connection()
        try:
            cursor = conn.cursor()
            try:
                cursor.execute(
                    "INSERT INTO users (email, full_name, password, organisation_id) VALUES (?, ?, ?, ?)",
                    (email, full_name, hash_password(password), organisation_id),
                )
            except sqlite3.IntegrityError:
                raise ConflictError(f"User '{email}' already exists")
            user_id = cursor.lastrowid
            conn.commit()
            logger.info("Created user %s in organisation %s", email, organisation_id)
            return UserRead(id=user_id, email=email, full_name=full_name, organisation_id=organisation_id)
        finally:
            conn.close()

    @classmethod
    async def authenticate(cls, email: str, password: str) -> Optional[UserRead]:
        """Return the user if the credentials match an enabled account."""
        conn = get_connection()
        try:
            row = conn.execute(
                "SELECT id, email, full_name, password, organisation_id, disabled FROM users WHERE email = ?",
                (email,),
            ).fetchone()
        finally:
            conn.close()
        if not row or row["disabled"] or not verify_password(password, row["password"]):
            return None
        return UserRead(
            id=row["id"],
            email=row["email"],
            full_name=row["full_name"],
            organisation_id=row["organisation_id"],
            disabled=bool(row["disabled"]),
        )
