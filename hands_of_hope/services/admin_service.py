"""Admin account lookups and super-admin gated administration."""

from uuid import UUID

import structlog
from sqlalchemy import delete, or_, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from hands_of_hope.core.exceptions import (
    AccessDeniedException,
    CannotDeleteSelfException,
    SuperAdminNotConfiguredException,
    UserExistsException,
)
from hands_of_hope.core.security import get_password_hash
from hands_of_hope.models.admins import admins
from hands_of_hope.schemas.admin import AdminRole

logger = structlog.get_logger(__name__)

# Columns safe to hand out; credentials and pending codes excluded
PUBLIC_COLUMNS = (
    admins.c.id,
    admins.c.username,
    admins.c.email,
    admins.c.role,
    admins.c.created_at,
)


class AdminService:
    """Service for admin account operations."""

    @staticmethod
    async def get_admin_by_id(db: AsyncSession, admin_id: UUID) -> dict | None:
        """Get admin by ID."""
        result = await db.execute(select(admins).where(admins.c.id == admin_id))
        admin = result.mappings().first()
        return dict(admin) if admin else None

    @staticmethod
    async def get_admin_by_username(db: AsyncSession, username: str) -> dict | None:
        """Get admin by username."""
        result = await db.execute(select(admins).where(admins.c.username == username))
        admin = result.mappings().first()
        return dict(admin) if admin else None

    @staticmethod
    async def get_admin_by_identifier(db: AsyncSession, identifier: str) -> dict | None:
        """Get admin whose username or email matches ``identifier``."""
        query = select(admins).where(
            or_(
                admins.c.username == identifier,
                admins.c.email == identifier.strip().lower(),
            )
        )
        result = await db.execute(query)
        admin = result.mappings().first()
        return dict(admin) if admin else None

    @staticmethod
    async def get_super_admin(db: AsyncSession) -> dict:
        """
        Get the super-admin account.

        Raises:
            SuperAdminNotConfiguredException: If none exists
        """
        query = select(admins).where(admins.c.role == AdminRole.SUPERADMIN.value)
        result = await db.execute(query)
        admin = result.mappings().first()

        if not admin:
            logger.error("super_admin_missing")
            raise SuperAdminNotConfiguredException()

        return dict(admin)

    @staticmethod
    async def require_super_admin(db: AsyncSession, username: str) -> dict:
        """
        Resolve ``username`` and check it holds the super-admin role.

        Raises:
            AccessDeniedException: If the user is unknown or a regular admin
        """
        admin = await AdminService.get_admin_by_username(db, username)
        if not admin or admin["role"] != AdminRole.SUPERADMIN:
            logger.warning("super_admin_required", username=username)
            raise AccessDeniedException()
        return admin

    @staticmethod
    async def _insert_admin(
        db: AsyncSession,
        username: str,
        email: str,
        password: str,
        role: AdminRole,
    ) -> dict:
        """Insert an admin row, mapping unique violations to UserExistsException."""
        email = email.strip().lower()

        existing = await db.execute(
            select(admins.c.id).where(or_(admins.c.username == username, admins.c.email == email))
        )
        if existing.first():
            raise UserExistsException()

        query = (
            admins.insert()
            .values(
                username=username,
                email=email,
                password_hash=get_password_hash(password),
                role=role.value,
            )
            .returning(*PUBLIC_COLUMNS)
        )

        try:
            result = await db.execute(query)
            await db.commit()
        except IntegrityError:
            await db.rollback()
            raise UserExistsException()

        return dict(result.mappings().one())

    @staticmethod
    async def add_admin(
        db: AsyncSession,
        requestor_username: str,
        new_username: str,
        new_email: str,
        new_password: str,
    ) -> dict:
        """
        Create a regular admin on behalf of the super-admin.

        The new account always gets the ``admin`` role.

        Args:
            db: Database session
            requestor_username: Admin performing the action
            new_username: Username for the new account
            new_email: Email for the new account
            new_password: Plain password, hashed before storage

        Returns:
            The new admin without credentials

        Raises:
            AccessDeniedException: If the requestor is not the super-admin
            UserExistsException: If username or email is taken
        """
        await AdminService.require_super_admin(db, requestor_username)

        admin = await AdminService._insert_admin(
            db, new_username, new_email, new_password, AdminRole.ADMIN
        )

        logger.info("admin_created", username=new_username, created_by=requestor_username)
        return admin

    @staticmethod
    async def delete_admin(db: AsyncSession, requestor_username: str, target_id: UUID) -> bool:
        """
        Delete another admin account.

        Args:
            db: Database session
            requestor_username: Admin performing the action
            target_id: Account to delete

        Returns:
            True if a row was deleted

        Raises:
            CannotDeleteSelfException: If the target is the requestor
            AccessDeniedException: If the requestor is not the super-admin
        """
        requestor = await AdminService.get_admin_by_username(db, requestor_username)

        if requestor and requestor["id"] == target_id:
            raise CannotDeleteSelfException()

        await AdminService.require_super_admin(db, requestor_username)

        result = await db.execute(delete(admins).where(admins.c.id == target_id))
        await db.commit()

        deleted = result.rowcount > 0  # type: ignore[attr-defined]
        logger.info(
            "admin_deleted",
            target_id=str(target_id),
            deleted=deleted,
            deleted_by=requestor_username,
        )
        return deleted

    @staticmethod
    async def create_super_admin(
        db: AsyncSession,
        username: str,
        email: str,
        password: str,
    ) -> dict:
        """
        Bootstrap the super-admin account.

        Raises:
            UserExistsException: If a super-admin already exists, or the
                username/email is taken
        """
        result = await db.execute(
            select(admins.c.id).where(admins.c.role == AdminRole.SUPERADMIN.value)
        )
        if result.first():
            raise UserExistsException("A super admin already exists")

        admin = await AdminService._insert_admin(
            db, username, email, password, AdminRole.SUPERADMIN
        )

        logger.info("super_admin_created", username=username)
        return admin

    @staticmethod
    async def list_admins(db: AsyncSession) -> list[dict]:
        """List admins without password hashes or pending codes."""
        query = select(*PUBLIC_COLUMNS).order_by(admins.c.created_at.desc())
        result = await db.execute(query)
        return [dict(row) for row in result.mappings().all()]
