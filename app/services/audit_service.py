"""Booking audit trail service."""

from typing import Any
from uuid import UUID

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from app.models.admin import AuditLog


class AuditService:
    """Service for append-only audit logging."""

    STATUS_CHANGE = "booking_status_change"

    async def log_action(
        self,
        db: AsyncSession,
        user_id: UUID | None,
        action: str,
        resource_type: str,
        resource_id: UUID,
        old_values: dict[str, Any] | None = None,
        new_values: dict[str, Any] | None = None,
        actor_role: str | None = None,
    ) -> AuditLog:
        """Record an action (append-only).

        Args:
            db: Database session
            user_id: User performing the action
            action: Action name (e.g., "booking_status_change")
            resource_type: Resource type (e.g., "booking")
            resource_id: Resource ID
            old_values: Previous state
            new_values: New state
            actor_role: Role the user acted in

        Returns:
            Created audit log entry
        """
        audit = AuditLog(
            user_id=user_id,
            actor_role=actor_role,
            action=action,
            resource_type=resource_type,
            resource_id=resource_id,
            old_values=old_values,
            new_values=new_values,
        )
        db.add(audit)
        return audit

    async def log_status_change(
        self,
        db: AsyncSession,
        user_id: UUID,
        booking_id: UUID,
        old_status: str,
        new_status: str,
        role: str,
    ) -> AuditLog:
        """Log a booking status transition."""
        return await self.log_action(
            db=db,
            user_id=user_id,
            action=self.STATUS_CHANGE,
            resource_type="booking",
            resource_id=booking_id,
            old_values={"status": old_status},
            new_values={"status": new_status},
            actor_role=role,
        )

    async def status_history(self, db: AsyncSession, booking_id: UUID) -> list[AuditLog]:
        """Status changes for a booking, oldest first."""
        result = await db.execute(
            select(AuditLog)
            .where(
                AuditLog.resource_type == "booking",
                AuditLog.resource_id == booking_id,
                AuditLog.action == self.STATUS_CHANGE,
            )
            .order_by(AuditLog.created_at)
        )
        return list(result.scalars().all())


audit_service = AuditService()
