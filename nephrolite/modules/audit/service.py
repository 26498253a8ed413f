import logging
import uuid
from sqlalchemy import select, desc
from sqlalchemy.ext.asyncio import AsyncSession
from nephrolite.modules.audit.models import AuditEvent

log = logging.getLogger(__name__)

class AuditService:
    def __init__(self, session: AsyncSession):
        self.session = session

    async def record(self,
                     org_id: uuid.UUID,
                     actor_user_id: uuid.UUID,
                     action: str,
                     resource_type: str,
                     resource_id: str,
                     details: dict | None = None,
                     success: bool = True) -> AuditEvent:
        """Stage an audit row in the caller's transaction; the caller commits."""
        ev = AuditEvent(
            org_id=org_id,
            actor_user_id=actor_user_id,
            action=action,
            resource_type=resource_type,
            resource_id=str(resource_id),
            success=success,
            details=details or {},
        )
        self.session.add(ev)
        await self.session.flush()
        log.info(f"audit {action} {resource_type}/{resource_id} by {actor_user_id}")
        return ev

    async def list(self, org_id: uuid.UUID, limit: int = 50, action: str | None = None):
        q = select(AuditEvent).where(
            AuditEvent.org_id == org_id,
            AuditEvent.deleted_at.is_(None),
        )
        if action:
            q = q.where(AuditEvent.action == action)
        q = q.order_by(desc(AuditEvent.occurred_at), desc(AuditEvent.created_at)).limit(limit)
        res = await self.session.execute(q)
        return res.scalars().all()
