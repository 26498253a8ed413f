"""Database snapshots written to object storage.

A run serializes each requested table for the org into a single JSON
document and stores it under ``{BACKUP_PREFIX}/{timestamp}/snapshot.json``.
Every run leaves a ``BackupLog`` row behind, whether it completes or fails.
"""
import asyncio
import json
import logging
import uuid
from datetime import datetime, timedelta
from typing import Sequence
from zoneinfo import ZoneInfo

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from nephrolite.core.base import row_to_dict, utcnow
from nephrolite.core.casing import to_camel_keys
from nephrolite.core.config import settings
from nephrolite.core.db import SessionLocal
from nephrolite.core.errors import AppError, InvalidArgumentError
from nephrolite.modules.audit.models import AuditEvent
from nephrolite.modules.audit.service import AuditService
from nephrolite.modules.backups.models import BackupLog
from nephrolite.modules.dialysis.models import DialysisSession
from nephrolite.modules.patients.models import Patient
from nephrolite.modules.users.models import User
from nephrolite.modules.visits.models import Visit
from nephrolite.modules.appointments.models import Appointment
from nephrolite.modules.interventions.models import Intervention
from nephrolite.modules.investigations.models import InvestigationRecord
from nephrolite.platform.provider_registry import registry

log = logging.getLogger(__name__)

BACKUP_TABLES = {
    "patients": Patient,
    "visits": Visit,
    "dialysis_sessions": DialysisSession,
    "users": User,
    "audit_events": AuditEvent,
    "appointments": Appointment,
    "interventions": Intervention,
    "investigation_records": InvestigationRecord,
}

SCHEDULED_COLLECTIONS = ["patients", "visits", "dialysis_sessions", "users", "audit_events"]
MANUAL_COLLECTIONS = ["patients", "visits", "dialysis_sessions", "users"]

RESTORE_INSTRUCTIONS = """To restore from a snapshot:

1. List available backups with GET /backups/status, or browse the storage location below.
2. Pick the snapshot.json of the run you want (completed runs only).
3. Load each table from the document into an empty database, one collection key per table.

IMPORTANT:
- Restoring will overwrite existing data
- Test the restore against a scratch database first
- Always verify the row counts in the backup log before restoring

For assistance, contact your system administrator."""


class BackupService:
    def __init__(self, session: AsyncSession):
        self.session = session
        self.audit = AuditService(session)

    async def status(self, org_id: uuid.UUID, limit: int = 10) -> Sequence[BackupLog]:
        q = (
            select(BackupLog)
            .where(BackupLog.org_id == org_id)
            .order_by(BackupLog.created_at.desc())
            .limit(limit)
        )
        res = await self.session.execute(q)
        return res.scalars().all()

    async def download_link(self, org_id: uuid.UUID, backup_id: uuid.UUID, expires_seconds: int = 900) -> dict | None:
        """Short-lived URL for a completed snapshot, or None when there is nothing to fetch."""
        entry = await self.session.get(BackupLog, backup_id)
        if not entry or entry.org_id != org_id or entry.status != "completed":
            return None
        storage = registry.object_storage()
        url = await asyncio.to_thread(storage.presign_download, entry.object_key, expires_seconds)
        return {"url": url, "object_key": entry.object_key, "expires_in": expires_seconds}

    def restore_instructions(self) -> dict:
        return {
            "instructions": RESTORE_INSTRUCTIONS,
            "location": registry.object_storage().location(),
            "prefix": settings.BACKUP_PREFIX,
        }

    async def _snapshot(self, org_id: uuid.UUID, collections: list[str]) -> tuple[dict, dict]:
        data, counts = {}, {}
        for name in collections:
            model = BACKUP_TABLES[name]
            res = await self.session.execute(select(model).where(model.org_id == org_id))
            rows = [to_camel_keys(row_to_dict(r)) for r in res.scalars().all()]
            data[name] = rows
            counts[name] = len(rows)
        return data, counts

    async def run_backup(
        self,
        org_id: uuid.UUID,
        backup_type: str = "manual",
        collections: list[str] | None = None,
        triggered_by: uuid.UUID | None = None,
    ) -> BackupLog:
        if collections is None:
            collections = list(SCHEDULED_COLLECTIONS if backup_type == "scheduled" else MANUAL_COLLECTIONS)
        unknown = [c for c in collections if c not in BACKUP_TABLES]
        if unknown or not collections:
            raise InvalidArgumentError(
                "Unknown backup collections", metadata={"unknown": unknown, "allowed": sorted(BACKUP_TABLES)}
            )

        storage = registry.object_storage()
        started = utcnow()
        key = f"{settings.BACKUP_PREFIX}/{started.strftime('%Y%m%dT%H%M%S%fZ')}/snapshot.json"
        entry = BackupLog(
            org_id=org_id,
            backup_type=backup_type,
            status="started",
            operation_name=f"{backup_type}-{started.strftime('%Y%m%dT%H%M%S')}",
            collections=collections,
            bucket=storage.location(),
            object_key=key,
            triggered_by=triggered_by,
        )
        op = entry.operation_name
        self.session.add(entry)
        await self.session.flush()
        if backup_type == "manual" and triggered_by:
            await self.audit.record(org_id, triggered_by, "TRIGGER_BACKUP", "backup", entry.id,
                                    details={"collections": collections})
        await self.session.commit()
        log.info(f"Backup {op} started: {', '.join(collections)} -> {key}")

        try:
            data, counts = await self._snapshot(org_id, collections)
            document = {
                "orgId": str(org_id),
                "createdAt": started.isoformat(),
                "backupType": backup_type,
                "collections": data,
            }
            body = json.dumps(document, default=str, ensure_ascii=False).encode("utf-8")
            await asyncio.to_thread(storage.put_bytes, key, body, "application/json")
        except Exception as e:
            await self.session.rollback()
            entry.status = "failed"
            entry.error = str(e)[:2000]
            self.session.add(entry)
            await self.session.commit()
            log.exception(f"Backup {op} failed")
            raise AppError(f"Backup failed: {e}", metadata={"operation": op}) from e

        entry.status = "completed"
        entry.row_counts = counts
        await self.session.commit()
        log.info(f"Backup {op} completed: {counts}")
        return entry


def seconds_until_next_run(now: datetime, hour: int, tz: str) -> float:
    local = now.astimezone(ZoneInfo(tz))
    target = local.replace(hour=hour, minute=0, second=0, microsecond=0)
    if target <= local:
        target += timedelta(days=1)
    return (target - local).total_seconds()


# ---- Background scheduler ----

async def run_backup_scheduler():
    org_id = uuid.UUID(settings.DEFAULT_ORG_ID)
    log.info(f"Backup scheduler started: daily at {settings.BACKUP_HOUR:02d}:00 {settings.BACKUP_TIMEZONE}")
    try:
        while True:
            delay = seconds_until_next_run(utcnow(), settings.BACKUP_HOUR, settings.BACKUP_TIMEZONE)
            await asyncio.sleep(delay)
            async with SessionLocal() as session:
                try:
                    await BackupService(session).run_backup(org_id, backup_type="scheduled")
                except Exception:
                    # the log row already says failed; wait for the next day
                    log.exception("Scheduled backup failed")
    except asyncio.CancelledError:
        log.info("Backup scheduler cancelled; shutting down")
        raise
