import uuid
from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy.ext.asyncio import AsyncSession
from nephrolite.core.db import get_session
from nephrolite.core.security import require_roles, Principal
from nephrolite.modules.backups.schemas import BackupTrigger, BackupLogOut, BackupDownload, RestoreInstructions
from nephrolite.modules.backups.service import BackupService

router = APIRouter()

def svc(session: AsyncSession = Depends(get_session)) -> BackupService:
    return BackupService(session)

@router.post("/backups", response_model=BackupLogOut, status_code=201)
async def trigger_backup(
    payload: BackupTrigger | None = None,
    principal: Principal = Depends(require_roles("admin")),
    service: BackupService = Depends(svc),
):
    collections = payload.collections if payload else None
    return await service.run_backup(principal.org_id, "manual", collections, triggered_by=principal.user_id)

@router.get("/backups/status", response_model=list[BackupLogOut])
async def backup_status(
    limit: int = Query(10, ge=1, le=100),
    principal: Principal = Depends(require_roles("admin")),
    service: BackupService = Depends(svc),
):
    return await service.status(principal.org_id, limit)

@router.get("/backups/restore-instructions", response_model=RestoreInstructions)
async def restore_instructions(
    principal: Principal = Depends(require_roles("admin")),
    service: BackupService = Depends(svc),
):
    return service.restore_instructions()

@router.get("/backups/{backup_id}/download", response_model=BackupDownload)
async def backup_download(
    backup_id: uuid.UUID,
    principal: Principal = Depends(require_roles("admin")),
    service: BackupService = Depends(svc),
):
    link = await service.download_link(principal.org_id, backup_id)
    if link is None:
        raise HTTPException(status_code=404, detail="No completed backup with this id")
    return link
