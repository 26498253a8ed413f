import uuid
from datetime import datetime
from nephrolite.core.casing import CamelModel

class BackupTrigger(CamelModel):
    collections: list[str] | None = None

class BackupLogOut(CamelModel):
    id: uuid.UUID
    backup_type: str
    status: str
    operation_name: str
    collections: list[str] = []
    bucket: str | None = None
    object_key: str | None = None
    triggered_by: uuid.UUID | None = None
    row_counts: dict = {}
    error: str | None = None
    created_at: datetime
    updated_at: datetime

class RestoreInstructions(CamelModel):
    instructions: str
    location: str
    prefix: str

class BackupDownload(CamelModel):
    url: str
    object_key: str
    expires_in: int
