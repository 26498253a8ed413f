import argparse
import asyncio
import os
import sys
import uuid

# Add the project root to the Python path
sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), '..')))

from dotenv import load_dotenv
load_dotenv()

from nephrolite.core.config import settings
from nephrolite.core.db import SessionLocal
from nephrolite.core.logging import setup_logging
from nephrolite.modules.backups.service import BackupService, BACKUP_TABLES

async def main(org_id: uuid.UUID, collections: list[str] | None):
    async with SessionLocal() as db:
        entry = await BackupService(db).run_backup(org_id, "scheduled", collections)
    print(f"Backup {entry.operation_name} {entry.status}: {entry.bucket}/{entry.object_key}")
    for name, count in (entry.row_counts or {}).items():
        print(f"   {name}: {count}")

if __name__ == "__main__":
    parser = argparse.ArgumentParser(description="Write a database snapshot to object storage (cron entry point)")
    parser.add_argument("--org-id", default=settings.DEFAULT_ORG_ID)
    parser.add_argument("--collection", action="append", choices=sorted(BACKUP_TABLES),
                        help="repeat to select tables; defaults to the scheduled set")
    args = parser.parse_args()
    setup_logging()
    asyncio.run(main(uuid.UUID(args.org_id), args.collection))
