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
from nephrolite.core.db import SessionLocal, init_models
from nephrolite.modules.investigations.service import MasterDataService
from nephrolite.modules.users.repository import UserRepository

async def seed_admin(db, org_id: uuid.UUID, user_id: uuid.UUID, email: str, name: str):
    # role checks read the users table, so the first admin has to exist before any token can write
    users = UserRepository(db)
    if await users.get(org_id, user_id) or await users.find_by_email(org_id, email):
        print(f"Admin {email} already present")
        return
    await users.create(org_id, id=user_id, email=email.strip().lower(), display_name=name, role="admin")
    await db.commit()
    print(f"Created admin {email} ({user_id})")

async def main(args):
    org_id = uuid.UUID(args.org_id)
    print("Seeding investigation master list and panels...")
    await init_models()
    async with SessionLocal() as db:
        counts = await MasterDataService(db).seed_defaults(org_id)
        if args.admin_email:
            await seed_admin(db, org_id, uuid.UUID(args.admin_id), args.admin_email, args.admin_name)
    print(f"Done: {counts['tests']} tests, {counts['panels']} panels")

if __name__ == "__main__":
    parser = argparse.ArgumentParser(description="Seed master data and, optionally, the first admin user")
    parser.add_argument("--org-id", default=settings.DEFAULT_ORG_ID)
    parser.add_argument("--admin-email")
    parser.add_argument("--admin-id", help="token subject of the admin; required with --admin-email")
    parser.add_argument("--admin-name", default="Administrator")
    args = parser.parse_args()
    if args.admin_email and not args.admin_id:
        parser.error("--admin-id is required with --admin-email")
    asyncio.run(main(args))
