import argparse
import asyncio
import json
import os
import sys
import uuid

# Add the project root to the Python path
sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), '..')))

from dotenv import load_dotenv
load_dotenv()

from nephrolite.core.config import settings
from nephrolite.core.db import SessionLocal, init_models
from nephrolite.core.logging import setup_logging
from nephrolite.modules.importer.loader import import_patient_form

async def main(path: str, org_id: uuid.UUID):
    """
    Import patients, visits and investigations from a legacy patientForm export.
    """
    print(f"Reading {path} (this may take a moment)...")
    with open(path, 'r', encoding='utf-8') as f:
        data = json.load(f)

    patient_form = data.get("patientForm")
    if not isinstance(patient_form, dict):
        print("JSON structure invalid: 'patientForm' key not found.")
        sys.exit(1)
    print(f"Found {len(patient_form)} patient records.")

    await init_models()
    async with SessionLocal() as db:
        summary = await import_patient_form(db, org_id, patient_form)

    print("\nImport complete")
    print(f"   Processed: {summary.processed}")
    print(f"   Skipped (already present): {summary.skipped}")
    print(f"   Errors: {summary.errors}")
    for message in summary.messages:
        print(f"     - {message}")

if __name__ == "__main__":
    parser = argparse.ArgumentParser(description="Import legacy patient JSON")
    parser.add_argument("path", help="path to the exported JSON file")
    parser.add_argument("--org-id", default=settings.DEFAULT_ORG_ID, help="practice to import into")
    args = parser.parse_args()
    setup_logging()
    asyncio.run(main(args.path, uuid.UUID(args.org_id)))
