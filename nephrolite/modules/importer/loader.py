import logging
import uuid
from dataclasses import dataclass, field
from sqlalchemy.ext.asyncio import AsyncSession
from nephrolite.modules.patients.repository import PatientRepository
from nephrolite.modules.visits.repository import VisitRepository
from nephrolite.modules.investigations.repository import InvestigationRecordRepository
from nephrolite.modules.importer.transform import transform_patient_record, validate_import_record

log = logging.getLogger(__name__)

COMMIT_EVERY = 400

@dataclass
class ImportSummary:
    processed: int = 0
    skipped: int = 0
    errors: int = 0
    messages: list[str] = field(default_factory=list)

async def import_patient_form(session: AsyncSession, org_id: uuid.UUID, patient_form: dict,
                              commit_every: int = COMMIT_EVERY) -> ImportSummary:
    """Write every valid record of a legacy ``patientForm`` mapping.

    Rows are committed in batches of roughly ``commit_every`` writes. A record
    whose Nephro ID already exists is skipped.
    """
    patients = PatientRepository(session)
    visits = VisitRepository(session)
    records = InvestigationRecordRepository(session)
    summary = ImportSummary()
    pending = 0

    for key, source in patient_form.items():
        ok, problems = validate_import_record(source)
        if not ok:
            summary.errors += 1
            summary.messages.append(f"{key}: {'; '.join(problems)}")
            continue
        try:
            row = transform_patient_record(key, source)
        except (AttributeError, KeyError, TypeError, ValueError) as e:
            log.warning(f"Import of {key} failed: {e}")
            summary.errors += 1
            summary.messages.append(f"{key}: {e}")
            continue
        if await patients.get_by_nephro_id(org_id, row["patient"]["nephro_id"], include_archived=True):
            summary.skipped += 1
            continue

        patient = await patients.create(org_id, **row["patient"])
        for v in row["visits"]:
            await visits.create(org_id, patient_id=patient.id, **v)
        for inv in row["investigations"]:
            await records.create(org_id, patient_id=patient.id, **inv)
        pending += 1 + len(row["visits"]) + len(row["investigations"])
        summary.processed += 1

        if pending >= commit_every:
            await session.commit()
            log.info(f"Import progress: {summary.processed} patients committed")
            pending = 0

    await session.commit()
    return summary
