import csv
import io
import json
import uuid
from typing import Any, Iterable
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession
from nephrolite.core.base import row_to_dict
from nephrolite.core.casing import to_camel_keys
from nephrolite.modules.appointments.models import Appointment
from nephrolite.modules.dialysis.models import DialysisSession
from nephrolite.modules.interventions.models import Intervention
from nephrolite.modules.investigations.models import InvestigationRecord
from nephrolite.modules.patients.models import Patient
from nephrolite.modules.visits.models import Visit

EXPORT_TABLES = {
    "patients": Patient,
    "visits": Visit,
    "dialysis-sessions": DialysisSession,
}

# bookkeeping columns left out of spreadsheets
HIDDEN_COLUMNS = {"org_id", "deleted_at", "version"}


def flatten(obj: dict[str, Any], prefix: str = "") -> dict[str, Any]:
    """``{"address": {"city": "X"}}`` -> ``{"address.city": "X"}``; lists stay as JSON text."""
    out: dict[str, Any] = {}
    for k, v in obj.items():
        key = f"{prefix}.{k}" if prefix else k
        if isinstance(v, dict):
            out.update(flatten(v, key))
        elif isinstance(v, list):
            out[key] = json.dumps(v, default=str, ensure_ascii=False)
        else:
            out[key] = v
    return out


def rows_to_csv(rows: Iterable[dict[str, Any]]) -> str:
    flat = [flatten(r) for r in rows]
    header: list[str] = []
    seen = set()
    for r in flat:
        for k in r:
            if k not in seen:
                seen.add(k)
                header.append(k)
    buf = io.StringIO()
    w = csv.DictWriter(buf, fieldnames=header, extrasaction="ignore")
    w.writeheader()
    for r in flat:
        w.writerow({k: ("" if v is None else v) for k, v in r.items()})
    return buf.getvalue()


def export_row(row) -> dict[str, Any]:
    data = {k: v for k, v in row_to_dict(row).items() if k not in HIDDEN_COLUMNS}
    return to_camel_keys(data)


class ExportService:
    def __init__(self, session: AsyncSession):
        self.session = session

    async def table_csv(self, org_id: uuid.UUID, name: str) -> str:
        model = EXPORT_TABLES[name]
        q = select(model).where(model.org_id == org_id, model.deleted_at.is_(None)).order_by(model.created_at)
        res = await self.session.execute(q)
        return rows_to_csv(export_row(r) for r in res.scalars().all())

    async def patient_bundle(self, org_id: uuid.UUID, patient_id: uuid.UUID) -> dict[str, Any] | None:
        res = await self.session.execute(select(Patient).where(
            Patient.id == patient_id, Patient.org_id == org_id, Patient.deleted_at.is_(None),
        ))
        patient = res.scalar_one_or_none()
        if not patient:
            return None
        bundle: dict[str, Any] = {"patient": export_row(patient)}
        related = {
            "visits": Visit,
            "dialysisSessions": DialysisSession,
            "investigationRecords": InvestigationRecord,
            "interventions": Intervention,
            "appointments": Appointment,
        }
        for key, model in related.items():
            res = await self.session.execute(select(model).where(
                model.org_id == org_id, model.patient_id == patient_id, model.deleted_at.is_(None),
            ).order_by(model.created_at))
            bundle[key] = [export_row(r) for r in res.scalars().all()]
        return bundle
