"""Visit reports (discharge summary, opinion report) rendered with reportlab."""
import io
import re
from datetime import date
from typing import Literal
from xml.sax.saxutils import escape

from reportlab.lib import colors
from reportlab.lib.pagesizes import A4
from reportlab.lib.styles import ParagraphStyle, getSampleStyleSheet
from reportlab.lib.units import inch
from reportlab.platypus import Paragraph, SimpleDocTemplate, Spacer, Table, TableStyle

from nephrolite.core.config import settings
from nephrolite.core.values import html_to_plain_text

ReportKind = Literal["discharge", "opinion"]

TITLES = {"discharge": "Discharge Summary", "opinion": "Opinion Report"}


def age_on(dob: str | None, on: date | None = None) -> int | None:
    if not dob:
        return None
    try:
        born = date.fromisoformat(dob)
    except ValueError:
        return None
    on = on or date.today()
    return on.year - born.year - ((on.month, on.day) < (born.month, born.day))


def report_filename(patient, visit, kind: ReportKind) -> str:
    name = re.sub(r"\s+", "_", f"{patient.first_name}_{patient.last_name}")
    day = (visit.date or "").replace("/", "-")
    return f"{TITLES[kind].replace(' ', '_')}_{name}_{day}.pdf"


def _para(text: str | None, style) -> Paragraph:
    plain = html_to_plain_text(text)
    return Paragraph(escape(plain).replace("\n", "<br/>"), style)


def _section(story: list, heading: str, text: str | None, styles) -> None:
    if not text or not html_to_plain_text(text):
        return
    story.append(Paragraph(heading, styles["Heading3"]))
    story.append(_para(text, styles["ReportBody"]))
    story.append(Spacer(1, 0.1 * inch))


def _medications_table(medications: list[dict], styles) -> Table:
    rows = [["Medicine", "Dosage", "Frequency", "Duration", "Instructions"]]
    for m in medications:
        rows.append([
            Paragraph(escape(m.get("name") or ""), styles["ReportCell"]),
            Paragraph(escape(m.get("dosage") or ""), styles["ReportCell"]),
            Paragraph(escape(m.get("frequency") or ""), styles["ReportCell"]),
            Paragraph(escape(m.get("duration") or ""), styles["ReportCell"]),
            Paragraph(escape(m.get("instructions") or ""), styles["ReportCell"]),
        ])
    table = Table(rows, colWidths=[1.8 * inch, 1.0 * inch, 1.1 * inch, 1.0 * inch, 2.0 * inch], repeatRows=1)
    table.setStyle(TableStyle([
        ("BACKGROUND", (0, 0), (-1, 0), colors.HexColor("#2C3E50")),
        ("TEXTCOLOR", (0, 0), (-1, 0), colors.white),
        ("FONTNAME", (0, 0), (-1, 0), "Helvetica-Bold"),
        ("FONTSIZE", (0, 0), (-1, -1), 9),
        ("GRID", (0, 0), (-1, -1), 0.5, colors.grey),
        ("VALIGN", (0, 0), (-1, -1), "TOP"),
    ]))
    return table


def _styles():
    styles = getSampleStyleSheet()
    styles.add(ParagraphStyle("PracticeName", parent=styles["Title"], fontSize=16, spaceAfter=2,
                              textColor=colors.HexColor("#2C3E50")))
    styles.add(ParagraphStyle("ReportTitle", parent=styles["Heading2"], alignment=1, spaceAfter=10))
    styles.add(ParagraphStyle("ReportBody", parent=styles["Normal"], fontSize=10, leading=14))
    styles.add(ParagraphStyle("ReportCell", parent=styles["Normal"], fontSize=9, leading=11))
    styles.add(ParagraphStyle("ReportMeta", parent=styles["Normal"], fontSize=9, textColor=colors.HexColor("#34495E")))
    return styles


def render_visit_report(patient, visit, kind: ReportKind = "discharge") -> bytes:
    styles = _styles()
    clinical = visit.clinical_data or {}
    buf = io.BytesIO()
    doc = SimpleDocTemplate(
        buf,
        pagesize=A4,
        topMargin=0.6 * inch,
        bottomMargin=0.6 * inch,
        leftMargin=0.6 * inch,
        rightMargin=0.6 * inch,
        title=f"{TITLES[kind]} - {patient.first_name} {patient.last_name}",
        author=settings.PRACTICE_NAME,
    )
    story = [
        Paragraph(escape(settings.PRACTICE_NAME), styles["PracticeName"]),
        Paragraph(TITLES[kind], styles["ReportTitle"]),
    ]

    age = age_on(patient.dob)
    header = [
        ["Patient", f"{patient.first_name} {patient.last_name}", "Nephro ID", patient.nephro_id],
        ["Age / Gender", f"{age if age is not None else '-'} / {patient.gender}", "Visit date", visit.date],
    ]
    table = Table(header, colWidths=[1.2 * inch, 2.4 * inch, 1.1 * inch, 2.2 * inch])
    table.setStyle(TableStyle([
        ("FONTNAME", (0, 0), (0, -1), "Helvetica-Bold"),
        ("FONTNAME", (2, 0), (2, -1), "Helvetica-Bold"),
        ("FONTSIZE", (0, 0), (-1, -1), 9),
        ("BOX", (0, 0), (-1, -1), 0.5, colors.grey),
    ]))
    story += [table, Spacer(1, 0.2 * inch)]

    diagnoses = visit.diagnoses or []
    if diagnoses:
        story.append(Paragraph("Diagnosis", styles["Heading3"]))
        for d in diagnoses:
            line = d.get("name") or ""
            if d.get("icd_code"):
                line += f" ({d['icd_code']})"
            story.append(Paragraph(f"• {escape(line)}", styles["ReportBody"]))
        story.append(Spacer(1, 0.1 * inch))

    _section(story, "History", clinical.get("history"), styles)
    _section(story, "General Examination", clinical.get("general_examination"), styles)
    _section(story, "Systemic Examination", clinical.get("systemic_examination"), styles)

    if kind == "discharge":
        _section(story, "Course in Hospital", clinical.get("course_in_hospital"), styles)
        _section(story, "USG Report", clinical.get("usg_report"), styles)
        _section(story, "Kidney Biopsy Report", clinical.get("kidney_biopsy_report"), styles)
        medications = clinical.get("medications") or []
        if medications:
            story.append(Paragraph("Medications", styles["Heading3"]))
            story.append(_medications_table(medications, styles))
            story.append(Spacer(1, 0.1 * inch))
        _section(story, "Discharge Instructions", clinical.get("discharge_instructions"), styles)
    else:
        _section(story, "Opinion", clinical.get("opinion_text"), styles)
        _section(story, "Recommendations", clinical.get("recommendations"), styles)
        _section(story, "Treatment Advised", clinical.get("treatment_advised"), styles)

    if visit.follow_up_date:
        story.append(Paragraph(f"Follow-up on {escape(visit.follow_up_date)}", styles["ReportMeta"]))

    story += [Spacer(1, 0.4 * inch), Paragraph(f"Generated {date.today().isoformat()}", styles["ReportMeta"])]
    doc.build(story)
    return buf.getvalue()
