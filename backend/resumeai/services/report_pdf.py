from io import BytesIO
from datetime import datetime, timezone
from typing import Optional

from reportlab.lib.pagesizes import A4
from reportlab.lib import colors
from reportlab.lib.styles import getSampleStyleSheet, ParagraphStyle
from reportlab.platypus import SimpleDocTemplate, Paragraph, Spacer, Table, TableStyle

from resumeai.core import AnalysisResult, JobDetails

TEXT = colors.HexColor("#0F172A")
MUTED = colors.HexColor("#475569")
BLUE = colors.HexColor("#2563EB")
CARD = colors.HexColor("#F1F5F9")
GRID = colors.HexColor("#E2E8F0")
IMPACT = {
    "High": colors.HexColor("#E11D48"),
    "Medium": colors.HexColor("#D97706"),
    "Low": colors.HexColor("#2563EB"),
}


def _esc(s: str) -> str:
    """Basic safe text for ReportLab Paragraph (avoids broken markup)."""
    if s is None:
        return ""
    s = str(s)
    s = s.replace("&", "&amp;").replace("<", "&lt;").replace(">", "&gt;")
    return s


def _joined(items) -> str:
    return _esc(", ".join(items)) if items else "—"


def build_pdf(
    result: AnalysisResult,
    job_details: Optional[JobDetails] = None,
    filename: Optional[str] = None,
) -> bytes:
    buf = BytesIO()
    doc = SimpleDocTemplate(
        buf,
        pagesize=A4,
        leftMargin=36,
        rightMargin=36,
        topMargin=36,
        bottomMargin=36,
        title="Resume Analysis",
        author="ResumeAI",
    )

    styles = getSampleStyleSheet()
    title = ParagraphStyle(
        "title",
        parent=styles["Title"],
        fontName="Helvetica-Bold",
        fontSize=20,
        textColor=TEXT,
        spaceAfter=10,
    )
    h = ParagraphStyle(
        "h",
        parent=styles["Heading2"],
        fontName="Helvetica-Bold",
        fontSize=12,
        textColor=TEXT,
        spaceBefore=10,
        spaceAfter=6,
    )
    p = ParagraphStyle(
        "p",
        parent=styles["BodyText"],
        fontName="Helvetica",
        fontSize=10,
        textColor=MUTED,
        leading=14,
    )

    story = []

    story.append(Paragraph("Resume Analysis", title))
    story.append(Paragraph(f"Generated: {datetime.now(timezone.utc).strftime('%Y-%m-%d %H:%M UTC')}", p))
    if filename:
        story.append(Paragraph(f"Filename: {_esc(filename)}", p))
    if job_details and job_details.title:
        target = _esc(job_details.title)
        if job_details.company:
            target += f" at {_esc(job_details.company)}"
        story.append(Paragraph(f"Target: {target}", p))
    story.append(Spacer(1, 12))

    ja = result.job_alignment
    kpi = Table(
        [
            ["Overall Score", "Job Match"],
            [f"{result.overall_score}%", f"{ja.match_percentage}%"],
        ],
        colWidths=[245, 245],
    )
    kpi.setStyle(
        TableStyle(
            [
                ("BACKGROUND", (0, 0), (-1, 0), CARD),
                ("TEXTCOLOR", (0, 0), (-1, 0), MUTED),
                ("FONTNAME", (0, 0), (-1, 0), "Helvetica-Bold"),
                ("FONTSIZE", (0, 0), (-1, 0), 10),
                ("TEXTCOLOR", (0, 1), (-1, 1), BLUE),
                ("FONTNAME", (0, 1), (-1, 1), "Helvetica-Bold"),
                ("FONTSIZE", (0, 1), (-1, 1), 18),
                ("GRID", (0, 0), (-1, -1), 0.6, GRID),
                ("ALIGN", (0, 0), (-1, -1), "CENTER"),
                ("BOTTOMPADDING", (0, 0), (-1, -1), 10),
                ("TOPPADDING", (0, 0), (-1, -1), 10),
            ]
        )
    )
    story.append(kpi)
    story.append(Spacer(1, 14))

    story.append(Paragraph("Summary", h))
    story.append(Paragraph(_esc(result.summary), p))

    story.append(Paragraph("Strengths", h))
    for s in result.strengths or ["—"]:
        story.append(Paragraph(f"• {_esc(s)}", p))

    story.append(Paragraph("Weaknesses", h))
    for w in result.weaknesses or ["—"]:
        story.append(Paragraph(f"• {_esc(w)}", p))

    story.append(Paragraph("Job Alignment", h))
    story.append(Paragraph(_esc(ja.role_fit_summary), p))
    story.append(Paragraph(f"Missing keywords: {_joined(ja.missing_keywords)}", p))
    story.append(Paragraph(f"Suggested keywords: {_joined(ja.suggested_keywords)}", p))

    story.append(Paragraph("Improvement Plan", h))
    if not result.improvements:
        story.append(Paragraph("—", p))
    for imp in result.improvements:
        color = IMPACT.get(imp.impact, MUTED)
        story.append(
            Paragraph(
                f"<font color='{color.hexval()}'><b>{_esc(imp.impact.upper())}</b></font> — {_esc(imp.category)}",
                p,
            )
        )
        story.append(Paragraph(_esc(imp.description), p))
        story.append(Spacer(1, 6))

    story.append(Paragraph("Spelling &amp; Grammar", h))
    if not result.spelling_errors:
        story.append(Paragraph("No issues found.", p))
    else:
        rows = [["Original", "Suggestion", "Context"]]
        for err in result.spelling_errors:
            context = err.context if len(err.context) <= 140 else err.context[:140] + "…"
            rows.append([err.original, err.suggestion, context])

        table = Table(rows, colWidths=[110, 110, 270])
        table.setStyle(
            TableStyle(
                [
                    ("BACKGROUND", (0, 0), (-1, 0), CARD),
                    ("FONTNAME", (0, 0), (-1, 0), "Helvetica-Bold"),
                    ("FONTNAME", (0, 1), (-1, -1), "Helvetica"),
                    ("FONTSIZE", (0, 0), (-1, -1), 9),
                    ("TEXTCOLOR", (0, 0), (-1, -1), TEXT),
                    ("TEXTCOLOR", (0, 1), (0, -1), IMPACT["High"]),
                    ("GRID", (0, 0), (-1, -1), 0.4, GRID),
                    ("VALIGN", (0, 0), (-1, -1), "TOP"),
                    ("TOPPADDING", (0, 0), (-1, -1), 6),
                    ("BOTTOMPADDING", (0, 0), (-1, -1), 6),
                ]
            )
        )
        story.append(table)

    doc.build(story)
    return buf.getvalue()
