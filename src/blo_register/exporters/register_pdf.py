"""
BLO register PDF.

Renders a RegisterReport into the fixed register layout:

1. Cover page (authority, title, officer and jurisdiction)
2. Statistical summary (census and election tables)
3. Statement-1 age cohort analysis
4. Prospective voters (age 17)
5. Unregistered voters (age 18+)
6. Marked voters (Expired/Shifted/Duplicate)
7. Signature page

All figures come from the report; nothing is computed here.
"""

from __future__ import annotations

from pathlib import Path
from typing import Optional, List, Any

from reportlab.lib import colors
from reportlab.lib.enums import TA_CENTER
from reportlab.lib.pagesizes import A4, letter
from reportlab.lib.styles import getSampleStyleSheet, ParagraphStyle
from reportlab.lib.units import inch, mm
from reportlab.platypus import SimpleDocTemplate, Table, TableStyle, Paragraph, Spacer, PageBreak

from ..config import ReportConfig
from ..exceptions import ConfigurationError
from ..logger import get_logger
from ..services.aggregation import RegisterReport

logger = get_logger(__name__)

PAGE_SIZES = {"A4": A4, "LETTER": letter}

HEADER_COLOR = colors.HexColor("#1f4788")

GRID_STYLE = TableStyle([
    ("BACKGROUND", (0, 0), (-1, 0), HEADER_COLOR),
    ("TEXTCOLOR", (0, 0), (-1, 0), colors.whitesmoke),
    ("FONTNAME", (0, 0), (-1, 0), "Helvetica-Bold"),
    ("FONTSIZE", (0, 0), (-1, -1), 9),
    ("ALIGN", (0, 0), (-1, -1), "LEFT"),
    ("VALIGN", (0, 0), (-1, -1), "MIDDLE"),
    ("GRID", (0, 0), (-1, -1), 0.5, colors.grey),
    ("ROWBACKGROUNDS", (0, 1), (-1, -1), [colors.white, colors.HexColor("#F9F9F9")]),
])

NO_MARKED_VOTERS = "No voters have been marked as Expired, Shifted, or Duplicate."


def _grid(rows: List[List[Any]], col_widths: Optional[List[float]] = None) -> Table:
    table = Table([[str(c) for c in row] for row in rows], colWidths=col_widths, repeatRows=1)
    table.setStyle(GRID_STYLE)
    return table


def _cover(report: RegisterReport, config: ReportConfig, styles) -> List[Any]:
    s = report.settings
    title = ParagraphStyle(
        "RegisterTitle",
        parent=styles["Heading1"],
        fontSize=18,
        alignment=TA_CENTER,
        spaceAfter=6,
    )
    centered = ParagraphStyle("Centered", parent=styles["Normal"], fontSize=12, alignment=TA_CENTER)

    identity = Table(
        [
            ["Assembly Constituency:", s.constituency],
            ["Part No & Name:", s.part],
            ["BLO Name:", s.officer_name],
            ["BLO Designation:", s.designation],
            ["BLO Address:", s.address],
            ["BLO Mobile:", s.mobile],
        ],
        colWidths=[2 * inch, 4 * inch],
    )
    identity.setStyle(TableStyle([
        ("FONTNAME", (0, 0), (0, -1), "Helvetica-Bold"),
        ("FONTSIZE", (0, 0), (-1, -1), 11),
        ("ALIGN", (0, 0), (-1, -1), "LEFT"),
    ]))

    return [
        Spacer(1, 0.6 * inch),
        Paragraph(config.authority, centered),
        Spacer(1, 0.4 * inch),
        Paragraph("BOOTH LEVEL OFFICER'S REGISTER", title),
        Paragraph("Summary of Census and Electoral Roll Data", centered),
        Spacer(1, 0.5 * inch),
        identity,
    ]


def _summary(report: RegisterReport) -> List[Any]:
    census = _grid([
        ["Census Statistics", "Value"],
        ["Total Households", report.population.households],
        ["Total Population", report.population.population],
        ["Male Population", report.population.male],
        ["Female Population", report.population.female],
    ])
    election = _grid([
        ["Election Statistics", "Value"],
        ["Total Electors", report.electors.total],
        ["Male Electors", report.electors.male],
        ["Female Electors", report.electors.female],
        ["EP Ratio (Electors per 1000 population)", report.ep_ratio],
        ["Gender Ratio (Females per 1000 males)", report.gender_ratio],
    ])
    side_by_side = Table([[census, election]])
    side_by_side.setStyle(TableStyle([("VALIGN", (0, 0), (-1, -1), "TOP")]))
    return [side_by_side]


def _cohorts(report: RegisterReport) -> List[Any]:
    rows = [["Age Cohort", "Projected Population", "%age to Pop.", "Electors", "%age to Electors", "% Registered"]]
    rows += [
        [c.band, c.population, c.population_pct, c.electors, c.elector_pct, c.registration_pct]
        for c in report.cohorts
    ]
    return [_grid(rows)]


def _prospective(report: RegisterReport) -> List[Any]:
    rows = [["S.No", "Name", "Parentage", "Gender", "DOB", "House No.", "Phone"]]
    rows += [
        [i, p.name, p.ref.hof_name, p.ref.member.gender.value, p.ref.member.dob, p.house_no, p.contact_phone]
        for i, p in enumerate(report.prospective, start=1)
    ]
    return [_grid(rows)]


def _unregistered(report: RegisterReport) -> List[Any]:
    rows = [["S.No", "Name", "Parentage", "Gender", "Age", "House No.", "Phone"]]
    rows += [
        [i, ref.name, ref.hof_name, ref.member.gender.value, report.unregistered_ages.get(ref.id, ""),
         ref.house_no, ref.contact_phone]
        for i, ref in enumerate(report.unregistered, start=1)
    ]
    return [_grid(rows)]


def _marked(report: RegisterReport, styles) -> List[Any]:
    if not report.marked:
        return [Paragraph(NO_MARKED_VOTERS, styles["Normal"])]
    rows = [["S.No", "EPIC No", "Name", "Status", "House No."]]
    rows += [
        [i, v.epic_no, v.name, v.status.value, v.house_no]
        for i, v in enumerate(report.marked, start=1)
    ]
    return [_grid(rows)]


def _signatures(page_width: float) -> List[Any]:
    signatures = Table(
        [
            ["Signature of BLO", "Signature of Supervisor"],
            ["(with date and seal)", "(with date and seal)"],
        ],
        colWidths=[(page_width - 2 * inch) / 2] * 2,
    )
    signatures.setStyle(TableStyle([("ALIGN", (0, 0), (-1, -1), "CENTER")]))
    return [Spacer(1, 6 * inch), signatures]


def write_register_pdf(
    report: RegisterReport,
    path: Path,
    config: Optional[ReportConfig] = None,
) -> Path:
    """
    Render the register to a PDF file.

    Args:
        report: Precomputed register content
        path: Output PDF path
        config: Report configuration (page size, authority line)

    Returns:
        The written path
    """
    config = config or ReportConfig()
    pagesize = PAGE_SIZES.get(config.page_size.upper())
    if pagesize is None:
        raise ConfigurationError(
            f"Unknown report page size: {config.page_size} (expected A4 or LETTER)",
            config_key="REPORT_PAGE_SIZE",
        )

    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)

    page_width, page_height = pagesize
    settings = report.settings
    generated = report.generated_on.strftime("%d/%m/%Y")
    styles = getSampleStyleSheet()

    def draw_cover(canvas, doc):
        canvas.saveState()
        canvas.rect(5 * mm, 5 * mm, page_width - 10 * mm, page_height - 10 * mm)
        canvas.setFont("Helvetica", 8)
        canvas.setFillColor(colors.grey)
        canvas.drawCentredString(
            page_width / 2, 10 * mm, f"Generated {report.generated_on.year} | {config.app_name}"
        )
        canvas.restoreState()

    def draw_page(canvas, doc):
        canvas.saveState()
        canvas.setFont("Helvetica", 9)
        canvas.setFillColor(colors.grey)
        canvas.drawString(15 * mm, page_height - 10 * mm, f"{settings.constituency} | Part: {settings.part}")
        canvas.drawRightString(page_width - 15 * mm, page_height - 10 * mm, f"Page {doc.page}")
        canvas.setFont("Helvetica", 8)
        canvas.drawCentredString(page_width / 2, 10 * mm, f"Generated on: {generated}")
        canvas.restoreState()

    def section(title: str) -> List[Any]:
        return [PageBreak(), Paragraph(title, styles["Heading2"]), Spacer(1, 0.15 * inch)]

    story: List[Any] = _cover(report, config, styles)
    story += section("Statistical Summary") + _summary(report)
    story += section("STATEMENT-1: Age Cohort Analysis") + _cohorts(report)
    story += section("List of Prospective Voters (Age 17)") + _prospective(report)
    story += section("List of Unregistered Voters (Age 18+)") + _unregistered(report)
    story += section("List of Marked Voters (Expired/Shifted/Duplicate)") + _marked(report, styles)
    story += [PageBreak()] + _signatures(page_width)

    doc = SimpleDocTemplate(
        str(path),
        pagesize=pagesize,
        topMargin=20 * mm,
        bottomMargin=18 * mm,
        title="BLO Register",
        author=settings.officer_name,
    )
    doc.build(story, onFirstPage=draw_cover, onLaterPages=draw_page)

    logger.info(f"Register written to {path}")
    return path
