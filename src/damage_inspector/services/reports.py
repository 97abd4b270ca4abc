"""PDF damage report rendering."""

from dataclasses import dataclass
from datetime import UTC, datetime
from io import BytesIO
from xml.sax.saxutils import escape

from reportlab.lib import colors
from reportlab.lib.enums import TA_CENTER, TA_RIGHT
from reportlab.lib.pagesizes import A4
from reportlab.lib.styles import ParagraphStyle, StyleSheet1, getSampleStyleSheet
from reportlab.platypus import Flowable, Paragraph, SimpleDocTemplate, Spacer

from damage_inspector.domain.images import AnalysisStatus, Damage, Image
from damage_inspector.errors import ValidationError

REPORT_TITLE = "Property Damage Report"
DISCLAIMER = (
    "This report is the result of an automated AI analysis "
    "and is provided for reference only."
)
FOOTER = "Damage Inspector - automated property damage detection"
PAGE_MARGIN = 50


def report_filename(image_id: str) -> str:
    """Return the download filename for an image report."""
    return f"damage_report_{image_id}.pdf"


@dataclass
class ReportRenderer:
    """Renders a completed analysis into an A4 PDF."""

    title: str = REPORT_TITLE

    def render(self, image: Image, generated_at: datetime | None = None) -> bytes:
        """Return PDF bytes for a completed image analysis."""
        if image.analysis.status is not AnalysisStatus.COMPLETED:
            raise ValidationError("Image analysis not completed yet")
        generated = generated_at or datetime.now(tz=UTC)
        buffer = BytesIO()
        document = SimpleDocTemplate(
            buffer,
            pagesize=A4,
            leftMargin=PAGE_MARGIN,
            rightMargin=PAGE_MARGIN,
            topMargin=PAGE_MARGIN,
            bottomMargin=PAGE_MARGIN,
            title=self.title,
            invariant=True,
        )
        document.build(self._story(image, generated))
        return buffer.getvalue()

    def _story(self, image: Image, generated_at: datetime) -> list[Flowable]:
        styles = getSampleStyleSheet()
        date_style = ParagraphStyle(
            "ReportDate", parent=styles["Normal"], alignment=TA_RIGHT
        )
        footer_style = ParagraphStyle(
            "ReportFooter",
            parent=styles["Normal"],
            alignment=TA_CENTER,
            fontSize=8,
            textColor=colors.grey,
        )
        story: list[Flowable] = [
            Paragraph(escape(self.title), styles["Title"]),
            Paragraph(
                f"Generated: {generated_at.strftime('%Y-%m-%d %H:%M UTC')}",
                date_style,
            ),
            Spacer(1, 24),
            Paragraph("Inspected image", styles["Heading2"]),
            Paragraph(_link(image.image_url), styles["Normal"]),
        ]
        if image.processed_image_url:
            story.append(
                Paragraph(
                    f"Annotated result: {_link(image.processed_image_url)}",
                    styles["Normal"],
                )
            )
        story.extend([Spacer(1, 24), Paragraph("Damage analysis", styles["Heading2"])])

        damages = image.analysis.damages
        if damages:
            story.append(
                Paragraph(f"{len(damages)} damage(s) detected.", styles["Normal"])
            )
            for index, damage in enumerate(damages, start=1):
                story.extend(_damage_lines(index, damage, styles))
        else:
            story.append(Paragraph("No damage detected.", styles["Normal"]))

        story.extend(
            [
                Spacer(1, 36),
                Paragraph(escape(DISCLAIMER), footer_style),
                Paragraph(escape(FOOTER), footer_style),
            ]
        )
        return story


def _damage_lines(
    index: int, damage: Damage, styles: StyleSheet1
) -> list[Flowable]:
    normal = styles["Normal"]
    lines: list[Flowable] = [
        Spacer(1, 8),
        Paragraph(f"<b>{index}. {escape(damage.type or 'Unknown')}</b>", normal),
        Paragraph(f"Severity: {escape(damage.severity or 'N/A')}", normal),
        Paragraph(f"Location: {escape(damage.location or 'N/A')}", normal),
        Paragraph(f"Confidence: {damage.confidence * 100:.1f}%", normal),
    ]
    if damage.bounding_box:
        box = damage.bounding_box
        lines.append(
            Paragraph(
                f"Region: x={box.x:g}, y={box.y:g}, {box.width:g}x{box.height:g}",
                normal,
            )
        )
    return lines


def _link(url: str) -> str:
    safe = escape(url, {'"': "&quot;"})
    return f'<link href="{safe}" color="blue"><u>{safe}</u></link>'
