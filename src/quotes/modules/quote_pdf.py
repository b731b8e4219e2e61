from io import BytesIO
from pathlib import Path
from typing import BinaryIO, Optional, Union
from xml.sax.saxutils import escape

from loguru import logger
from PIL import Image as PILImage
from reportlab.lib import colors
from reportlab.lib.enums import TA_RIGHT
from reportlab.lib.pagesizes import A4
from reportlab.lib.styles import ParagraphStyle, getSampleStyleSheet
from reportlab.lib.units import mm
from reportlab.platypus import Image, Paragraph, SimpleDocTemplate, Spacer, Table, TableStyle

from .quote_context import QuoteContext

MARGIN_X = 40
LOGO_MAX_HEIGHT = 18 * mm
LOGO_MAX_WIDTH = 50 * mm


def load_logo(path: Optional[Path]) -> Optional[bytes]:
    """
    Lädt das Logo für den Briefkopf.
    Fehlt die Datei oder ist sie kein lesbares Bild, wird None zurückgegeben und das
    Angebot ohne Logo erstellt.
    """
    if path is None:
        return None
    try:
        data = Path(path).read_bytes()
        with PILImage.open(BytesIO(data)) as img:
            img.verify()
    except Exception as e:
        logger.warning(f"Logo '{path}' nicht verfügbar, Angebot wird ohne Logo erstellt: {e}")
        return None
    return data


class QuotePdfRenderer:
    """
    Setzt den Export-Kontext als A4-PDF mit reportlab.platypus:
    Titel, Firmen- und Angebotsangaben, Leistungstabelle, Summenblock und Hinweise.
    Lange Tabellen werden automatisch auf Folgeseiten umbrochen (Kopfzeile wiederholt).
    """

    def __init__(self):
        styles = getSampleStyleSheet()
        self.title_style = ParagraphStyle("QuoteTitle", parent=styles["Heading1"], fontName="Helvetica-Bold",
                                          fontSize=14, spaceAfter=6)
        self.text_style = ParagraphStyle("QuoteText", parent=styles["Normal"], fontName="Helvetica", fontSize=10,
                                         leading=14)
        self.right_style = ParagraphStyle("QuoteRight", parent=self.text_style, alignment=TA_RIGHT)
        self.cell_style = ParagraphStyle("QuoteCell", parent=styles["Normal"], fontName="Helvetica", fontSize=9,
                                         leading=11)
        self.cell_right_style = ParagraphStyle("QuoteCellRight", parent=self.cell_style, alignment=TA_RIGHT)
        self.note_style = ParagraphStyle("QuoteNote", parent=self.text_style, fontSize=9, leading=12)

    def _paragraph(self, text: str, style: ParagraphStyle) -> Paragraph:
        return Paragraph(escape(text or ""), style)

    def _logo_flowable(self, logo: bytes) -> Optional[Image]:
        try:
            with PILImage.open(BytesIO(logo)) as img:
                width, height = img.size
        except Exception as e:
            logger.warning(f"Logo konnte nicht gelesen werden: {e}")
            return None
        scale = min(LOGO_MAX_WIDTH / width, LOGO_MAX_HEIGHT / height)
        flowable = Image(BytesIO(logo), width=width * scale, height=height * scale)
        flowable.hAlign = "LEFT"
        return flowable

    def _header(self, context: QuoteContext, logo: Optional[bytes], width: float) -> Table:
        left = [self._paragraph(line, self.text_style) for line in context["company_lines"] or []]
        if logo:
            logo_flowable = self._logo_flowable(logo)
            if logo_flowable is not None:
                left.insert(0, logo_flowable)
        right = [self._paragraph(line, self.right_style) for line in context["quote_lines"] or []]
        header = Table([[left, right]], colWidths=[width / 2, width / 2])
        header.setStyle(TableStyle([
            ("VALIGN", (0, 0), (-1, -1), "TOP"),
            ("LEFTPADDING", (0, 0), (-1, -1), 0),
            ("RIGHTPADDING", (0, 0), (-1, -1), 0),
        ]))
        return header

    def _items_table(self, context: QuoteContext, width: float) -> Table:
        headers = context["column_headers"] or ["Servicio", "Detalle", "Importe"]
        body = [
            [
                self._paragraph(row.label, self.cell_style),
                self._paragraph(row.detail, self.cell_style),
                self._paragraph(row.amount, self.cell_right_style),
            ]
            for row in context["rows"] or []
        ]
        amount_width = 90
        label_width = 130
        table = Table(
            [headers] + body,
            colWidths=[label_width, width - label_width - amount_width, amount_width],
            repeatRows=1,
        )
        table.setStyle(TableStyle([
            ("FONTNAME", (0, 0), (-1, 0), "Helvetica-Bold"),
            ("FONTSIZE", (0, 0), (-1, -1), 9),
            ("GRID", (0, 0), (-1, -1), 0.5, colors.grey),
            ("BACKGROUND", (0, 0), (-1, 0), colors.HexColor("#E8E8F0")),
            ("VALIGN", (0, 0), (-1, -1), "TOP"),
            ("ALIGN", (-1, 0), (-1, 0), "RIGHT"),
            ("TOPPADDING", (0, 0), (-1, -1), 6),
            ("BOTTOMPADDING", (0, 0), (-1, -1), 6),
        ]))
        return table

    def _totals_table(self, context: QuoteContext) -> Table:
        lines = context["total_lines"] or []
        table = Table([list(line) for line in lines], colWidths=[130, 90], hAlign="RIGHT")
        style = [
            ("FONTNAME", (0, 0), (-1, -1), "Helvetica"),
            ("FONTSIZE", (0, 0), (-1, -1), 10),
            ("ALIGN", (1, 0), (1, -1), "RIGHT"),
        ]
        if lines:
            style += [
                ("FONTNAME", (0, -1), (-1, -1), "Helvetica-Bold"),
                ("LINEABOVE", (0, -1), (-1, -1), 0.5, colors.black),
            ]
        table.setStyle(TableStyle(style))
        return table

    @staticmethod
    def _draw_page_number(canvas, doc) -> None:
        canvas.saveState()
        canvas.setFont("Helvetica", 8)
        canvas.drawRightString(A4[0] - MARGIN_X, 20, str(doc.page))
        canvas.restoreState()

    def render(
        self,
        context: QuoteContext,
        target: Union[Path, BinaryIO],
        logo: Optional[bytes] = None,
    ) -> Union[Path, BinaryIO]:
        """
        Erzeugt das PDF.

        Args:
            context (QuoteContext): Kontext aus der QuoteFactory.
            target (Path | BinaryIO): Zieldatei oder Stream.
            logo (bytes, optional): Bilddaten für den Briefkopf.

        Returns:
            Das übergebene Ziel.
        """
        doc = SimpleDocTemplate(
            str(target) if isinstance(target, Path) else target,
            pagesize=A4,
            leftMargin=MARGIN_X,
            rightMargin=MARGIN_X,
            topMargin=36,
            bottomMargin=40,
            title=context["document_title"] or "",
        )
        width = doc.width
        story = [
            self._paragraph(context["document_title"], self.title_style),
            self._header(context, logo, width),
            Spacer(1, 18),
            self._items_table(context, width),
            Spacer(1, 12),
            self._totals_table(context),
            Spacer(1, 18),
        ]
        story += [self._paragraph(note, self.note_style) for note in context["footer_notes"] or []]
        doc.build(story, onFirstPage=self._draw_page_number, onLaterPages=self._draw_page_number)
        return target
