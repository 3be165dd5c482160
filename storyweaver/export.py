"""
PDF export of the current story.

Layout: A4 portrait, 15 mm margins, a bold title line, then the illustration
(if any) scaled to the content width, then the story text word-wrapped to the
content width. Pages are broken by hand so the image is never split and every
text line lands inside the bottom margin.

The core PDF fonts only cover Latin-1. Text is normalised to Latin-1 unless a
TrueType font is supplied for scripts outside it.
"""

import logging
import unicodedata
from dataclasses import dataclass, field
from io import BytesIO
from pathlib import Path

from fpdf import FPDF
from fpdf.errors import FPDFException
from PIL import Image, UnidentifiedImageError

from .media import parse_data_uri
from .share import SHARE_TITLE
from .shared.errors import ExportError

logger = logging.getLogger(__name__)

DEFAULT_PDF_FILENAME = "story-weaver.pdf"

MARGIN = 15
TITLE_FONT_SIZE = 16
BODY_FONT_SIZE = 12
LINE_HEIGHT = 7
TITLE_GAP = 10
IMAGE_GAP = 10
CORE_FONT = "helvetica"
CUSTOM_FONT = "storyfont"

_LATIN1_REPLACEMENTS = {
    ord("\u2010"): "-",
    ord("\u2011"): "-",
    ord("\u2012"): "-",
    ord("\u2013"): "-",
    ord("\u2014"): "-",
    ord("\u2015"): "-",
    ord("\u2212"): "-",
    ord("\u2018"): "'",
    ord("\u2019"): "'",
    ord("\u201A"): "'",
    ord("\u201B"): "'",
    ord("\u2032"): "'",
    ord("\u201C"): '"',
    ord("\u201D"): '"',
    ord("\u201E"): '"',
    ord("\u2026"): "...",
    ord("\u00A0"): " ",
    ord("\u2009"): " ",
    ord("\u202F"): " ",
    ord("\u200B"): "",
    ord("\ufeff"): "",
}


@dataclass
class ExportReport:
    path: Path
    image_embedded: bool = False
    pages: int = 0
    warnings: list[str] = field(default_factory=list)


def pdf_safe_text(text: str) -> str:
    """Normalise ``text`` for the Latin-1 core fonts; unmappable characters become '?'."""
    normalized = unicodedata.normalize("NFKC", text or "").replace("\t", " ")
    return normalized.translate(_LATIN1_REPLACEMENTS).encode("latin-1", "replace").decode("latin-1")


def wrap_text(pdf: FPDF, text: str, width: float) -> list[str]:
    """
    Split ``text`` into lines no wider than ``width`` in the current font.

    Paragraph breaks are kept as empty lines. A single word wider than the
    line is broken by characters.
    """
    lines: list[str] = []
    for paragraph in text.splitlines():
        words = paragraph.split()
        if not words:
            lines.append("")
            continue

        current = ""
        for word in words:
            candidate = f"{current} {word}" if current else word
            if pdf.get_string_width(candidate) <= width:
                current = candidate
                continue
            if current:
                lines.append(current)
            current = word
            while pdf.get_string_width(current) > width and len(current) > 1:
                cut = len(current) - 1
                while cut > 1 and pdf.get_string_width(current[:cut]) > width:
                    cut -= 1
                lines.append(current[:cut])
                current = current[cut:]
        lines.append(current)
    return lines


def _load_image(image_data_uri: str) -> Image.Image:
    decoded = parse_data_uri(image_data_uri)
    img = Image.open(BytesIO(decoded.data))
    img.load()
    return img


def export_story_pdf(
    story: str,
    output_path: Path | str = DEFAULT_PDF_FILENAME,
    image_data_uri: str | None = None,
    font_path: Path | str | None = None,
) -> ExportReport:
    """
    Write the story (and its illustration, if any) to a PDF file.

    An illustration that cannot be decoded is left out and reported in
    ``ExportReport.warnings``; the text is still exported.

    Raises:
        ExportError: If there is no story or the document cannot be written.
    """
    if not story or not story.strip():
        raise ExportError("there is no story to export")

    report = ExportReport(path=Path(output_path))

    try:
        pdf = FPDF(orientation="portrait", unit="mm", format="A4")
        pdf.set_auto_page_break(auto=False)
        pdf.set_margins(MARGIN, MARGIN, MARGIN)

        if font_path:
            pdf.add_font(CUSTOM_FONT, "", str(font_path))
            pdf.add_font(CUSTOM_FONT, "B", str(font_path))
            family = CUSTOM_FONT
            title, body = SHARE_TITLE, story
        else:
            family = CORE_FONT
            title, body = pdf_safe_text(SHARE_TITLE), pdf_safe_text(story)

        page_height = pdf.h
        content_width = pdf.w - MARGIN * 2
        y = MARGIN

        pdf.add_page()
        pdf.set_font(family, "B", TITLE_FONT_SIZE)
        pdf.text(MARGIN, y, title)
        y += TITLE_GAP

        if image_data_uri:
            try:
                img = _load_image(image_data_uri)
                img_height = img.height * content_width / img.width
                if y + img_height > page_height - MARGIN:
                    pdf.add_page()
                    y = MARGIN
                pdf.image(img, x=MARGIN, y=y, w=content_width, h=img_height)
                y += img_height + IMAGE_GAP
                report.image_embedded = True
            except (ValueError, OSError, UnidentifiedImageError, FPDFException) as e:
                logger.error("Error adding image to PDF: %s", e)
                report.warnings.append("Could not add the generated image to the PDF.")

        pdf.set_font(family, "", BODY_FONT_SIZE)
        for line in wrap_text(pdf, body, content_width):
            if y > page_height - MARGIN:
                pdf.add_page()
                y = MARGIN
            if line:
                pdf.text(MARGIN, y, line)
            y += LINE_HEIGHT

        report.path.parent.mkdir(parents=True, exist_ok=True)
        pdf.output(str(report.path))
        report.pages = pdf.pages_count
    except (OSError, FPDFException, RuntimeError) as e:
        logger.error("Error generating PDF: %s", e)
        raise ExportError("There was an error trying to download the story.", details={"error": str(e)}) from e

    logger.info("Exported story to %s (%d pages)", report.path, report.pages)
    return report

