"""Tests for PDF export."""

import base64

import pytest
from fpdf import FPDF

from storyweaver.export import BODY_FONT_SIZE, CORE_FONT, export_story_pdf, pdf_safe_text, wrap_text
from storyweaver.shared.errors import ExportError

SHORT_STORY = "The lighthouse keeper rubbed his eyes.\n\nA little boat was waiting on the rocks."


@pytest.fixture
def pdf():
    document = FPDF(unit="mm", format="A4")
    document.add_page()
    document.set_font(CORE_FONT, "", BODY_FONT_SIZE)
    return document


def test_export_text_only(tmp_path):
    report = export_story_pdf(SHORT_STORY, tmp_path / "story.pdf")

    assert report.path == tmp_path / "story.pdf"
    assert report.path.read_bytes().startswith(b"%PDF")
    assert report.pages == 1
    assert not report.image_embedded
    assert report.warnings == []


def test_export_creates_parent_directories(tmp_path):
    report = export_story_pdf(SHORT_STORY, tmp_path / "out" / "nested" / "story.pdf")
    assert report.path.exists()


def test_export_with_wide_image_stays_on_first_page(tmp_path, png_uri_factory):
    report = export_story_pdf(SHORT_STORY, tmp_path / "story.pdf", image_data_uri=png_uri_factory(640, 360))

    assert report.image_embedded
    assert report.pages == 1


def test_tall_image_moves_to_its_own_page(tmp_path, png_uri_factory):
    # 180 mm wide at 2:3 is 270 mm tall: too tall to share the first page with the title
    report = export_story_pdf(SHORT_STORY, tmp_path / "story.pdf", image_data_uri=png_uri_factory(100, 150))

    assert report.image_embedded
    assert report.pages == 3


def test_long_story_spans_pages(tmp_path):
    story = " ".join(["word"] * 2000)

    report = export_story_pdf(story, tmp_path / "story.pdf")

    assert report.pages > 1


def test_broken_image_is_reported_and_skipped(tmp_path):
    report = export_story_pdf(SHORT_STORY, tmp_path / "story.pdf", image_data_uri="data:image/png;base64,AAAA")

    assert not report.image_embedded
    assert report.warnings == ["Could not add the generated image to the PDF."]
    assert report.path.exists()


def test_malformed_image_uri_is_reported(tmp_path):
    report = export_story_pdf(SHORT_STORY, tmp_path / "story.pdf", image_data_uri="not-a-data-uri")
    assert report.warnings


def test_non_image_payload_is_reported(tmp_path):
    uri = "data:image/png;base64," + base64.b64encode(b"plain text").decode()
    report = export_story_pdf(SHORT_STORY, tmp_path / "story.pdf", image_data_uri=uri)
    assert not report.image_embedded


@pytest.mark.parametrize("story", ["", "   \n  "])
def test_empty_story_is_rejected(tmp_path, story):
    with pytest.raises(ExportError):
        export_story_pdf(story, tmp_path / "story.pdf")
    assert not (tmp_path / "story.pdf").exists()


def test_unwritable_destination(tmp_path):
    blocker = tmp_path / "file"
    blocker.write_text("x")

    with pytest.raises(ExportError) as exc_info:
        export_story_pdf(SHORT_STORY, blocker / "story.pdf")

    assert exc_info.value.message == "Export failed: There was an error trying to download the story."


def test_non_latin_text_exports_with_core_font(tmp_path):
    report = export_story_pdf("“Hello” — नमस्ते", tmp_path / "story.pdf")
    assert report.pages == 1


class TestPdfSafeText:
    def test_typographic_punctuation(self):
        assert pdf_safe_text("“Hi” — it’s…") == "\"Hi\" - it's..."

    def test_latin1_is_kept(self):
        assert pdf_safe_text("Café naïve") == "Café naïve"

    def test_unmappable_characters(self):
        assert pdf_safe_text("नम") == "??"

    def test_tabs_and_none(self):
        assert pdf_safe_text("a\tb") == "a b"
        assert pdf_safe_text(None) == ""


class TestWrapText:
    def test_lines_fit_width(self, pdf):
        text = " ".join(["lighthouse"] * 60)

        lines = wrap_text(pdf, text, 60)

        assert len(lines) > 1
        assert all(pdf.get_string_width(line) <= 60 for line in lines)
        assert " ".join(lines) == text

    def test_paragraph_breaks_are_kept(self, pdf):
        assert wrap_text(pdf, "One.\n\nTwo.", 180) == ["One.", "", "Two."]

    def test_long_word_is_broken(self, pdf):
        word = "a" * 200

        lines = wrap_text(pdf, word, 20)

        assert "".join(lines) == word
        assert all(pdf.get_string_width(line) <= 20 for line in lines)
