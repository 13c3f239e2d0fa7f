"""
Tests for DOCX extraction, templating and output naming.
"""
from jobfit.services.docx_service import (
    EXTRACTION_FALLBACK_TEXT,
    build_output_filename,
    extract_docx_text,
    find_unsupported_placeholders,
    render_docx_template,
    sanitize_filename_component,
)

from conftest import build_docx


def test_extract_text(template_docx):
    text, warning = extract_docx_text(template_docx)
    
    assert warning is None
    assert "Backend Engineer" in text
    assert "summary_bullet_1" in text
    assert "<w:" not in text


def test_extract_text_from_garbage_degrades():
    text, warning = extract_docx_text(b"definitely not a zip file")
    assert text == EXTRACTION_FALLBACK_TEXT
    assert warning


def test_render_fills_placeholders(template_docx):
    document, warning = render_docx_template(
        template_docx, {"summary_bullet_1": "Shipped a resume scanner in Python"}
    )
    
    assert warning is None
    text, _ = extract_docx_text(document)
    assert "Shipped a resume scanner in Python" in text
    assert "{{" not in text


def test_render_unknown_placeholder_renders_empty():
    template = build_docx("Before {{ not_answered }} after")
    document, warning = render_docx_template(template, {})
    
    assert warning is None
    text, _ = extract_docx_text(document)
    assert "not_answered" not in text


def test_render_failure_returns_original_bytes():
    data = b"broken template bytes"
    document, warning = render_docx_template(data, {"a": "b"})
    assert document == data
    assert warning


def test_sanitize_filename_component():
    assert sanitize_filename_component("Acme, Inc. (EU)") == "Acme__Inc___EU_"
    assert sanitize_filename_component("") == ""


def test_build_output_filename():
    assert build_output_filename("Jane Doe", "Acme", "Backend Engineer") == "Jane_Doe_Acme_Backend_Engineer_resume.docx"


def test_hyphenated_placeholder_is_reported():
    template = build_docx("{{ summary-bullet }}", "{{ exp2_bullet_1 }}")
    
    assert find_unsupported_placeholders(template) == ["summary-bullet"]
    document, warning = render_docx_template(template, {"summary-bullet": "text", "exp2_bullet_1": "more"})
    assert document == template
    assert "summary-bullet" in warning


def test_supported_placeholders_are_not_reported(template_docx):
    assert find_unsupported_placeholders(template_docx) == []
    assert find_unsupported_placeholders(b"not a zip") == []
