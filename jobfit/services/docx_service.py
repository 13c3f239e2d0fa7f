"""
DOCX helpers: plain-text extraction, placeholder templating and output naming.

Extraction and templating are best-effort: failures degrade to a safe
fallback and return a warning instead of raising.
"""
import io
import logging
import re
import zipfile
from typing import Dict, List, Optional, Tuple

from docxtpl import DocxTemplate

logger = logging.getLogger(__name__)

DOCX_MEDIA_TYPE = "application/vnd.openxmlformats-officedocument.wordprocessingml.document"
DOCUMENT_XML_PART = "word/document.xml"
EXTRACTION_FALLBACK_TEXT = "Could not extract text. Analyze based on placeholders if present."

_TAG_RE = re.compile(r"<[^>]+>")
_WHITESPACE_RE = re.compile(r"\s+")
_UNSAFE_FILENAME_CHARS_RE = re.compile(r"[^A-Za-z0-9]")
_PLACEHOLDER_RE = re.compile(r"\{\{(.*?)\}\}", re.DOTALL)
# Jinja reads `summary-bullet` as `summary - bullet`
_HYPHENATED_NAME_RE = re.compile(r"[A-Za-z_][A-Za-z0-9_]*(?:-[A-Za-z0-9_]+)+")


def _read_document_xml(data: bytes) -> str:
    with zipfile.ZipFile(io.BytesIO(data)) as archive:
        return archive.read(DOCUMENT_XML_PART).decode("utf-8", errors="ignore")


def extract_docx_text(data: bytes) -> Tuple[str, Optional[str]]:
    """
    Extract plain text from a DOCX container.

    Reads the main document part and strips the XML markup.

    Returns:
        (text, warning) - on failure the fallback text and a warning message
    """
    try:
        xml = _read_document_xml(data)
    except (zipfile.BadZipFile, KeyError, OSError) as e:
        logger.warning(f"Text extraction failed: {type(e).__name__}: {e}")
        return EXTRACTION_FALLBACK_TEXT, "Could not read text from the uploaded resume; analysis used placeholders only."

    text = _WHITESPACE_RE.sub(" ", _TAG_RE.sub(" ", xml)).strip()
    return text, None


def find_unsupported_placeholders(data: bytes) -> List[str]:
    """
    Placeholder names the template engine cannot read as one variable.

    Tags split across runs are joined first, the way Word stores edited text.
    Unreadable documents report nothing; rendering reports those.
    """
    try:
        text = _TAG_RE.sub("", _read_document_xml(data))
    except (zipfile.BadZipFile, KeyError, OSError):
        return []

    names: List[str] = []
    for match in _PLACEHOLDER_RE.finditer(text):
        name = match.group(1).strip()
        if _HYPHENATED_NAME_RE.fullmatch(name) and name not in names:
            names.append(name)
    return names


def render_docx_template(data: bytes, replacements: Dict[str, str]) -> Tuple[bytes, Optional[str]]:
    """
    Fill ``{{ placeholder }}`` tags in a DOCX template.

    Args:
        data: Template bytes
        replacements: Placeholder name -> replacement text

    Returns:
        (document, warning) - on failure the original bytes and a warning message
    """
    unsupported = find_unsupported_placeholders(data)
    if unsupported:
        logger.warning(f"DOCX template has unsupported placeholder names: {unsupported}")
        return data, (
            f"Placeholders {', '.join(unsupported)} contain '-' and cannot be filled; "
            "use letters, digits and underscores. The original document was returned."
        )

    try:
        template = DocxTemplate(io.BytesIO(data))
        template.render(replacements or {}, autoescape=True)
        output = io.BytesIO()
        template.save(output)
    except Exception as e:
        # docxtpl surfaces jinja, lxml and zip errors alike
        logger.error(f"DOCX templating failed, returning original document: {type(e).__name__}: {e}")
        return data, "Template placeholders could not be filled; the original document was returned."

    return output.getvalue(), None


def sanitize_filename_component(value: str) -> str:
    """Replace every character outside ``[A-Za-z0-9]`` with ``_``."""
    return _UNSAFE_FILENAME_CHARS_RE.sub("_", value or "")


def build_output_filename(user_name: str, company_name: str, job_title: str) -> str:
    parts = [sanitize_filename_component(part) for part in (user_name, company_name, job_title)]
    return "_".join(parts) + "_resume.docx"
