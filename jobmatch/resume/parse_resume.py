"""
Résumé file handling.

Reads an uploaded résumé file into plain text and runs the rule-based
extractor over it.  Supported formats are plain text, PDF (via
``pdfplumber``) and Word ``.docx`` (via ``python-docx``).  The resulting
:class:`~jobmatch.schema.ResumeRecord` can be written to and read back
from JSON so that later commands (matching, the job feed) can reuse one
analysis.
"""

from __future__ import annotations

import json
import logging
import os
from datetime import datetime, timezone
from typing import Optional

import docx
import pdfplumber

from ..schema import ResumeRecord
from ..skills import SkillTables
from .extract import analyze_resume

logger = logging.getLogger(__name__)

SUPPORTED_EXTENSIONS = (".txt", ".pdf", ".docx")


def read_resume_text(file_path: str) -> str:
    """Extract the plain text of a résumé file.

    Args:
        file_path: Path to a ``.txt``, ``.pdf`` or ``.docx`` file.

    Returns:
        The text, pages or paragraphs separated by newlines.

    Raises:
        FileNotFoundError: If the file does not exist.
        ValueError: If the extension is unsupported or no text could be
            extracted.
    """
    if not os.path.exists(file_path):
        raise FileNotFoundError(f"Résumé file not found: {file_path}")
    ext = os.path.splitext(file_path)[1].lower()
    if ext == ".pdf":
        pages = []
        with pdfplumber.open(file_path) as pdf:
            for page in pdf.pages:
                pages.append(page.extract_text() or "")
        text = "\n".join(pages)
    elif ext == ".docx":
        document = docx.Document(file_path)
        text = "\n".join(p.text for p in document.paragraphs)
    elif ext == ".txt":
        with open(file_path, "r", encoding="utf-8", errors="ignore") as f:
            text = f.read()
    else:
        raise ValueError(
            f"Unsupported résumé format {ext!r}; expected one of {', '.join(SUPPORTED_EXTENSIONS)}"
        )
    if not text.strip():
        raise ValueError(f"Could not extract any text from {os.path.basename(file_path)}")
    logger.info("Extracted %d characters from %s", len(text), os.path.basename(file_path))
    return text


def analyze_resume_file(
    file_path: str,
    user_id: str = "",
    tables: Optional[SkillTables] = None,
) -> ResumeRecord:
    """Read a résumé file and extract its structured fields."""
    text = read_resume_text(file_path)
    record = ResumeRecord(
        user_id=user_id,
        extracted_text=text,
        original_name=os.path.basename(file_path),
        uploaded_at=datetime.now(timezone.utc).replace(tzinfo=None),
    )
    record = analyze_resume(record, tables)
    logger.info(
        "Analyzed %s: %d skills, %d education, %d experience entries",
        record.original_name,
        len(record.skills),
        len(record.education),
        len(record.experience),
    )
    return record


def save_resume_json(resume: ResumeRecord, out_path: str) -> None:
    """Serialize a résumé record to JSON."""
    with open(out_path, "w", encoding="utf-8") as f:
        json.dump(resume.to_dict(), f, indent=2)
    logger.info("Wrote résumé JSON to %s", out_path)


def load_resume_json(path: str) -> ResumeRecord:
    """Read a résumé record written by :func:`save_resume_json`.

    Raises:
        ValueError: If the file is not a JSON object.
    """
    with open(path, "r", encoding="utf-8") as f:
        data = json.load(f)
    if not isinstance(data, dict):
        raise ValueError(f"{path} does not contain a résumé object")
    return ResumeRecord.from_dict(data)
