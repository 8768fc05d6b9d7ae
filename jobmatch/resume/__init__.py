"""
Résumé analysis for jobmatch.

This package turns an unstructured résumé into the structured fields
stored on the résumé record (skills, education, experience, summary).
`extract` holds the pattern-matching rules; `parse_resume` reads PDF,
DOCX and text files and persists analysed records as JSON.
"""

from .extract import analyze_resume, extract  # noqa: F401
from .parse_resume import (  # noqa: F401
    analyze_resume_file,
    load_resume_json,
    read_resume_text,
    save_resume_json,
)
