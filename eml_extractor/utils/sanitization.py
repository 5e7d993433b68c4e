"""
Sanitization Utility Module
Makes untrusted header values safe for the filesystem and for log output.

SECURITY STORY: Subjects and attachment filenames come straight from the
email, so an attacker chooses them. Before one becomes a path component we
reduce it to word characters, whitespace, hyphens and dots, which removes
path separators, NUL bytes and shell metacharacters in one step.
"""

import re
import unicodedata
from typing import Container

# Whitelist: anything that is not a word character, whitespace, hyphen or dot
FILENAME_SANITIZE_PATTERN = re.compile(r"[^\w\s\-.]", re.ASCII)
WHITESPACE_PATTERN = re.compile(r"\s+", re.ASCII)
ANSI_ESCAPE_PATTERN = re.compile(r'\x1B(?:[@-Z\\-_]|\[[0-?]*[ -/]*[@-~])')

MAX_FOLDER_NAME_LENGTH = 100
FOLDER_SUFFIX = "_email"
EML_EXTENSION = ".eml"


def sanitize_filename(name: str) -> str:
    """
    Replace unsafe characters in a filename with underscores

    Every character that is not a word character, whitespace, hyphen or dot
    becomes ``_``; then each run of whitespace collapses to a single ``_``.
    No truncation is applied.

    Example:
        >>> sanitize_filename("Q3 report: final?.pdf")
        'Q3_report__final_.pdf'
    """
    name = FILENAME_SANITIZE_PATTERN.sub("_", name)
    return WHITESPACE_PATTERN.sub("_", name)


def make_folder_name(subject: str, eml_filename: str) -> str:
    """
    Derive the output folder name for an extraction

    Uses the sanitized subject truncated to MAX_FOLDER_NAME_LENGTH characters,
    or the input filename without its .eml extension when the subject is
    empty. ``_email`` is appended unless the name already ends with it.
    """
    if subject:
        folder_name = sanitize_filename(subject)[:MAX_FOLDER_NAME_LENGTH]
    elif eml_filename.endswith(EML_EXTENSION):
        folder_name = eml_filename[:-len(EML_EXTENSION)]
    else:
        folder_name = eml_filename

    if not folder_name.endswith(FOLDER_SUFFIX):
        folder_name += FOLDER_SUFFIX
    return folder_name


def uniquify(desired_name: str, taken: Container[str]) -> str:
    """
    Return a filename that is not in *taken*

    The first candidate is the name itself, then ``<stem>_1<ext>``,
    ``<stem>_2<ext>`` and so on.

    Args:
        desired_name: Sanitized filename
        taken: Names already in use (a set, or anything supporting ``in``)

    Example:
        >>> uniquify("report.pdf", {"report.pdf", "report_1.pdf"})
        'report_2.pdf'
    """
    if desired_name not in taken:
        return desired_name

    stem, ext = _split_extension(desired_name)
    counter = 1
    while True:
        candidate = f"{stem}_{counter}{ext}"
        if candidate not in taken:
            return candidate
        counter += 1


def sanitize_for_logging(text: str, max_length: int = 255) -> str:
    """
    Sanitize text for safe logging to prevent Log Injection (CRLF) and terminal manipulation.

    Args:
        text: The input string to sanitize.
        max_length: Maximum allowed length for the log entry (truncates if longer).

    Returns:
        Sanitized string safe for logging.
    """
    if not text:
        return ""

    text = unicodedata.normalize('NFKC', text)
    text = text.replace('\n', '\\n').replace('\r', '\\r')
    text = ANSI_ESCAPE_PATTERN.sub('', text)

    # Drop remaining control characters except tab
    text = "".join(ch for ch in text if ch == '\t' or ord(ch) >= 32)

    if len(text) > max_length:
        text = text[:max_length] + "..."

    return text


def _split_extension(filename: str):
    """Split at the last dot; a leading dot belongs to the stem"""
    dot = filename.rfind(".")
    if dot <= 0:
        return filename, ""
    return filename[:dot], filename[dot:]
