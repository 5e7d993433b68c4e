"""Pytest configuration.

The application code lives in the top-level `eml_extractor/` package.
Depending on how pytest is invoked and the active import mode, the
repository root may not be on `sys.path`, which breaks imports like
`from eml_extractor.modules...` when the project is not installed.

This file makes test imports robust by explicitly adding the repo root to
`sys.path` during test collection.
"""

from __future__ import annotations

import logging
import os
import sys
from pathlib import Path
from unittest.mock import patch

import pytest


REPO_ROOT = Path(__file__).resolve().parents[1]

# NOTE: Insert at the front so local imports win over an installed copy.
if str(REPO_ROOT) not in sys.path:
    sys.path.insert(0, str(REPO_ROOT))


@pytest.fixture
def write_eml(tmp_path):
    """Write raw bytes to ``<tmp_path>/<name>`` and return the path"""
    def _write(raw: bytes, name: str = "message.eml") -> Path:
        path = tmp_path / name
        path.write_bytes(raw)
        return path
    return _write


@pytest.fixture(autouse=True)
def _reset_root_logger():
    """AppRunner installs handlers on the root logger; drop them after each test"""
    root = logging.getLogger()
    handlers = list(root.handlers)
    level = root.level
    yield
    for handler in root.handlers:
        if handler not in handlers:
            root.removeHandler(handler)
            handler.close()
    root.setLevel(level)


CONFIG_ENV_VARS = ("LOG_LEVEL", "LOG_FILE", "LOG_FORMAT", "NO_COLOR", "EML_OUTPUT_DIR", "EML_CLEANUP")


@pytest.fixture
def clean_env():
    """Isolate os.environ; load_dotenv writes straight into it"""
    with patch.dict(os.environ):
        for key in CONFIG_ENV_VARS:
            os.environ.pop(key, None)
        yield os.environ


@pytest.fixture(autouse=True)
def _restore_colors():
    """Colors.disable() blanks the class attributes for the whole process"""
    from eml_extractor.utils.colors import Colors

    saved = {name: getattr(Colors, name) for name in Colors._CODES}
    yield
    for name, value in saved.items():
        setattr(Colors, name, value)
