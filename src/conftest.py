"""
Pytest Configuration
====================

Automatically loaded by pytest. Puts src/ on sys.path so lar_math
imports without installation, and resets the lar_math logger between
tests (setup_logging attaches handlers to it).

Usage:
    cd src
    pytest tests/ -v
"""

import logging
import sys
from pathlib import Path

import pytest

src_root = Path(__file__).parent
if str(src_root) not in sys.path:
    sys.path.insert(0, str(src_root))


@pytest.fixture(autouse=True)
def reset_lar_math_logger():
    yield
    logger = logging.getLogger("lar_math")
    logger.handlers.clear()
    logger.setLevel(logging.NOTSET)
