"""Pytest configuration and fixtures for the test suite.

This is the root-level conftest.py that provides:
- Python path setup (so catalog_resolution imports without installation)
- Basic environment variable defaults
- Shared fixtures for all tests
"""
import os
import sys
from pathlib import Path

import pytest

# Project root is the parent of tests/
project_root = Path(__file__).parent.parent
if str(project_root) not in sys.path:
    sys.path.insert(0, str(project_root))

# Must be set before catalog_resolution.config is first imported
os.environ.setdefault("LOG_LEVEL", "WARNING")
os.environ.setdefault("LOG_FORMAT", "console")
# No external brand table during tests
os.environ.pop("MATCH_BRAND_TABLE_PATH", None)


@pytest.fixture
def classifier():
    """Classifier over the built-in rule set."""
    from catalog_resolution.services.classification import CategoryClassifier
    return CategoryClassifier()


@pytest.fixture
def engine():
    """Decision engine with default thresholds."""
    from catalog_resolution.config import MatchingSettings
    from catalog_resolution.services.matching import MatchDecisionEngine
    return MatchDecisionEngine(MatchingSettings())


@pytest.fixture
def catalog_entries():
    """Small multi-category catalog."""
    from catalog_resolution.models import CatalogEntry, CategoryId
    return [
        CatalogEntry(id="hd600", name="Sennheiser HD600", brand="Sennheiser", category=CategoryId.HEADPHONE),
        CatalogEntry(id="hd650", name="Sennheiser HD650", brand="Sennheiser", category=CategoryId.HEADPHONE),
        CatalogEntry(id="zenith", name="Letshuoer Zenith", brand="Letshuoer", category=CategoryId.IEM),
        CatalogEntry(id="blessing3", name="Moondrop Blessing 3", brand="Moondrop", category=CategoryId.IEM),
        CatalogEntry(id="aria", name="Moondrop Aria", brand="Moondrop", category=CategoryId.IEM),
        CatalogEntry(id="fh7", name="FiiO FH7", brand="FiiO", category=CategoryId.IEM),
    ]
