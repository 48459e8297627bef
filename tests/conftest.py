"""
Pytest configuration and shared fixtures for fbimport tests.

This module provides:
- Per-test temporary directories for generated archives
- Archive generator fixtures
- A fake job API client
- Custom markers
"""

import sys
from pathlib import Path

import pytest

# Add project root to path for imports
PROJECT_ROOT = Path(__file__).parent.parent
sys.path.insert(0, str(PROJECT_ROOT))

from tests.fixtures.records import FakeImportClient  # noqa: E402


# ============================================================================
# Session-scoped fixtures - created once per test session
# ============================================================================


@pytest.fixture(scope="session")
def project_root() -> Path:
    """Return the project root directory."""
    return PROJECT_ROOT


# ============================================================================
# Function-scoped fixtures - created fresh for each test
# ============================================================================


@pytest.fixture
def temp_export_dir(tmp_path) -> Path:
    """Create a temporary directory receiving generated archives.

    This directory is automatically cleaned up after each test.
    """
    export_dir = tmp_path / "export"
    export_dir.mkdir()
    return export_dir


@pytest.fixture(autouse=True)
def isolated_env(monkeypatch):
    """Keep FB_IMPORT_* settings from the developer's shell out of tests."""
    for name in (
        "FB_IMPORT_API_URL",
        "FB_IMPORT_TOKEN",
        "FB_IMPORT_TIMEOUT",
        "FB_IMPORT_SKIP_PAUSES",
    ):
        monkeypatch.delenv(name, raising=False)


@pytest.fixture
def fake_client() -> FakeImportClient:
    """Create a fake job API client with only the default album bucket."""
    return FakeImportClient()


# ============================================================================
# Export generator fixtures
# ============================================================================


@pytest.fixture
def minimal_facebook_export(temp_export_dir) -> Path:
    """Create a one-album, one-photo, one-comment JSON export."""
    from tests.fixtures.generators import create_minimal_facebook_export
    return create_minimal_facebook_export(temp_export_dir)


@pytest.fixture
def html_facebook_export(temp_export_dir) -> Path:
    """Create a minimal HTML-format export."""
    from tests.fixtures.generators import create_facebook_html_export
    return create_facebook_html_export(temp_export_dir)


# ============================================================================
# Test configuration
# ============================================================================


def pytest_configure(config):
    """Configure pytest with custom markers."""
    config.addinivalue_line(
        "markers", "slow: marks tests as slow (deselect with '-m \"not slow\"')"
    )
    config.addinivalue_line(
        "markers", "integration: marks tests that run the full pipeline or the CLI"
    )
