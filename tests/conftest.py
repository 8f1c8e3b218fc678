"""Pytest configuration and shared fixtures.

Test Categories:
| Category    | Focus                 | Tools              |
| Unit        | Individual functions  | pytest, mock       |
| Integration | Component interaction | pytest, CLI runner |
"""

import logging
import os
import sys
from collections.abc import Generator
from pathlib import Path

import pytest

# Add src to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from bashlike.config import settings as settings_module
from bashlike.config.settings import Settings
from bashlike.utils.logging import clear_execution_context, configure_logging

# =============================================================================
# PYTEST CONFIGURATION
# =============================================================================


def pytest_configure(config):
    """Configure pytest with custom markers."""
    config.addinivalue_line("markers", "unit: Unit tests (fast, isolated)")
    config.addinivalue_line(
        "markers", "integration: Integration tests (component interaction)"
    )
    config.addinivalue_line("markers", "slow: Slow tests (may take > 1s)")


def pytest_addoption(parser):
    """Add custom command line options."""
    parser.addoption(
        "--run-slow", action="store_true", default=False, help="Run slow tests"
    )


def pytest_collection_modifyitems(config, items):
    """Skip slow tests unless --run-slow is given."""
    if config.getoption("--run-slow", default=False):
        return
    skip_slow = pytest.mark.skip(reason="Skipping slow tests (use --run-slow)")
    for item in items:
        if "slow" in item.keywords:
            item.add_marker(skip_slow)


# =============================================================================
# COMMON FIXTURES
# =============================================================================


@pytest.fixture(autouse=True)
def isolated_config(tmp_path, monkeypatch) -> Generator[Path, None, None]:
    """Point config files at a temp dir and reset global settings.

    Keeps tests away from ~/.bashlike and any BASHLIKE_* variables in the
    developer's environment.
    """
    service = settings_module.config_service
    monkeypatch.setattr(service, "user_config_path", tmp_path / "user" / "config.yaml")
    monkeypatch.setattr(service, "project_dir", tmp_path)
    for key in list(os.environ):
        if key.startswith("BASHLIKE_"):
            monkeypatch.delenv(key)

    monkeypatch.setattr(settings_module, "_cached_settings", Settings())
    yield tmp_path
    clear_execution_context()


@pytest.fixture(autouse=True)
def quiet_logging() -> Generator[None, None, None]:
    """Start each test with warning-level logging to stderr."""
    configure_logging(level="warning", color=False)
    yield
    logging.getLogger().handlers = []


@pytest.fixture
def sample_tree(tmp_path) -> Path:
    """Small directory tree for find/ls tests.

    root/
      a.txt
      b.log
      sub/
        c.txt
        deeper/
          d.txt
    """
    root = tmp_path / "root"
    (root / "sub" / "deeper").mkdir(parents=True)
    (root / "a.txt").write_text("alpha\n", encoding="utf-8")
    (root / "b.log").write_text("beta\n", encoding="utf-8")
    (root / "sub" / "c.txt").write_text("gamma\n", encoding="utf-8")
    (root / "sub" / "deeper" / "d.txt").write_text("delta\n", encoding="utf-8")
    return root


@pytest.fixture
def log_text() -> str:
    """Sample application log."""
    return (
        "INFO start service\n"
        "ERROR disk full\n"
        "INFO request ok\n"
        "ERROR timeout\n"
        "ERROR disk full\n"
    )
