"""Pytest configuration and shared fixtures for the mdweave test suite.

This module provides shared fixtures, test configuration, and utilities
that are used across the entire test suite.
"""

import logging
import os
from pathlib import Path

import pytest
from hypothesis import HealthCheck, Phase, Verbosity, settings

from mdweave.transforms.registry import rule_registry

# Register custom Hypothesis profiles. The autouse isolation fixture below is
# function scoped but holds no per-example state.
_SUPPRESSED = [HealthCheck.function_scoped_fixture]
settings.register_profile("ci", max_examples=100, verbosity=Verbosity.verbose, suppress_health_check=_SUPPRESSED)
settings.register_profile("dev", max_examples=30, suppress_health_check=_SUPPRESSED)
settings.register_profile(
    "debug",
    max_examples=10,
    verbosity=Verbosity.verbose,
    phases=[Phase.explicit, Phase.reuse, Phase.generate],
    suppress_health_check=_SUPPRESSED,
)
settings.load_profile(os.getenv("HYPOTHESIS_PROFILE", "dev"))


def pytest_configure(config):
    """Configure pytest with custom markers."""
    config.addinivalue_line("markers", "unit: Unit tests - fast, isolated component tests")
    config.addinivalue_line("markers", "integration: Integration tests - component interaction tests")
    config.addinivalue_line("markers", "e2e: End-to-end tests - full pipeline tests")
    config.addinivalue_line("markers", "cli: Tests related to command-line interface")


@pytest.fixture(autouse=True)
def _isolate_config(monkeypatch, tmp_path):
    """Keep configuration discovery away from the developer's files."""
    monkeypatch.delenv("MDWEAVE_CONFIG", raising=False)
    monkeypatch.chdir(tmp_path)


@pytest.fixture(autouse=True)
def _restore_root_logger():
    """Undo logging configuration done by CLI runs."""
    root = logging.getLogger()
    handlers, level = list(root.handlers), root.level
    yield
    root.handlers[:] = handlers
    root.setLevel(level)


@pytest.fixture
def fresh_registry():
    """Provide the rule registry with only built-in rules, restored afterwards."""
    rule_registry.clear()
    yield rule_registry
    rule_registry.clear()


@pytest.fixture
def sample_markdown() -> str:
    """Provide a document exercising every directive form.

    Returns
    -------
    str
        Markdown with a callout, a video, an unknown directive and plain blocks

    """
    return """# Release notes

Plain paragraph with :abbr[HTML]{title="HyperText Markup Language"}.

:::warning
Be careful.
:::

::video{src="https://www.youtube.com/embed/abc" title="Walkthrough" type="youtube"}

:::custom{.box}
Not a callout.
:::

- one
- two
"""


@pytest.fixture
def markdown_file(tmp_path: Path, sample_markdown: str) -> Path:
    """Write the sample document to a file and return its path."""
    path = tmp_path / "page.md"
    path.write_text(sample_markdown, encoding="utf-8")
    return path
