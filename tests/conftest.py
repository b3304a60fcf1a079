"""Global pytest configuration and fixtures.

Every test runs in an isolated working directory with PLM_* environment
variables removed, a fresh configuration cache and the default registry
restored to its production catalog source. Rich handlers installed by
a test are removed and the root logger level is restored afterwards.
"""

import logging
import os

import pytest
from rich.logging import RichHandler

from platform_lifecycle.context import ComponentContext
from platform_lifecycle.registry import reset_catalog_source
from platform_lifecycle.settings import load_config, reset_config
from tests.fixtures.fakes import FakeCluster, FakeInstaller


def pytest_configure(config):
    config.addinivalue_line("markers", "fast: Quick unit tests with no external dependencies")


@pytest.fixture(autouse=True)
def isolated_env(tmp_path, monkeypatch):
    """Isolated CWD and environment for each test."""
    for key in list(os.environ):
        if key.startswith("PLM_"):
            monkeypatch.delenv(key, raising=False)
    monkeypatch.chdir(tmp_path)
    reset_config()
    reset_catalog_source()
    yield tmp_path
    reset_catalog_source()
    reset_config()


@pytest.fixture(autouse=True)
def clean_logging():
    """Undo root logging changes made by setup_logging."""
    root = logging.getLogger()
    level = root.level
    yield
    for handler in [h for h in root.handlers if isinstance(h, RichHandler)]:
        root.removeHandler(handler)
    root.setLevel(level)


@pytest.fixture
def cluster():
    return FakeCluster()


@pytest.fixture
def installer():
    return FakeInstaller()


@pytest.fixture
def config(tmp_path):
    return load_config(root_dir=tmp_path / "platform")


@pytest.fixture
def ctx(cluster, installer, config):
    """Context wired to in-memory collaborators."""
    return ComponentContext(client=cluster, installer=installer, config=config)


@pytest.fixture
def info_logs(caplog):
    caplog.set_level(logging.INFO)
    return caplog
