import logging

import pytest

from sp_inventory.core.models import RunConfiguration
from sp_inventory.reporters.output_sink import OutputSink


@pytest.fixture
def log_dir(tmp_path):
    return tmp_path / "logs"


@pytest.fixture
def make_config(log_dir):
    """Build a RunConfiguration writing into the test's log directory."""
    def _make(**values):
        values.setdefault("tenant_name", "contoso")
        values.setdefault("log_directory", str(log_dir))
        values.setdefault("console_output", False)
        return RunConfiguration(**values)
    return _make


@pytest.fixture
def sink(log_dir):
    log_dir.mkdir(parents=True, exist_ok=True)
    return OutputSink(
        log_file=log_dir / "run.log",
        failures_file=log_dir / "failures.csv",
        sites_file=log_dir / "sites.csv",
        files_file=log_dir / "files.csv",
    )


@pytest.fixture(autouse=True)
def restore_root_logger():
    root = logging.getLogger()
    handlers = root.handlers[:]
    level = root.level
    yield
    root.handlers[:] = handlers
    root.setLevel(level)
