"""Tests for the Lambda entry point."""

import json

import pytest

import launcher.handler as handler_module
from launcher.config import Settings
from launcher.errors import ProcessExitError


@pytest.fixture
def use_executable(monkeypatch):
    """Point the handler at a test executable."""

    def _use(path, **kwargs):
        monkeypatch.setattr(
            handler_module, "settings", Settings(executable=str(path), **kwargs)
        )

    return _use


def test_external_returns_none_on_success(make_executable, use_executable, lambda_context):
    """Test event {"port": 8080} with exit 0 succeeds."""
    script = make_executable(exit_code=0)
    use_executable(script)

    assert handler_module.external({"port": 8080}, lambda_context) is None

    argv = json.loads((script.parent / "argv.json").read_text())
    assert argv == ['{"port":8080}']


def test_external_raises_on_nonzero_exit(make_executable, use_executable, lambda_context):
    """Test event {} with exit 1 fails with the status message."""
    use_executable(make_executable(exit_code=1))

    with pytest.raises(ProcessExitError) as exc_info:
        handler_module.external({}, lambda_context)

    assert str(exc_info.value) == "Process exited with non-zero status code: 1"


def test_external_raises_when_executable_missing(tmp_path, use_executable, lambda_context):
    """Test a missing executable surfaces as a failure, not a hang."""
    use_executable(tmp_path / "missing")

    with pytest.raises(FileNotFoundError):
        handler_module.external({"port": 8080}, lambda_context)


def test_handler_alias():
    """Test the conventional handler name points at external."""
    assert handler_module.handler is handler_module.external


def test_default_executable_is_bundled_script():
    """Test the default executable path."""
    assert Settings().executable == "./uniqueport"
    assert Settings().timeout_sec is None
