"""
Tests for the upload_logs entry point exit codes.
"""

import importlib.util
import signal
import threading
from pathlib import Path

import pytest

from conftest import FakeDeliveryClient, ok, transport_error
from sensor_uploader.config import Settings
from sensor_uploader.models import DeliveryOutcome
from sensor_uploader.uploader import LogUploader

SCRIPT = Path(__file__).resolve().parents[1] / "scripts" / "upload_logs.py"


@pytest.fixture(scope="module")
def script():
    spec = importlib.util.spec_from_file_location("upload_logs", SCRIPT)
    module = importlib.util.module_from_spec(spec)
    spec.loader.exec_module(module)
    return module


@pytest.fixture
def settings(tmp_path, monkeypatch, log_files):
    monkeypatch.chdir(tmp_path)
    return Settings(
        COLLECTOR_BASE_URL="https://collector.example.com",
        COLLECTOR_API_KEY="sensor-key",
        DNS_LOG_PATH=str(log_files.dns_path),
        CONN_LOG_PATH=str(log_files.conn_path),
    )


def _run(script, settings, outcomes, argv=(), cancel=None):
    client = FakeDeliveryClient(outcomes)
    uploader = LogUploader(client=client, api_key="sensor-key", retry_count=2, retry_delay=0)
    args = script.build_parser().parse_args(list(argv))
    code = script.run(args, settings, uploader, cancel or threading.Event())
    return code, client


def test_success_exits_zero(script, settings):
    code, client = _run(script, settings, [ok()])
    assert code == script.EXIT_OK
    assert len(client.calls) == 1


def test_gone_has_its_own_exit_code(script, settings):
    code, _ = _run(script, settings, [DeliveryOutcome(status_code=410)])
    assert code == script.EXIT_GONE


def test_exhaustion_exits_with_failure(script, settings):
    code, client = _run(script, settings, [transport_error()])
    assert code == script.EXIT_FAILED
    assert len(client.calls) == 2


def test_missing_connection_log_is_bad_input(script, settings, tmp_path):
    code, client = _run(script, settings, [ok()], argv=["--conn-log", str(tmp_path / "nope.log")])
    assert code == script.EXIT_BAD_INPUT
    assert client.calls == []


def test_cancelled_run(script, settings):
    cancel = threading.Event()
    cancel.set()
    code, client = _run(script, settings, [ok()], cancel=cancel)
    assert code == script.EXIT_CANCELLED
    assert client.calls == []


def test_dry_run_does_not_upload(script, settings, caplog):
    caplog.set_level("INFO")
    code, client = _run(script, settings, [ok()], argv=["--dry-run"])
    assert code == script.EXIT_OK
    assert "[DRY-RUN] Would upload" in caplog.text
    assert "b64 chars" in caplog.text
    assert "[DRY-RUN] Would upload" in caplog.text


def test_signal_handler_records_signal_name(script, monkeypatch):
    handlers = {}
    monkeypatch.setattr(script.signal, "signal", lambda signum, handler: handlers.setdefault(signum, handler))
    cancel = script.CancelSignal()

    script.install_signal_handlers(cancel)
    handlers[signal.SIGTERM](signal.SIGTERM, None)

    assert cancel.is_set()
    assert cancel.cause == "SIGTERM"
