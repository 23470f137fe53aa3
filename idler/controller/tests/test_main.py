"""
Tests for the faas-idler entrypoint: startup checks and single-cycle runs.
"""

import httpx
import pytest

from gateway_fixtures import (
    GATEWAY_URL,
    OPT_IN,
    PROMETHEUS_URL,
    function_payload,
    prometheus_by_function,
    scale_calls,
    vector,
)
from idler.controller import main as idler_main


@pytest.fixture(autouse=True)
def controller_env(monkeypatch, tmp_path):
    user_file = tmp_path / "basic-auth-user"
    password_file = tmp_path / "basic-auth-password"
    user_file.write_text("admin\n")
    password_file.write_text("secret\n")

    monkeypatch.setenv("LOG_CONFIG_PATH", str(tmp_path / "missing-log.yaml"))
    monkeypatch.setenv("gateway_url", GATEWAY_URL)
    monkeypatch.setenv("prometheus_host", "prometheus")
    monkeypatch.setenv("prometheus_port", "9090")
    monkeypatch.setenv("BASIC_AUTH_USER_FILE", str(user_file))
    monkeypatch.setenv("BASIC_AUTH_PASSWORD_FILE", str(password_file))
    for name in ("dry_run", "write_debug", "inactivity_duration", "reconcile_interval"):
        monkeypatch.delenv(name, raising=False)
        monkeypatch.delenv(name.upper(), raising=False)


def _gateway_info(mock_router):
    return mock_router.get(f"{GATEWAY_URL}system/info").mock(
        return_value=httpx.Response(200, json={"version": {"release": "0.27.0", "sha": "abc"}})
    )


def test_parse_args_defaults():
    args = idler_main.parse_args([])

    assert args.dry_run is False
    assert args.once is False


def test_parse_args_dry_run():
    assert idler_main.parse_args(["--dry-run"]).dry_run is True


def test_missing_gateway_url_is_fatal(monkeypatch, mock_router):
    monkeypatch.delenv("gateway_url", raising=False)
    info = _gateway_info(mock_router)

    assert idler_main.main(["--once"]) == 1
    assert not info.called


def test_invalid_configuration_is_fatal(monkeypatch):
    monkeypatch.setenv("inactivity_duration", "not-a-duration")

    assert idler_main.main(["--once"]) == 1


def test_unreachable_gateway_is_fatal(mock_router):
    mock_router.get(f"{GATEWAY_URL}system/info").mock(
        side_effect=httpx.ConnectError("connection refused")
    )

    assert idler_main.main(["--once"]) == 1


def test_once_runs_a_single_cycle(mock_router):
    _gateway_info(mock_router)
    inventory = mock_router.get(f"{GATEWAY_URL}system/functions").mock(
        return_value=httpx.Response(
            200, json=[function_payload("f1", labels=OPT_IN, invocation_count=5)]
        )
    )
    mock_router.get(PROMETHEUS_URL).mock(
        side_effect=prometheus_by_function({"f1": vector(("f1", "0"))})
    )
    mock_router.get(f"{GATEWAY_URL}system/function/f1").mock(
        return_value=httpx.Response(200, json=function_payload("f1", available_replicas=3))
    )
    mock_router.post(f"{GATEWAY_URL}system/scale-function/f1").mock(
        return_value=httpx.Response(202)
    )

    assert idler_main.main(["--once"]) == 0

    assert inventory.call_count == 1
    calls = scale_calls(mock_router)
    assert len(calls) == 1
    assert calls[0].headers["authorization"].startswith("Basic ")


def test_dry_run_flag_suppresses_scaling(mock_router):
    _gateway_info(mock_router)
    mock_router.get(f"{GATEWAY_URL}system/functions").mock(
        return_value=httpx.Response(
            200, json=[function_payload("f1", labels=OPT_IN, invocation_count=0)]
        )
    )
    mock_router.get(PROMETHEUS_URL).mock(side_effect=prometheus_by_function({}))
    mock_router.get(f"{GATEWAY_URL}system/function/f1").mock(
        return_value=httpx.Response(200, json=function_payload("f1", available_replicas=1))
    )
    mock_router.post(f"{GATEWAY_URL}system/scale-function/f1").mock(
        return_value=httpx.Response(202)
    )

    assert idler_main.main(["--once", "--dry-run"]) == 0

    assert scale_calls(mock_router) == []


def test_loop_mode_hands_over_to_run_forever(monkeypatch, mock_router):
    _gateway_info(mock_router)
    captured = {}

    def fake_run_forever(self, interval, sleep=None):
        captured["interval"] = interval
        captured["dry_run"] = self.scaler.dry_run

    monkeypatch.setenv("reconcile_interval", "2m")
    monkeypatch.setattr(idler_main.Reconciler, "run_forever", fake_run_forever)

    assert idler_main.main([]) == 0
    assert captured["interval"].total_seconds() == 120
    assert captured["dry_run"] is False
