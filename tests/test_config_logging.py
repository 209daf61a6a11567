"""Tests for config and logging."""

import asyncio
import io
import json
import logging
import sys
from decimal import Decimal
from pathlib import Path

import pytest

from transfer_sim.config import AccountConfig, OutputConfig, PhaseConfig, SimulatorConfig
from transfer_sim.enums import Phase
from transfer_sim.exceptions import ConfigurationError
from transfer_sim.logging import JsonFormatter, setup_logging

ENV_VARS = [
    "BALANCE_CHECK_FAILURE_RATE",
    "DEDUCT_FAILURE_RATE",
    "CONFIRM_FAILURE_RATE",
    "PHASE_DELAY_MS",
    "INITIAL_BALANCE",
    "MAX_TRANSFER_AMOUNT",
    "ACCOUNT_HOLDER",
    "AUDIT_DIR",
    "PRETTY_JSON",
    "SEED",
    "LOG_LEVEL",
    "LOG_FORMAT",
]


@pytest.fixture
def clean_env(monkeypatch: pytest.MonkeyPatch) -> pytest.MonkeyPatch:
    for name in ENV_VARS:
        monkeypatch.delenv(name, raising=False)
    return monkeypatch


class TestPhaseConfig:
    """Tests for PhaseConfig."""

    def test_default_values(self) -> None:
        """Test default configuration values."""
        config = PhaseConfig()

        assert config.balance_check_failure_rate == 0.20
        assert config.deduct_failure_rate == 0.15
        assert config.confirm_failure_rate == 0.10
        assert config.delay_ms == 1500
        assert config.delay_seconds == 1.5

    def test_failure_rate_per_phase(self) -> None:
        config = PhaseConfig(
            balance_check_failure_rate=0.5, deduct_failure_rate=0.25, confirm_failure_rate=0.0
        )
        assert config.failure_rate(Phase.BALANCE_CHECK) == 0.5
        assert config.failure_rate(Phase.DEDUCT) == 0.25
        assert config.failure_rate(Phase.CONFIRM) == 0.0

    @pytest.mark.parametrize(
        "kwargs",
        [
            {"balance_check_failure_rate": -0.1},
            {"deduct_failure_rate": 1.01},
            {"confirm_failure_rate": 2},
            {"delay_ms": -1},
        ],
    )
    def test_validate_rejects(self, kwargs: dict) -> None:
        with pytest.raises(ConfigurationError):
            PhaseConfig(**kwargs).validate()

    def test_validate_accepts_bounds(self) -> None:
        PhaseConfig(balance_check_failure_rate=0.0, deduct_failure_rate=1.0, delay_ms=0).validate()


class TestAccountConfig:
    """Tests for AccountConfig."""

    def test_default_values(self) -> None:
        config = AccountConfig()

        assert config.initial_balance == Decimal("1000.00")
        assert config.max_transfer_amount == Decimal("1000")
        assert config.holder_name is None

    def test_validate_rejects_negative_balance(self) -> None:
        with pytest.raises(ConfigurationError):
            AccountConfig(initial_balance=Decimal("-1")).validate()

    def test_validate_rejects_zero_limit(self) -> None:
        with pytest.raises(ConfigurationError):
            AccountConfig(max_transfer_amount=Decimal("0")).validate()

    @pytest.mark.parametrize("field_name", ["initial_balance", "max_transfer_amount"])
    @pytest.mark.parametrize("value", ["NaN", "sNaN", "Infinity", "-Infinity"])
    def test_validate_rejects_non_finite(self, field_name: str, value: str) -> None:
        with pytest.raises(ConfigurationError):
            AccountConfig(**{field_name: Decimal(value)}).validate()


class TestSimulatorConfig:
    """Tests for SimulatorConfig."""

    def test_default_values(self) -> None:
        config = SimulatorConfig()

        assert isinstance(config.phases, PhaseConfig)
        assert isinstance(config.account, AccountConfig)
        assert isinstance(config.output, OutputConfig)
        assert config.output.audit_dir is None
        assert config.output.pretty_json is False
        assert config.seed is None
        assert config.log_level == "INFO"
        assert config.log_format == "standard"

    def test_from_env_default(self, clean_env: pytest.MonkeyPatch) -> None:
        config = SimulatorConfig.from_env()

        assert config.phases == PhaseConfig()
        assert config.account == AccountConfig()
        assert config.output == OutputConfig()
        assert config.seed is None
        assert config.log_level == "INFO"

    def test_from_env_custom(self, clean_env: pytest.MonkeyPatch) -> None:
        env_vars = {
            "BALANCE_CHECK_FAILURE_RATE": "0.5",
            "DEDUCT_FAILURE_RATE": "0",
            "CONFIRM_FAILURE_RATE": "1",
            "PHASE_DELAY_MS": "10",
            "INITIAL_BALANCE": "2500.50",
            "MAX_TRANSFER_AMOUNT": "2000",
            "ACCOUNT_HOLDER": "Grace Hopper",
            "AUDIT_DIR": "/data/audit",
            "PRETTY_JSON": "true",
            "SEED": "12345",
            "LOG_LEVEL": "DEBUG",
            "LOG_FORMAT": "json",
        }
        for k, v in env_vars.items():
            clean_env.setenv(k, v)

        config = SimulatorConfig.from_env()

        assert config.phases.balance_check_failure_rate == 0.5
        assert config.phases.deduct_failure_rate == 0.0
        assert config.phases.confirm_failure_rate == 1.0
        assert config.phases.delay_ms == 10
        assert config.account.initial_balance == Decimal("2500.50")
        assert config.account.max_transfer_amount == Decimal("2000")
        assert config.account.holder_name == "Grace Hopper"
        assert config.output.audit_dir == Path("/data/audit")
        assert config.output.pretty_json is True
        assert config.seed == 12345
        assert config.log_level == "DEBUG"
        assert config.log_format == "json"

    @pytest.mark.parametrize(
        "name, value",
        [
            ("PHASE_DELAY_MS", "soon"),
            ("INITIAL_BALANCE", "lots"),
            ("SEED", "x"),
            ("DEDUCT_FAILURE_RATE", "3"),
            ("INITIAL_BALANCE", "NaN"),
            ("MAX_TRANSFER_AMOUNT", "Infinity"),
        ],
    )
    def test_from_env_invalid(self, clean_env: pytest.MonkeyPatch, name: str, value: str) -> None:
        clean_env.setenv(name, value)
        with pytest.raises(ConfigurationError):
            SimulatorConfig.from_env()


class TestSetupLogging:
    """Tests for setup_logging."""

    def test_standard_format(self) -> None:
        setup_logging(level="DEBUG")

        root = logging.getLogger()
        assert root.level == logging.DEBUG
        assert len(root.handlers) == 1
        handler = root.handlers[0]
        assert isinstance(handler, logging.StreamHandler)
        assert handler.stream is sys.stderr
        assert not isinstance(handler.formatter, JsonFormatter)
        assert logging.getLogger("transfer_sim").level == logging.DEBUG
        assert logging.getLogger("faker").level == logging.WARNING

    def test_json_format(self) -> None:
        setup_logging(level="WARNING", format_type="json")

        root = logging.getLogger()
        assert root.level == logging.WARNING
        assert isinstance(root.handlers[0].formatter, JsonFormatter)

    def test_unknown_level_falls_back_to_info(self) -> None:
        setup_logging(level="CHATTY")
        assert logging.getLogger().level == logging.INFO

    def test_replaces_existing_handlers(self) -> None:
        setup_logging()
        setup_logging()
        assert len(logging.getLogger().handlers) == 1


class TestJsonFormatter:
    """Tests for JsonFormatter."""

    def _record(self, msg: str, exc_info=None) -> logging.LogRecord:
        return logging.LogRecord(
            name="transfer_sim.test",
            level=logging.INFO,
            pathname=__file__,
            lineno=1,
            msg=msg,
            args=(),
            exc_info=exc_info,
        )

    def test_basic_fields(self) -> None:
        data = json.loads(JsonFormatter().format(self._record("Transfer started")))

        assert data["level"] == "INFO"
        assert data["logger"] == "transfer_sim.test"
        assert data["message"] == "Transfer started"
        assert "timestamp" in data

    def test_exception_included(self) -> None:
        try:
            raise ValueError("boom")
        except ValueError:
            exc_info = sys.exc_info()

        data = json.loads(JsonFormatter().format(self._record("failed", exc_info)))
        assert "ValueError: boom" in data["exception"]

    def test_transfer_context_fields(self) -> None:
        record = self._record("Transfer started")
        record.transfer_id = "tx-1"
        record.amount = Decimal("5.00")
        record.phase = None

        data = json.loads(JsonFormatter().format(record))
        assert data["transfer_id"] == "tx-1"
        assert data["amount"] == "5.00"
        assert "phase" not in data
        assert "balance" not in data

    def test_orchestrator_records_carry_context(self, make_orchestrator) -> None:
        stream = io.StringIO()
        setup_logging(level="INFO", format_type="json", stream=stream)

        asyncio.run(make_orchestrator().start("10"))

        lines = [json.loads(line) for line in stream.getvalue().splitlines()]
        started = next(line for line in lines if "started" in line["message"])
        assert started["logger"] == "transfer_sim.orchestrator"
        assert started["account_id"] == "acct-test-001"
        assert started["amount"] == "10"
        assert started["balance"] == "1000.00"
        assert all(line["transfer_id"] == started["transfer_id"] for line in lines)
