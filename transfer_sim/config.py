"""Configuration management for transfer-sim."""

from dataclasses import dataclass, field
from decimal import Decimal
from pathlib import Path

from transfer_sim.enums import Phase
from transfer_sim.exceptions import ConfigurationError


@dataclass
class PhaseConfig:
    """Latency and failure probabilities of the simulated remote phases."""

    balance_check_failure_rate: float = 0.20
    deduct_failure_rate: float = 0.15
    confirm_failure_rate: float = 0.10
    delay_ms: int = 1500

    def failure_rate(self, phase: Phase) -> float:
        """Get the failure probability for a phase."""
        return {
            Phase.BALANCE_CHECK: self.balance_check_failure_rate,
            Phase.DEDUCT: self.deduct_failure_rate,
            Phase.CONFIRM: self.confirm_failure_rate,
        }[phase]

    @property
    def delay_seconds(self) -> float:
        return self.delay_ms / 1000

    def validate(self) -> None:
        """Raise ConfigurationError for out-of-range values."""
        for phase in Phase:
            rate = self.failure_rate(phase)
            if not 0.0 <= rate <= 1.0:
                raise ConfigurationError(
                    f"Failure rate for {phase.value} must be within [0, 1], got {rate}"
                )
        if self.delay_ms < 0:
            raise ConfigurationError(f"Phase delay must not be negative, got {self.delay_ms}")


@dataclass
class AccountConfig:
    """Opening balance and transfer limits."""

    initial_balance: Decimal = Decimal("1000.00")
    max_transfer_amount: Decimal = Decimal("1000")
    holder_name: str | None = None

    def validate(self) -> None:
        """Raise ConfigurationError for out-of-range values."""
        for name in ("initial_balance", "max_transfer_amount"):
            value = getattr(self, name)
            if not value.is_finite():
                raise ConfigurationError(f"{name} must be a finite amount, got {value}")
        if self.initial_balance < 0:
            raise ConfigurationError(
                f"Initial balance must not be negative, got {self.initial_balance}"
            )
        if self.max_transfer_amount <= 0:
            raise ConfigurationError(
                f"Max transfer amount must be positive, got {self.max_transfer_amount}"
            )


@dataclass
class OutputConfig:
    """Audit output configuration."""

    audit_dir: Path | None = None
    pretty_json: bool = False


@dataclass
class SimulatorConfig:
    """Main configuration for transfer-sim."""

    phases: PhaseConfig = field(default_factory=PhaseConfig)
    account: AccountConfig = field(default_factory=AccountConfig)
    output: OutputConfig = field(default_factory=OutputConfig)
    seed: int | None = None
    log_level: str = "INFO"
    log_format: str = "standard"

    def validate(self) -> None:
        self.phases.validate()
        self.account.validate()

    @classmethod
    def from_env(cls) -> "SimulatorConfig":
        """Create config from environment variables."""
        import os

        try:
            phases = PhaseConfig(
                balance_check_failure_rate=float(os.getenv("BALANCE_CHECK_FAILURE_RATE", "0.20")),
                deduct_failure_rate=float(os.getenv("DEDUCT_FAILURE_RATE", "0.15")),
                confirm_failure_rate=float(os.getenv("CONFIRM_FAILURE_RATE", "0.10")),
                delay_ms=int(os.getenv("PHASE_DELAY_MS", "1500")),
            )

            account = AccountConfig(
                initial_balance=Decimal(os.getenv("INITIAL_BALANCE", "1000.00")),
                max_transfer_amount=Decimal(os.getenv("MAX_TRANSFER_AMOUNT", "1000")),
                holder_name=os.getenv("ACCOUNT_HOLDER") or None,
            )

            seed = int(os.getenv("SEED")) if os.getenv("SEED") else None
        except (ArithmeticError, ValueError) as exc:
            raise ConfigurationError(f"Invalid numeric setting: {exc}") from exc

        audit_dir = os.getenv("AUDIT_DIR")
        output = OutputConfig(
            audit_dir=Path(audit_dir) if audit_dir else None,
            pretty_json=os.getenv("PRETTY_JSON", "false").lower() == "true",
        )

        config = cls(
            phases=phases,
            account=account,
            output=output,
            seed=seed,
            log_level=os.getenv("LOG_LEVEL", "INFO"),
            log_format=os.getenv("LOG_FORMAT", "standard"),
        )
        config.validate()
        return config
