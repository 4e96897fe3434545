"""
Run configuration for the fair exchange and its benchmark driver.

``ExchangeConfig`` is a frozen pydantic model; defaults reproduce the
reference scenario.  ``ExchangeConfig.from_env`` overlays ``SIGSWAP_*``
environment variables and lets pydantic coerce and validate them:

    SIGSWAP_NOTARY_MESSAGE   message the notary signs
    SIGSWAP_TX_LOCK          lock transaction description
    SIGSWAP_TX_PAY           pay transaction description
    SIGSWAP_ITERATIONS       benchmark runs (>= 1)
    SIGSWAP_RESULTS_DIR      directory of the timings CSV
    SIGSWAP_LOG_LEVEL        DEBUG / INFO / WARNING / ERROR

The hash suite is not configurable here; it is an object passed to the
scheme constructors.
"""

from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import Literal, Mapping, Optional

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    ValidationError,
    field_validator,
    model_validator,
)

from .curve import CURVE_NAME
from .errors import ConfigError

DEFAULT_NOTARY_MESSAGE = (
    "Lorem ipsum dolor sit amet, consectetur adipiscing elit, sed do "
    "eiusmod tempor incididunt ut labore et dolore magna aliqua"
)
DEFAULT_TX_LOCK = "(alpha, pk_b_1) -> (alpha, (pk_b_2 && pk_s) || (pk_b_2 + t))"
DEFAULT_TX_PAY = "(alpha, (pk_b_2 && pk_s) || (pk_b_2 + t)) -> (alpha, pk_s_2)"

ENV_PREFIX = "SIGSWAP_"
_ENV_FIELDS = (
    "notary_message", "tx_lock", "tx_pay", "iterations", "results_dir", "log_level",
)


class ExchangeConfig(BaseModel):
    """Messages, benchmark size and output location of an exchange run."""

    model_config = ConfigDict(frozen=True)

    notary_message: str = Field(
        default=DEFAULT_NOTARY_MESSAGE, description="Message the notary signs",
    )
    tx_lock: str = Field(default=DEFAULT_TX_LOCK, description="Lock transaction")
    tx_pay: str = Field(default=DEFAULT_TX_PAY, description="Pay transaction")
    iterations: int = Field(default=1000, description="Benchmark runs", ge=1)
    results_dir: Path = Field(
        default=Path("."), description="Directory of the timings CSV",
    )
    curve_name: str = Field(default=CURVE_NAME, description="Curve label in file names")
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = Field(
        default="INFO", description="Level the benchmark driver logs at",
    )

    @field_validator("log_level", mode="before")
    @classmethod
    def _upper_level(cls, v):
        return v.upper() if isinstance(v, str) else v

    @model_validator(mode="after")
    def _distinct_transactions(self) -> ExchangeConfig:
        if self.tx_lock == self.tx_pay:
            raise ValueError("lock and pay transactions must differ")
        return self

    @classmethod
    def from_env(
        cls,
        environ: Optional[Mapping[str, str]] = None,
        **overrides,
    ) -> ExchangeConfig:
        """
        Defaults, then ``SIGSWAP_*`` variables, then keyword overrides.

        Raises
        ------
        ConfigError
            If the merged values fail validation.
        """
        env = os.environ if environ is None else environ
        values = {
            name: env[ENV_PREFIX + name.upper()]
            for name in _ENV_FIELDS
            if ENV_PREFIX + name.upper() in env
        }
        values.update(overrides)
        try:
            return cls(**values)
        except ValidationError as e:
            raise ConfigError(f"invalid {ENV_PREFIX}* configuration: {e}") from e

    def with_overrides(self, **changes) -> ExchangeConfig:
        """Validated copy with *changes* applied."""
        return type(self)(**{**self.model_dump(), **changes})

    @property
    def results_file(self) -> Path:
        return self.results_dir / f"selling_signature_service_times_{self.curve_name}.csv"

    @property
    def level(self) -> int:
        return getattr(logging, self.log_level)

    # message bytes --------------------------------------------------------
    @property
    def notary_message_bytes(self) -> bytes:
        return self.notary_message.encode("utf-8")

    @property
    def tx_lock_bytes(self) -> bytes:
        return self.tx_lock.encode("utf-8")

    @property
    def tx_pay_bytes(self) -> bytes:
        return self.tx_pay.encode("utf-8")
