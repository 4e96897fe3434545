"""
Exception taxonomy.

Cryptographic checks (``verify``, ``pre_verify``, ``R``) return booleans.
The exceptions below are what callers see when a run must stop:

- ``ConstructionInvariantViolation``: a sampled scalar or derived point
  broke a non-zero / non-identity precondition.  Astronomically rare
  with honest randomness, but never coerced silently.
- ``NonceReuseError``: a single-use nonce was consumed twice.
- ``VerificationFailure``: the fair-exchange orchestration received a
  False verdict and aborted before any value moved.
- ``ConfigError``: run configuration failed validation.
- ``ExtractionFailure``: no witness could be recovered from a
  (pre-signature, signature) pair.

Proving a false statement (a relation violation) is undefined
behaviour and is deliberately not detected at runtime.
"""

from __future__ import annotations

from typing import Optional


class SigswapError(Exception):
    """Base class for every error raised by this package."""


class ConstructionInvariantViolation(SigswapError):
    """A sampled value violated a non-zero / non-identity precondition."""


class NonceReuseError(ConstructionInvariantViolation):
    """A single-use nonce was consumed a second time."""


class VerificationFailure(SigswapError):
    """A verification verdict was False; the exchange run is aborted."""

    def __init__(self, step: str, check: str, detail: Optional[str] = None):
        self.step = step
        self.check = check
        self.detail = detail
        msg = f"{step}: {check} failed"
        if detail:
            msg = f"{msg} ({detail})"
        super().__init__(msg)


class ExtractionFailure(SigswapError):
    """No valid witness could be extracted."""


class ConfigError(SigswapError, ValueError):
    """Configuration values failed validation."""
