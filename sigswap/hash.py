"""
Hash suites, domain tags and the Fiat-Shamir transcript.

Every hash call is a BIP-340 style tagged hash

    H_tag(x) = H( H(tag) ‖ H(tag) ‖ x )

so that challenges for different proof types and signature schemes are
independent even on identical input.  The underlying hash function is a
``HashSuite`` object injected into each scheme at construction time;
nothing here dispatches on strings.

``Transcript`` is the single place where challenge inputs are
serialised.  Prover and verifier of every proof call the same
``_challenge`` helper, which feeds the CRS, the statement and the
commitments through one ``Transcript`` in a fixed order:

    points  → 32-byte affine x-coordinate (identity → zeros)
    scalars → 32-byte big-endian
    bytes   → 4-byte length prefix ‖ data
"""

from __future__ import annotations

import hashlib
from dataclasses import dataclass
from typing import Any, Callable, Iterable

from .curve import Scalar, Point, SCALAR_BYTES


# ── domain tags ─────────────────────────────────────────────────────────
TAG_SCHNORR  = b"sigswap/v1/schnorr"
TAG_ADAPTOR  = b"sigswap/v1/adaptor"
TAG_DLOG     = b"sigswap/v1/dlog_proof"
TAG_POK_SIG  = b"sigswap/v1/signature_knowledge_proof"
TAG_OR_SIG   = b"sigswap/v1/or_proof"


# ── hash suites ─────────────────────────────────────────────────────────

@dataclass(frozen=True)
class HashSuite:
    """
    A 256-bit hash function used as the random oracle.

    Its digest size must equal the scalar size so that reducing a digest
    modulo *q* gives a (statistically) uniform scalar.
    """

    name: str
    factory: Callable[[], Any]

    def __post_init__(self) -> None:
        if self.factory().digest_size != SCALAR_BYTES:
            raise ValueError(
                f"{self.name}: digest size must be {SCALAR_BYTES} bytes"
            )

    def new(self):
        return self.factory()

    def digest(self, data: bytes) -> bytes:
        h = self.factory()
        h.update(data)
        return h.digest()

    def tagged(self, tag: bytes):
        """Return a hash context pre-loaded with the tag prefix."""
        tag_hash = self.digest(tag)
        h = self.factory()
        h.update(tag_hash)
        h.update(tag_hash)
        return h


SHA256 = HashSuite("SHA-256", hashlib.sha256)
SHA3_256 = HashSuite("SHA3-256", hashlib.sha3_256)
BLAKE2S = HashSuite("BLAKE2s-256", hashlib.blake2s)

DEFAULT_SUITE = SHA256


# ── transcript ──────────────────────────────────────────────────────────

class Transcript:
    """
    Ordered accumulator for Fiat-Shamir challenge inputs::

        c = Transcript(TAG_DLOG, suite).points(g, x, a).challenge()
    """

    def __init__(self, tag: bytes, suite: HashSuite = DEFAULT_SUITE) -> None:
        self._h = suite.tagged(tag)

    def point(self, p: Point) -> Transcript:
        self._h.update(p.x_bytes())
        return self

    def points(self, *ps: Point) -> Transcript:
        for p in ps:
            self.point(p)
        return self

    def scalar(self, s: Scalar) -> Transcript:
        self._h.update(s.to_bytes())
        return self

    def message(self, data: bytes) -> Transcript:
        self._h.update(len(data).to_bytes(4, "big"))
        self._h.update(data)
        return self

    def append(self, items: Iterable[Any]) -> Transcript:
        """Append a heterogeneous sequence of points, scalars and bytes."""
        for item in items:
            if isinstance(item, Point):
                self.point(item)
            elif isinstance(item, Scalar):
                self.scalar(item)
            elif isinstance(item, (bytes, bytearray)):
                self.message(bytes(item))
            else:
                raise TypeError(
                    f"cannot add {type(item).__name__} to a transcript"
                )
        return self

    def challenge(self) -> Scalar:
        return Scalar.from_bytes_reduce(self._h.digest())
