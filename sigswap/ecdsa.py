"""
ECDSA over secp256k1, delegated to libsecp256k1 through ``coincurve``.

Offered as an alternative plain signature scheme for the buyer's lock
transaction.  Signatures are DER-encoded; nonces are derived inside
libsecp256k1 (RFC 6979), so no nonce ever crosses this API.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Tuple

from coincurve import PrivateKey as _SK

from .curve import Scalar, Point, G
from .hash import HashSuite, DEFAULT_SUITE
from .relation import DLogRelation
from .schnorr import SignatureScheme


@dataclass(frozen=True)
class EcdsaSignature:
    """DER-encoded ECDSA signature (at most 72 bytes)."""

    der: bytes

    def to_bytes(self) -> bytes:
        return self.der


class EcdsaSignatureScheme(SignatureScheme[Scalar, Point, EcdsaSignature]):
    """ECDSA with the message digest taken from the injected hash suite."""

    def __init__(self, suite: HashSuite = DEFAULT_SUITE) -> None:
        self.suite = suite
        self._keys = DLogRelation()

    def gen(self) -> Tuple[Scalar, Point]:
        return self._keys.sample(G)

    def sign(self, sk: Scalar, msg: bytes) -> EcdsaSignature:
        der = _SK(sk.to_bytes()).sign(msg, hasher=self.suite.digest)
        return EcdsaSignature(der=der)

    def verify(self, pk: Point, msg: bytes, sig: EcdsaSignature) -> bool:
        if pk.is_inf():
            return False
        try:
            return bool(
                pk.public_key().verify(sig.der, msg, hasher=self.suite.digest)
            )
        except ValueError:
            # unparsable DER
            return False
