"""
Plain signature schemes: the interface and textbook Schnorr.

The notary signs with ``SchnorrSignatureScheme``; the signature it
produces is what the seller later proves possession of, so the
verification equation here is the one the signature relations embed:

    sign:    r ←$ Z_q,   R = r·g,   e = H(R, m),   s = r − sk·e
    verify:  R' = s·g + e·pk,  accept iff  e == H(R', m)

Since  s·g = R − e·pk,  anybody holding (e, s) can publish the
commitment  gs = s·g  without revealing *s*, and anybody can then check
e == H(gs + e·pk, m)  (``SchnorrSignatureScheme.consistent``).
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Generic, Tuple, TypeVar

from .curve import Scalar, Point, G, Nonce, non_identity
from .encoding import encode_all
from .hash import HashSuite, Transcript, DEFAULT_SUITE, TAG_SCHNORR
from .relation import DLogRelation

SK = TypeVar("SK")
PK = TypeVar("PK")
S = TypeVar("S")


class SignatureScheme(ABC, Generic[SK, PK, S]):
    """``gen`` / ``sign`` / ``verify``."""

    @abstractmethod
    def gen(self) -> Tuple[SK, PK]:
        ...

    @abstractmethod
    def sign(self, sk: SK, msg: bytes) -> S:
        ...

    @abstractmethod
    def verify(self, pk: PK, msg: bytes, sig: S) -> bool:
        ...


@dataclass(frozen=True)
class SchnorrSignature:
    """
    Schnorr signature  (e, s).

    Encoding: e ‖ s  (64 bytes).
    """

    e: Scalar
    s: Scalar

    def to_bytes(self) -> bytes:
        return encode_all((self.e, self.s))

    @classmethod
    def from_bytes(cls, data: bytes) -> SchnorrSignature:
        if len(data) != 64:
            raise ValueError(f"expected 64 bytes, got {len(data)}")
        return cls(e=Scalar.from_bytes(data[:32]), s=Scalar.from_bytes(data[32:]))


class SchnorrSignatureScheme(SignatureScheme[Scalar, Point, SchnorrSignature]):
    """Textbook Schnorr over secp256k1 with an injected hash suite."""

    def __init__(self, suite: HashSuite = DEFAULT_SUITE) -> None:
        self.suite = suite
        self._keys = DLogRelation()

    def gen(self) -> Tuple[Scalar, Point]:
        return self._keys.sample(G)

    def challenge(self, R: Point, msg: bytes) -> Scalar:  # noqa: N803
        """e = H(R, m)."""
        return Transcript(TAG_SCHNORR, self.suite).point(R).message(msg).challenge()

    def sign(self, sk: Scalar, msg: bytes) -> SchnorrSignature:
        """
        Sign *msg* with a fresh nonce.

        Parameters
        ----------
        sk : Scalar
            Signing key.
        msg : bytes
            Message.

        Returns
        -------
        SchnorrSignature
            (e, s) with  e = H(r·g, m)  and  s = r − sk·e.
        """
        r = Nonce.fresh()
        R = non_identity(r.commit(), "Schnorr nonce commitment")
        e = self.challenge(R, msg)
        return SchnorrSignature(e=e, s=r.take() - sk * e)

    def verify(self, pk: Point, msg: bytes, sig: SchnorrSignature) -> bool:
        R = (sig.s * G) + (sig.e * pk)
        if R.is_inf():
            return False
        return self.challenge(R, msg) == sig.e

    def consistent(self, gs: Point, e: Scalar, pk: Point, msg: bytes) -> bool:
        """
        Public half of verification:  e == H(gs + e·pk, m).

        True for every honest signature when  gs = s·g.  On its own it
        proves nothing, since (gs, e) pairs satisfying it are easy to
        forge; the proofs add knowledge of  log_g(gs).
        """
        return self.challenge(gs + (e * pk), msg) == e
