"""
Schnorr adaptor signatures keyed on the discrete-log relation.

A pre-signature on *m* for statement  x = w·g  is a Schnorr signature
whose nonce commitment has been shifted by *x*:

    pre_sign:    r ←$ Z_q,  R' = r·g + x  (even y),  e = H(pk, R', m),  z = r + sk·e
    pre_verify:  R'' = z·g − e·pk + x,     accept iff  e == H(pk, R'', m)
    adapt:       z' = z + w                → signature (e, z')
    verify:      R = z'·g − e·pk,           accept iff  e == H(pk, R, m)
    extract:     w' = z' − z               (absent when zero)

Adapting requires *w*; publishing the adapted signature next to the
pre-signature reveals *w* to everyone.  Plain ``sign`` produces the
same (e, z) shape with  R = r·g,  so plain and adapted signatures go
through one ``verify``.

The challenge hashes R' by its x-coordinate only, so both R' and −R'
would satisfy it.  ``pre_sign`` and ``sign`` redraw *r* until the
commitment has even y, and both verifiers reject an odd R''.  Without
that rule the mirror statement  x* = −(z·g − e·pk + x) − (z·g − e·pk)
gives R'' = −R' and a pre-signature would verify for a second
statement whose witness nobody knows.

Extraction returns an ``Extracted`` result instead of ``None`` so that
the presence flag is computed with ``hmac.compare_digest`` on the
encoded difference rather than by branching on its value.  Python's
integer arithmetic is not constant time, so this is best effort only.

References
----------
- Aumayr, Ersoy, Erwig, Faust, Hostáková, Maffei, Moreno-Sanchez,
  Riahi (2021). "Generalized Channels from Limited Blockchain
  Scripts and Adaptor Signatures."  ASIACRYPT 2021.
"""

from __future__ import annotations

import hmac
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Generic, Optional, Tuple, TypeVar

from .curve import Scalar, Point, G, SCALAR_BYTES, even_y_commitment
from .encoding import encode_all
from .errors import ExtractionFailure
from .hash import HashSuite, Transcript, DEFAULT_SUITE, TAG_ADAPTOR
from .relation import DLogRelation

SK = TypeVar("SK")
PK = TypeVar("PK")
X = TypeVar("X")
W = TypeVar("W")
PS = TypeVar("PS")
S = TypeVar("S")

_ZERO = b"\x00" * SCALAR_BYTES


# ── result of extraction ────────────────────────────────────────────────

@dataclass(frozen=True)
class Extracted:
    """Optional witness: ``value`` is meaningful only when ``present``."""

    value: Scalar
    present: bool

    def __bool__(self) -> bool:
        return self.present

    def unwrap(self) -> Scalar:
        if not self.present:
            raise ExtractionFailure("no witness: signature was not adapted")
        return self.value

    def unwrap_or(self, default: Optional[Scalar] = None) -> Optional[Scalar]:
        return self.value if self.present else default


# ── interface ───────────────────────────────────────────────────────────

class AdaptorSignatureScheme(ABC, Generic[SK, PK, X, W, PS, S]):
    """Adaptor signature scheme w.r.t. a hard relation."""

    @abstractmethod
    def gen(self) -> Tuple[SK, PK]:
        ...

    @abstractmethod
    def pre_sign(self, sk: SK, msg: bytes, x: X) -> PS:
        ...

    @abstractmethod
    def pre_verify(self, pk: PK, msg: bytes, x: X, presig: PS) -> bool:
        ...

    @abstractmethod
    def adapt(self, pk: PK, presig: PS, w: W) -> S:
        ...

    @abstractmethod
    def sign(self, sk: SK, msg: bytes) -> S:
        ...

    @abstractmethod
    def verify(self, pk: PK, msg: bytes, sig: S) -> bool:
        ...

    @abstractmethod
    def extract(self, pk: PK, presig: PS, sig: S) -> Extracted:
        ...


# ── Schnorr instantiation ───────────────────────────────────────────────

@dataclass(frozen=True)
class PreSignature:
    """
    Pre-signature  (e, z).  Encoding: e ‖ z.
    """

    e: Scalar
    z: Scalar

    def to_bytes(self) -> bytes:
        return encode_all((self.e, self.z))


@dataclass(frozen=True)
class Signature:
    """
    Schnorr signature  (e, z).  Encoding: e ‖ z.
    """

    e: Scalar
    z: Scalar

    def to_bytes(self) -> bytes:
        return encode_all((self.e, self.z))


class SchnorrAdaptorSignature(
    AdaptorSignatureScheme[Scalar, Point, Point, Scalar, PreSignature, Signature]
):
    """Adaptor signatures over secp256k1 with an injected hash suite."""

    def __init__(self, suite: HashSuite = DEFAULT_SUITE) -> None:
        self.suite = suite
        self.relation = DLogRelation()

    def _challenge(self, pk: Point, R: Point, msg: bytes) -> Scalar:  # noqa: N803
        return (
            Transcript(TAG_ADAPTOR, self.suite)
            .points(pk, R)
            .message(msg)
            .challenge()
        )

    def gen(self) -> Tuple[Scalar, Point]:
        return self.relation.sample(G)

    def pre_sign(self, sk: Scalar, msg: bytes, x: Point) -> PreSignature:
        """
        Pre-sign *msg* under *sk* for the statement *x*.

        Parameters
        ----------
        sk : Scalar
            Signing key.
        msg : bytes
            Message, hashed as a length-prefixed field.
        x : Point
            Adaptor statement  x = w·g.

        Returns
        -------
        PreSignature
            (e, z) whose shifted commitment  R' = r·g + x  has even y.

        Raises
        ------
        ConstructionInvariantViolation
            If R' is the identity.
        """
        pk = self.relation.statement(G, sk)
        nonce, R = even_y_commitment(x, "adaptor-shifted nonce commitment")
        e = self._challenge(pk, R, msg)
        return PreSignature(e=e, z=nonce.take() + sk * e)

    def pre_verify(
        self, pk: Point, msg: bytes, x: Point, presig: PreSignature,
    ) -> bool:
        """
        Check *presig* against *pk*, *msg* and the statement *x*.

        Returns
        -------
        bool
            False when the recomputed R'' is the identity, has odd y or
            does not hash to ``presig.e``.
        """
        R = (presig.z * G) - (presig.e * pk) + x
        if R.is_inf() or R.y_is_odd:
            return False
        return self._challenge(pk, R, msg) == presig.e

    def adapt(self, pk: Point, presig: PreSignature, w: Scalar) -> Signature:
        return Signature(e=presig.e, z=presig.z + w)

    def sign(self, sk: Scalar, msg: bytes) -> Signature:
        pk = self.relation.statement(G, sk)
        nonce, R = even_y_commitment()
        e = self._challenge(pk, R, msg)
        return Signature(e=e, z=nonce.take() + sk * e)

    def verify(self, pk: Point, msg: bytes, sig: Signature) -> bool:
        R = (sig.z * G) - (sig.e * pk)
        if R.is_inf() or R.y_is_odd:
            return False
        return self._challenge(pk, R, msg) == sig.e

    def extract(
        self, pk: Point, presig: PreSignature, sig: Signature,
    ) -> Extracted:
        diff = sig.z - presig.z
        absent = hmac.compare_digest(diff.to_bytes(), _ZERO)
        return Extracted(value=diff, present=not absent)
