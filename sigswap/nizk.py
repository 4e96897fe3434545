"""
Non-interactive zero-knowledge proofs (Fiat-Shamir'd sigma protocols).

Contract::

    crs_gen()            -> CRS
    prove(crs, x, w)     -> proof      assumes R(pp, w, x) holds
    verify(crs, x, proof) -> bool

Every instance in this package runs the same three moves:

1. sample blinding scalars  u_i  and commit  a_i = u_i·base_i;
2. derive  c = H(crs, statement, a_1, …, a_n)  through one
   ``_challenge`` helper shared by prover and verifier;
3. respond  r_i = u_i + c·w_i.

The verifier recomputes *c* and checks  r_i·base_i == a_i + c·x_i  for
every component.  A proof built without a witness passes with
probability about 1/q per component.

``prove`` does not check the relation: proving a false statement is
undefined behaviour.

References
----------
- Schnorr (1989). "Efficient Identification and Signatures for Smart
  Cards."  CRYPTO 1989.
- Fiat & Shamir (1986). "How To Prove Yourself."  CRYPTO 1986.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Generic, TypeVar

from .curve import Scalar, Point, G, Nonce
from .encoding import encode_all
from .hash import HashSuite, Transcript, DEFAULT_SUITE, TAG_DLOG
from .relation import HardRelation, DLogRelation

CRS = TypeVar("CRS")
X = TypeVar("X")
W = TypeVar("W")
P = TypeVar("P")


class NIZK(ABC, Generic[CRS, X, W, P]):
    """Interface every proof system implements."""

    relation: HardRelation

    def __init__(self, suite: HashSuite = DEFAULT_SUITE) -> None:
        self.suite = suite

    @abstractmethod
    def crs_gen(self) -> CRS:
        ...

    @abstractmethod
    def prove(self, crs: CRS, x: X, w: W) -> P:
        ...

    @abstractmethod
    def verify(self, crs: CRS, x: X, proof: P) -> bool:
        ...


# ── discrete-log sigma proof ────────────────────────────────────────────

@dataclass(frozen=True)
class DLogProofTranscript:
    """
    Proof  (a, r)  that the prover knows  w  with  x = w·g.

    Encoding: a ‖ r.
    """

    a: Point
    r: Scalar

    def to_bytes(self) -> bytes:
        return encode_all((self.a, self.r))


class DLogProof(NIZK[Point, Point, Scalar, DLogProofTranscript]):
    """
    Schnorr proof of knowledge of a discrete logarithm.

    The CRS is the base point *g*:

        u ←$ Z_q,   a = u·g,   c = H(g, x, a),   r = u + c·w
        verify:     r·g == a + c·x
    """

    relation = DLogRelation()

    def crs_gen(self) -> Point:
        return G

    def _challenge(self, crs: Point, x: Point, a: Point) -> Scalar:
        return Transcript(TAG_DLOG, self.suite).points(crs, x, a).challenge()

    def prove(self, crs: Point, x: Point, w: Scalar) -> DLogProofTranscript:
        """
        Prove knowledge of *w* with  x = w·crs.

        Parameters
        ----------
        crs : Point
            Base point.
        x : Point
            Statement.
        w : Scalar
            Witness; a wrong one yields a proof that does not verify.

        Returns
        -------
        DLogProofTranscript
            Commitment *a* and response *r*.
        """
        u = Nonce.fresh()
        a = u.commit(crs)
        c = self._challenge(crs, x, a)
        return DLogProofTranscript(a=a, r=u.take() + c * w)

    def verify(self, crs: Point, x: Point, proof: DLogProofTranscript) -> bool:
        c = self._challenge(crs, x, proof.a)
        return proof.r * crs == proof.a + (c * x)
