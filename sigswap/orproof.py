"""
Disjunctive ("OR") proof binding an adaptor point to a notary signature.

Statement  (x, pk, gs, e, m)  with CRS  (g, h).  The prover knows a
witness for ONE of

    branch 1:   gs == s·g  ∧  e == H(gs + e·pk, m)  ∧  x == w·g
    branch 2:   x == w·h

and the proof does not reveal which.  Honest sellers always use
branch 1; branch 2 exists so that the proof is zero-knowledge with
respect to *s*, since a simulator that knows  log_g(h)  can prove any
statement through it.

Construction (Cramer–Damgård–Schoenmakers)
------------------------------------------
For the FALSE branch the prover first picks its sub-challenge
c_false ←$ Z_q and back-solves commitments that satisfy the
verification equations for that challenge:

    a = r·base − c_false·y          (r ←$ Z_q)

For the TRUE branch it commits honestly,  a = u·base.  With

    c = H(g, h, x, pk, gs, e, m, a_g, a_sig, a_h)

it sets  c_true = c − c_false  and answers  r = u + c_true·witness.

Verification::

    c == c1 + c2
    e == H(gs + e·pk, m)
    r_sig·g == a_sig + c1·gs
    r_g·g   == a_g   + c1·x
    r_h·h   == a_h   + c2·x

A simulated branch is distributed exactly like an honest one, which is
what makes the two cases indistinguishable.

CRS
---
*h* must have a discrete log w.r.t. *g* unknown to both parties.  It is
set up with a two-message Diffie-Hellman exchange: party A sends
h1 = α·g, party B answers  h = β·h1.  ``crs_gen`` runs both halves in
one process; ``crs_request`` / ``crs_respond`` / ``crs_accept`` split
them between two roles.

References
----------
- Cramer, Damgård, Schoenmakers (1994). "Proofs of Partial Knowledge
  and Simplified Design of Witness Hiding Protocols."  CRYPTO 1994.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Tuple

from .curve import Scalar, Point, G, Nonce, non_identity
from .encoding import encode_all, encode_point
from .errors import ConstructionInvariantViolation
from .hash import HashSuite, Transcript, DEFAULT_SUITE, TAG_OR_SIG
from .nizk import NIZK
from .proofs import SignatureWitness, sample_signature_witness
from .relation import HardRelation
from .schnorr import SchnorrSignatureScheme

logger = logging.getLogger(__name__)


# ── CRS ─────────────────────────────────────────────────────────────────

@dataclass(frozen=True)
class Crs:
    """Common reference string  (g, h)."""

    g: Point
    h: Point

    def __post_init__(self) -> None:
        non_identity(self.g, "CRS generator g")
        non_identity(self.h, "CRS generator h")
        if self.g == self.h:
            raise ConstructionInvariantViolation("CRS generators coincide")

    def transcript_items(self) -> Tuple[Point, Point]:
        return (self.g, self.h)


def crs_request() -> Point:
    """Party A: send  h1 = α·g  (α is discarded)."""
    h1 = non_identity(Nonce.fresh().commit(), "CRS request")
    logger.debug("CRS request: %d bytes", len(encode_point(h1)))
    return h1


def crs_respond(h1: Point) -> Crs:
    """Party B: answer with  h = β·h1  and adopt  (g, h)."""
    non_identity(h1, "CRS request")
    h = non_identity(Nonce.fresh().commit(h1), "CRS response")
    logger.debug("CRS response: %d bytes", len(encode_point(h)))
    return Crs(g=G, h=h)


def crs_accept(h: Point) -> Crs:
    """Party A: adopt the CRS from B's response."""
    return Crs(g=G, h=h)


# ── statement ───────────────────────────────────────────────────────────

@dataclass(frozen=True)
class OrStatement:
    """
    Public instance  (x, pk, gs, e, m).

    Encoding: x ‖ pk ‖ gs ‖ e ‖ m.
    """

    x: Point
    pk: Point
    gs: Point
    e: Scalar
    msg: bytes

    def transcript_items(self) -> tuple:
        return (self.x, self.pk, self.gs, self.e, self.msg)

    def to_bytes(self) -> bytes:
        return encode_all(self.transcript_items())


class OrRelation(HardRelation[Crs, SignatureWitness, OrStatement]):
    """The disjunction described in the module docstring; pp is the CRS."""

    def __init__(self, suite: HashSuite = DEFAULT_SUITE) -> None:
        self.suite = suite
        self.signatures = SchnorrSignatureScheme(suite)

    def R(self, pp: Crs, w: SignatureWitness, x: OrStatement) -> bool:  # noqa: N802
        b1 = (
            x.gs == w.s * pp.g
            and self.signatures.consistent(x.gs, x.e, x.pk, x.msg)
        )
        b2 = w.w * pp.g == x.x
        b3 = w.w * pp.h == x.x
        return (b1 and b2) or b3

    def statement(self, pp: Crs, w: SignatureWitness) -> OrStatement:
        """Branch-1 statement for a signature witness."""
        return OrStatement(
            x=w.w * pp.g,
            pk=w.public_key,
            gs=w.s * pp.g,
            e=w.signature.e,
            msg=w.message,
        )

    def sample(self, pp: Crs) -> Tuple[SignatureWitness, OrStatement]:
        w = sample_signature_witness(self.suite)
        return w, self.statement(pp, w)


# ── proof ───────────────────────────────────────────────────────────────

@dataclass(frozen=True)
class OrProofTranscript:
    """
    Transcript  ((a_g, a_sig, a_h), (r_g, r_sig, r_h), (c1, c2)).

    Encoding: a_g ‖ a_sig ‖ a_h ‖ r_g ‖ r_sig ‖ r_h ‖ c1 ‖ c2.
    """

    a_g: Point
    a_sig: Point
    a_h: Point
    r_g: Scalar
    r_sig: Scalar
    r_h: Scalar
    c1: Scalar
    c2: Scalar

    def to_bytes(self) -> bytes:
        return encode_all((
            self.a_g, self.a_sig, self.a_h,
            self.r_g, self.r_sig, self.r_h,
            self.c1, self.c2,
        ))


class OrProof(NIZK[Crs, OrStatement, SignatureWitness, OrProofTranscript]):
    """CDS OR-proof over the signature branch and the *h* branch."""

    def __init__(self, suite: HashSuite = DEFAULT_SUITE) -> None:
        super().__init__(suite)
        self.relation = OrRelation(suite)

    def crs_gen(self) -> Crs:
        """Run both halves of the Diffie-Hellman CRS setup locally."""
        return crs_respond(crs_request())

    def _challenge(
        self,
        crs: Crs,
        x: OrStatement,
        a_g: Point,
        a_sig: Point,
        a_h: Point,
    ) -> Scalar:
        return (
            Transcript(TAG_OR_SIG, self.suite)
            .append(crs.transcript_items())
            .append(x.transcript_items())
            .points(a_g, a_sig, a_h)
            .challenge()
        )

    def prove(
        self, crs: Crs, x: OrStatement, w: SignatureWitness,
    ) -> OrProofTranscript:
        """
        Prove  R_sig(x, gs, pk, m) ∨ (x = w·h)  for whichever branch *w*
        satisfies; the other branch is simulated.

        Parameters
        ----------
        crs : Crs
            Generators (g, h) from the Diffie-Hellman setup.
        x : OrStatement
            Adaptor point, signature commitment, notary key and message.
        w : SignatureWitness
            (w, s) for branch 1, or (w, anything) with  x = w·h  for
            branch 2.

        Returns
        -------
        OrProofTranscript
            Commitments, responses and the split challenge  c1 + c2 = c.
        """
        g, h = crs.g, crs.h
        u_g, u_sig, u_h =Nonce.fresh(), Nonce.fresh(), Nonce.fresh()
        c_false = Scalar.random()

        if w.w * g == x.x:
            # branch 1 true, branch 2 simulated
            c2 = c_false
            r_h = u_h.take()
            a_g = u_g.commit(g)
            a_sig = u_sig.commit(g)
            a_h = (r_h * h) - (c2 * x.x)
            c = self._challenge(crs, x, a_g, a_sig, a_h)
            c1 = c - c2
            r_g = u_g.take() + c1 * w.w
            r_sig = u_sig.take() + c1 * w.s
        else:
            # branch 2 true, branch 1 simulated
            c1 = c_false
            r_g = u_g.take()
            r_sig = u_sig.take()
            a_g = (r_g * g) - (c1 * x.x)
            a_sig = (r_sig * g) - (c1 * x.gs)
            a_h = u_h.commit(h)
            c = self._challenge(crs, x, a_g, a_sig, a_h)
            c2 = c - c1
            r_h = u_h.take() + c2 * w.w

        return OrProofTranscript(
            a_g=a_g, a_sig=a_sig, a_h=a_h,
            r_g=r_g, r_sig=r_sig, r_h=r_h,
            c1=c1, c2=c2,
        )

    def verify(self, crs: Crs, x: OrStatement, proof: OrProofTranscript) -> bool:
        g, h = crs.g, crs.h
        c = self._challenge(crs, x, proof.a_g, proof.a_sig, proof.a_h)
        return (
            c == proof.c1 + proof.c2
            and self.relation.signatures.consistent(x.gs, x.e, x.pk, x.msg)
            and proof.r_sig * g == proof.a_sig + (proof.c1 * x.gs)
            and proof.r_g * g == proof.a_g + (proof.c1 * x.x)
            and proof.r_h * h == proof.a_h + (proof.c2 * x.x)
        )
