"""
Proof of knowledge of a notarised Schnorr signature.

The seller holds a notary signature  σ = (e, s)  on message *m* under
the notary key *pk*, plus a fresh secret *w*.  The statement publishes

    gs = s·g,   x = w·g,   ct = s + w,   pk,   e,   m

and the relation asserts

    x == w·g   ∧   gs == s·g   ∧   ct·g == x + gs   ∧   e == H(gs + e·pk, m)

i.e. *gs* commits to the response of a valid signature and *ct* is the
signature scalar blinded by *w*.  Whoever later learns *w* (for example
by extracting it from an adaptor signature) recovers  s = ct − w  and
with it the complete signature.

The NIZK proves knowledge of (s, w) with two Schnorr components sharing
one challenge:

    u1, u2 ←$ Z_q
    a1 = u1·g,   a2 = u2·g
    c  = H(gs, x, pk, e, ct, m, a1, a2)
    r1 = u1 + c·s,   r2 = u2 + c·w

    verify:  ct·g == x + gs,   e == H(gs + e·pk, m),
             r1·g == a1 + c·gs,   r2·g == a2 + c·x

The CRS is empty.
"""

from __future__ import annotations

import secrets
from dataclasses import dataclass
from typing import Optional, Tuple

from .curve import Scalar, Point, G, Nonce
from .encoding import encode_all
from .hash import HashSuite, Transcript, DEFAULT_SUITE, TAG_POK_SIG
from .nizk import NIZK
from .relation import HardRelation
from .schnorr import SchnorrSignature, SchnorrSignatureScheme


# ── witness ─────────────────────────────────────────────────────────────

@dataclass(frozen=True)
class SignatureWitness:
    """
    What the prover holds: a notary signature together with the key and
    message it is valid for, and the secret scalar *w*.

    Only ``signature.s`` and ``w`` are secret.
    """

    public_key: Point
    message: bytes
    signature: SchnorrSignature
    w: Scalar

    @property
    def s(self) -> Scalar:
        return self.signature.s


def sample_signature_witness(
    suite: HashSuite = DEFAULT_SUITE,
    message: Optional[bytes] = None,
) -> SignatureWitness:
    """Fresh notary key, signature on *message* (random if None), fresh w."""
    scheme = SchnorrSignatureScheme(suite)
    sk, pk = scheme.gen()
    if message is None:
        message = secrets.token_bytes(32)
    return SignatureWitness(
        public_key=pk,
        message=message,
        signature=scheme.sign(sk, message),
        w=Scalar.random(),
    )


# ── statement ───────────────────────────────────────────────────────────

@dataclass(frozen=True)
class SignatureKnowledgeStatement:
    """
    Public instance  (gs, x, pk, e, ct, m).

    Encoding: gs ‖ x ‖ pk ‖ e ‖ ct ‖ m.
    """

    gs: Point
    x: Point
    pk: Point
    e: Scalar
    ct: Scalar
    msg: bytes

    def transcript_items(self) -> tuple:
        return (self.gs, self.x, self.pk, self.e, self.ct, self.msg)

    def to_bytes(self) -> bytes:
        return encode_all(self.transcript_items())


class SignatureKnowledgeRelation(
    HardRelation[None, SignatureWitness, SignatureKnowledgeStatement]
):
    """The relation described in the module docstring."""

    def __init__(self, suite: HashSuite = DEFAULT_SUITE) -> None:
        self.suite = suite
        self.signatures = SchnorrSignatureScheme(suite)

    def R(  # noqa: N802
        self,
        pp: None,
        w: SignatureWitness,
        x: SignatureKnowledgeStatement,
    ) -> bool:
        return (
            x.x == w.w * G
            and x.gs == w.s * G
            and x.ct * G == x.x + x.gs
            and self.signatures.consistent(x.gs, x.e, x.pk, x.msg)
        )

    def statement(
        self, pp: None, w: SignatureWitness,
    ) -> SignatureKnowledgeStatement:
        return SignatureKnowledgeStatement(
            gs=w.s * G,
            x=w.w * G,
            pk=w.public_key,
            e=w.signature.e,
            ct=w.s + w.w,
            msg=w.message,
        )

    def sample(
        self, pp: None = None,
    ) -> Tuple[SignatureWitness, SignatureKnowledgeStatement]:
        w = sample_signature_witness(self.suite)
        return w, self.statement(pp, w)


# ── proof ───────────────────────────────────────────────────────────────

@dataclass(frozen=True)
class SignatureKnowledgeProofTranscript:
    """
    Transcript  ((a1, a2), (r1, r2)).

    Encoding: a1 ‖ a2 ‖ r1 ‖ r2.
    """

    a1: Point
    a2: Point
    r1: Scalar
    r2: Scalar

    def to_bytes(self) -> bytes:
        return encode_all((self.a1, self.a2, self.r1, self.r2))


class SignatureKnowledgeProof(
    NIZK[
        None,
        SignatureKnowledgeStatement,
        SignatureWitness,
        SignatureKnowledgeProofTranscript,
    ]
):
    """Fiat-Shamir proof of knowledge of (s, w) for the relation above."""

    def __init__(self, suite: HashSuite = DEFAULT_SUITE) -> None:
        super().__init__(suite)
        self.relation = SignatureKnowledgeRelation(suite)

    def crs_gen(self) -> None:
        return None

    def _challenge(
        self,
        crs: None,
        x: SignatureKnowledgeStatement,
        a1: Point,
        a2: Point,
    ) -> Scalar:
        return (
            Transcript(TAG_POK_SIG, self.suite)
            .append(x.transcript_items())
            .points(a1, a2)
            .challenge()
        )

    def prove(
        self,
        crs: None,
        x: SignatureKnowledgeStatement,
        w: SignatureWitness,
    ) -> SignatureKnowledgeProofTranscript:
        """
        Prove knowledge of  s = log_g(gs)  and  w = log_g(x).

        Parameters
        ----------
        crs : None
            Unused; the proof needs no setup.
        x : SignatureKnowledgeStatement
            Public instance.
        w : SignatureWitness
            Notary signature and blinding scalar.

        Returns
        -------
        SignatureKnowledgeProofTranscript
            Commitments  a1 = u1·g,  a2 = u2·g  and responses
            r1 = u1 + c·s,  r2 = u2 + c·w.
        """
        u1, u2 = Nonce.fresh(), Nonce.fresh()
        a1 = u1.commit()
        a2 = u2.commit()
        c = self._challenge(crs, x, a1, a2)
        return SignatureKnowledgeProofTranscript(
            a1=a1, a2=a2, r1=u1.take() + c * w.s, r2=u2.take() + c * w.w,
        )

    def verify(
        self,
        crs: None,
        x: SignatureKnowledgeStatement,
        proof: SignatureKnowledgeProofTranscript,
    ) -> bool:
        c = self._challenge(crs, x, proof.a1, proof.a2)
        return (
            x.ct * G == x.x + x.gs
            and self.relation.signatures.consistent(x.gs, x.e, x.pk, x.msg)
            and proof.r1 * G == proof.a1 + (c * x.gs)
            and proof.r2 * G == proof.a2 + (c * x.x)
        )
