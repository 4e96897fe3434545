"""
Fair exchange of a notarised signature for a payment.

Five sequential steps between three roles::

    Notary ──σ──▶ Seller (S1) ──offer──▶ Buyer (B1) ──lock──▶ Seller (S2)
                                                                  │
                               Buyer (B2) ◀──published signature──┘

S1  The seller samples  (w, x = w·g),  binds *x* to the notary signature
    in an OR statement and proves it (:mod:`sigswap.orproof`).
B1  The buyer verifies the proof, signs and publishes the lock
    transaction, and pre-signs the pay transaction with adaptor point
    *x* (:mod:`sigswap.adaptor`).
S2  The seller pre-verifies, adapts with *w* and publishes the
    signature; publishing is the only way to claim the payment.
B2  The buyer extracts *w* from (pre-signature, published signature).

Fairness is algebraic: the seller cannot claim the payment without
publishing a signature from which *w* is extractable, and the buyer
cannot finalise the pay signature without *w*.

Before the offer the buyer and seller run the two-message Diffie-Hellman
CRS setup, so neither one alone fixes  log_g(h).  The S1 timing covers
the notary signature, the CRS setup and the offer.

Every failed check raises ``VerificationFailure`` (or
``ExtractionFailure`` in B2) and aborts the run.  Roles keep no state
between runs; a failed run is repeated from scratch.

Usage
-----
::

    from sigswap import FairExchange, G

    result = FairExchange().run()
    assert result.witness * G == result.offer.statement.x
"""

from __future__ import annotations

import logging
import time
from dataclasses import dataclass
from typing import Optional, Union

from .adaptor import PreSignature, SchnorrAdaptorSignature, Signature
from .config import ExchangeConfig
from .curve import Scalar, Point, G, Nonce
from .ecdsa import EcdsaSignature
from .errors import ExtractionFailure, SigswapError, VerificationFailure
from .hash import HashSuite, DEFAULT_SUITE
from .orproof import (
    Crs,
    OrProof,
    OrProofTranscript,
    OrStatement,
    crs_accept,
    crs_request,
    crs_respond,
)
from .proofs import SignatureWitness
from .relation import DLogRelation
from .schnorr import SchnorrSignature, SchnorrSignatureScheme, SignatureScheme

logger = logging.getLogger(__name__)

STEP_BUYER_LOCK = "buyer-lock"
STEP_SELLER_CLAIM = "seller-claim"
STEP_BUYER_EXTRACT = "buyer-extract"


# ── messages ────────────────────────────────────────────────────────────

@dataclass(frozen=True)
class Notarization:
    """The notary's signature on the agreed message."""

    message: bytes
    public_key: Point
    signature: SchnorrSignature


@dataclass(frozen=True)
class Offer:
    """Seller → buyer: OR statement and its proof."""

    statement: OrStatement
    proof: OrProofTranscript

    def to_bytes(self) -> bytes:
        return self.proof.to_bytes() + self.statement.to_bytes()


@dataclass(frozen=True)
class PaymentLock:
    """
    Buyer's B1 output: the published lock signature and the pay
    pre-signature sent to the seller.
    """

    lock_signature: Union[SchnorrSignature, EcdsaSignature]
    pre_signature: PreSignature


@dataclass(frozen=True)
class PaymentClaim:
    """Seller's published pay signature."""

    signature: Signature

    def to_bytes(self) -> bytes:
        return self.signature.to_bytes()


@dataclass(frozen=True)
class StepTimings:
    """Wall-clock duration of each timed step, in nanoseconds."""

    seller_offer: int
    buyer_lock: int
    seller_claim: int
    buyer_extract: int

    def as_row(self) -> str:
        return (
            f"{self.seller_offer}, {self.buyer_lock}, "
            f"{self.seller_claim}, {self.buyer_extract}\n"
        )


@dataclass(frozen=True)
class ExchangeResult:
    """Everything exchanged during one successful run."""

    notarization: Notarization
    crs: Crs
    offer: Offer
    lock: PaymentLock
    claim: PaymentClaim
    witness: Scalar
    timings: StepTimings


# ── roles ───────────────────────────────────────────────────────────────

class Notary:
    """Trust anchor: signs the agreed message with plain Schnorr."""

    def __init__(self, suite: HashSuite = DEFAULT_SUITE) -> None:
        self._scheme = SchnorrSignatureScheme(suite)
        self._sk, self.public_key = self._scheme.gen()

    def notarize(self, message: bytes) -> Notarization:
        """
        Sign *message* under the notary key.

        Parameters
        ----------
        message : bytes
            The agreed message.

        Returns
        -------
        Notarization
            Message, notary public key and Schnorr signature.
        """
        return Notarization(
            message=message,
            public_key=self.public_key,
            signature=self._scheme.sign(self._sk, message),
        )


class Seller:
    """
    Holds the notarised signature and sells it.

    Lifecycle per run:
    1. ``respond_crs(request)``  → CRS response *h*
    2. ``offer(notarization)``   → ``Offer``           (S1)
    3. ``claim(...)``            → ``PaymentClaim``    (S2)
    """

    def __init__(self, suite: HashSuite = DEFAULT_SUITE) -> None:
        self._nizk = OrProof(suite)
        self._adaptor = SchnorrAdaptorSignature(suite)
        self._dlog = DLogRelation()
        self._crs: Optional[Crs] = None
        self._witness: Optional[Nonce] = None
        self._x: Optional[Point] = None

    def respond_crs(self, request: Point) -> Point:
        self._crs = crs_respond(request)
        return self._crs.h

    def offer(self, notarization: Notarization) -> Offer:
        """
        S1: sample (w, x), build the OR statement and prove it.

        Parameters
        ----------
        notarization : Notarization
            The signature being sold.

        Returns
        -------
        Offer
            OR statement binding  x = w·g  to the signature, and its proof.

        Raises
        ------
        RuntimeError
            If the CRS is missing or an earlier offer is still unclaimed.
        """
        if self._crs is None:
            raise RuntimeError("no CRS; call respond_crs() first")
        if self._witness is not None and not self._witness.used:
            raise RuntimeError("an offer is already outstanding")

        w, x = self._dlog.sample(self._crs.g)
        witness = SignatureWitness(
            public_key=notarization.public_key,
            message=notarization.message,
            signature=notarization.signature,
            w=w,
        )
        statement = self._nizk.relation.statement(self._crs, witness)
        proof = self._nizk.prove(self._crs, statement, witness)

        self._witness, self._x = Nonce(w), x
        offer = Offer(statement=statement, proof=proof)
        logger.debug("seller sends %d bytes", len(offer.to_bytes()))
        return offer

    def claim(
        self,
        buyer_pay_key: Point,
        tx_pay: bytes,
        lock: PaymentLock,
    ) -> PaymentClaim:
        """
        S2: pre-verify, adapt with w, verify, publish.

        *w* is released at most once per offer.

        Parameters
        ----------
        buyer_pay_key : Point
            Key the buyer pre-signed the pay transaction with.
        tx_pay : bytes
            Pay transaction.
        lock : PaymentLock
            The buyer's B1 output.

        Returns
        -------
        PaymentClaim
            The adapted signature to publish.

        Raises
        ------
        VerificationFailure
            If the pre-signature or the adapted signature does not verify.
        NonceReuseError
            If *w* was already released by an earlier claim.
        """
        if self._witness is None or self._x is None:
            raise RuntimeError("no outstanding offer; call offer() first")

        presig = lock.pre_signature
        if not self._adaptor.pre_verify(buyer_pay_key, tx_pay, self._x, presig):
            raise VerificationFailure(STEP_SELLER_CLAIM, "pre_verify")

        signature = self._adaptor.adapt(buyer_pay_key, presig, self._witness.take())
        if not self._adaptor.verify(buyer_pay_key, tx_pay, signature):
            raise VerificationFailure(STEP_SELLER_CLAIM, "verify adapted signature")

        claim = PaymentClaim(signature=signature)
        logger.debug("seller publishes %d bytes", len(claim.to_bytes()))
        return claim


class Buyer:
    """
    Pays for the notarised signature.

    Holds two keys: one for the lock transaction (any plain
    ``SignatureScheme``, Schnorr by default) and one for the pay
    transaction (adaptor scheme).

    Lifecycle per run:
    1. ``request_crs()`` / ``accept_crs(h)``
    2. ``lock(...)``     → ``PaymentLock``   (B1)
    3. ``extract(...)``  → witness *w*       (B2)
    """

    def __init__(
        self,
        suite: HashSuite = DEFAULT_SUITE,
        lock_scheme: Optional[SignatureScheme] = None,
    ) -> None:
        self._nizk = OrProof(suite)
        self._adaptor = SchnorrAdaptorSignature(suite)
        self._lock_scheme = lock_scheme or SchnorrSignatureScheme(suite)
        self._lock_sk, self.lock_key = self._lock_scheme.gen()
        self._pay_sk, self.pay_key = self._adaptor.gen()
        self._crs: Optional[Crs] = None
        self._x: Optional[Point] = None
        self._presig: Optional[PreSignature] = None
        self._tx_pay: Optional[bytes] = None

    def request_crs(self) -> Point:
        return crs_request()

    def accept_crs(self, h: Point) -> Crs:
        self._crs = crs_accept(h)
        return self._crs

    def lock(
        self,
        offer: Offer,
        notary_key: Point,
        notary_message: bytes,
        tx_lock: bytes,
        tx_pay: bytes,
    ) -> PaymentLock:
        """
        B1: verify the offer, lock funds, pre-sign the payment.

        Parameters
        ----------
        offer : Offer
            The seller's S1 message.
        notary_key, notary_message : Point, bytes
            The notarisation the buyer agreed to pay for.
        tx_lock, tx_pay : bytes
            Lock and pay transactions.

        Returns
        -------
        PaymentLock
            Lock signature (published) and pay pre-signature (to the seller).

        Raises
        ------
        VerificationFailure
            If the offer is about another notarisation, its adaptor point
            is the identity, or its OR proof does not verify.
        """
        if self._crs is None:
            raise RuntimeError("no CRS; call accept_crs() first")

        statement = offer.statement
        if statement.pk != notary_key or statement.msg != notary_message:
            raise VerificationFailure(
                STEP_BUYER_LOCK, "statement binding",
                "offer is not about the agreed notarisation",
            )
        if statement.x.is_inf():
            raise VerificationFailure(STEP_BUYER_LOCK, "statement binding",
                                      "adaptor point is the identity")
        if not self._nizk.verify(self._crs, statement, offer.proof):
            raise VerificationFailure(STEP_BUYER_LOCK, "OR proof")

        lock_signature = self._lock_scheme.sign(self._lock_sk, tx_lock)
        if not self._lock_scheme.verify(self.lock_key, tx_lock, lock_signature):
            raise VerificationFailure(STEP_BUYER_LOCK, "lock signature")

        presig = self._adaptor.pre_sign(self._pay_sk, tx_pay, statement.x)
        self._x, self._presig, self._tx_pay = statement.x, presig, tx_pay

        logger.debug("buyer sends %d bytes", len(presig.to_bytes()))
        logger.debug(
            "buyer publishes %d bytes", len(lock_signature.to_bytes()),
        )
        return PaymentLock(lock_signature=lock_signature, pre_signature=presig)

    def extract(self, claim: PaymentClaim) -> Scalar:
        """
        B2: recover w from the published pay signature.

        Returns
        -------
        Scalar
            *w* with  w·g == x.

        Raises
        ------
        VerificationFailure
            If the published signature does not verify.
        ExtractionFailure
            If the signature was not adapted or does not open *x*.
        """
        if self._presig is None or self._x is None or self._tx_pay is None:
            raise RuntimeError("no outstanding pre-signature; call lock() first")

        if not self._adaptor.verify(self.pay_key, self._tx_pay, claim.signature):
            raise VerificationFailure(STEP_BUYER_EXTRACT, "published signature")

        w = self._adaptor.extract(
            self.pay_key, self._presig, claim.signature,
        ).unwrap()
        if w * G != self._x:
            raise ExtractionFailure("extracted value does not open the statement")
        self._presig = None
        return w


# ── orchestration ───────────────────────────────────────────────────────

class FairExchange:
    """
    Runs the complete exchange with fresh roles every time.

    Parameters
    ----------
    config : ExchangeConfig or None
        Messages exchanged; defaults to ``ExchangeConfig()``.
    suite : HashSuite
        Hash function used by every scheme.
    lock_scheme : SignatureScheme or None
        Scheme the buyer signs the lock transaction with.
    """

    def __init__(
        self,
        config: Optional[ExchangeConfig] = None,
        suite: HashSuite = DEFAULT_SUITE,
        lock_scheme: Optional[SignatureScheme] = None,
    ) -> None:
        self.config = config or ExchangeConfig()
        self.suite = suite
        self.lock_scheme = lock_scheme

    def run(self) -> ExchangeResult:
        try:
            return self._run()
        except SigswapError as exc:
            logger.warning("exchange aborted: %s", exc)
            raise

    def _run(self) -> ExchangeResult:
        cfg = self.config
        notary = Notary(self.suite)
        seller = Seller(self.suite)
        buyer = Buyer(self.suite, self.lock_scheme)

        # S1 (notary signature, CRS exchange, offer)
        start = time.perf_counter_ns()
        notarization = notary.notarize(cfg.notary_message_bytes)
        crs = buyer.accept_crs(seller.respond_crs(buyer.request_crs()))
        offer = seller.offer(notarization)
        t_offer = time.perf_counter_ns() - start

        # B1
        start = time.perf_counter_ns()
        lock = buyer.lock(
            offer,
            notary_key=notary.public_key,
            notary_message=cfg.notary_message_bytes,
            tx_lock=cfg.tx_lock_bytes,
            tx_pay=cfg.tx_pay_bytes,
        )
        t_lock = time.perf_counter_ns() - start

        # S2
        start = time.perf_counter_ns()
        claim = seller.claim(buyer.pay_key, cfg.tx_pay_bytes, lock)
        t_claim = time.perf_counter_ns() - start

        # B2
        start = time.perf_counter_ns()
        witness = buyer.extract(claim)
        t_extract = time.perf_counter_ns() - start

        timings = StepTimings(
            seller_offer=t_offer,
            buyer_lock=t_lock,
            seller_claim=t_claim,
            buyer_extract=t_extract,
        )
        logger.info("exchange completed: %s", timings.as_row().strip())
        return ExchangeResult(
            notarization=notarization,
            crs=crs,
            offer=offer,
            lock=lock,
            claim=claim,
            witness=witness,
            timings=timings,
        )
