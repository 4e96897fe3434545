# tests for the notarised-signature fair exchange

import logging
from dataclasses import replace
from types import SimpleNamespace

import pytest

from sigswap import exchange
from sigswap.adaptor import Signature
from sigswap.config import ExchangeConfig
from sigswap.curve import Scalar, G
from sigswap.ecdsa import EcdsaSignature, EcdsaSignatureScheme
from sigswap.errors import (
    ExtractionFailure,
    NonceReuseError,
    SigswapError,
    VerificationFailure,
)
from sigswap.exchange import (
    Buyer,
    FairExchange,
    Notary,
    PaymentClaim,
    PaymentLock,
    Seller,
    StepTimings,
)
from sigswap.schnorr import SchnorrSignature

CFG = ExchangeConfig()


def _start(suite):
    """Notary, seller and buyer with the CRS agreed and an offer made."""
    notary = Notary(suite)
    seller = Seller(suite)
    buyer = Buyer(suite)
    notarization = notary.notarize(CFG.notary_message_bytes)
    buyer.accept_crs(seller.respond_crs(buyer.request_crs()))
    offer = seller.offer(notarization)
    return notary, seller, buyer, notarization, offer


def _lock(buyer, notary, offer):
    return buyer.lock(
        offer,
        notary_key=notary.public_key,
        notary_message=CFG.notary_message_bytes,
        tx_lock=CFG.tx_lock_bytes,
        tx_pay=CFG.tx_pay_bytes,
    )


class TestFairExchange:
    """tests for complete runs."""

    def test_run_completes(self, suite):
        result = FairExchange(suite=suite).run()
        assert result.witness * G == result.offer.statement.x

    def test_offer_binds_notarization(self):
        result = FairExchange().run()
        notarization = result.notarization
        statement = result.offer.statement
        assert statement.pk == notarization.public_key
        assert statement.e == notarization.signature.e
        assert statement.gs == notarization.signature.s * G

    def test_timings_are_positive(self):
        timings = FairExchange().run().timings
        assert isinstance(timings, StepTimings)
        assert timings.seller_offer > 0
        assert timings.buyer_lock > 0
        assert timings.seller_claim > 0
        assert timings.buyer_extract > 0

    def test_notarization_inside_offer_timing(self, monkeypatch):
        events = []
        notarize = Notary.notarize

        def clock():
            events.append("clock")
            return len(events)

        def recording_notarize(self, message):
            events.append("notarize")
            return notarize(self, message)

        monkeypatch.setattr(exchange, "time", SimpleNamespace(perf_counter_ns=clock))
        monkeypatch.setattr(Notary, "notarize", recording_notarize)
        FairExchange().run()
        # S1 starts the clock, then the notary signs
        assert events[:3] == ["clock", "notarize", "clock"]

    def test_ecdsa_lock_scheme(self):
        result = FairExchange(lock_scheme=EcdsaSignatureScheme()).run()
        assert isinstance(result.lock.lock_signature, EcdsaSignature)
        assert result.witness * G == result.offer.statement.x

    def test_runs_are_independent(self):
        fx = FairExchange()
        a, b = fx.run(), fx.run()
        assert a.witness != b.witness
        assert a.crs.h != b.crs.h

    def test_completion_is_logged(self, caplog):
        with caplog.at_level(logging.INFO, logger="sigswap.exchange"):
            FairExchange().run()
        assert "exchange completed" in caplog.text

    def test_custom_messages(self):
        cfg = ExchangeConfig(notary_message="deed #42", tx_lock="lock", tx_pay="pay")
        result = FairExchange(cfg).run()
        assert result.notarization.message == b"deed #42"
        assert result.offer.statement.msg == b"deed #42"


class TestStepTimings:

    def test_row_format(self):
        row = StepTimings(1, 22, 333, 4444).as_row()
        assert row == "1, 22, 333, 4444\n"


class TestBuyerAborts:
    """tests for the buyer rejecting bad offers and claims."""

    def test_offer_for_other_message(self, suite):
        notary, seller, buyer, _, offer = _start(suite)
        with pytest.raises(VerificationFailure, match="statement binding"):
            buyer.lock(
                offer,
                notary_key=notary.public_key,
                notary_message=b"something else",
                tx_lock=CFG.tx_lock_bytes,
                tx_pay=CFG.tx_pay_bytes,
            )

    def test_offer_for_other_notary(self, suite):
        _, seller, buyer, _, offer = _start(suite)
        with pytest.raises(VerificationFailure, match="statement binding"):
            buyer.lock(
                offer,
                notary_key=Notary(suite).public_key,
                notary_message=CFG.notary_message_bytes,
                tx_lock=CFG.tx_lock_bytes,
                tx_pay=CFG.tx_pay_bytes,
            )

    def test_tampered_proof(self, suite):
        notary, _, buyer, _, offer = _start(suite)
        proof = replace(offer.proof, r_g=offer.proof.r_g + Scalar.one())
        with pytest.raises(VerificationFailure, match="OR proof") as exc_info:
            _lock(buyer, notary, replace(offer, proof=proof))
        assert exc_info.value.step == "buyer-lock"

    def test_swapped_adaptor_point(self, suite):
        notary, _, buyer, _, offer = _start(suite)
        statement = replace(offer.statement, x=Scalar.random() * G)
        with pytest.raises(VerificationFailure, match="OR proof"):
            _lock(buyer, notary, replace(offer, statement=statement))

    def test_forged_signature_commitment(self, suite):
        notary, _, buyer, _, offer = _start(suite)
        statement = replace(offer.statement, gs=offer.statement.gs + G)
        with pytest.raises(VerificationFailure):
            _lock(buyer, notary, replace(offer, statement=statement))

    def test_unadapted_claim(self, suite):
        notary, seller, buyer, _, offer = _start(suite)
        lock = _lock(buyer, notary, offer)
        presig = lock.pre_signature
        claim = PaymentClaim(signature=Signature(e=presig.e, z=presig.z))
        with pytest.raises(VerificationFailure, match="published signature"):
            buyer.extract(claim)

    def test_extract_checks_statement(self, suite):
        notary, seller, buyer, _, offer = _start(suite)
        lock = _lock(buyer, notary, offer)
        claim = seller.claim(buyer.pay_key, CFG.tx_pay_bytes, lock)
        buyer._x = buyer._x + G
        with pytest.raises(ExtractionFailure):
            buyer.extract(claim)

    def test_lock_before_crs(self, suite):
        notary, _, _, _, offer = _start(suite)
        with pytest.raises(RuntimeError):
            _lock(Buyer(suite), notary, offer)

    def test_extract_before_lock(self, suite):
        claim = PaymentClaim(signature=Signature(e=Scalar.one(), z=Scalar.one()))
        with pytest.raises(RuntimeError):
            Buyer(suite).extract(claim)


class TestSellerAborts:
    """tests for the seller rejecting bad pre-signatures."""

    def test_tampered_pre_signature(self, suite):
        notary, seller, buyer, _, offer = _start(suite)
        lock = _lock(buyer, notary, offer)
        presig = replace(lock.pre_signature, z=lock.pre_signature.z + Scalar.one())
        with pytest.raises(VerificationFailure, match="pre_verify") as exc_info:
            seller.claim(buyer.pay_key, CFG.tx_pay_bytes, replace(lock, pre_signature=presig))
        assert exc_info.value.step == "seller-claim"

    def test_pre_signature_on_wrong_transaction(self, suite):
        notary, seller, buyer, _, offer = _start(suite)
        lock = _lock(buyer, notary, offer)
        with pytest.raises(VerificationFailure):
            seller.claim(buyer.pay_key, CFG.tx_lock_bytes, lock)

    def test_offer_before_crs(self, suite):
        notarization = Notary(suite).notarize(b"m")
        with pytest.raises(RuntimeError):
            Seller(suite).offer(notarization)

    def test_single_outstanding_offer(self, suite):
        _, seller, _, notarization, _ = _start(suite)
        with pytest.raises(RuntimeError):
            seller.offer(notarization)

    def test_claim_consumes_witness(self, suite):
        notary, seller, buyer, _, offer = _start(suite)
        lock = _lock(buyer, notary, offer)
        seller.claim(buyer.pay_key, CFG.tx_pay_bytes, lock)
        with pytest.raises(NonceReuseError):
            seller.claim(buyer.pay_key, CFG.tx_pay_bytes, lock)

    def test_new_offer_after_claim(self, suite):
        notary, seller, buyer, notarization, offer = _start(suite)
        seller.claim(buyer.pay_key, CFG.tx_pay_bytes, _lock(buyer, notary, offer))
        second = seller.offer(notarization)
        assert second.statement.x != offer.statement.x

    def test_claim_before_offer(self, suite):
        lock = PaymentLock(lock_signature=None, pre_signature=None)
        with pytest.raises(RuntimeError, match="no outstanding offer"):
            Seller(suite).claim(G, CFG.tx_pay_bytes, lock)


class TestAbortLogging:

    def test_aborted_run_is_logged_and_reraised(self, caplog, monkeypatch):
        def reject(self, *args, **kwargs):
            raise VerificationFailure("buyer-lock", "OR proof")

        monkeypatch.setattr(Buyer, "lock", reject)
        with caplog.at_level(logging.WARNING, logger="sigswap.exchange"):
            with pytest.raises(SigswapError):
                FairExchange().run()
        assert "exchange aborted" in caplog.text
        assert "buyer-lock: OR proof failed" in caplog.text


class TestMessages:

    def test_lock_carries_schnorr_signature_by_default(self):
        result = FairExchange().run()
        assert isinstance(result.lock.lock_signature, SchnorrSignature)
        assert isinstance(result.lock, PaymentLock)
        assert len(result.claim.to_bytes()) == 64
