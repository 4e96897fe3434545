# tests for Schnorr adaptor signatures

from dataclasses import replace

import pytest
from hypothesis import given, strategies as st

from sigswap.adaptor import Extracted, SchnorrAdaptorSignature, Signature
from sigswap.curve import Scalar, G
from sigswap.errors import ExtractionFailure
from sigswap.relation import DLogRelation


@pytest.fixture
def setup(suite):
    scheme = SchnorrAdaptorSignature(suite)
    sk, pk = scheme.gen()
    w, x = DLogRelation().sample(G)
    return scheme, sk, pk, w, x


class TestAdaptorRoundTrip:
    """tests for pre_sign → pre_verify → adapt → verify → extract."""

    def test_full_cycle(self, setup):
        scheme, sk, pk, w, x = setup
        presig = scheme.pre_sign(sk, b"tx_pay", x)
        assert scheme.pre_verify(pk, b"tx_pay", x, presig)

        sig = scheme.adapt(pk, presig, w)
        assert scheme.verify(pk, b"tx_pay", sig)

        extracted = scheme.extract(pk, presig, sig)
        assert extracted
        assert extracted.unwrap() == w
        assert extracted.unwrap() * G == x

    @given(st.binary(max_size=128))
    def test_any_message(self, msg):
        scheme = SchnorrAdaptorSignature()
        sk, pk = scheme.gen()
        w, x = DLogRelation().sample(G)
        presig = scheme.pre_sign(sk, msg, x)
        assert scheme.pre_verify(pk, msg, x, presig)
        sig = scheme.adapt(pk, presig, w)
        assert scheme.verify(pk, msg, sig)
        assert scheme.extract(pk, presig, sig).unwrap() == w

    def test_plain_sign_verifies(self, setup):
        scheme, sk, pk, _, _ = setup
        sig = scheme.sign(sk, b"m")
        assert scheme.verify(pk, b"m", sig)
        assert not scheme.verify(pk, b"n", sig)


class TestAdaptorSoundness:
    """tests for rejection of mismatched or tampered values."""

    def test_pre_signature_is_not_a_signature(self, setup):
        scheme, sk, pk, _, x = setup
        presig = scheme.pre_sign(sk, b"m", x)
        assert not scheme.verify(pk, b"m", Signature(e=presig.e, z=presig.z))

    def test_pre_verify_rejects_other_statement(self, setup):
        scheme, sk, pk, _, x = setup
        presig = scheme.pre_sign(sk, b"m", x)
        assert not scheme.pre_verify(pk, b"m", x + G, presig)

    def test_pre_verify_rejects_other_key_or_message(self, setup):
        scheme, sk, pk, _, x = setup
        presig = scheme.pre_sign(sk, b"m", x)
        _, other = scheme.gen()
        assert not scheme.pre_verify(other, b"m", x, presig)
        assert not scheme.pre_verify(pk, b"n", x, presig)

    def test_pre_verify_rejects_tampered_presig(self, setup):
        scheme, sk, pk, _, x = setup
        presig = scheme.pre_sign(sk, b"m", x)
        assert not scheme.pre_verify(pk, b"m", x, replace(presig, z=presig.z + Scalar.one()))

    def test_adapt_with_wrong_witness_fails(self, setup):
        scheme, sk, pk, w, x = setup
        presig = scheme.pre_sign(sk, b"m", x)
        sig = scheme.adapt(pk, presig, w + Scalar.one())
        assert not scheme.verify(pk, b"m", sig)

    def test_unrelated_pairs_do_not_yield_witness(self, setup):
        scheme, sk, pk, w, x = setup
        presig = scheme.pre_sign(sk, b"m", x)
        other = scheme.adapt(pk, scheme.pre_sign(sk, b"m", x), w)
        extracted = scheme.extract(pk, presig, other)
        assert extracted.unwrap_or() != w


class TestCommitmentParity:
    """tests for the even-y rule on nonce commitments."""

    def test_pre_signature_commitment_is_even(self, setup):
        scheme, sk, pk, _, x = setup
        for _ in range(10):
            presig = scheme.pre_sign(sk, b"m", x)
            R = (presig.z * G) - (presig.e * pk) + x
            assert not R.y_is_odd

    def test_mirror_statement_rejected(self, setup):
        # x* gives R'' = -R', which has the same x-coordinate as R'
        scheme, sk, pk, _, x = setup
        for _ in range(10):
            presig = scheme.pre_sign(sk, b"tx_pay", x)
            base = (presig.z * G) - (presig.e * pk)
            x_mirror = -(base + x) - base
            assert (base + x_mirror).x_bytes() == (base + x).x_bytes()
            assert scheme.pre_verify(pk, b"tx_pay", x, presig)
            assert not scheme.pre_verify(pk, b"tx_pay", x_mirror, presig)

    def test_mirror_signature_rejected(self, setup):
        scheme, sk, pk, _, _ = setup
        sig = scheme.sign(sk, b"m")
        # z* = 2·sk·e − z  gives  z*·g − e·pk = −R
        mirrored = Signature(e=sig.e, z=(Scalar(2) * sk * sig.e) - sig.z)
        R = (sig.z * G) - (sig.e * pk)
        assert (mirrored.z * G) - (mirrored.e * pk) == -R
        assert scheme.verify(pk, b"m", sig)
        assert not scheme.verify(pk, b"m", mirrored)

    def test_adapted_signature_keeps_even_commitment(self, setup):
        scheme, sk, pk, w, x = setup
        presig = scheme.pre_sign(sk, b"m", x)
        sig = scheme.adapt(pk, presig, w)
        assert not ((sig.z * G) - (sig.e * pk)).y_is_odd


class TestExtracted:
    """tests for the optional extraction result."""

    def test_unadapted_signature_yields_nothing(self, setup):
        scheme, sk, pk, _, x = setup
        presig = scheme.pre_sign(sk, b"m", x)
        result = scheme.extract(pk, presig, Signature(e=presig.e, z=presig.z))
        assert not result
        assert result.unwrap_or() is None
        with pytest.raises(ExtractionFailure):
            result.unwrap()

    def test_unwrap_or_default(self):
        default = Scalar(9)
        assert Extracted(Scalar.zero(), False).unwrap_or(default) == default
        assert Extracted(Scalar(3), True).unwrap_or(default) == Scalar(3)
