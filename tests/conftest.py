# pytest configuration and fixtures

"""
Test Configuration

Hypothesis profiles are selected with HYPOTHESIS_PROFILE (default: dev).
Every group operation goes through libsecp256k1, so examples are cheap,
but the exchange-level properties still run a full protocol per example.

To reproduce a failing test:
  pytest tests/test_adaptor.py --hypothesis-seed=12345
"""

import os

import pytest
from hypothesis import settings, Phase

from sigswap.curve import Scalar, G
from sigswap.hash import SHA256, SHA3_256, BLAKE2S
from sigswap.orproof import OrProof
from sigswap.proofs import sample_signature_witness

settings.register_profile(
    "ci",
    max_examples=100,
    deadline=None,
    phases=[Phase.explicit, Phase.reuse, Phase.generate, Phase.shrink],
    print_blob=True,
)

settings.register_profile(
    "dev",
    max_examples=20,
    deadline=None,
)

settings.register_profile(
    "extensive",
    max_examples=500,
    deadline=None,
)

profile = os.environ.get("HYPOTHESIS_PROFILE", "dev")
settings.load_profile(profile)


@pytest.fixture(params=[SHA256, SHA3_256, BLAKE2S], ids=lambda s: s.name)
def suite(request):
    """every scheme must work under each supported hash suite."""
    return request.param


@pytest.fixture
def signature_witness(suite):
    return sample_signature_witness(suite, message=b"notarised document")


@pytest.fixture
def or_setup(suite):
    """OR proof system, fresh CRS, and an honest branch-1 instance."""
    nizk = OrProof(suite)
    crs = nizk.crs_gen()
    w, x = nizk.relation.sample(crs)
    return nizk, crs, w, x


@pytest.fixture
def random_point():
    return Scalar.random() * G
