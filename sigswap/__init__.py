"""
sigswap: zero-knowledge proofs and adaptor signatures on secp256k1, and
a fair exchange of a notarised signature for a payment built from them.

- **Hard relations** and **Fiat-Shamir NIZKs** with one shared
  transcript builder
- **OR proofs** (Cramer–Damgård–Schoenmakers) binding an adaptor point
  to a notary signature
- **Schnorr adaptor signatures** with non-branching extraction
- **Fair exchange** between a notary, a seller and a buyer, with no
  trusted escrow

Quick start
-----------
::

    from sigswap import FairExchange, G

    result = FairExchange().run()
    assert result.witness * G == result.offer.statement.x
"""

__version__ = "0.1.0"

# ── core types ──────────────────────────────────────────────────────────
from .curve import Scalar, Point, G, ORDER, CURVE_NAME, Nonce

# ── errors ──────────────────────────────────────────────────────────────
from .errors import (
    SigswapError,
    ConstructionInvariantViolation,
    NonceReuseError,
    VerificationFailure,
    ExtractionFailure,
    ConfigError,
)

# ── hashing ─────────────────────────────────────────────────────────────
from .hash import (
    HashSuite,
    Transcript,
    SHA256,
    SHA3_256,
    BLAKE2S,
    DEFAULT_SUITE,
)

# ── relations & proofs ──────────────────────────────────────────────────
from .relation import HardRelation, DLogRelation
from .nizk import NIZK, DLogProof, DLogProofTranscript
from .proofs import (
    SignatureWitness,
    SignatureKnowledgeStatement,
    SignatureKnowledgeRelation,
    SignatureKnowledgeProof,
    SignatureKnowledgeProofTranscript,
)
from .orproof import (
    Crs,
    OrStatement,
    OrRelation,
    OrProof,
    OrProofTranscript,
    crs_request,
    crs_respond,
    crs_accept,
)

# ── signatures ──────────────────────────────────────────────────────────
from .schnorr import SignatureScheme, SchnorrSignature, SchnorrSignatureScheme
from .ecdsa import EcdsaSignature, EcdsaSignatureScheme
from .adaptor import (
    AdaptorSignatureScheme,
    SchnorrAdaptorSignature,
    PreSignature,
    Signature,
    Extracted,
)

# ── encryption ──────────────────────────────────────────────────────────
from .encryption import ElGamal, ElGamalCiphertext, OneTimePad

# ── exchange ────────────────────────────────────────────────────────────
from .config import ExchangeConfig
from .exchange import (
    FairExchange,
    ExchangeResult,
    Notary,
    Seller,
    Buyer,
    Notarization,
    Offer,
    PaymentLock,
    PaymentClaim,
    StepTimings,
)

__all__ = [
    "__version__",
    # core
    "Scalar", "Point", "G", "ORDER", "CURVE_NAME", "Nonce",
    # errors
    "SigswapError", "ConstructionInvariantViolation", "NonceReuseError",
    "VerificationFailure", "ExtractionFailure", "ConfigError",
    # hashing
    "HashSuite", "Transcript", "SHA256", "SHA3_256", "BLAKE2S",
    "DEFAULT_SUITE",
    # relations & proofs
    "HardRelation", "DLogRelation",
    "NIZK", "DLogProof", "DLogProofTranscript",
    "SignatureWitness", "SignatureKnowledgeStatement",
    "SignatureKnowledgeRelation", "SignatureKnowledgeProof",
    "SignatureKnowledgeProofTranscript",
    "Crs", "OrStatement", "OrRelation", "OrProof", "OrProofTranscript",
    "crs_request", "crs_respond", "crs_accept",
    # signatures
    "SignatureScheme", "SchnorrSignature", "SchnorrSignatureScheme",
    "EcdsaSignature", "EcdsaSignatureScheme",
    "AdaptorSignatureScheme", "SchnorrAdaptorSignature",
    "PreSignature", "Signature", "Extracted",
    # encryption
    "ElGamal", "ElGamalCiphertext", "OneTimePad",
    # exchange
    "ExchangeConfig", "FairExchange", "ExchangeResult",
    "Notary", "Seller", "Buyer",
    "Notarization", "Offer", "PaymentLock", "PaymentClaim", "StepTimings",
]
