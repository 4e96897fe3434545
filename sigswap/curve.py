"""
secp256k1 group and its scalar field.

Group operations go through ``coincurve`` (libsecp256k1).  A ``Point``
is stored as its 33-byte SEC 1 compressed encoding, which is also what
equality, hashing and negation work on; a ``coincurve.PublicKey`` is
only built when libsecp256k1 has to do arithmetic.

What the rest of the package needs from this module:

- ``Scalar`` arithmetic modulo the group order *q*,
- ``s * P``  (written  s·P  in docstrings; the scalar always goes left),
- point addition, subtraction, negation and equality,
- the 32-byte affine x-coordinate and the y-parity of a point,
- ``Nonce``: secret scalars that can be read exactly once.

Install
-------
    pip install coincurve>=18.0.0

References
----------
- SEC 2 v2 §2.4.1  secp256k1 domain parameters
- SEC 1 v2 §2.3.3  point compression
"""

from __future__ import annotations

import secrets
from typing import Optional, Tuple

from coincurve import PrivateKey as _SK, PublicKey as _PK

from .errors import ConstructionInvariantViolation, NonceReuseError

# ── secp256k1 constants ─────────────────────────────────────────────────
CURVE_NAME = "Secp256k1"
ORDER = 0xFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFEBAAEDCE6AF48A03BBFD25E8CD0364141
SCALAR_BYTES = 32
SEC1_BYTES = 33

_EVEN, _ODD = 0x02, 0x03


# ── Scalar ──────────────────────────────────────────────────────────────
class Scalar:
    """Integer modulo ``ORDER``; immutable."""

    __slots__ = ("_n",)

    def __init__(self, n: int) -> None:
        self._n = n % ORDER

    @classmethod
    def zero(cls) -> Scalar:
        return cls(0)

    @classmethod
    def one(cls) -> Scalar:
        return cls(1)

    @classmethod
    def random(cls) -> Scalar:
        """Uniform non-zero scalar (``secrets.randbelow``)."""
        return cls(1 + secrets.randbelow(ORDER - 1))

    @classmethod
    def from_bytes(cls, data: bytes) -> Scalar:
        """Strict 32-byte big-endian decoding; values >= q are rejected."""
        if len(data) != SCALAR_BYTES:
            raise ValueError(
                f"scalar encoding is {SCALAR_BYTES} bytes, got {len(data)}"
            )
        n = int.from_bytes(data, "big")
        if n >= ORDER:
            raise ValueError("scalar encoding is not reduced modulo q")
        return cls(n)

    @classmethod
    def from_bytes_reduce(cls, data: bytes) -> Scalar:
        """Interpret a digest as a big-endian integer and reduce it."""
        return cls(int.from_bytes(data, "big"))

    def to_bytes(self) -> bytes:
        return self._n.to_bytes(SCALAR_BYTES, "big")

    @property
    def value(self) -> int:
        return self._n

    def is_zero(self) -> bool:
        return not self._n

    def __add__(self, other: Scalar) -> Scalar:
        if isinstance(other, Scalar):
            return Scalar(self._n + other._n)
        return NotImplemented

    def __sub__(self, other: Scalar) -> Scalar:
        if isinstance(other, Scalar):
            return Scalar(self._n - other._n)
        return NotImplemented

    def __neg__(self) -> Scalar:
        return Scalar(-self._n)

    def __mul__(self, other):
        # Scalar * Scalar  or  Scalar * Point
        if isinstance(other, Scalar):
            return Scalar(self._n * other._n)
        if isinstance(other, Point):
            return other._times(self)
        return NotImplemented

    def __eq__(self, other: object) -> bool:
        return isinstance(other, Scalar) and self._n == other._n

    def __hash__(self) -> int:
        return hash(("Scalar", self._n))

    def __bool__(self) -> bool:
        return self._n != 0

    def __repr__(self) -> str:
        if self._n < 1 << 32:
            return f"Scalar({self._n:#x})"
        return f"Scalar({self.to_bytes()[:4].hex()}…)"


# ── Point ───────────────────────────────────────────────────────────────
class Point:
    """
    Element of the secp256k1 group.

    ``_sec`` holds the compressed encoding, or ``None`` for the identity
    (libsecp256k1 has no representation for the point at infinity).
    The identity's x-coordinate is reported as 32 zero bytes; no curve
    point has x = 0 because 7 is not a square mod p.
    """

    __slots__ = ("_sec",)

    def __init__(self, sec: Optional[bytes] = None) -> None:
        self._sec = sec

    @classmethod
    def _wrap(cls, pk: _PK) -> Point:
        return cls(pk.format(compressed=True))

    @classmethod
    def identity(cls) -> Point:
        return cls(None)

    @classmethod
    def from_bytes(cls, data: bytes) -> Point:
        """
        Parse SEC 1 (compressed or uncompressed).  Raises ``ValueError``
        for bytes that are not a curve point; all-zero input is the
        identity.
        """
        if not any(data):
            return cls.identity()
        return cls._wrap(_PK(data))

    def to_bytes(self) -> bytes:
        """Compressed SEC 1 encoding; 33 zero bytes for the identity."""
        return self._sec if self._sec is not None else bytes(SEC1_BYTES)

    def x_bytes(self) -> bytes:
        return self.to_bytes()[1:]

    @property
    def y_is_odd(self) -> bool:
        return self._sec is not None and self._sec[0] == _ODD

    def is_inf(self) -> bool:
        return self._sec is None

    def public_key(self) -> _PK:
        """This point as a ``coincurve.PublicKey``."""
        if self._sec is None:
            raise ConstructionInvariantViolation(
                "the identity point is not a valid public key"
            )
        return _PK(self._sec)

    def _times(self, s: Scalar) -> Point:
        if self._sec is None or s.is_zero():
            return Point.identity()
        if self._sec == _GENERATOR_SEC:
            return Point._wrap(_SK(s.to_bytes()).public_key)
        return Point._wrap(_PK(self._sec).multiply(s.to_bytes()))

    def __rmul__(self, s) -> Point:
        if isinstance(s, int):
            s = Scalar(s)
        if isinstance(s, Scalar):
            return self._times(s)
        return NotImplemented

    def __neg__(self) -> Point:
        if self._sec is None:
            return self
        flipped = _ODD if self._sec[0] == _EVEN else _EVEN
        return Point(bytes([flipped]) + self._sec[1:])

    def __add__(self, other: Point) -> Point:
        if not isinstance(other, Point):
            return NotImplemented
        if other._sec is None:
            return self
        if self._sec is None:
            return other
        if self._sec[1:] == other._sec[1:] and self._sec != other._sec:
            return Point.identity()
        return Point._wrap(_PK.combine_keys([_PK(self._sec), _PK(other._sec)]))

    def __sub__(self, other: Point) -> Point:
        return self + (-other)

    def __eq__(self, other: object) -> bool:
        return isinstance(other, Point) and self._sec == other._sec

    def __hash__(self) -> int:
        return hash(("Point", self._sec))

    def __repr__(self) -> str:
        if self._sec is None:
            return "Point(∞)"
        return f"Point({self._sec[:5].hex()}…)"


_GENERATOR_SEC = _SK((1).to_bytes(SCALAR_BYTES, "big")).public_key.format()

G = Point(_GENERATOR_SEC)


def non_identity(point: Point, what: str) -> Point:
    """Return *point* unchanged, or raise when it is the identity."""
    if point.is_inf():
        raise ConstructionInvariantViolation(f"{what} is the identity point")
    return point


# ── single-use nonces ───────────────────────────────────────────────────
class Nonce:
    """
    Secret scalar that can be read once.

    Provers and signers draw every blinding scalar with ``Nonce.fresh()``,
    publish its commitment with ``commit(base)`` and read the scalar
    with ``take()`` when they compute their response.  A second
    ``take()``, or a ``commit`` after it, raises ``NonceReuseError``.
    No public API accepts a caller-chosen nonce.
    """

    __slots__ = ("_secret",)

    def __init__(self, secret: Scalar) -> None:
        if secret.is_zero():
            raise ConstructionInvariantViolation("nonce must be non-zero")
        self._secret: Optional[Scalar] = secret

    @classmethod
    def fresh(cls) -> Nonce:
        return cls(Scalar.random())

    @property
    def used(self) -> bool:
        return self._secret is None

    def commit(self, base: Optional[Point] = None) -> Point:
        """
        Commitment  r·base  (base defaults to *g*) without releasing *r*.

        Raises
        ------
        NonceReuseError
            If the nonce has already been taken.
        """
        if self._secret is None:
            raise NonceReuseError("nonce already consumed")
        return self._secret * (G if base is None else base)

    def take(self) -> Scalar:
        if self._secret is None:
            raise NonceReuseError("nonce already consumed")
        secret, self._secret = self._secret, None
        return secret

    def __repr__(self) -> str:
        return f"Nonce(used={self.used})"


def even_y_commitment(
    offset: Optional[Point] = None,
    what: str = "nonce commitment",
) -> Tuple[Nonce, Point]:
    """
    Draw a nonce *r* whose commitment  R = r·g + offset  has even y.

    Nonces giving an odd R are discarded and redrawn (BIP-340), so the
    x-only challenge hash determines R uniquely.

    Parameters
    ----------
    offset : Point or None
        Added to r·g; an adaptor statement for pre-signatures.
    what : str
        Name used in the error message.

    Returns
    -------
    (Nonce, Point)
        The untaken nonce and its commitment R.

    Raises
    ------
    ConstructionInvariantViolation
        If R is the identity.
    """
    while True:
        nonce = Nonce.fresh()
        R = nonce.commit()
        if offset is not None:
            R = R + offset
        non_identity(R, what)
        if not R.y_is_odd:
            return nonce, R
