"""
Encryption collaborators sharing the group abstraction.

- ``ElGamal``: public-key encryption of group elements:

      enc(pk, M):  y ←$ Z_q,  ct = (y·g,  M + y·pk)
      dec(sk, (A, B)) = B − sk·A

  ``enc`` also returns the randomness *y* so that callers can prove
  statements about the ciphertext.

- ``OneTimePad``: symmetric encryption of scalars under a scalar key:
  ct = m + k,  m = ct − k.  A key must encrypt exactly one message.

Neither is used by the fair-exchange run itself.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Generic, Tuple, TypeVar

from .curve import Scalar, Point, G, Nonce
from .encoding import encode_all
from .relation import DLogRelation

K = TypeVar("K")
SK = TypeVar("SK")
PK = TypeVar("PK")
M = TypeVar("M")
C = TypeVar("C")


class PublicKeyEncryptionScheme(ABC, Generic[SK, PK, M, C]):

    @abstractmethod
    def gen(self) -> Tuple[SK, PK]:
        ...

    @abstractmethod
    def enc(self, pk: PK, msg: M) -> Tuple[C, Scalar]:
        ...

    @abstractmethod
    def dec(self, sk: SK, ct: C) -> M:
        ...


class SymmetricEncryptionScheme(ABC, Generic[K, M, C]):

    @abstractmethod
    def enc(self, key: K, msg: M) -> C:
        ...

    @abstractmethod
    def dec(self, key: K, ct: C) -> M:
        ...


@dataclass(frozen=True)
class ElGamalCiphertext:
    """Encoding: a ‖ b."""

    a: Point
    b: Point

    def to_bytes(self) -> bytes:
        return encode_all((self.a, self.b))


class ElGamal(PublicKeyEncryptionScheme[Scalar, Point, Point, ElGamalCiphertext]):

    def __init__(self) -> None:
        self._keys = DLogRelation()

    def gen(self) -> Tuple[Scalar, Point]:
        return self._keys.sample(G)

    def enc(self, pk: Point, msg: Point) -> Tuple[ElGamalCiphertext, Scalar]:
        nonce = Nonce.fresh()
        a, blind = nonce.commit(), nonce.commit(pk)
        return ElGamalCiphertext(a=a, b=msg + blind), nonce.take()

    def dec(self, sk: Scalar, ct: ElGamalCiphertext) -> Point:
        return ct.b - (sk * ct.a)


class OneTimePad(SymmetricEncryptionScheme[Scalar, Scalar, Scalar]):

    def enc(self, key: Scalar, msg: Scalar) -> Scalar:
        return msg + key

    def dec(self, key: Scalar, ct: Scalar) -> Scalar:
        return ct - key
