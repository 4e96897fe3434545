"""
Hard relations.

A hard relation is a predicate  R(pp, w, x)  that is believed infeasible
to satisfy without knowing the witness *w*.  Every relation exposes:

    R(pp, w, x)      -> bool       membership test
    statement(pp, w) -> x          derive the public statement
    sample(pp)       -> (w, x)     fresh instance with R(pp, w, x) true

*pp* carries the public parameters the relation needs beyond (w, x)
and may be ``None``.

Concrete relations:

- ``DLogRelation`` (here): x = w·pp, with pp the base point.
- ``SignatureKnowledgeRelation`` (:mod:`sigswap.proofs`).
- ``OrRelation`` (:mod:`sigswap.orproof`).
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Generic, Optional, Tuple, TypeVar

from .curve import Scalar, Point, G

PP = TypeVar("PP")
W = TypeVar("W")
X = TypeVar("X")


class HardRelation(ABC, Generic[PP, W, X]):
    """Interface every relation implements."""

    @abstractmethod
    def R(self, pp: PP, w: W, x: X) -> bool:  # noqa: N802
        ...

    @abstractmethod
    def statement(self, pp: PP, w: W) -> X:
        ...

    @abstractmethod
    def sample(self, pp: PP) -> Tuple[W, X]:
        ...


class DLogRelation(HardRelation[Optional[Point], Scalar, Point]):
    """
    Discrete-log relation  x = w·base.

    The base point is the public parameter; ``None`` means the standard
    generator *g*.  Witnesses are non-zero so that statements are never
    the identity.
    """

    @staticmethod
    def _base(pp: Optional[Point]) -> Point:
        return G if pp is None else pp

    def R(self, pp: Optional[Point], w: Scalar, x: Point) -> bool:  # noqa: N802
        return w * self._base(pp) == x

    def statement(self, pp: Optional[Point], w: Scalar) -> Point:
        return w * self._base(pp)

    def sample(self, pp: Optional[Point] = None) -> Tuple[Scalar, Point]:
        w = Scalar.random()
        return w, self.statement(pp, w)

