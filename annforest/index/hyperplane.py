"""
Splitting Hyperplane

A HyperPlane is the oriented plane ``coefficients · x + constant = 0``.
Points with a strictly positive value are "above"; everything else,
including points lying exactly on the plane, is "below". There is no third
category.
"""

from __future__ import annotations

from dataclasses import dataclass

import numpy as np

from annforest.core.types import Vector


@dataclass(frozen=True, slots=True)
class HyperPlane:
    """
    Oriented splitting plane.

    Built from two distinct sample points as the perpendicular bisector of
    the segment between them: ``a`` always lands above, ``b`` below.
    """
    coefficients: Vector
    constant: float

    @classmethod
    def from_points(cls, a: Vector, b: Vector) -> "HyperPlane":
        coefficients = a.subtract_from(b)
        midpoint = a.avg(b)
        return cls(
            coefficients=coefficients,
            constant=-coefficients.dot_product(midpoint),
        )

    def margin(self, v: Vector) -> float:
        """Signed (unnormalized) distance of ``v`` from the plane."""
        return self.coefficients.dot_product(v) + self.constant

    def point_is_above(self, v: Vector) -> bool:
        return self.margin(v) > 0.0

    def above_mask(self, points: np.ndarray) -> np.ndarray:
        """
        Batch form of point_is_above over an [n, d] block of points.

        Returns:
            Boolean array of shape [n]
        """
        margins = points @ self.coefficients.to_numpy() + self.constant
        return margins > 0.0
