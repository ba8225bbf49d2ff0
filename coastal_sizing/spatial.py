"""Nearest-neighbour search over scattered points."""

from __future__ import annotations

import numpy as np
from scipy.spatial import cKDTree


class NearestNeighbor:
    """k-d tree index over ``(N, 2)`` points.

    ``query`` returns distances and indices of shape ``(M, k)`` (``(M,)`` for
    ``k == 1``).  Missing neighbours, when ``k`` exceeds the number of indexed
    points, come back as ``inf`` distances.
    """

    def __init__(self, points):
        self.points = np.atleast_2d(np.asarray(points, dtype=float))
        if self.points.shape[0] == 0:
            raise ValueError("Cannot index an empty point set")
        self._tree = cKDTree(self.points)

    def __len__(self):
        return self.points.shape[0]

    def query(self, points, k=1):
        points = np.atleast_2d(np.asarray(points, dtype=float))
        return self._tree.query(points, k=k, workers=-1)
