# ml/dataset.py
import logging
import numbers
from typing import NamedTuple

import numpy as np

from ml.errors import ConfigurationError, DimensionMismatch, InvalidLabel, InvalidPointCount
from ml.perceptron import as_point, check_dim

log = logging.getLogger(__name__)

DEFAULT_RANGE = (-1.0, 1.0)


class LabeledPoint(NamedTuple):
    x: np.ndarray
    label: int


def _frozen(x):
    arr = np.array(x, dtype=float)
    arr.setflags(write=False)
    return arr


def generate_dataset(count, dim, target, coord_range=DEFAULT_RANGE, seed=None):
    """
    Draw count points uniformly from coord_range on every axis and label
    each one by the side of target it falls on (w.x + b >= 0 -> +1).

    seed: optional int (or numpy Generator) for a reproducible sample.
    """
    if isinstance(count, bool) or not isinstance(count, numbers.Integral) or count < 0:
        raise InvalidPointCount(count)
    dim = check_dim(dim)
    if target.dim != dim:
        raise DimensionMismatch(dim, target.dim, what='target hyperplane')
    low, high = float(coord_range[0]), float(coord_range[1])
    if not low < high:
        raise ConfigurationError(f"coordinate range must have low < high, got {coord_range!r}")

    rng = np.random.default_rng(seed)
    coords = rng.uniform(low, high, size=(int(count), dim))
    points = tuple(LabeledPoint(_frozen(x), target.side(x)) for x in coords)
    log.debug("generated %d points in %dD (seed=%s)", len(points), dim, seed)
    return points


def make_dataset(pairs, dim=None):
    """
    Build a dataset from (coords, label) pairs supplied by the user.
    All points must share one dimension (dim, if given) and labels must be +1 or -1.
    """
    points = []
    for x, y in pairs:
        if dim is None:
            dim = check_dim(len(x))
        x = as_point(x, dim)
        if y not in (1, -1):
            raise InvalidLabel(y)
        points.append(LabeledPoint(_frozen(x), int(y)))
    return tuple(points)
