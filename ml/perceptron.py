# ml/perceptron.py
import math

import numpy as np

from ml.errors import ConfigurationError, DimensionMismatch, InvalidLearningRate

SUPPORTED_DIMS = (2, 3)


def as_point(x, dim):
    """Return x as a float vector of length dim, or raise DimensionMismatch."""
    arr = np.asarray(x, dtype=float)
    if arr.ndim != 1 or arr.shape[0] != dim:
        got = arr.shape[0] if arr.ndim == 1 else arr.shape
        raise DimensionMismatch(dim, got)
    return arr


def check_learning_rate(eta):
    try:
        value = float(eta)
    except (TypeError, ValueError):
        raise InvalidLearningRate(eta)
    if not math.isfinite(value) or value <= 0:
        raise InvalidLearningRate(eta)
    return value


def check_dim(dim):
    if dim not in SUPPORTED_DIMS:
        raise DimensionMismatch(SUPPORTED_DIMS, dim, what='model')
    return int(dim)


class Hyperplane:
    """
    The set of points where w.x + b == 0.
    Points with w.x + b >= 0 lie on the +1 side, the rest on the -1 side.
    """
    def __init__(self, w, b=0.0):
        w = np.array(w, dtype=float)
        if w.ndim != 1 or w.shape[0] == 0:
            raise DimensionMismatch(SUPPORTED_DIMS, w.shape, what='hyperplane')
        if not np.all(np.isfinite(w)) or not math.isfinite(float(b)):
            raise ConfigurationError(f"hyperplane coefficients must be finite, got w={w.tolist()}, b={b!r}")
        w.setflags(write=False)
        self.w = w
        self.b = float(b)

    @classmethod
    def from_line(cls, slope, intercept):
        # y = slope * x + intercept  ->  -slope * x + y - intercept = 0
        return cls([-float(slope), 1.0], -float(intercept))

    @classmethod
    def from_plane(cls, a, b, c):
        # z = a * x + b * y + c  ->  -a * x - b * y + z - c = 0
        return cls([-float(a), -float(b), 1.0], -float(c))

    @property
    def dim(self):
        return self.w.shape[0]

    def net(self, x):
        return float(np.dot(self.w, as_point(x, self.dim)) + self.b)

    def side(self, x):
        return 1 if self.net(x) >= 0 else -1

    def __eq__(self, other):
        if not isinstance(other, Hyperplane):
            return NotImplemented
        return self.b == other.b and np.array_equal(self.w, other.w)

    def __repr__(self):
        return f"Hyperplane(w={tuple(self.w.tolist())}, b={self.b})"


class Perceptron:
    """
    Single-layer perceptron over 2D or 3D points with labels in {+1, -1}.

    Starts from the zero hyperplane. Training is online: each misclassified
    sample updates w and b immediately, so later samples in the same epoch
    see the new weights.
    """
    def __init__(self, dim=2):
        self.dim = check_dim(dim)
        self.w = np.zeros(self.dim)
        self.b = 0.0
        self.history = []

    def net(self, x):
        return float(np.dot(self.w, as_point(x, self.dim)) + self.b)

    def predict(self, x):
        # sum == 0 counts as the positive side
        return 1 if self.net(x) >= 0 else -1

    def train_one_epoch(self, dataset, eta, record=False):
        """
        One pass over dataset in its stored order. Returns the number of
        misclassified samples (each of which triggered exactly one update).
        """
        eta = check_learning_rate(eta)
        samples = [(as_point(x, self.dim), int(y)) for x, y in dataset]

        mistakes = 0
        for x, y in samples:
            net = float(np.dot(self.w, x) + self.b)
            y_pred = 1 if net >= 0 else -1
            err = y - y_pred
            if record:
                self.history.append({'sample_x': tuple(x.tolist()), 'y': y, 'net_before': net,
                                     'err': err, 'w': tuple(self.w.tolist()), 'b': self.b,
                                     'phase': 'before'})
            if err != 0:
                self.w = self.w + eta * err * x
                self.b = self.b + eta * err
                mistakes += 1
            if record:
                self.history.append({'sample_x': tuple(x.tolist()), 'y': y, 'net_before': None,
                                     'err': err, 'w': tuple(self.w.tolist()), 'b': self.b,
                                     'phase': 'after'})
        return mistakes

    def accuracy(self, dataset):
        """Return (correct, wrong, fraction correct) over dataset."""
        correct = sum(1 for x, y in dataset if self.predict(x) == y)
        total = len(dataset)
        frac = correct / total if total else 0.0
        return correct, total - correct, frac

    def reset(self):
        self.w = np.zeros(self.dim)
        self.b = 0.0
        self.history = []
