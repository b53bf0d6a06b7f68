import math

import numpy as np
import pytest

from ml.errors import ConfigurationError, DimensionMismatch, InvalidLearningRate
from ml.perceptron import Hyperplane, Perceptron


def test_zero_model_predicts_positive_on_tie():
    p = Perceptron(2)
    assert p.net((0.3, -0.7)) == 0.0
    assert p.predict((0.3, -0.7)) == 1


def test_point_on_boundary_is_positive():
    p = Perceptron(2)
    p.w = np.array([1.0, -1.0])
    assert p.predict((0.3, 0.3)) == 1
    assert p.predict((0.3, 0.31)) == -1


def test_predict_is_deterministic():
    p = Perceptron(3)
    p.w = np.array([0.2, -0.4, 0.7])
    p.b = 0.05
    x = (0.1, 0.9, -0.3)
    assert len({p.predict(x) for _ in range(20)}) == 1


def test_single_mistake_update():
    p = Perceptron(2)
    mistakes = p.train_one_epoch([((-1.0, 0.0), -1)], 0.1)
    assert mistakes == 1
    assert p.w.tolist() == pytest.approx([0.2, 0.0])
    assert p.b == pytest.approx(-0.2)
    assert p.predict((-1.0, 0.0)) == -1


def test_correct_points_do_not_change_weights():
    p = Perceptron(2)
    p.w = np.array([0.1, 0.0])
    mistakes = p.train_one_epoch([((-1.0, 0.0), -1), ((1.0, 0.5), 1)], 0.1)
    assert mistakes == 0
    assert p.w.tolist() == [0.1, 0.0]
    assert p.b == 0.0


def test_updates_are_applied_within_the_epoch():
    # the second copy of the point already sees the corrected weights
    p = Perceptron(2)
    mistakes = p.train_one_epoch([((1.0, 0.0), -1), ((1.0, 0.0), -1)], 1.0)
    assert mistakes == 1
    assert p.w.tolist() == [-2.0, 0.0]
    assert p.b == -2.0


def test_converges_on_separable_points(diagonal_points):
    p = Perceptron(2)
    for epoch in range(1, 1001):
        if p.train_one_epoch(diagonal_points, 0.1) == 0:
            break
    assert epoch == 2
    assert p.w.tolist() == pytest.approx([0.28, 0.28])
    assert p.b == pytest.approx(0.0)
    assert p.accuracy(diagonal_points) == (4, 0, 1.0)


def test_predict_rejects_wrong_dimension():
    with pytest.raises(DimensionMismatch):
        Perceptron(2).predict((1.0, 2.0, 3.0))


def test_train_rejects_wrong_dimension_without_mutation():
    p = Perceptron(2)
    with pytest.raises(DimensionMismatch):
        p.train_one_epoch([((-1.0, 0.0), -1), ((1.0, 2.0, 3.0), 1)], 0.1)
    assert p.w.tolist() == [0.0, 0.0]
    assert p.b == 0.0


@pytest.mark.parametrize('eta', [0, -0.5, math.nan, math.inf, 'fast', None])
def test_train_rejects_bad_learning_rate(eta):
    with pytest.raises(InvalidLearningRate):
        Perceptron(2).train_one_epoch([((1.0, 1.0), 1)], eta)


def test_unsupported_dimension():
    with pytest.raises(DimensionMismatch):
        Perceptron(4)


def test_reset_is_idempotent():
    p = Perceptron(3)
    p.train_one_epoch([((1.0, 1.0, 1.0), -1)], 0.5)
    p.reset()
    first = (p.w.tolist(), p.b)
    p.reset()
    assert (p.w.tolist(), p.b) == first == ([0.0, 0.0, 0.0], 0.0)


def test_record_keeps_before_and_after_rows(diagonal_points):
    p = Perceptron(2)
    p.train_one_epoch(diagonal_points, 0.1, record=True)
    assert len(p.history) == 2 * len(diagonal_points)
    assert [r['phase'] for r in p.history[:2]] == ['before', 'after']
    # second point was the first mistake
    assert p.history[2]['err'] == -2
    assert p.history[3]['w'] == pytest.approx((0.1, 0.1))


def test_accuracy_of_empty_dataset():
    assert Perceptron(2).accuracy([]) == (0, 0, 0.0)


def test_hyperplane_from_line():
    h = Hyperplane.from_line(0.5, 0.2)
    assert h.dim == 2
    assert h.side((0.0, 1.0)) == 1
    assert h.side((0.0, 0.0)) == -1
    assert h.side((0.0, 0.2)) == 1


def test_hyperplane_from_plane():
    h = Hyperplane.from_plane(1.0, 0.0, 0.0)
    assert h.dim == 3
    assert h.side((0.5, 0.0, 0.9)) == 1
    assert h.side((0.5, 0.0, 0.1)) == -1


def test_hyperplane_is_read_only():
    h = Hyperplane([0.0, 0.0], 0.0)
    with pytest.raises(ValueError):
        h.w[0] = 1.0
    assert h == Hyperplane([0.0, 0.0])


@pytest.mark.parametrize('w, b', [
    ([math.nan, 1.0], 0.0),
    ([0.5, 1.0], math.inf),
    ([0.5, -math.inf, 1.0], 0.0),
])
def test_hyperplane_rejects_non_finite_coefficients(w, b):
    with pytest.raises(ConfigurationError):
        Hyperplane(w, b)


def test_line_with_nan_slope_is_rejected():
    with pytest.raises(ConfigurationError):
        Hyperplane.from_line(math.nan, 0.2)
