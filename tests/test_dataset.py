import numpy as np
import pytest

from ml.dataset import generate_dataset, make_dataset
from ml.errors import ConfigurationError, DimensionMismatch, InvalidLabel, InvalidPointCount
from ml.perceptron import Hyperplane


@pytest.fixture
def line():
    return Hyperplane.from_line(0.5, 0.2)


def test_empty_dataset(line):
    assert generate_dataset(0, 2, line) == ()


@pytest.mark.parametrize('count', [-1, 2.5, '10', True])
def test_bad_count(line, count):
    with pytest.raises(InvalidPointCount):
        generate_dataset(count, 2, line)


def test_labels_follow_target(line):
    ds = generate_dataset(200, 2, line, seed=1)
    assert len(ds) == 200
    for x, y in ds:
        assert x.shape == (2,)
        assert np.all((x >= -1.0) & (x <= 1.0))
        assert y == line.side(x)
    assert {y for _, y in ds} == {1, -1}


def test_3d_labels_follow_target():
    plane = Hyperplane.from_plane(0.5, -0.3, 0.1)
    ds = generate_dataset(100, 3, plane, coord_range=(2.0, 3.0), seed=3)
    assert all(x.shape == (3,) for x, _ in ds)
    for x, y in ds:
        assert np.all((x >= 2.0) & (x <= 3.0))
        assert y == plane.side(x)


def test_seed_is_reproducible(line):
    a = generate_dataset(20, 2, line, seed=42)
    b = generate_dataset(20, 2, line, seed=42)
    assert all(np.array_equal(p.x, q.x) and p.label == q.label for p, q in zip(a, b))


def test_target_dimension_must_match(line):
    with pytest.raises(DimensionMismatch):
        generate_dataset(5, 3, line)


def test_range_must_be_ordered(line):
    with pytest.raises(ConfigurationError):
        generate_dataset(5, 2, line, coord_range=(1.0, -1.0))


def test_points_are_immutable(line):
    ds = generate_dataset(1, 2, line, seed=0)
    with pytest.raises(ValueError):
        ds[0].x[0] = 5.0
    with pytest.raises(AttributeError):
        ds[0].label = 1


def test_make_dataset(diagonal_points):
    ds = make_dataset(diagonal_points)
    assert [p.label for p in ds] == [1, -1, 1, -1]
    x, y = ds[0]
    assert x.tolist() == [0.5, 0.5] and y == 1


def test_make_dataset_rejects_bad_label():
    with pytest.raises(InvalidLabel):
        make_dataset([((0.0, 0.0), 0)])


def test_make_dataset_rejects_mixed_dimensions():
    with pytest.raises(DimensionMismatch):
        make_dataset([((0.0, 0.0), 1), ((0.0, 0.0, 1.0), -1)])
