import pytest

from app import config_from_args, parse_args
from ml.config import TrainerConfig
from ml.errors import ConfigurationError, DimensionMismatch, InvalidLearningRate, InvalidPointCount


def test_defaults_are_valid():
    cfg = TrainerConfig().validate()
    assert cfg.dim == 2
    assert cfg.learning_rate == 0.1
    assert cfg.target().side((0.0, 1.0)) == 1


def test_3d_target():
    cfg = TrainerConfig(dim=3, plane=(0.0, 0.0, 0.5))
    target = cfg.target()
    assert target.dim == 3
    assert target.side((0.0, 0.0, 0.6)) == 1
    assert target.side((0.0, 0.0, 0.4)) == -1


@pytest.mark.parametrize('changes, error', [
    ({'dim': 1}, DimensionMismatch),
    ({'learning_rate': 0.0}, InvalidLearningRate),
    ({'point_count': -1}, InvalidPointCount),
    ({'interval_ms': 0}, ConfigurationError),
    ({'coord_range': (1.0, 1.0)}, ConfigurationError),
    ({'slope': float('nan')}, ConfigurationError),
    ({'dim': 3, 'plane': (0.0, float('inf'), 0.0)}, ConfigurationError),
])
def test_invalid_config(changes, error):
    with pytest.raises(error):
        TrainerConfig().with_changes(**changes).validate()


def test_cli_flags():
    cfg = config_from_args(parse_args(['--dim', '3', '--points', '80', '--learning-rate', '0.05',
                                       '--plane', '1', '2', '3', '--seed', '4']))
    assert cfg.dim == 3
    assert cfg.point_count == 80
    assert cfg.learning_rate == 0.05
    assert cfg.plane == (1.0, 2.0, 3.0)
    assert cfg.seed == 4


def test_cli_rejects_bad_learning_rate():
    with pytest.raises(InvalidLearningRate):
        config_from_args(parse_args(['--learning-rate', '-1']))
