# ml/config.py
from dataclasses import dataclass, field, replace
from typing import Optional, Tuple

from ml.errors import ConfigurationError, InvalidPointCount
from ml.perceptron import Hyperplane, check_dim, check_learning_rate


@dataclass
class TrainerConfig:
    dim: int = 2
    point_count: int = 50
    learning_rate: float = 0.1
    # 2D target line: y = slope * x + intercept
    slope: float = 0.5
    intercept: float = 0.2
    # 3D target plane: z = a * x + b * y + c
    plane: Tuple[float, float, float] = (0.5, -0.3, 0.1)
    coord_range: Tuple[float, float] = field(default=(-1.0, 1.0))
    interval_ms: int = 500
    seed: Optional[int] = None

    def validate(self):
        check_dim(self.dim)
        check_learning_rate(self.learning_rate)
        if isinstance(self.point_count, bool) or not isinstance(self.point_count, int) \
                or self.point_count < 0:
            raise InvalidPointCount(self.point_count)
        if self.interval_ms <= 0:
            raise ConfigurationError(f"tick interval must be > 0 ms, got {self.interval_ms}")
        if not self.coord_range[0] < self.coord_range[1]:
            raise ConfigurationError(f"coordinate range must have low < high, got {self.coord_range!r}")
        self.target()
        return self

    def target(self):
        if self.dim == 2:
            return Hyperplane.from_line(self.slope, self.intercept)
        return Hyperplane.from_plane(*self.plane)

    def with_changes(self, **changes):
        return replace(self, **changes)
