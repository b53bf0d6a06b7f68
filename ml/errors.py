# ml/errors.py


class ConfigurationError(ValueError):
    """Base class for bad arguments handed to the training core."""


class DimensionMismatch(ConfigurationError):
    def __init__(self, expected, got, what='point'):
        super().__init__(f"{what} has dimension {got}, expected {expected}")
        self.expected = expected
        self.got = got


class InvalidLearningRate(ConfigurationError):
    def __init__(self, rate):
        super().__init__(f"learning rate must be finite and > 0, got {rate!r}")
        self.rate = rate


class InvalidPointCount(ConfigurationError):
    def __init__(self, count):
        super().__init__(f"point count must be a non-negative integer, got {count!r}")
        self.count = count


class InvalidLabel(ConfigurationError):
    def __init__(self, label):
        super().__init__(f"label must be +1 or -1, got {label!r}")
        self.label = label
