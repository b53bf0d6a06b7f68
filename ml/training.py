# ml/training.py
import enum
import logging
from dataclasses import dataclass
from typing import Optional, Tuple

import numpy as np

from ml.config import TrainerConfig
from ml.dataset import generate_dataset, make_dataset
from ml.errors import ConfigurationError, DimensionMismatch
from ml.perceptron import Perceptron, check_learning_rate

log = logging.getLogger(__name__)


class Phase(enum.Enum):
    IDLE = 'idle'
    RUNNING = 'running'
    CONVERGED = 'converged'
    STOPPED = 'stopped'


@dataclass(frozen=True)
class EpochResult:
    epoch: int
    mistakes: int
    accuracy: float


@dataclass(frozen=True)
class TrainingState:
    w: Tuple[float, ...]
    b: float
    epoch_count: int
    is_running: bool
    mistakes_last_epoch: Optional[int]
    phase: Phase


class TrainingController:
    """
    Drives a Perceptron over a fixed dataset, one epoch per on_tick() call.

    The host (a QTimer in the UI, a plain loop in tests) calls on_tick() at
    whatever cadence it likes; only RUNNING controllers do any work there.
    An epoch with zero mistakes moves the controller to CONVERGED and fires
    the on_converged listeners once.
    """
    def __init__(self, config=None, dataset=None):
        self.config = (config or TrainerConfig()).validate()
        self.model = Perceptron(self.config.dim)
        self.learning_rate = check_learning_rate(self.config.learning_rate)
        self._target = self.config.target()
        self._rng = np.random.default_rng(self.config.seed)
        self.on_converged = []
        self.history = []
        self.epoch_count = 0
        self.mistakes_last_epoch = None
        self.phase = Phase.IDLE
        self._in_epoch = False
        if dataset is None:
            self._dataset = self._generate(self.config.point_count)
        else:
            self._dataset = make_dataset(dataset, self.model.dim)

    # -------------------- read-only views --------------------
    @property
    def dim(self):
        return self.model.dim

    @property
    def dataset(self):
        return self._dataset

    @property
    def target(self):
        return self._target

    @property
    def is_running(self):
        return self.phase is Phase.RUNNING

    @property
    def sample_log(self):
        """Per-sample before/after rows recorded during the last epoch."""
        return self.model.history

    def predict(self, x):
        return self.model.predict(x)

    def current_state(self):
        return TrainingState(w=tuple(self.model.w.tolist()), b=self.model.b,
                             epoch_count=self.epoch_count, is_running=self.is_running,
                             mistakes_last_epoch=self.mistakes_last_epoch, phase=self.phase)

    # -------------------- lifecycle --------------------
    def start(self):
        """Begin issuing epochs on tick. Returns False if it was not startable."""
        if self.phase not in (Phase.IDLE, Phase.STOPPED):
            log.debug("start() ignored in phase %s", self.phase.value)
            return False
        check_learning_rate(self.learning_rate)
        self._set_phase(Phase.RUNNING)
        return True

    def stop(self):
        if self.phase is Phase.RUNNING:
            self._set_phase(Phase.STOPPED)

    def reset(self):
        self.model.reset()
        self._clear_progress()
        self._set_phase(Phase.IDLE)

    def on_tick(self):
        """Run one epoch if running. Returns its EpochResult, or None if nothing ran."""
        if self.phase is not Phase.RUNNING or self._in_epoch:
            return None
        self._in_epoch = True
        try:
            # sample_log holds only the latest epoch
            self.model.history = []
            mistakes = self.model.train_one_epoch(self._dataset, self.learning_rate, record=True)
        finally:
            self._in_epoch = False

        self.epoch_count += 1
        self.mistakes_last_epoch = mistakes
        _, _, acc = self.model.accuracy(self._dataset)
        result = EpochResult(self.epoch_count, mistakes, acc)
        self.history.append(result)
        log.debug("epoch %d: %d mistakes, accuracy %.3f", result.epoch, mistakes, acc)

        if mistakes == 0:
            self._set_phase(Phase.CONVERGED)
            for callback in list(self.on_converged):
                callback(result)
        return result

    # -------------------- data & parameters --------------------
    def regenerate_data(self, count=None):
        """Replace the dataset with a fresh sample. The learned weights are kept."""
        if count is None:
            count = self.config.point_count
        dataset = self._generate(count)
        self.config = self.config.with_changes(point_count=count)
        self._replace_dataset(dataset)

    def load_points(self, pairs):
        """Replace the dataset with user-supplied (coords, label) pairs."""
        self._replace_dataset(make_dataset(pairs, self.dim))

    def set_target_hyperplane(self, target, count=None):
        if target.dim != self.dim:
            raise DimensionMismatch(self.dim, target.dim, what='target hyperplane')
        self.stop()
        previous, self._target = self._target, target
        try:
            self.regenerate_data(count)
        except ConfigurationError:
            self._target = previous
            raise
        log.info("target hyperplane set to %r", target)

    def set_learning_rate(self, rate):
        self.learning_rate = check_learning_rate(rate)
        self.config = self.config.with_changes(learning_rate=self.learning_rate)

    # -------------------- internals --------------------
    def _generate(self, count):
        return generate_dataset(count, self.dim, self._target,
                                coord_range=self.config.coord_range, seed=self._rng)

    def _replace_dataset(self, dataset):
        self.stop()
        self._dataset = dataset
        self._clear_progress()
        self._set_phase(Phase.IDLE)
        log.info("dataset replaced (%d points)", len(dataset))

    def _clear_progress(self):
        self.epoch_count = 0
        self.mistakes_last_epoch = None
        self.history = []
        self.model.history = []

    def _set_phase(self, phase):
        if phase is not self.phase:
            log.info("training %s -> %s (epoch %d)", self.phase.value, phase.value, self.epoch_count)
        self.phase = phase
