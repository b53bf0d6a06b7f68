# app.py
import argparse
import logging
import sys

from ml.config import TrainerConfig
from ml.errors import ConfigurationError


def parse_args(argv=None):
    defaults = TrainerConfig()
    p = argparse.ArgumentParser(description='Interactive perceptron learning visualisation')
    p.add_argument('--dim', type=int, choices=(2, 3), default=defaults.dim,
                   help='2 for a target line, 3 for a target plane')
    p.add_argument('--points', type=int, default=defaults.point_count,
                   help='number of training points')
    p.add_argument('--learning-rate', type=float, default=defaults.learning_rate)
    p.add_argument('--slope', type=float, default=defaults.slope, help='2D target slope')
    p.add_argument('--intercept', type=float, default=defaults.intercept,
                   help='2D target intercept')
    p.add_argument('--plane', type=float, nargs=3, metavar=('A', 'B', 'C'),
                   default=defaults.plane, help='3D target plane z = A*x + B*y + C')
    p.add_argument('--interval', type=int, default=defaults.interval_ms,
                   help='milliseconds between training rounds')
    p.add_argument('--seed', type=int, default=None, help='seed for reproducible data')
    p.add_argument('--log-level', default='WARNING',
                   choices=('DEBUG', 'INFO', 'WARNING', 'ERROR'))
    return p.parse_args(argv)


def config_from_args(args):
    return TrainerConfig(dim=args.dim, point_count=args.points, learning_rate=args.learning_rate,
                         slope=args.slope, intercept=args.intercept, plane=tuple(args.plane),
                         interval_ms=args.interval, seed=args.seed).validate()


def main(argv=None):
    args = parse_args(argv)
    logging.basicConfig(level=args.log_level,
                        format='%(asctime)s %(levelname)s %(name)s: %(message)s')
    try:
        config = config_from_args(args)
    except ConfigurationError as e:
        sys.exit(f"error: {e}")

    # Try PyQt5, fallback to PySide6 (consistent with UI code)
    try:
        from PyQt5.QtWidgets import QApplication
    except ImportError:
        try:
            from PySide6.QtWidgets import QApplication
        except ImportError:
            raise RuntimeError("Install PyQt5 or PySide6 (pip install pyqt5 OR pip install pyside6)")
    from ui.main_window import PerceptronTrainerMainWindow

    app = QApplication(sys.argv[:1])
    win = PerceptronTrainerMainWindow(config)
    win.show()
    sys.exit(app.exec())


if __name__ == "__main__":
    main()
