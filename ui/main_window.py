# ui/main_window.py
import logging

import numpy as np

# Matplotlib for plotting
import matplotlib
matplotlib.use('QtAgg')
from matplotlib.figure import Figure
from matplotlib.backends.backend_qtagg import FigureCanvasQTAgg as FigureCanvas

# Try to import PyQt5, fallback to PySide6
try:
    from PyQt5.QtWidgets import (QWidget, QVBoxLayout, QHBoxLayout, QGridLayout, QLabel,
                                 QLineEdit, QPushButton, QTableWidget, QTableWidgetItem,
                                 QMessageBox, QSpinBox, QTextEdit, QGroupBox)
    from PyQt5.QtCore import QTimer
    qt_binding = 'PyQt5'
except ImportError:
    from PySide6.QtWidgets import (QWidget, QVBoxLayout, QHBoxLayout, QGridLayout, QLabel,
                                   QLineEdit, QPushButton, QTableWidget, QTableWidgetItem,
                                   QMessageBox, QSpinBox, QTextEdit, QGroupBox)
    from PySide6.QtCore import QTimer
    qt_binding = 'PySide6'

from ml.config import TrainerConfig
from ml.errors import ConfigurationError
from ml.perceptron import Hyperplane
from ml.training import Phase, TrainingController
from ml.utils import (boundary_line, describe_prediction, format_line_equation,
                      format_plane_equation, learned_equation, parse_custom_points, parse_point)
from ui.plot3d import draw_scene_3d

log = logging.getLogger(__name__)

POS_COLOR = '#4CAF50'
NEG_COLOR = '#2196F3'
TARGET_COLOR = '#f44336'
LEARNED_COLOR = '#FF9800'


class PerceptronTrainerMainWindow(QWidget):
    def __init__(self, config=None):
        super().__init__()
        self.setWindowTitle('Perceptron Learning Visualisation')
        self.resize(1200, 780)

        self.config = (config or TrainerConfig()).validate()
        self.controller = None
        self.test_points = []  # list of np arrays, classified again on every redraw

        # Layouts
        main_layout = QHBoxLayout(self)
        control_layout = QVBoxLayout()
        plot_layout = QVBoxLayout()

        # Problem group
        problem_group = QGroupBox('Problem')
        problem_layout = QGridLayout()
        problem_layout.addWidget(QLabel('Dimensions:'), 0, 0)
        self.dim_spin = QSpinBox()
        self.dim_spin.setRange(2, 3)
        self.dim_spin.setValue(self.config.dim)
        self.dim_spin.valueChanged.connect(self.on_dim_change)
        problem_layout.addWidget(self.dim_spin, 0, 1)
        problem_layout.addWidget(QLabel('Points:'), 1, 0)
        self.points_spin = QSpinBox()
        self.points_spin.setRange(0, 5000)
        self.points_spin.setValue(self.config.point_count)
        problem_layout.addWidget(self.points_spin, 1, 1)
        problem_layout.addWidget(QLabel('Learning rate:'), 2, 0)
        self.eta_input = QLineEdit(str(self.config.learning_rate))
        problem_layout.addWidget(self.eta_input, 2, 1)
        problem_group.setLayout(problem_layout)
        control_layout.addWidget(problem_group)

        # Target group: line for 2D, plane for 3D
        target_group = QGroupBox('Target boundary')
        target_layout = QVBoxLayout()
        h_line = QHBoxLayout()
        self.line_widgets = [QLabel('y ='), QLineEdit(str(self.config.slope)), QLabel('x +'),
                             QLineEdit(str(self.config.intercept))]
        self.slope_input, self.intercept_input = self.line_widgets[1], self.line_widgets[3]
        for w in self.line_widgets:
            h_line.addWidget(w)
        target_layout.addLayout(h_line)
        h_plane = QHBoxLayout()
        a, b, c = self.config.plane
        self.plane_widgets = [QLabel('z ='), QLineEdit(str(a)), QLabel('x +'), QLineEdit(str(b)),
                              QLabel('y +'), QLineEdit(str(c))]
        self.plane_inputs = self.plane_widgets[1::2]
        for w in self.plane_widgets:
            h_plane.addWidget(w)
        target_layout.addLayout(h_plane)
        self.target_label = QLabel('')
        target_layout.addWidget(self.target_label)
        h_target_btns = QHBoxLayout()
        self.update_target_btn = QPushButton('Update Target')
        self.update_target_btn.clicked.connect(self.on_update_target)
        h_target_btns.addWidget(self.update_target_btn)
        self.new_data_btn = QPushButton('New Data')
        self.new_data_btn.clicked.connect(self.on_new_data)
        h_target_btns.addWidget(self.new_data_btn)
        target_layout.addLayout(h_target_btns)
        target_group.setLayout(target_layout)
        control_layout.addWidget(target_group)

        # Custom points
        custom_group = QGroupBox('Custom points')
        custom_layout = QVBoxLayout()
        custom_layout.addWidget(QLabel('One per line: x1,x2,y  or x1,x2,x3,y  (y = 1 or -1)'))
        self.custom_text = QTextEdit()
        self.custom_text.setPlaceholderText('0.5,0.5,1\n-0.5,-0.5,-1\n0.9,0.9,1\n-0.9,-0.1,-1')
        custom_layout.addWidget(self.custom_text)
        self.load_points_btn = QPushButton('Load Points')
        self.load_points_btn.clicked.connect(self.on_load_points)
        custom_layout.addWidget(self.load_points_btn)
        custom_group.setLayout(custom_layout)
        control_layout.addWidget(custom_group)

        # Buttons / controls
        btn_layout = QHBoxLayout()
        self.start_btn = QPushButton('Start Training')
        self.start_btn.clicked.connect(self.on_start)
        btn_layout.addWidget(self.start_btn)
        self.stop_btn = QPushButton('Stop')
        self.stop_btn.clicked.connect(self.on_stop)
        btn_layout.addWidget(self.stop_btn)
        self.reset_btn = QPushButton('Reset')
        self.reset_btn.clicked.connect(self.on_reset)
        btn_layout.addWidget(self.reset_btn)
        control_layout.addLayout(btn_layout)

        # Test point entry (clicking the 2D plot does the same)
        h_test = QHBoxLayout()
        self.test_input = QLineEdit()
        self.test_input.setPlaceholderText('x1,x2[,x3]')
        h_test.addWidget(self.test_input)
        self.classify_btn = QPushButton('Classify')
        self.classify_btn.clicked.connect(self.on_classify)
        h_test.addWidget(self.classify_btn)
        control_layout.addLayout(h_test)

        # Stats
        stats_group = QGroupBox('Perceptron')
        stats_layout = QGridLayout()
        self.stat_labels = {}
        for row, key in enumerate(['Training round', 'Weights', 'Bias', 'Accuracy',
                                   'Correct', 'Wrong']):
            stats_layout.addWidget(QLabel(key + ':'), row, 0)
            lbl = QLabel('-')
            stats_layout.addWidget(lbl, row, 1)
            self.stat_labels[key] = lbl
        stats_group.setLayout(stats_layout)
        control_layout.addWidget(stats_group)

        # Table log
        self.table = QTableWidget(0, 5)
        self.table.setHorizontalHeaderLabels(['epoch', 'mistakes', 'accuracy', 'w', 'b'])
        control_layout.addWidget(QLabel('Training log'))
        control_layout.addWidget(self.table, stretch=1)
        self.sample_table = QTableWidget(0, 6)
        self.sample_table.setHorizontalHeaderLabels(['phase', 'x', 'y', 'net', 'err', 'w, b'])
        control_layout.addWidget(QLabel('Samples (last epoch)'))
        control_layout.addWidget(self.sample_table, stretch=1)

        main_layout.addLayout(control_layout, 1)

        # Right column - plots
        self.fig_dec = Figure(figsize=(6, 5))
        self.canvas_dec = FigureCanvas(self.fig_dec)
        self.canvas_dec.mpl_connect('button_press_event', self.on_plot_click)
        plot_layout.addWidget(self.canvas_dec, stretch=3)

        self.fig_acc = Figure(figsize=(6, 2))
        self.canvas_acc = FigureCanvas(self.fig_acc)
        plot_layout.addWidget(self.canvas_acc, stretch=1)

        self.status_label = QLabel('Ready - using %s' % qt_binding)
        plot_layout.addWidget(self.status_label)

        main_layout.addLayout(plot_layout, 2)

        # one epoch per tick
        self.timer = QTimer(self)
        self.timer.setInterval(self.config.interval_ms)
        self.timer.timeout.connect(self.on_tick)

        self.build_controller(self.config)

    # -------------------- controller setup --------------------
    def build_controller(self, config):
        controller = TrainingController(config)
        self.timer.stop()
        self.config = config
        self.controller = controller
        self.controller.on_converged.append(self.on_converged)
        self.test_points = []
        self._3d_ax = None
        for w in self.line_widgets:
            w.setVisible(config.dim == 2)
        for w in self.plane_widgets:
            w.setVisible(config.dim == 3)
        self.refresh_all()

    def show_error(self, title, exc):
        log.warning("%s: %s", title, exc)
        QMessageBox.critical(self, title, str(exc))

    # -------------------- UI actions --------------------
    def on_dim_change(self, dim):
        try:
            self.build_controller(self.config.with_changes(dim=int(dim),
                                                           point_count=self.points_spin.value()))
        except ConfigurationError as e:
            self.show_error('Configuration error', e)
            return
        self.status_label.setText(f'Switched to {dim}D')

    def read_target(self):
        try:
            if self.controller.dim == 2:
                slope = float(self.slope_input.text())
                intercept = float(self.intercept_input.text())
            else:
                plane = tuple(float(e.text()) for e in self.plane_inputs)
        except ValueError:
            raise ValueError('Target coefficients must be numeric')
        # ConfigurationError for nan/inf comes from Hyperplane itself
        if self.controller.dim == 2:
            return Hyperplane.from_line(slope, intercept), {'slope': slope, 'intercept': intercept}
        return Hyperplane.from_plane(*plane), {'plane': plane}

    def on_update_target(self):
        try:
            target, changes = self.read_target()
            self.controller.set_target_hyperplane(target, self.points_spin.value())
        except ValueError as e:
            self.show_error('Target error', e)
            return
        self.timer.stop()
        self.config = self.config.with_changes(**changes)
        self.refresh_all()
        self.status_label.setText('Target updated, new data generated')

    def on_new_data(self):
        self.timer.stop()
        try:
            self.controller.regenerate_data(self.points_spin.value())
        except ConfigurationError as e:
            self.show_error('Dataset error', e)
            return
        self.refresh_all()
        self.status_label.setText(f'Generated {len(self.controller.dataset)} new points')

    def on_load_points(self):
        try:
            pts = parse_custom_points(self.custom_text.toPlainText())
            if len(pts) == 0:
                raise ValueError('No points given')
            self.timer.stop()
            self.controller.load_points(pts)
        except ValueError as e:
            self.show_error('Dataset error', e)
            return
        self.refresh_all()
        self.status_label.setText(f'Loaded {len(pts)} custom points')

    def on_start(self):
        try:
            self.controller.set_learning_rate(self.eta_input.text())
        except ConfigurationError as e:
            self.show_error('Param error', e)
            return
        if self.controller.start():
            self.timer.start()
            self.status_label.setText('Training...')
        elif self.controller.phase is Phase.CONVERGED:
            self.status_label.setText('Already converged - reset or load new data first')
        self.update_buttons()

    def on_stop(self):
        self.timer.stop()
        self.controller.stop()
        self.status_label.setText(f'Stopped after {self.controller.epoch_count} rounds')
        self.update_buttons()

    def on_reset(self):
        self.timer.stop()
        self.controller.reset()
        self.refresh_all()
        self.status_label.setText('Perceptron reset')

    def on_tick(self):
        result = self.controller.on_tick()
        if result is None:
            self.timer.stop()
            return
        self.append_epoch_to_table(result)
        self.fill_sample_table()
        self.refresh_plots()
        self.update_stats()
        if self.controller.is_running:
            self.status_label.setText(f"Epoch {result.epoch} done - acc {result.accuracy*100:.1f}% "
                                      f"mistakes={result.mistakes}")

    def on_converged(self, result):
        self.timer.stop()
        self.update_buttons()
        self.refresh_plots()
        self.status_label.setText(f'Converged after {result.epoch} rounds')
        QMessageBox.information(self, 'Converged',
                                'Perfect accuracy achieved! All points classified correctly.')

    def on_classify(self):
        try:
            x = parse_point(self.test_input.text(), self.controller.dim)
        except ValueError as e:
            self.show_error('Test point', e)
            return
        self.add_test_point(x)

    def on_plot_click(self, event):
        if self.controller.dim != 2 or event.inaxes is None or event.xdata is None:
            return
        self.add_test_point(np.array([event.xdata, event.ydata]))

    def add_test_point(self, x):
        if not np.any(self.controller.model.w):
            QMessageBox.information(self, 'Test point',
                                    'Please train the perceptron first before testing new points!')
            return
        self.test_points.append(x)
        state = self.controller.current_state()
        self.status_label.setText(describe_prediction(state.w, state.b, x,
                                                      self.controller.target.side(x)))
        self.refresh_plots()

    # -------------------- display --------------------
    def refresh_all(self):
        self.table.setRowCount(0)
        for result in self.controller.history:
            self.append_epoch_to_table(result)
        self.fill_sample_table()
        target = self.controller.target
        if self.controller.dim == 2:
            self.target_label.setText('Target: ' + format_line_equation(self.config.slope,
                                                                       self.config.intercept))
        else:
            self.target_label.setText('Target: ' + format_plane_equation(*self.config.plane))
        log.debug("refresh with target %r", target)
        self.refresh_plots()
        self.update_stats()

    def update_buttons(self):
        running = self.controller.is_running
        self.start_btn.setEnabled(not running)
        self.stop_btn.setEnabled(running)

    def update_stats(self):
        state = self.controller.current_state()
        correct, wrong, acc = self.controller.model.accuracy(self.controller.dataset)
        self.stat_labels['Training round'].setText(str(state.epoch_count))
        self.stat_labels['Weights'].setText(', '.join(f'{v:.3f}' for v in state.w))
        self.stat_labels['Bias'].setText(f'{state.b:.3f}')
        self.stat_labels['Accuracy'].setText(f'{acc*100:.1f}%')
        self.stat_labels['Correct'].setText(str(correct))
        self.stat_labels['Wrong'].setText(str(wrong))
        self.update_buttons()

    def append_epoch_to_table(self, result):
        w = self.controller.current_state().w
        i = self.table.rowCount()
        self.table.insertRow(i)
        self.table.setItem(i, 0, QTableWidgetItem(str(result.epoch)))
        self.table.setItem(i, 1, QTableWidgetItem(str(result.mistakes)))
        self.table.setItem(i, 2, QTableWidgetItem(f'{result.accuracy*100:.1f}%'))
        self.table.setItem(i, 3, QTableWidgetItem(', '.join(f'{v:.3f}' for v in w)))
        self.table.setItem(i, 4, QTableWidgetItem(f'{self.controller.model.b:.3f}'))
        self.table.scrollToBottom()

    def fill_sample_table(self):
        rows = self.controller.sample_log
        self.sample_table.setRowCount(len(rows))
        for i, rec in enumerate(rows):
            net = rec['net_before']
            wb = ', '.join(f'{v:.3f}' for v in rec['w']) + f'; {rec["b"]:.3f}'
            self.sample_table.setItem(i, 0, QTableWidgetItem(rec['phase']))
            self.sample_table.setItem(i, 1, QTableWidgetItem(', '.join(f'{v:.3f}' for v in rec['sample_x'])))
            self.sample_table.setItem(i, 2, QTableWidgetItem(f'{rec["y"]:+d}'))
            self.sample_table.setItem(i, 3, QTableWidgetItem('' if net is None else f'{net:.3f}'))
            self.sample_table.setItem(i, 4, QTableWidgetItem(str(rec['err'])))
            self.sample_table.setItem(i, 5, QTableWidgetItem(wb))

    def refresh_plots(self):
        self.draw_current_model()
        self.draw_accuracy_plot()

    def classified_test_points(self):
        target = self.controller.target
        out = []
        for x in self.test_points:
            pred = self.controller.predict(x)
            out.append((x, pred, pred == target.side(x)))
        return out

    def draw_current_model(self):
        state = self.controller.current_state()
        dataset = self.controller.dataset
        lim = self.config.coord_range

        if self.controller.dim == 3:
            # keep the user's rotation between redraws
            elev = azim = None
            if self._3d_ax is not None:
                elev, azim = self._3d_ax.elev, self._3d_ax.azim
            self.fig_dec.clf()
            ax = self.fig_dec.add_subplot(111, projection='3d')
            if elev is not None:
                ax.view_init(elev=elev, azim=azim)
            self._3d_ax = ax
            draw_scene_3d(ax, dataset, self.controller.target, state.w, state.b,
                          self.classified_test_points(), lim)
            self.canvas_dec.draw()
            return

        self.fig_dec.clf()
        ax = self.fig_dec.add_subplot(111)
        pts = np.array([x for x, y in dataset]).reshape(-1, 2)
        ys = np.array([y for x, y in dataset])
        pos = pts[ys == 1]
        neg = pts[ys == -1]
        if len(pos) > 0:
            ax.scatter(pos[:, 0], pos[:, 1], s=25, color=POS_COLOR, label='Above Line (+1)')
        if len(neg) > 0:
            ax.scatter(neg[:, 0], neg[:, 1], s=25, color=NEG_COLOR, label='Below Line (-1)')

        xs = np.linspace(lim[0], lim[1], 200)
        target = self.controller.target
        ax.plot(xs, boundary_line(target.w, target.b, xs), '-', linewidth=2, color=TARGET_COLOR,
                label='Target: ' + format_line_equation(self.config.slope, self.config.intercept))

        ys_line = boundary_line(state.w, state.b, xs)
        if ys_line is not None:
            ax.plot(xs, ys_line, '--', linewidth=2, color=LEARNED_COLOR,
                    label=learned_equation(state.w, state.b))
        elif state.w[0] != 0:
            ax.axvline(-state.b / state.w[0], linestyle='--', linewidth=2, color=LEARNED_COLOR,
                       label='Decision Boundary')

        for x, pred, correct in self.classified_test_points():
            color = TARGET_COLOR if not correct else (POS_COLOR if pred == 1 else NEG_COLOR)
            ax.scatter([x[0]], [x[1]], marker='D', s=70, color=color, edgecolors='k')

        ax.set_xlim(*lim)
        ax.set_ylim(*lim)
        ax.set_xlabel('X Coordinate')
        ax.set_ylabel('Y Coordinate')
        ax.set_title('Perceptron Learning Visualisation')
        ax.legend(loc='upper left', fontsize=8)
        self.canvas_dec.draw()

    def draw_accuracy_plot(self):
        history = self.controller.history
        self.fig_acc.clf()
        ax = self.fig_acc.add_subplot(111)
        if history:
            epochs = [r.epoch for r in history]
            ax.plot(epochs, [r.accuracy for r in history], marker='o', linestyle='-',
                    label='accuracy')
            ax2 = ax.twinx()
            ax2.bar(epochs, [r.mistakes for r in history], alpha=0.3, color=LEARNED_COLOR,
                    label='mistakes')
            ax2.set_ylabel('mistakes')
        ax.set_ylim(0, 1.05)
        ax.set_xlabel('Epoch')
        ax.set_ylabel('accuracy')
        self.canvas_acc.draw()
