# ui/plot3d.py
import numpy as np
from mpl_toolkits.mplot3d import Axes3D  # noqa: F401  (needed for 3D)

from ml.utils import boundary_plane


def draw_plane(ax, w, b, lim=(-1.0, 1.0), resolution=10, **kwargs):
    """
    Draw the plane w.x + b = 0 over the [lim] square of the x-y plane.
    Returns False when the plane cannot be written as z = f(x, y).
    """
    xx, yy = np.meshgrid(np.linspace(lim[0], lim[1], resolution),
                         np.linspace(lim[0], lim[1], resolution))
    zz = boundary_plane(w, b, xx, yy)
    if zz is None:
        return False
    ax.plot_surface(xx, yy, zz, **kwargs)
    return True


def draw_scene_3d(ax, dataset, target, w, b, test_points=(), lim=(-1.0, 1.0)):
    """
    dataset: sequence of (x, label) with 3D x
    test_points: sequence of (x, prediction, correct) tuples
    """
    pts = np.array([x for x, y in dataset]).reshape(-1, 3)
    ys = np.array([y for x, y in dataset])
    pos = pts[ys == 1]
    neg = pts[ys == -1]
    if len(pos) > 0:
        ax.scatter(pos[:, 0], pos[:, 1], pos[:, 2], color='#4CAF50', s=30, label='Above plane (+1)')
    if len(neg) > 0:
        ax.scatter(neg[:, 0], neg[:, 1], neg[:, 2], color='#2196F3', s=30, label='Below plane (-1)')

    draw_plane(ax, target.w, target.b, lim, alpha=0.2, color='#f44336')
    if np.any(np.asarray(w) != 0):
        draw_plane(ax, w, b, lim, alpha=0.35, color='#FF9800')

    for x, pred, correct in test_points:
        color = '#f44336' if not correct else ('#4CAF50' if pred == 1 else '#2196F3')
        ax.scatter([x[0]], [x[1]], [x[2]], marker='D', s=70, color=color, edgecolors='k')

    ax.set_xlim(*lim)
    ax.set_ylim(*lim)
    ax.set_zlim(*lim)
    ax.set_xlabel('X')
    ax.set_ylabel('Y')
    ax.set_zlabel('Z')
    ax.set_title('3D decision plane (drag to rotate)')
    if len(dataset) > 0:
        ax.legend(loc='upper left', fontsize=8)
