# ml/utils.py
import numpy as np


def parse_custom_points(txt):
    """
    Parse lines of x1,x2,y  OR x1,x2,x3,y  with y in {+1, -1}.
    Blank lines are skipped; every line must have the same number of fields.
    """
    pts = []
    width = None
    for lineno, ln in enumerate(txt.splitlines(), start=1):
        ln = ln.strip()
        if not ln:
            continue
        parts = [p.strip() for p in ln.split(',')]
        if len(parts) not in (3, 4):
            raise ValueError(f"line {lineno}: expected x1,x2,y OR x1,x2,x3,y")
        if width is not None and len(parts) != width:
            raise ValueError(f"line {lineno}: mixes 2D and 3D points")
        width = len(parts)
        try:
            coords = [float(p) for p in parts[:-1]]
            y = int(float(parts[-1]))
        except ValueError:
            raise ValueError(f"line {lineno}: fields must be numeric")
        if y not in (1, -1):
            raise ValueError(f"line {lineno}: label must be 1 or -1, got {parts[-1]}")
        pts.append((np.array(coords), y))
    return pts


def parse_point(txt, dim):
    """Parse a single 'x1,x2' or 'x1,x2,x3' test point."""
    parts = [p.strip() for p in txt.replace(';', ',').split(',') if p.strip()]
    if len(parts) != dim:
        raise ValueError(f"test point needs {dim} comma separated values")
    try:
        return np.array([float(p) for p in parts])
    except ValueError:
        raise ValueError("test point coordinates must be numeric")


def boundary_line(w, b, xs):
    """
    y values of the 2D boundary w0*x + w1*y + b = 0 over xs.
    Returns None when w1 == 0 (vertical line or no boundary at all).
    """
    if w[1] == 0:
        return None
    xs = np.asarray(xs, dtype=float)
    return -(w[0] * xs + b) / w[1]


def boundary_plane(w, b, xx, yy):
    """z values of the 3D boundary plane over a meshgrid, or None when w2 == 0."""
    if w[2] == 0:
        return None
    return -(w[0] * xx + w[1] * yy + b) / w[2]


def format_line_equation(slope, intercept, prefix='y = ', digits=None):
    if digits is not None:
        slope, intercept = round(slope, digits), round(intercept, digits)
    sign = '+' if intercept >= 0 else '-'
    return f"{prefix}{slope:g}x {sign} {abs(intercept):g}"


def format_plane_equation(a, b, c, prefix='z = '):
    sb = '+' if b >= 0 else '-'
    sc = '+' if c >= 0 else '-'
    return f"{prefix}{a:g}x {sb} {abs(b):g}y {sc} {abs(c):g}"


def learned_equation(w, b):
    """Human readable form of the learned 2D boundary, or None if it is not a function of x."""
    if len(w) != 2 or w[1] == 0:
        return None
    return format_line_equation(-w[0] / w[1], -b / w[1], prefix='Perceptron: y = ', digits=2)


def describe_prediction(w, b, x, true_label=None):
    """
    Multi-line explanation of how the perceptron classifies x, e.g.
    (0.200 x 0.50) + (0.100 x -0.30) + -0.100 = -0.030 -> -1
    """
    terms = ' + '.join(f"({wi:.3f} x {xi:.2f})" for wi, xi in zip(w, x))
    net = float(np.dot(w, x) + b)
    pred = 1 if net >= 0 else -1
    lines = [
        'Test point (' + ', '.join(f"{xi:.2f}" for xi in x) + ')',
        f"{terms} + {b:.3f} = {net:.3f}",
        f"Prediction: {pred:+d}",
    ]
    if true_label is not None:
        lines[-1] += ' (correct)' if pred == true_label else f" (WRONG, correct label {true_label:+d})"
    return '\n'.join(lines)
