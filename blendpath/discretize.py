"""
discretize.py
----------------

Expand the linear and circular edges of offset loops
into points.
"""
import numpy as np

from .constants import res, tol


def arc_center(start, end, radius, clockwise):
    """
    Find the center of the shorter arc between two points.

    Parameters
    ------------
    start : (2,) float
      Start of the arc
    end : (2,) float
      End of the arc
    radius : float
      Arc radius
    clockwise : bool
      Direction travelled from start to end

    Returns
    ------------
    center : (2,) float
      Arc center
    """
    start = np.asanyarray(start, dtype=np.float64)
    end = np.asanyarray(end, dtype=np.float64)

    chord = end - start
    length = np.linalg.norm(chord)
    midpoint = (start + end) / 2.0
    if length < tol.merge:
        return midpoint

    # left of the chord for counter- clockwise arcs
    normal = np.array([-chord[1], chord[0]]) / length
    if clockwise:
        normal *= -1.0

    # a chord slightly longer than the diameter is numerical noise
    height = np.sqrt(max(radius ** 2 - (length / 2.0) ** 2, 0.0))

    return midpoint + normal * height


def arc_steps(radius, sweep, tolerance=None, max_angle=None):
    """
    How many pieces an arc must be split into to keep every
    chord within `tolerance` of the arc.

    Parameters
    ------------
    radius : float
      Arc radius
    sweep : float
      Swept angle in radians
    tolerance : float or None
      Maximum distance between chord and arc
    max_angle : float or None
      Maximum angle of each piece

    Returns
    ------------
    count : int
      Number of pieces, at least one
    """
    if tolerance is None:
        tolerance = res.arc_tolerance
    if max_angle is None:
        max_angle = res.arc_max_angle

    # chord deviation of an angle `t` is r * (1 - cos(t / 2))
    ratio = np.clip(1.0 - (tolerance / radius), -1.0, 1.0)
    angle = min(2.0 * np.arccos(ratio), max_angle)
    if angle < tol.zero:
        raise ValueError('arc resolution too fine!')

    return max(1, int(np.ceil(abs(sweep) / angle)))


def discretize_arc(start, end, radius, clockwise,
                   tolerance=None, max_angle=None):
    """
    Sample the shorter arc between two points.

    Parameters
    ------------
    start : (2,) float
      Start of the arc
    end : (2,) float
      End of the arc
    radius : float
      Arc radius
    clockwise : bool
      Direction travelled from start to end
    tolerance : float or None
      Maximum chord deviation
    max_angle : float or None
      Maximum angle between samples

    Returns
    ------------
    points : (n, 2) float
      Start point and interior samples, the end
      point is left to the next edge
    """
    start = np.asanyarray(start, dtype=np.float64)
    end = np.asanyarray(end, dtype=np.float64)

    center = arc_center(start, end, radius, clockwise)
    angle_start = np.arctan2(*(start - center)[::-1])
    angle_end = np.arctan2(*(end - center)[::-1])

    if clockwise:
        sweep = -((angle_start - angle_end) % (np.pi * 2))
    else:
        sweep = (angle_end - angle_start) % (np.pi * 2)

    count = arc_steps(radius=radius,
                      sweep=sweep,
                      tolerance=tolerance,
                      max_angle=max_angle)
    theta = angle_start + np.linspace(0.0, sweep, count + 1)[:-1]

    points = center + radius * np.column_stack(
        (np.cos(theta), np.sin(theta)))
    # keep the exact vertex rather than its round trip
    points[0] = start

    return points


def discretize_loop(loop, tolerance=None, max_angle=None):
    """
    Expand an offset loop into a closed sequence of points.

    Straight edges contribute their start vertex, arcs their
    start vertex plus interior samples.

    Parameters
    ------------
    loop : OffsetLoop
      Loop to discretize
    tolerance : float or None
      Maximum chord deviation for arcs
    max_angle : float or None
      Maximum angle between arc samples

    Returns
    ------------
    points : (n, 2) float
      Closed path, the first point is repeated at the end
    """
    vertices = loop.vertices
    count = len(vertices)

    chunks = []
    for i, vertex in enumerate(vertices):
        following = vertices[(i + 1) % count]
        if vertex.is_arc:
            chunks.append(discretize_arc(
                start=vertex.point,
                end=following.point,
                radius=vertex.radius,
                clockwise=vertex.clockwise,
                tolerance=tolerance,
                max_angle=max_angle))
        else:
            chunks.append([vertex.point])
    chunks.append([vertices[0].point])

    return np.vstack(chunks)
