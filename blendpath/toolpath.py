"""
toolpath.py
--------------

Stitch ordered offset loops into one continuous 3D
process path with step and traverse transitions.
"""
import numpy as np
import trimesh

from scipy import spatial

from . import discretize

from .constants import (log, res,
                        MOTION_PROCESS,
                        MOTION_STEP,
                        MOTION_TRAVERSE)


class ProcessPath(object):
    """
    An ordered sequence of oriented 3D points.

    Points on the surface have z == 0, transition points
    sit between the surface and the safe traverse height.

    Parameters
    ------------
    positions : (n, 3) float
      Point positions
    motion : (n,) int
      MOTION_PROCESS, MOTION_STEP or MOTION_TRAVERSE per point
    segments : (m, 2) int
      [start, stop) indexes of the points of each loop
    loop_ids : (m,) int
      Loop identifier of each segment
    orientation : (4,) float
      Quaternion (w, x, y, z) shared by every point
    """

    def __init__(self,
                 positions,
                 motion,
                 segments=None,
                 loop_ids=None,
                 orientation=None):
        positions = np.array(positions, dtype=np.float64)
        if not trimesh.util.is_shape(positions, (-1, 3)):
            raise ValueError('positions must be (n, 3)!')
        motion = np.array(motion, dtype=np.int64)
        if motion.shape != (len(positions),):
            raise ValueError('motion must have one entry per point!')
        if segments is None:
            segments = np.zeros((0, 2), dtype=np.int64)
        if loop_ids is None:
            loop_ids = np.arange(len(segments))
        if orientation is None:
            # flat: tool axis along +Z
            orientation = [1.0, 0.0, 0.0, 0.0]

        self.positions = positions
        self.motion = motion
        self.segments_index = np.array(
            segments, dtype=np.int64).reshape((-1, 2))
        self.loop_ids = np.array(loop_ids, dtype=np.int64)
        self.orientation = np.array(orientation, dtype=np.float64)

    def __len__(self):
        return len(self.positions)

    @property
    def orientations(self):
        """
        Orientation quaternion of every point.

        Returns
        ----------
        orientations : (n, 4) float
          (w, x, y, z) per point
        """
        return np.tile(self.orientation, (len(self.positions), 1))

    @property
    def transforms(self):
        """
        Homogeneous pose of every point.

        Returns
        ----------
        transforms : (n, 4, 4) float
          Rotation from the orientation, translation
          from the position
        """
        base = trimesh.transformations.quaternion_matrix(self.orientation)
        transforms = np.tile(base, (len(self.positions), 1, 1))
        transforms[:, :3, 3] = self.positions
        return transforms

    def segments(self):
        """
        The on- surface points of each loop.

        Returns
        ----------
        segments : list of (m, 3) float
          One array per loop in machining order
        """
        return [self.positions[a:b] for a, b in self.segments_index]

    def tobytes(self):
        """
        Every field of the path as bytes, equal for equal paths.
        """
        return b''.join([self.positions.tobytes(),
                         self.motion.tobytes(),
                         self.segments_index.tobytes(),
                         self.loop_ids.tobytes(),
                         self.orientation.tobytes()])


class PathBuilder(object):
    """
    Accumulate points of a process path in order.
    """

    def __init__(self, interpolation_step=None):
        self.interpolation_step = interpolation_step
        self.points = []
        self.motion = []
        self.segments = []
        self.loop_ids = []

    @property
    def last(self):
        return self.points[-1]

    def add(self, point, motion):
        self.points.append(np.array(point, dtype=np.float64))
        self.motion.append(motion)

    def add_loop(self, points, loop_id):
        """
        Add the points of one loop on the surface.
        """
        start = len(self.points)
        for point in points:
            self.add(np.append(point, 0.0), MOTION_PROCESS)
        self.segments.append((start, len(self.points)))
        self.loop_ids.append(loop_id)

    def add_interpolated(self, end, motion):
        """
        Add the points strictly between the last point and
        `end`, neither endpoint is added.
        """
        for point in interpolate(self.last, end, self.interpolation_step):
            self.add(point, motion)

    def add_traverse(self, start, end, height):
        """
        Retract above `start`, move over to above `end`
        and approach `end`.
        """
        retract = np.append(start, height)
        approach = np.append(end, height)

        self.add_interpolated(retract, MOTION_TRAVERSE)
        self.add(retract, MOTION_TRAVERSE)
        self.add_interpolated(approach, MOTION_TRAVERSE)
        self.add(approach, MOTION_TRAVERSE)
        self.add_interpolated(np.append(end, 0.0), MOTION_TRAVERSE)

    def to_path(self):
        return ProcessPath(positions=np.array(self.points).reshape((-1, 3)),
                           motion=self.motion,
                           segments=self.segments,
                           loop_ids=self.loop_ids)


def interpolate(start, end, step=None):
    """
    Points spaced at most `step` apart strictly between
    two points.

    Parameters
    ------------
    start : (d,) float
      First point, not included
    end : (d,) float
      Last point, not included
    step : float or None
      Maximum spacing, None for no points

    Returns
    ------------
    points : (n, d) float
      Interior points, may be empty
    """
    start = np.asanyarray(start, dtype=np.float64)
    end = np.asanyarray(end, dtype=np.float64)
    if step is None:
        return np.zeros((0, len(start)))

    count = int(np.ceil(np.linalg.norm(end - start) / step))
    # linearly interpolate between `start` and `end`
    weights = np.linspace(0.0, 1.0, count + 1)[1:-1].reshape((-1, 1))
    points = (start * (1.0 - weights)) + (end * weights)

    return points


def roll_closed(points, start):
    """
    Rotate a closed path so it begins at its point
    closest to `start`.

    Parameters
    ------------
    points : (n, 2) float
      Closed path, first point repeated at the end
    start : (2,) float
      Point to begin near

    Returns
    ------------
    rolled : (n, 2) float
      Closed path starting at the nearest point
    """
    distance, index = spatial.cKDTree(points[:-1]).query(start, k=1)
    rolled = np.roll(points[:-1], -index, axis=0)
    rolled = np.vstack((rolled, [rolled[0]]))
    return rolled


def stitch(loops,
           safe_traverse_height=None,
           generators=None,
           interpolation_step=None,
           arc_tolerance=None,
           arc_max_angle=None):
    """
    Join ordered offset loops into one process path.

    A loop shallower than the loop before it that was generated
    from it is reached with a step along the surface, starting
    at its point closest to where the previous loop ended. Any
    other loop is reached by retracting to the safe height,
    traversing and approaching.

    Parameters
    ------------
    loops : list of OffsetLoop
      Loops in machining order
    safe_traverse_height : float or None
      Height of traverse moves above the surface
    generators : dict or None
      {loop id : set of loop ids it was generated from}, if
      None any outward loop is treated as nested
    interpolation_step : float or None
      Spacing of points on connecting moves
    arc_tolerance : float or None
      Maximum chord deviation when sampling arcs
    arc_max_angle : float or None
      Maximum angle between arc samples

    Returns
    ------------
    path : ProcessPath
      Continuous path starting and ending at the safe height
    """
    if len(loops) == 0:
        raise ValueError('no loops to stitch!')
    if safe_traverse_height is None:
        safe_traverse_height = res.safe_traverse_height
    if interpolation_step is None:
        interpolation_step = res.interpolation_step

    def points_of(loop):
        return discretize.discretize_loop(loop,
                                          tolerance=arc_tolerance,
                                          max_angle=arc_max_angle)

    path = PathBuilder(interpolation_step=interpolation_step)

    # approach the first point from above
    current = points_of(loops[0])
    path.add(np.append(current[0], safe_traverse_height), MOTION_TRAVERSE)
    path.add_interpolated(np.append(current[0], 0.0), MOTION_TRAVERSE)

    steps = 0
    for loop, following in zip(loops[:-1], loops[1:]):
        path.add_loop(current, loop.id)

        upcoming = points_of(following)
        nested = generators is None or following.id in generators.get(
            loop.id, ())
        if following.offset_distance < loop.offset_distance and nested:
            # step out to the enclosing loop along the surface
            upcoming = roll_closed(upcoming, current[-1])
            path.add_interpolated(np.append(upcoming[0], 0.0), MOTION_STEP)
            steps += 1
        else:
            path.add_traverse(current[-1], upcoming[0], safe_traverse_height)
        current = upcoming

    # finish the last loop and retract
    path.add_loop(current, loops[-1].id)
    retract = np.append(current[-1], safe_traverse_height)
    path.add_interpolated(retract, MOTION_TRAVERSE)
    path.add(retract, MOTION_TRAVERSE)

    log.debug('stitched %d loops with %d steps and %d traverses',
              len(loops), steps, len(loops) - 1 - steps)

    return path.to_path()
