"""
constants.py
--------------

Logging, numeric tolerances and default resolutions.
"""
import logging

import numpy as np


class ToleranceOffset(object):
    """
    Tolerances used when building and offsetting regions.

    Attributes
    ------------
    zero : float
      Floating point numbers smaller than this are zero
    merge : float
      Points closer than this are coincident
    area : float
      Offset pieces with less area than this are
      considered fully consumed
    arc : float
      Relative tolerance for deciding that an offset
      vertex sits on a circle around a boundary vertex
    lineage : float
      Fraction of the offset step allowed as slack when
      matching a loop with the loop that generated it
    """

    def __init__(self, **kwargs):
        self.zero = 1e-12
        self.merge = 1e-8
        self.area = 1e-8
        self.arc = 1e-6
        self.lineage = 1e-2
        self.__dict__.update(kwargs)


class ResolutionPath(object):
    """
    Default resolutions for turning offsets into points.

    Attributes
    ------------
    quad_segs : int
      Segments per quarter circle when offsetting
    arc_tolerance : float
      Maximum chord deviation when sampling arcs
    arc_max_angle : float
      Maximum angle in radians between arc samples
    interpolation_step : float or None
      Spacing of points on connecting moves, or None
      for no intermediate points
    safe_traverse_height : float
      Height above the surface for traverse moves
    """

    def __init__(self, **kwargs):
        self.quad_segs = 16
        self.arc_tolerance = 1e-4
        self.arc_max_angle = np.radians(10.0)
        self.interpolation_step = None
        self.safe_traverse_height = 0.05
        self.__dict__.update(kwargs)


tol = ToleranceOffset()
res = ResolutionPath()

# motion kinds stored per point of a process path
MOTION_PROCESS = 0
MOTION_STEP = 1
MOTION_TRAVERSE = 2

log = logging.getLogger('blendpath')
log.addHandler(logging.NullHandler())
