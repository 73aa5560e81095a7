"""
offset.py
------------

Planar offsetting: build a region from boundaries and
produce the closed loops lying a fixed distance inside it.

The provider is an object with `build`, `offset` and `lineage`
so the buffer based implementation here can be swapped for a
Voronoi or straight skeleton offsetter.
"""
import itertools

import numpy as np

from scipy import spatial
from shapely.geometry import LinearRing, Polygon

from . import discretize
from . import polygons

from .constants import log, res, tol


class OffsetVertex(object):
    """
    A point on an offset loop, tagged with the kind of
    edge that runs to the next vertex of the loop.

    Parameters
    ------------
    point : (2,) float
      Vertex position
    radius : float or None
      Radius of the arc to the next vertex,
      None for a straight edge
    clockwise : bool
      Curvature sign of the arc to the next vertex
    """
    __slots__ = ('point', 'radius', 'clockwise')

    def __init__(self, point, radius=None, clockwise=False):
        self.point = np.array(point, dtype=np.float64)
        self.radius = None if radius is None else float(radius)
        self.clockwise = bool(clockwise)

    @property
    def is_arc(self):
        return self.radius is not None

    def __repr__(self):
        if self.is_arc:
            return 'OffsetVertex({}, arc r={:.6g} {})'.format(
                self.point.tolist(),
                self.radius,
                'cw' if self.clockwise else 'ccw')
        return 'OffsetVertex({}, linear)'.format(self.point.tolist())


class OffsetLoop(object):
    """
    A closed contour at a fixed distance inside a region.

    Parameters
    ------------
    vertices : list of OffsetVertex
      Loop vertices, the closing vertex is not repeated
    offset_distance : float
      Distance from the original boundaries
    id : int
      Identifier unique within the diagram that made it
    is_hole : bool
      True if the loop runs around a hole of the region
    piece : shapely.geometry.Polygon or None
      Offset region piece the loop bounds
    """

    def __init__(self,
                 vertices,
                 offset_distance,
                 id,
                 is_hole=False,
                 piece=None):
        self.vertices = list(vertices)
        self.offset_distance = float(offset_distance)
        self.id = int(id)
        self.is_hole = bool(is_hole)
        self.piece = piece

    @property
    def points(self):
        """
        Vertex positions of the loop.

        Returns
        ----------
        points : (n, 2) float
          One row per vertex, not closed
        """
        return np.array([v.point for v in self.vertices],
                        dtype=np.float64)

    @property
    def polygon(self):
        """
        The area enclosed by this loop alone.

        Returns
        ----------
        polygon : shapely.geometry.Polygon
          Polygon with this loop as its exterior,
          arcs sampled along the curve
        """
        return Polygon(discretize.discretize_loop(self))

    def __len__(self):
        return len(self.vertices)

    def __repr__(self):
        return 'OffsetLoop(id={}, distance={:.6g}, vertices={}{})'.format(
            self.id,
            self.offset_distance,
            len(self.vertices),
            ', hole' if self.is_hole else '')


class Diagram(object):
    """
    Offsetting state built from one boundary collection.

    The region is fixed once built. Loop ids are numbered per
    request: `reset` restarts them so repeated requests on one
    diagram give identical loops. Not safe to share between
    threads while a request is running.

    Parameters
    ------------
    region : shapely.geometry.Polygon or MultiPolygon
      Area enclosed by the boundaries
    vertices : (n, 2) float
      Every boundary vertex, candidate arc centers
    """

    def __init__(self, region, vertices):
        self.region = region
        self.vertices = np.asanyarray(vertices, dtype=np.float64)
        self.tree = spatial.cKDTree(self.vertices)
        self.reset()

    def reset(self):
        """
        Restart loop ids at zero for a new request.
        """
        self._ids = itertools.count()

    def next_id(self):
        return next(self._ids)


class OffsetProvider(object):
    """
    Interface for building diagrams and offsetting them.
    """

    def build(self, boundaries):
        raise NotImplementedError

    def offset(self, diagram, distance):
        raise NotImplementedError

    def lineage(self, diagram, shallow, deep, step):
        raise NotImplementedError


class BufferOffsetter(OffsetProvider):
    """
    Offset provider using shapely's inward buffer.

    Parameters
    ------------
    quad_segs : int
      Segments per quarter circle for round joins
    min_area : float
      Pieces smaller than this are considered collapsed
    """

    def __init__(self, quad_segs=None, min_area=None):
        if quad_segs is None:
            quad_segs = res.quad_segs
        if min_area is None:
            min_area = tol.area
        self.quad_segs = int(quad_segs)
        self.min_area = float(min_area)

    def build(self, boundaries):
        """
        Build an offsetting diagram from boundaries.

        Parameters
        ------------
        boundaries : sequence of (n, 2) float
          Outer boundaries and holes

        Returns
        ------------
        diagram : Diagram
          State for `offset` and `lineage`

        Raises
        ------------
        ConfigurationError
          If the boundaries are malformed
        """
        region, vertices = polygons.region(boundaries)
        log.debug('built diagram from %d boundaries, %d vertices',
                  len(boundaries), len(vertices))
        return Diagram(region=region, vertices=vertices)

    def offset(self, diagram, distance):
        """
        Find the loops lying exactly `distance` inside the
        boundaries of a diagram.

        Parameters
        ------------
        diagram : Diagram
          Result of `build`
        distance : float
          Positive inward offset distance

        Returns
        ------------
        loops : list of OffsetLoop
          Exterior loop then hole loops of each remaining
          piece, empty once every piece has collapsed
        """
        distance = float(distance)
        if not distance > 0.0:
            raise ValueError('offset distance must be positive!')

        buffered = diagram.region.buffer(
            -distance, quad_segs=self.quad_segs)

        loops = []
        for piece in polygons.pieces(buffered, min_area=self.min_area):
            rings = [(piece.exterior, False)]
            rings.extend((i, True) for i in piece.interiors)
            for ring, is_hole in rings:
                # shapely repeats the first point to close rings
                points = np.array(ring.coords, dtype=np.float64)[:-1]
                if len(points) < 3:
                    continue
                loop = OffsetLoop(
                    vertices=ring_vertices(diagram, points, distance),
                    offset_distance=distance,
                    id=diagram.next_id(),
                    is_hole=is_hole,
                    piece=piece)
                loops.append(loop)

        log.debug('offset %f produced %d loops', distance, len(loops))
        return loops

    def lineage(self, diagram, shallow, deep, step):
        """
        Find which loops at one depth gave rise to which
        loops at the next depth.

        A deep loop comes from a shallow loop when it lies inside
        the shallow loop's piece and within one step of it.

        Parameters
        ------------
        diagram : Diagram
          Diagram both sets of loops were produced from
        shallow : list of OffsetLoop
          Loops at distance d
        deep : list of OffsetLoop
          Loops at distance d + step
        step : float
          Distance between the two depths

        Returns
        ------------
        edges : list of (int, int)
          (shallow id, deep id) pairs
        """
        if len(shallow) == 0 or len(deep) == 0:
            return []

        # arcs are chords in the buffer and sampled here
        depth = max(loop.offset_distance for loop in deep)
        sagitta = depth * (1.0 - np.cos(np.pi / (4.0 * self.quad_segs)))
        slack = ((tol.lineage * step) + (2.0 * sagitta) +
                 (2.0 * res.arc_tolerance))

        # rings follow the arcs rather than cutting across them
        shallow_rings = [LinearRing(discretize.discretize_loop(i))
                         for i in shallow]
        edges = []
        for child in deep:
            child_ring = LinearRing(discretize.discretize_loop(child))
            for parent, parent_ring in zip(shallow, shallow_rings):
                if not parent.piece.contains(child_ring):
                    continue
                if parent_ring.distance(child_ring) <= step + slack:
                    edges.append((parent.id, child.id))
        return edges


def ring_vertices(diagram, points, distance):
    """
    Tag the points of an offset ring with their edge kind.

    An edge whose endpoints both sit exactly `distance` from the
    same boundary vertex is an arc around that vertex. Runs of
    arc edges around the same vertex are merged into one edge.

    Parameters
    ------------
    diagram : Diagram
      Holds the boundary vertices
    points : (n, 2) float
      Ring points, not closed
    distance : float
      Offset distance of the ring

    Returns
    ------------
    vertices : list of OffsetVertex
      Tagged vertices of the ring
    """
    points = np.asanyarray(points, dtype=np.float64)
    count = len(points)
    slack = tol.arc * max(1.0, distance)

    # boundary vertices on a circle of `distance` around each point
    near = diagram.tree.query_ball_point(points, r=distance + slack)
    centers = []
    for point, index in zip(points, near):
        index = np.array(sorted(index), dtype=np.int64)
        if len(index) > 0:
            radii = np.linalg.norm(diagram.vertices[index] - point, axis=1)
            index = index[radii > distance - slack]
        centers.append(set(index.tolist()))

    # (center index or None, sweep) for the edge leaving each point
    edges = []
    for i in range(count):
        j = (i + 1) % count
        common = centers[i] & centers[j]
        if len(common) == 0 or np.linalg.norm(
                points[j] - points[i]) < tol.merge:
            edges.append((None, 0.0))
            continue
        center = diagram.vertices[min(common)]
        a = points[i] - center
        b = points[j] - center
        sweep = np.arctan2(a[0] * b[1] - a[1] * b[0], np.dot(a, b))
        edges.append((min(common), sweep))

    # drop points in the middle of an arc around one center
    keep = np.ones(count, dtype=bool)
    swept = edges[0][1]
    for i in range(1, count):
        previous = edges[i - 1][0]
        current, sweep = edges[i]
        if (current is not None and current == previous and
                np.sign(sweep) == np.sign(swept) and
                abs(swept + sweep) < np.pi - tol.arc):
            keep[i] = False
            swept += sweep
        else:
            swept = sweep

    vertices = []
    for i in np.nonzero(keep)[0]:
        center, sweep = edges[i]
        if center is None:
            vertices.append(OffsetVertex(points[i]))
        else:
            vertices.append(OffsetVertex(points[i],
                                         radius=distance,
                                         clockwise=sweep < 0.0))
    return vertices
