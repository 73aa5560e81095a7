"""
polygons.py
---------------

Turn boundary point lists into validated planar regions
and query distances against them.
"""
import functools

import numpy as np
import shapely
import trimesh

from scipy import spatial
from shapely.geometry import LinearRing, Polygon
from shapely.geometry.polygon import orient

from .constants import tol
from .exceptions import ConfigurationError


def boundary_array(boundary):
    """
    Validate a single boundary and return it as an array.

    Parameters
    ------------
    boundary : (n, 2) float
      Ordered points of a closed boundary, the
      last point implicitly connects to the first

    Returns
    ------------
    points : (m, 2) float
      Boundary points without a repeated closing point

    Raises
    ------------
    ConfigurationError
      If the boundary is degenerate or self-intersecting
    """
    try:
        points = np.array(boundary, dtype=np.float64)
    except (TypeError, ValueError):
        raise ConfigurationError('boundary is not numeric!')
    if not trimesh.util.is_shape(points, (-1, 2)):
        raise ConfigurationError(
            'boundary must be (n, 2), not {}!'.format(points.shape))
    if not np.isfinite(points).all():
        raise ConfigurationError('boundary contains non-finite values!')

    # accept closed input by dropping the closing point
    if len(points) > 1 and np.linalg.norm(
            points[0] - points[-1]) < tol.merge:
        points = points[:-1]
    if len(points) < 3:
        raise ConfigurationError(
            'boundary needs 3 points, got {}!'.format(len(points)))

    # adjacent points including last -> first
    edges = np.roll(points, -1, axis=0) - points
    if (np.linalg.norm(edges, axis=1) < tol.merge).any():
        raise ConfigurationError('boundary has coincident adjacent points!')

    ring = LinearRing(points)
    if not ring.is_simple:
        raise ConfigurationError('boundary is self-intersecting!')
    if Polygon(ring).area < tol.area:
        raise ConfigurationError('boundary encloses no area!')

    return points


def region(boundaries):
    """
    Build the region enclosed by a collection of boundaries.

    Boundaries nested inside an odd number of other boundaries
    are holes, so a collection may hold several disjoint outer
    boundaries each with their own holes.

    Parameters
    ------------
    boundaries : sequence of (n, 2) float
      Outer boundaries and holes in one planar frame

    Returns
    ------------
    region : shapely.geometry.Polygon or MultiPolygon
      Area enclosed by the boundaries
    vertices : (m, 2) float
      Every vertex of every boundary

    Raises
    ------------
    ConfigurationError
      If any boundary is malformed or boundaries touch
    """
    if boundaries is None or len(boundaries) == 0:
        raise ConfigurationError('no boundaries passed!')

    arrays = [boundary_array(b) for b in boundaries]
    rings = [LinearRing(a) for a in arrays]

    # boundaries may nest but never cross or touch
    tree = shapely.STRtree(rings)
    hits = tree.query(rings, predicate='intersects')
    crossing = hits[:, hits[0] < hits[1]]
    if crossing.shape[1] > 0:
        a, b = crossing[:, 0]
        raise ConfigurationError(
            'boundary {} intersects boundary {}!'.format(a, b))

    # even- odd nesting: largest first so each hole is
    # cut from the polygon it sits inside of
    polygons = sorted((Polygon(r) for r in rings),
                      key=lambda p: -p.area)
    result = functools.reduce(
        lambda a, b: a.symmetric_difference(b), polygons)

    if not result.is_valid or result.area < tol.area:
        raise ConfigurationError(
            'boundaries do not enclose a valid region: {}'.format(
                shapely.is_valid_reason(result)))

    return result, np.vstack(arrays)


def pieces(geometry, min_area=None):
    """
    Split a geometry into its polygons in a repeatable order.

    Parameters
    ------------
    geometry : shapely.geometry
      Polygon, MultiPolygon or collection
    min_area : float or None
      Polygons smaller than this are dropped

    Returns
    ------------
    pieces : list of shapely.geometry.Polygon
      Counter- clockwise exteriors and clockwise holes,
      sorted by descending area then centroid
    """
    if min_area is None:
        min_area = tol.area
    if geometry is None or geometry.is_empty:
        return []

    # single polygons don't have `geoms`
    candidates = getattr(geometry, 'geoms', [geometry])
    result = [orient(p, sign=1.0) for p in candidates
              if p.geom_type == 'Polygon' and p.area >= min_area]

    result.sort(key=lambda p: (-round(p.area, 9),) +
                tuple(np.round(p.centroid.coords[0], 9)))

    return result


def boundary_distance(polygon, points):
    """
    Find the distance between a polygon's boundary and an
    array of points.

    Parameters
    -------------
    polygon : shapely.geometry.Polygon
      Polygon to query
    points : (n, 2) float
      2D points

    Returns
    ------------
    distance : (n,) float
      Minimum distance from each point to polygon boundary
    """
    points = np.asanyarray(points, dtype=np.float64)
    distance = shapely.distance(
        polygon.boundary, shapely.points(points))
    return np.asanyarray(distance, dtype=np.float64)


def closest_node(g, node, node_options):
    """
    Find the option whose loop centroid is closest to the
    centroid of the loop at `node`.

    Parameters
    ------------
    g : networkx.DiGraph
      Machining graph with a `loop` attribute per node
    node : hashable
      Node key in g
    node_options : list
      Candidate node keys

    Returns
    ------------
    closest : hashable
      Member of node_options closest to node
    """
    node_options = [i for i in node_options if i != node]
    if len(node_options) == 1:
        return node_options[0]

    origin = g.nodes[node]['loop'].polygon.centroid.coords[0]
    others = [g.nodes[i]['loop'].polygon.centroid.coords[0]
              for i in node_options]

    tree = spatial.cKDTree(others)

    distance, index = tree.query(origin, k=1)
    closest = node_options[index]
    return closest
