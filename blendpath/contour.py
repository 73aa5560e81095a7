"""
contour.py
---------------

Contour- parallel process paths: offset boundaries inward
step by step, link the offsets and stitch them together.
"""
import numpy as np

from . import graph
from . import offset
from . import polygons
from . import toolpath

from .constants import log, res
from .exceptions import NoOffsetGeneratedError, ParameterError


def check_parameters(tool_radius,
                     margin=0.0,
                     overlap=0.0,
                     safe_traverse_height=None,
                     interpolation_step=None):
    """
    Make sure process parameters give a positive offset step.

    Parameters
    ------------
    tool_radius : float
      Radius of the tool, must be positive
    margin : float
      Extra distance kept from the boundaries, not negative
    overlap : float
      How much neighboring loops overlap, in [0, 2 * tool_radius)
    safe_traverse_height : float or None
      Height of traverse moves, not negative
    interpolation_step : float or None
      Spacing of connecting moves, positive

    Returns
    ------------
    step : float
      Distance between successive offsets

    Raises
    ------------
    ParameterError
      If any parameter is out of range
    """
    values = {'tool_radius': tool_radius,
              'margin': margin,
              'overlap': overlap}
    if safe_traverse_height is not None:
        values['safe_traverse_height'] = safe_traverse_height
    if interpolation_step is not None:
        values['interpolation_step'] = interpolation_step
    for name, value in values.items():
        try:
            values[name] = float(value)
        except (TypeError, ValueError):
            raise ParameterError('{} must be a number!'.format(name))
        if not np.isfinite(values[name]):
            raise ParameterError('{} must be finite!'.format(name))

    tool_radius = values['tool_radius']
    margin = values['margin']
    overlap = values['overlap']
    step = (2.0 * tool_radius) - overlap

    problems = []
    if tool_radius <= 0.0:
        problems.append('tool radius must be positive')
    if margin < 0.0:
        problems.append('margin must not be negative')
    if overlap < 0.0:
        problems.append('overlap must not be negative')
    if step <= 0.0:
        problems.append('overlap must be less than the tool diameter')
    if values.get('safe_traverse_height', 0.0) < 0.0:
        problems.append('safe traverse height must not be negative')
    if values.get('interpolation_step', 1.0) <= 0.0:
        problems.append('interpolation step must be positive')

    if len(problems) > 0:
        log.warning('bad process parameters: tool radius %s, '
                    'margin %s, overlap %s', tool_radius, margin, overlap)
        raise ParameterError(', '.join(problems) + '!')

    return step


def accumulate_offsets(provider, diagram, start, step):
    """
    Offset inward until the region is consumed.

    Parameters
    ------------
    provider : OffsetProvider
      Object with an `offset(diagram, distance)` method
    diagram : Diagram
      Result of `provider.build`
    start : float
      Distance of the first offset, tool radius plus margin
    step : float
      Distance between successive offsets

    Returns
    ------------
    levels : list of (float, list of OffsetLoop)
      Distance and loops at each depth, shallowest first

    Raises
    ------------
    NoOffsetGeneratedError
      If the first offset is already empty
    """
    start = float(start)
    step = float(step)
    # loop ids restart for every request on a diagram
    diagram.reset()

    levels = []
    while True:
        # multiply rather than accumulate to keep distances exact
        distance = start + (len(levels) * step)
        log.debug('creating offset at distance %f', distance)
        loops = provider.offset(diagram, distance)
        if len(loops) == 0:
            break
        levels.append((distance, loops))

    if len(levels) == 0:
        log.warning('no offsets generated: initial offset %f', start)
        raise NoOffsetGeneratedError(
            'no offsets generated, initial offset {} '
            'is too large for the region!'.format(start))

    log.debug('created %d offset loops at %d depths',
              sum(len(i[1]) for i in levels), len(levels))
    return levels


def process_path(provider,
                 diagram,
                 tool_radius,
                 margin=0.0,
                 overlap=0.0,
                 safe_traverse_height=None,
                 interpolation_step=None,
                 arc_tolerance=None,
                 arc_max_angle=None,
                 exhaust_children=False,
                 step=None):
    """
    Generate a process path from an already built diagram.

    Parameters
    ------------
    provider : OffsetProvider
      Offset provider the diagram was built with
    diagram : Diagram
      Result of `provider.build`
    step : float or None
      Offset step from `check_parameters` if the caller
      already validated, otherwise parameters are checked
    See `contour_parallel` for the remaining parameters.

    Returns
    ------------
    path : ProcessPath
      Stitched path over every offset loop
    """
    if safe_traverse_height is None:
        safe_traverse_height = res.safe_traverse_height
    if step is None:
        step = check_parameters(tool_radius=tool_radius,
                                margin=margin,
                                overlap=overlap,
                                safe_traverse_height=safe_traverse_height,
                                interpolation_step=interpolation_step)

    levels = accumulate_offsets(provider=provider,
                                diagram=diagram,
                                start=float(tool_radius) + float(margin),
                                step=step)

    g = graph.machining_graph(
        levels,
        lineage=lambda a, b, step: provider.lineage(diagram, a, b, step))
    branches = graph.branching_loops(g)
    if len(branches) > 0:
        log.debug('offset regions split or merge at loops %s, '
                  'some regions will need traverse moves', branches)

    order = graph.order_loops(g,
                              closest=polygons.closest_node,
                              exhaust_children=exhaust_children)

    return toolpath.stitch([g.nodes[n]['loop'] for n in order],
                           safe_traverse_height=safe_traverse_height,
                           generators=graph.generators(g),
                           interpolation_step=interpolation_step,
                           arc_tolerance=arc_tolerance,
                           arc_max_angle=arc_max_angle)


def contour_parallel(boundaries,
                     tool_radius,
                     margin=0.0,
                     overlap=0.0,
                     safe_traverse_height=None,
                     provider=None,
                     **kwargs):
    """
    Create a linked contour parallel process path.

    Parameters
    ------------
    boundaries : sequence of (n, 2) float
      Outer boundaries and holes in one planar frame
    tool_radius : float
      Radius of the tool
    margin : float
      Extra distance kept from the boundaries
    overlap : float
      Overlap between neighboring loops
    safe_traverse_height : float or None
      Height of traverse moves above the surface
    provider : OffsetProvider or None
      Offset provider, a new BufferOffsetter if None
    kwargs : dict
      interpolation_step, arc_tolerance, arc_max_angle
      and exhaust_children passed to `process_path`

    Returns
    ------------
    path : ProcessPath
      Stitched path over every offset loop
    """
    if provider is None:
        provider = offset.BufferOffsetter()

    # validate before building anything
    step = check_parameters(
        tool_radius=tool_radius,
        margin=margin,
        overlap=overlap,
        safe_traverse_height=safe_traverse_height,
        interpolation_step=kwargs.get('interpolation_step'))

    # a fresh diagram per call keeps concurrent calls independent
    diagram = provider.build(boundaries)

    return process_path(provider=provider,
                        diagram=diagram,
                        tool_radius=tool_radius,
                        margin=margin,
                        overlap=overlap,
                        safe_traverse_height=safe_traverse_height,
                        step=step,
                        **kwargs)
