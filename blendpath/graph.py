"""
graph.py
---------------

Build the machining graph over offset loops and order
its loops for machining.
"""
import networkx as nx

from .constants import log


def machining_graph(levels, lineage):
    """
    Build a graph linking each offset loop to the loops it
    gave rise to at the next depth.

    Parameters
    ------------
    levels : list of (float, list of OffsetLoop)
      Offset distance and loops at each depth, shallowest first
    lineage : function
      lineage(shallow, deep, step) -> [(shallow id, deep id)]

    Returns
    ------------
    g : networkx.DiGraph
      Nodes are loop ids with `offset_distance` and `loop`
      attributes, edges point from shallow to deep loops
    """
    g = nx.DiGraph()
    for distance, loops in levels:
        for loop in loops:
            g.add_node(loop.id,
                       offset_distance=distance,
                       loop=loop)

    for (d_a, shallow), (d_b, deep) in zip(levels[:-1], levels[1:]):
        g.add_edges_from(lineage(shallow, deep, d_b - d_a))

    # every edge has to go deeper which also rules out cycles
    for a, b in g.edges():
        if not g.nodes[b]['offset_distance'] > g.nodes[a]['offset_distance']:
            raise ValueError(
                'loop {} does not lie deeper than loop {}!'.format(b, a))

    log.debug('machining graph has %d loops and %d links',
              len(g), g.number_of_edges())
    return g


def order_loops(g, closest=None, exhaust_children=False):
    """
    Order every loop of a machining graph for machining.

    Repeatedly take the deepest unordered loop, then walk outward
    through the loops that generated it while they are unordered.
    Each region is finished from its deepest loop outward before
    the next deepest region is started.

    When a region split, only one of its deeper pieces is walked
    out through the loop it split from and the others are picked
    up by later deepest passes. With `exhaust_children` every piece
    below a loop is finished before stepping out to that loop.

    Parameters
    ------------
    g : networkx.DiGraph
      Result of `machining_graph`
    closest : function or None
      closest(g, node, options) picks which generator to
      step out to when a loop has several unordered ones
    exhaust_children : bool
      Finish all loops below a generator before it

    Returns
    ------------
    ordered : list
      Every node of g exactly once
    """
    # ties between equally deep loops go to the first added
    rank = {n: i for i, n in enumerate(g.nodes())}
    unordered = set(g.nodes())
    ordered = []

    def deepest(options):
        return max(options, key=lambda n: (
            g.nodes[n]['offset_distance'], -rank[n]))

    def take(node):
        unordered.remove(node)
        ordered.append(node)
        log.debug('ordered loop %s at depth %f',
                  node, g.nodes[node]['offset_distance'])

    while len(unordered) > 0:
        take(deepest(unordered))

        while True:
            current = ordered[-1]
            options = [n for n in g.predecessors(current)
                       if n in unordered]
            if len(options) == 0:
                break
            if closest is None or len(options) == 1:
                parent = options[0]
            else:
                parent = closest(g, current, options)

            if exhaust_children:
                pending = [n for n in nx.descendants(g, parent)
                           if n in unordered]
                if len(pending) > 0:
                    take(deepest(pending))
                    continue

            take(parent)

    return ordered


def generators(g):
    """
    Find the loops each loop was generated from.

    Parameters
    ------------
    g : networkx.DiGraph
      Machining graph

    Returns
    ------------
    generators : dict
      {node : set of predecessor nodes}
    """
    return {n: set(g.predecessors(n)) for n in g.nodes()}


def branching_loops(g):
    """
    Find loops where the offset region split or merged.

    Parameters
    ------------
    g : networkx.DiGraph
      Machining graph

    Returns
    ------------
    branching : list
      Nodes with more than one generator or more than
      one generated loop, in graph order
    """
    return [n for n in g.nodes()
            if g.in_degree(n) > 1 or g.out_degree(n) > 1]
