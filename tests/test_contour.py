import unittest

import numpy as np

import blendpath

from blendpath import constants, contour, graph, offset, toolpath
from blendpath.exceptions import (ConfigurationError,
                                  NoOffsetGeneratedError,
                                  ParameterError)

from generic import square, l_shape, dumbbell, triangle


class ForbiddenOffsetter(offset.BufferOffsetter):
    """
    Fails if any geometry work is attempted.
    """

    def build(self, boundaries):
        raise AssertionError('build should not be called!')

    def offset(self, diagram, distance):
        raise AssertionError('offset should not be called!')


class CountingOffsetter(offset.BufferOffsetter):

    def __init__(self, *args, **kwargs):
        super(CountingOffsetter, self).__init__(*args, **kwargs)
        self.distances = []

    def offset(self, diagram, distance):
        self.distances.append(distance)
        return super(CountingOffsetter, self).offset(diagram, distance)


def traverse_count(path):
    """
    Number of retract- traverse- approach transitions.
    """
    # each one adds a retract and an approach point
    return ((path.motion == constants.MOTION_TRAVERSE).sum() - 2) // 2


class ParameterTest(unittest.TestCase):

    def test_step(self):
        assert np.isclose(contour.check_parameters(1.0), 2.0)
        assert np.isclose(contour.check_parameters(
            1.0, margin=0.5, overlap=0.5), 1.5)

    def test_bad(self):
        bad = [dict(tool_radius=0.0),
               dict(tool_radius=-1.0),
               dict(tool_radius=1.0, margin=-0.1),
               dict(tool_radius=1.0, overlap=2.0),
               dict(tool_radius=1.0, overlap=3.0),
               dict(tool_radius=1.0, overlap=-0.1),
               dict(tool_radius=1.0, safe_traverse_height=-1.0),
               dict(tool_radius=1.0, interpolation_step=0.0),
               dict(tool_radius=None),
               dict(tool_radius=np.inf)]
        for kwargs in bad:
            with self.assertRaises(ParameterError):
                contour.check_parameters(**kwargs)

    def test_checked_first(self):
        # overlap of a full tool diameter is rejected before offsetting
        with self.assertRaises(ParameterError):
            contour.contour_parallel([square()],
                                     tool_radius=1.0,
                                     overlap=2.0,
                                     provider=ForbiddenOffsetter())


class AccumulateTest(unittest.TestCase):

    def test_square(self):
        provider = CountingOffsetter()
        diagram = provider.build([square()])
        levels = contour.accumulate_offsets(
            provider, diagram, start=1.0, step=2.0)

        assert [d for d, loops in levels] == [1.0, 3.0]
        assert all(len(loops) == 1 for d, loops in levels)
        # stops at the first empty offset
        assert provider.distances == [1.0, 3.0, 5.0]

    def test_margin_overlap(self):
        provider = CountingOffsetter()
        diagram = provider.build([square(20.0)])
        levels = contour.accumulate_offsets(
            provider, diagram, start=1.5, step=1.5)
        distances = [d for d, loops in levels]
        assert np.allclose(distances, 1.5 + 1.5 * np.arange(len(distances)))
        assert distances[-1] < 10.0

    def test_repeated(self):
        provider = offset.BufferOffsetter()
        diagram = provider.build([square(40.0), triangle()])
        first = contour.accumulate_offsets(
            provider, diagram, start=1.0, step=2.0)
        again = contour.accumulate_offsets(
            provider, diagram, start=1.0, step=2.0)
        # ids restart for each request on one diagram
        assert ([[i.id for i in loops] for d, loops in first] ==
                [[i.id for i in loops] for d, loops in again])

    def test_too_large(self):
        provider = offset.BufferOffsetter()
        diagram = provider.build([square()])
        with self.assertRaises(NoOffsetGeneratedError):
            contour.accumulate_offsets(
                provider, diagram, start=6.0, step=12.0)


class ContourTest(unittest.TestCase):

    def test_square(self):
        path = blendpath.contour_parallel([square()],
                                          tool_radius=1.0,
                                          safe_traverse_height=0.25)
        # one loop per depth, deepest first
        segments = path.segments()
        assert len(segments) == 2
        assert np.allclose(segments[0][:, :2].min(axis=0), [3, 3])
        assert np.allclose(segments[1][:, :2].min(axis=0), [1, 1])

        # only step transitions
        assert traverse_count(path) == 0
        assert np.isclose(path.positions[0, 2], 0.25)
        assert np.isclose(path.positions[-1, 2], 0.25)
        assert np.allclose(path.positions[1:-1, 2], 0.0)
        # the step starts where the inner loop ended
        assert np.isclose(np.linalg.norm(
            segments[1][0] - segments[0][-1]), np.sqrt(8.0))

    def test_disjoint(self):
        path = blendpath.contour_parallel(
            [square(), square(origin=(50, 0))],
            tool_radius=1.0,
            safe_traverse_height=0.25)

        segments = path.segments()
        assert len(segments) == 4
        # first square finished inside out, then the second
        x = [s[:, 0].min() for s in segments]
        assert np.allclose(x, [3, 1, 53, 51])
        assert traverse_count(path) == 1

        # the jump lands on the deepest loop of the other square
        jump = np.nonzero(np.diff(path.positions[:, 2]) > 0)[0]
        assert path.positions[jump[0] + 2, 0] > 50

    def test_split(self):
        path = blendpath.contour_parallel([dumbbell()],
                                          tool_radius=1.0,
                                          safe_traverse_height=0.25)
        assert len(path.segments()) == 3
        assert traverse_count(path) == 1

        path = blendpath.contour_parallel([dumbbell()],
                                          tool_radius=1.0,
                                          safe_traverse_height=0.25,
                                          exhaust_children=True)
        assert len(path.segments()) == 3
        assert traverse_count(path) == 1
        # the outer loop around both pieces comes last
        last = path.segments()[-1]
        assert np.ptp(last[:, 0]) > 20.0

    def test_hole(self):
        path = blendpath.contour_parallel(
            [square(20.0), square(4.0, origin=(8, 8))],
            tool_radius=1.0,
            safe_traverse_height=0.25)
        assert len(path.segments()) == 4
        # two chains, exterior and around the hole
        assert traverse_count(path) == 1

    def test_rounded_hole(self):
        # loops around a hole step outward from each other
        provider = offset.BufferOffsetter()
        diagram = provider.build([square(40.0), triangle()])
        levels = [(d, provider.offset(diagram, d))
                  for d in [1.0, 3.0, 5.0, 7.0]]
        g = graph.machining_graph(
            levels,
            lambda a, b, step: provider.lineage(diagram, a, b, step))

        holes = [loops[1] for d, loops in levels[::-1]]
        path = toolpath.stitch(holes,
                               safe_traverse_height=0.25,
                               generators=graph.generators(g))
        assert len(path.segments()) == 4
        assert traverse_count(path) == 0

    def test_spacing(self):
        # every loop keeps one distance from the boundary
        path = blendpath.contour_parallel([l_shape()],
                                          tool_radius=0.5,
                                          safe_traverse_height=0.25)
        segments = path.segments()
        assert len(segments) == 2
        region = blendpath.polygons.region([l_shape()])[0]
        for segment, expected in zip(segments, [1.5, 0.5]):
            distance = blendpath.polygons.boundary_distance(
                region, segment[:, :2])
            assert np.allclose(distance, expected)

    def test_interpolated(self):
        path = blendpath.contour_parallel(
            [square(), square(origin=(50, 0))],
            tool_radius=1.0,
            safe_traverse_height=0.25,
            interpolation_step=0.05)
        z = path.positions[:, 2]
        assert np.isclose(z[0], 0.25)
        assert np.isclose(z[-1], 0.25)
        traverse = path.motion == constants.MOTION_TRAVERSE
        assert (z[traverse] > 0.0).all()
        assert np.allclose(z[~traverse], 0.0)

    def test_deterministic(self):
        kwargs = dict(tool_radius=0.75,
                      overlap=0.1,
                      safe_traverse_height=0.25,
                      interpolation_step=0.2)
        boundaries = [dumbbell(), square(4.0, origin=(3, 3))]
        a = blendpath.contour_parallel(boundaries, **kwargs)
        b = blendpath.contour_parallel(boundaries, **kwargs)
        assert a.tobytes() == b.tobytes()

    def test_errors(self):
        with self.assertRaises(NoOffsetGeneratedError):
            blendpath.contour_parallel([square()], tool_radius=6.0)
        with self.assertRaises(ConfigurationError):
            blendpath.contour_parallel(
                [[[0, 0], [1, 1], [1, 0], [0, 1]]], tool_radius=0.1)
        with self.assertRaises(ParameterError):
            blendpath.contour_parallel([square()], tool_radius=0.0)


if __name__ == '__main__':
    unittest.main()
