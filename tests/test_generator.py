import unittest

import numpy as np

from blendpath import ProcessPathGenerator
from blendpath.exceptions import (ConfigurationError,
                                  IncompleteConfigurationError,
                                  NoOffsetGeneratedError,
                                  ParameterError)

from generic import square


class GeneratorTest(unittest.TestCase):

    def test_create(self):
        generator = ProcessPathGenerator(tool_radius=1.0,
                                         safe_traverse_height=0.1)
        assert not generator.is_configured
        generator.configure([square()])
        assert generator.is_configured

        path = generator.create_process_path()
        assert len(path.segments()) == 2
        assert np.isclose(path.positions[0, 2], 0.1)
        assert np.isclose(path.positions[-1, 2], 0.1)

        # cached parameters can change between paths
        generator.tool_radius = 0.5
        assert len(generator.create_process_path().segments()) == 5

    def test_repeatable(self):
        generator = ProcessPathGenerator(tool_radius=0.8,
                                         overlap=0.2,
                                         interpolation_step=0.1)
        generator.configure([square(), square(origin=(50, 0))])
        a = generator.create_process_path()
        b = generator.create_process_path()
        assert a.tobytes() == b.tobytes()

    def test_repeated_ids(self):
        generator = ProcessPathGenerator(tool_radius=1.0)
        generator.configure([square(), square(origin=(50, 0))])
        first = generator.create_process_path()
        for i in range(3):
            path = generator.create_process_path()
            assert path.loop_ids.tolist() == first.loop_ids.tolist()
            assert path.tobytes() == first.tobytes()
        assert sorted(first.loop_ids.tolist()) == [0, 1, 2, 3]

    def test_unconfigured(self):
        generator = ProcessPathGenerator(tool_radius=1.0)
        with self.assertRaises(IncompleteConfigurationError):
            generator.create_process_path()

    def test_parameters(self):
        generator = ProcessPathGenerator()
        # no tool radius set
        assert not generator.variables_ok()
        with self.assertRaises(ParameterError):
            generator.create_process_path()

        generator = ProcessPathGenerator(tool_radius=1.0, overlap=2.0)
        generator.configure([square()])
        assert not generator.variables_ok()
        with self.assertRaises(ParameterError):
            generator.create_process_path()

        generator.overlap = 0.5
        assert generator.variables_ok()

    def test_failed_configure(self):
        generator = ProcessPathGenerator(tool_radius=1.0)
        generator.configure([square()])
        with self.assertRaises(ConfigurationError):
            generator.configure([[[0, 0], [1, 1], [1, 0], [0, 1]]])
        # the previous diagram is gone
        assert not generator.is_configured
        with self.assertRaises(IncompleteConfigurationError):
            generator.create_process_path()

    def test_too_large(self):
        generator = ProcessPathGenerator(tool_radius=5.5)
        generator.configure([square()])
        with self.assertRaises(NoOffsetGeneratedError):
            generator.create_process_path()


if __name__ == '__main__':
    unittest.main()
