"""
blendpath
------------

Generate continuous contour- parallel process paths
from 2D surface boundaries.
"""
from .version import __version__

from . import constants
from . import exceptions
from . import polygons
from . import offset
from . import graph
from . import discretize
from . import toolpath
from . import contour
from . import generator

from .contour import contour_parallel
from .generator import ProcessPathGenerator
from .exceptions import (BlendPathError,
                         ConfigurationError,
                         ParameterError,
                         NoOffsetGeneratedError,
                         IncompleteConfigurationError)

__all__ = ['__version__',
           'contour_parallel',
           'ProcessPathGenerator',
           'BlendPathError',
           'ConfigurationError',
           'ParameterError',
           'NoOffsetGeneratedError',
           'IncompleteConfigurationError']
