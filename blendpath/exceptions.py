"""
exceptions.py
----------------

Errors raised while generating process paths.
"""


class BlendPathError(Exception):
    """
    Base class for errors raised by blendpath.
    """


class ConfigurationError(BlendPathError, ValueError):
    """
    Input boundaries could not be turned into a valid
    planar region: degenerate, self-intersecting or
    mutually intersecting boundaries.
    """


class ParameterError(BlendPathError, ValueError):
    """
    Scalar process parameters are out of range, for example
    a tool radius that isn't positive or an overlap that
    leaves no positive offset step.
    """


class NoOffsetGeneratedError(BlendPathError):
    """
    The first offset produced no loops, the tool is too
    large for the region.
    """


class IncompleteConfigurationError(BlendPathError, RuntimeError):
    """
    A process path was requested before boundaries were
    successfully configured.
    """
