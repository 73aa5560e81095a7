"""
generator.py
---------------

Stateful process path generation: configure boundaries
once, then create paths with cached process parameters.
"""
from . import contour
from . import offset

from .constants import log, res
from .exceptions import ConfigurationError, IncompleteConfigurationError


class ProcessPathGenerator(object):
    """
    Generate process paths for one set of boundaries.

    An instance owns the offsetting diagram of the boundaries it
    was configured with, use one instance per concurrent request.

    Parameters
    ------------
    tool_radius : float or None
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
      and exhaust_children used for every path
    """

    def __init__(self,
                 tool_radius=None,
                 margin=0.0,
                 overlap=0.0,
                 safe_traverse_height=None,
                 provider=None,
                 **kwargs):
        if safe_traverse_height is None:
            safe_traverse_height = res.safe_traverse_height
        if provider is None:
            provider = offset.BufferOffsetter()

        self.tool_radius = tool_radius
        self.margin = margin
        self.overlap = overlap
        self.safe_traverse_height = safe_traverse_height
        self.provider = provider
        self.options = kwargs

        self._diagram = None

    @property
    def is_configured(self):
        """
        Has `configure` succeeded.
        """
        return self._diagram is not None

    def configure(self, boundaries):
        """
        Build the offsetting diagram for a set of boundaries.

        Parameters
        ------------
        boundaries : sequence of (n, 2) float
          Outer boundaries and holes in one planar frame

        Raises
        ------------
        ConfigurationError
          If the boundaries are malformed, any previous
          configuration is discarded
        """
        self._diagram = None
        try:
            diagram = self.provider.build(boundaries)
        except ConfigurationError as E:
            log.warning('diagram check failed: %s', E)
            raise
        self._diagram = diagram
        log.debug('configure complete')

    def variables_ok(self):
        """
        Check the cached process parameters.

        Returns
        ------------
        ok : bool
          True if a path can be generated with them
        """
        try:
            self.check_parameters()
        except ValueError:
            return False
        return True

    def check_parameters(self):
        """
        Raise ParameterError if the cached process
        parameters are out of range.

        Returns
        ------------
        step : float
          Distance between successive offsets
        """
        return contour.check_parameters(
            tool_radius=self.tool_radius,
            margin=self.margin,
            overlap=self.overlap,
            safe_traverse_height=self.safe_traverse_height,
            interpolation_step=self.options.get('interpolation_step'))

    def create_process_path(self):
        """
        Generate a process path over the configured boundaries.

        Returns
        ------------
        path : ProcessPath
          Path starting and ending at the safe traverse height

        Raises
        ------------
        ParameterError
          If the process parameters are out of range
        IncompleteConfigurationError
          If `configure` hasn't succeeded
        NoOffsetGeneratedError
          If the tool is too large for the boundaries
        """
        step = self.check_parameters()
        if not self.is_configured:
            log.warning('configuration incomplete, run configure() '
                        'successfully before creating process path')
            raise IncompleteConfigurationError(
                'configure() must succeed before creating a process path!')

        return contour.process_path(
            provider=self.provider,
            diagram=self._diagram,
            tool_radius=self.tool_radius,
            margin=self.margin,
            overlap=self.overlap,
            safe_traverse_height=self.safe_traverse_height,
            step=step,
            **self.options)
