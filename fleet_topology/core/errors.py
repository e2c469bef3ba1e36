"""Exceptions raised at the layout engine's calling boundary."""


class TopologyError(Exception):
    """Base class for topology layout errors."""


class TopologyInputError(TopologyError, ValueError):
    """The node or edge lists handed to the engine break the calling contract."""


class LayoutConfigError(TopologyError, ValueError):
    """Layout options describe an impossible canvas or invalid parameters."""
