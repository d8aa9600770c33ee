"""flow-alfred command-line interface."""

from flow_alfred import __version__

__all__ = ["__version__"]
