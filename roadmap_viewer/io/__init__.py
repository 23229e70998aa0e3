"""Road network data set loading."""

from roadmap_viewer.io.network_loader import NetworkFormatError, NetworkLoader

__all__ = [
    "NetworkLoader",
    "NetworkFormatError",
]
