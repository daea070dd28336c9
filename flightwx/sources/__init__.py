"""Weather data sources."""

from flightwx.sources.awc import AwcSource

__all__ = ['AwcSource']
