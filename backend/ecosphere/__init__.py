"""EcoSphere: personal carbon-footprint tracking."""

__version__ = "0.1.0"
