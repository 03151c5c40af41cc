"""plogconverter: normalize, filter and render static-analysis logs."""

__version__ = "1.0.0"
