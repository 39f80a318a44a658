"""PackFlow: payment requests, SMS notification and revenue metrics."""

__version__ = "0.1.0"
