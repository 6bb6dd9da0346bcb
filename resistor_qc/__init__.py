"""Quality-control calculator for resistor shipment samples."""

__version__ = "1.0.0"
