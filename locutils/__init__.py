"""GNSS location helpers: NMEA sentences, target detection, a FIFO list and device utilities."""

__version__ = "0.1.0"