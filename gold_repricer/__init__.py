"""Gold jewelry repricer: spot-price driven price recalculation and marketplace sync."""

__version__ = "0.1.0"
