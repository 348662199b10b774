"""Route group exports."""

from . import cities, geocoding, health, reports, routes

__all__ = ["cities", "geocoding", "health", "reports", "routes"]
