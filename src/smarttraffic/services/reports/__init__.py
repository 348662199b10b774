"""Traffic report service exports."""

from .generator import generate_traffic_report

__all__ = ["generate_traffic_report"]
