from .aggregator import HealthAggregator

__all__ = ["HealthAggregator"]
