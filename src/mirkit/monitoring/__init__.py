"""
Performance Monitoring
Prometheus-based metrics collection
"""

from .metrics import MetricsCollector

__all__ = ["MetricsCollector"]
