# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from prometheus_client import CollectorRegistry, Counter, Histogram

from seaweedpath.application import OperationMetrics
from seaweedpath.shared.config import ObservabilityConfig

REGISTRY = CollectorRegistry(auto_describe=True)

OPERATION_COUNTER = Counter(
    "seaweedpath_operations_total",
    "Number of adapter operations by outcome",
    labelnames=("operation", "outcome"),
    registry=REGISTRY,
)
OPERATION_LATENCY = Histogram(
    "seaweedpath_operation_latency_seconds",
    "Adapter operation latency",
    labelnames=("operation",),
    buckets=(0.005, 0.01, 0.05, 0.1, 0.25, 0.5, 1, 2, 5, 10),
    registry=REGISTRY,
)


class PrometheusOperationMetrics(OperationMetrics):
    def __init__(self, config: ObservabilityConfig) -> None:
        self._enabled = config.metrics_enabled

    def observe(self, operation: str, outcome: str, seconds: float) -> None:
        if not self._enabled:
            return
        OPERATION_COUNTER.labels(operation=operation, outcome=outcome).inc()
        OPERATION_LATENCY.labels(operation=operation).observe(seconds)


__all__ = [
    "OPERATION_COUNTER",
    "OPERATION_LATENCY",
    "PrometheusOperationMetrics",
    "REGISTRY",
]
