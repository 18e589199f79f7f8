#!/usr/bin/env python3
"""
Result Table - Awair gauge registry

This module provides the registry that holds one gauge per Awair
measurement. All gauges are registered up front, polls only overwrite
their values, and the table renders itself in the Prometheus text
exposition format.
"""

import math
import threading
import logging
from typing import Dict
from prometheus_client import Gauge
from prometheus_client.core import CollectorRegistry
from prometheus_client.utils import floatToGoString

from .air_data import AirData, MEASUREMENTS

NAMESPACE = 'awair'


def _format_value(value: float) -> str:
    """Render integral values without a trailing '.0'"""
    if math.isfinite(value) and float(value).is_integer():
        return str(int(value))
    return floatToGoString(value)


def _escape_help(text: str) -> str:
    return text.replace('\\', r'\\').replace('\n', r'\n')


class ResultTable:
    """
    Shared gauge table for the Awair exporter.

    Wraps a dedicated CollectorRegistry so the exposition contains the
    Awair gauges and nothing else. Updates and renders are serialized by
    one lock, so a scrape never renders half of another scrape's update.
    """

    def __init__(self):
        """Initialize the table and register every measurement gauge"""
        self.registry = CollectorRegistry()
        self._lock = threading.Lock()
        self.logger = logging.getLogger(__name__)
        self.gauges: Dict[str, Gauge] = {}

        for field, _, documentation in MEASUREMENTS:
            self.gauges[field] = Gauge(
                name=field,
                documentation=documentation,
                namespace=NAMESPACE,
                registry=self.registry
            )

        self.logger.debug(f"ResultTable initialized with {len(self.gauges)} gauges")

    def update(self, data: AirData):
        """Overwrite every gauge with the values of one decoded reading"""
        with self._lock:
            for field, gauge in self.gauges.items():
                gauge.set(getattr(data, field))

    def get_value(self, field: str) -> float:
        """Current value of the gauge for ``field``"""
        return self.registry.get_sample_value(f"{NAMESPACE}_{field}")

    def generate_metrics(self) -> bytes:
        """
        Generate Prometheus-formatted metrics from the registry.

        Each metric gets a HELP line and a TYPE line followed by its
        samples. Integral values are written without a decimal point.

        Returns:
            bytes: Prometheus-formatted metrics
        """
        with self._lock:
            lines = []
            for metric in self.registry.collect():
                lines.append(f"# HELP {metric.name} {_escape_help(metric.documentation)}\n")
                lines.append(f"# TYPE {metric.name} {metric.type}\n")
                for sample in metric.samples:
                    lines.append(f"{sample.name} {_format_value(sample.value)}\n")
            return ''.join(lines).encode('utf-8')
