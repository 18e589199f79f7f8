#!/usr/bin/env python3
"""
Awair Exporter - Prometheus exporter for Awair air-quality sensors

Polls the local API of one Awair device on every scrape and exposes its
readings as awair_* gauges.
"""

__version__ = '1.0.0'

__all__ = ['AwairPrometheusExporter', 'ExporterConfig', 'AwairClient', 'PollError',
           'ResultTable', 'AirData', 'AirDataError', 'decode_air_data']

from .air_data import AirData, AirDataError, decode_air_data
from .awair_client import AwairClient, PollError
from .result_table import ResultTable
from .awair_exporter import AwairPrometheusExporter, ExporterConfig
