#!/usr/bin/env python3
"""
Air Data - Awair local API payload decoding

Decodes the JSON document returned by ``GET /air-data/latest`` into an
immutable AirData record. Decoding is strict: every measurement must be
present and carry the expected JSON type, otherwise AirDataError is raised
and nothing downstream sees a partial record.
"""

import math
from typing import Any, Dict, List, NamedTuple, Tuple


INT64_MIN = -2 ** 63
INT64_MAX = 2 ** 63 - 1


class AirDataError(ValueError):
    """Raised when an air-data payload cannot be decoded"""


class AirData(NamedTuple):
    """One reading from the Awair device"""
    timestamp: str
    score: int
    dew_point: float
    temp: float
    humid: float
    abs_humid: float
    co2: int
    co2_est: int
    co2_est_baseline: int
    voc: int
    voc_baseline: int
    voc_h2_raw: int
    voc_ethanol_raw: int
    pm25: int
    pm10_est: int


# (field, json type, help) in exposition order
MEASUREMENTS: List[Tuple[str, type, str]] = [
    ('score', int, 'Air quality score'),
    ('dew_point', float, 'Dew point'),
    ('temp', float, 'Temperature'),
    ('humid', float, 'Humidity'),
    ('abs_humid', float, 'Absolute humidity'),
    ('co2', int, 'CO2'),
    ('co2_est', int, 'Estimated CO2'),
    ('co2_est_baseline', int, 'Estimated CO2 baseline'),
    ('voc', int, 'VOC'),
    ('voc_baseline', int, 'VOC baseline'),
    ('voc_h2_raw', int, 'VOC H2 raw'),
    ('voc_ethanol_raw', int, 'VOC ethanol raw'),
    ('pm25', int, 'PM25'),
    ('pm10_est', int, 'Estimated PM10'),
]


def _decode_number(name: str, kind: type, value: Any):
    # bool is a subclass of int but never a valid reading
    if isinstance(value, bool):
        raise AirDataError(f"field '{name}': expected {kind.__name__}, got bool")
    if kind is int:
        if not isinstance(value, int):
            raise AirDataError(f"field '{name}': expected int, got {type(value).__name__}")
        if not INT64_MIN <= value <= INT64_MAX:
            raise AirDataError(f"field '{name}': value does not fit in a signed 64-bit integer")
        return value
    if not isinstance(value, (int, float)):
        raise AirDataError(f"field '{name}': expected float, got {type(value).__name__}")
    try:
        number = float(value)
    except OverflowError:
        raise AirDataError(f"field '{name}': value is out of float range")
    if not math.isfinite(number):
        raise AirDataError(f"field '{name}': non-finite value {number}")
    return number


def decode_air_data(payload: Any) -> AirData:
    """
    Decode a parsed JSON payload into an AirData record.

    Unknown keys are ignored.

    Args:
        payload: Result of ``json.loads`` on the device response body

    Returns:
        AirData: The decoded reading

    Raises:
        AirDataError: If the payload is not an object, a field is missing,
            or a field has the wrong type
    """
    if not isinstance(payload, dict):
        raise AirDataError(f"expected a JSON object, got {type(payload).__name__}")

    values: Dict[str, Any] = {}

    if 'timestamp' not in payload:
        raise AirDataError("missing field 'timestamp'")
    if not isinstance(payload['timestamp'], str):
        raise AirDataError(f"field 'timestamp': expected str, got {type(payload['timestamp']).__name__}")
    values['timestamp'] = payload['timestamp']

    for name, kind, _ in MEASUREMENTS:
        if name not in payload:
            raise AirDataError(f"missing field '{name}'")
        values[name] = _decode_number(name, kind, payload[name])

    return AirData(**values)
