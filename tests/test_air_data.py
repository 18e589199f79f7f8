import json

import pytest

from awair_exporter.air_data import AirData, AirDataError, MEASUREMENTS, decode_air_data


def test_decode_full_payload(reading):
    data = decode_air_data(reading)

    assert isinstance(data, AirData)
    assert data.timestamp == "2026-10-18T09:15:00.000Z"
    assert data.score == 84
    assert data.temp == 21.5
    assert data.co2_est_baseline == 35500
    assert data.pm10_est == 4


def test_measurement_table_lists_fourteen_fields_in_record_order():
    names = [name for name, _, _ in MEASUREMENTS]

    assert len(names) == 14
    assert names == list(AirData._fields[1:])


def test_decimal_fields_accept_integers(reading):
    reading["temp"] = 22
    data = decode_air_data(reading)

    assert data.temp == 22.0
    assert isinstance(data.temp, float)


def test_unknown_fields_are_ignored(reading):
    reading["lux"] = 120.5
    assert decode_air_data(reading).score == 84


@pytest.mark.parametrize("field", ["score", "humid", "pm25", "timestamp"])
def test_missing_field_is_rejected(reading, field):
    del reading[field]
    with pytest.raises(AirDataError, match=field):
        decode_air_data(reading)


@pytest.mark.parametrize("field,value", [
    ("co2", 612.5),
    ("co2", "612"),
    ("score", None),
    ("voc", True),
    ("temp", "21.5"),
    ("dew_point", False),
    ("timestamp", 1697620500),
])
def test_wrong_type_is_rejected(reading, field, value):
    reading[field] = value
    with pytest.raises(AirDataError, match=field):
        decode_air_data(reading)


@pytest.mark.parametrize("payload", [[], "score", 84, None])
def test_non_object_payload_is_rejected(payload):
    with pytest.raises(AirDataError):
        decode_air_data(payload)


def test_air_data_error_is_a_value_error():
    assert issubclass(AirDataError, ValueError)


@pytest.mark.parametrize("value", [2 ** 63, -2 ** 63 - 1, int("1" + "0" * 400)])
def test_integer_outside_int64_is_rejected(reading, value):
    reading["pm10_est"] = value
    with pytest.raises(AirDataError, match="pm10_est"):
        decode_air_data(reading)


def test_integer_int64_bounds_are_accepted(reading):
    reading["voc_h2_raw"] = 2 ** 63 - 1
    reading["voc_ethanol_raw"] = -2 ** 63

    data = decode_air_data(reading)
    assert data.voc_h2_raw == 2 ** 63 - 1
    assert data.voc_ethanol_raw == -2 ** 63


def test_decimal_out_of_float_range_is_rejected(reading):
    reading["temp"] = int("1" + "0" * 400)
    with pytest.raises(AirDataError, match="temp"):
        decode_air_data(reading)


@pytest.mark.parametrize("literal", ["NaN", "Infinity", "-Infinity", "1e400"])
def test_non_finite_decimal_is_rejected(reading, literal):
    body = json.dumps(reading).replace('"humid": 46.72', f'"humid": {literal}')
    payload = json.loads(body)

    with pytest.raises(AirDataError, match="humid"):
        decode_air_data(payload)
