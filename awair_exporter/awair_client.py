#!/usr/bin/env python3
"""
Awair Client - HTTP client for the Awair local API

Fetches the latest air-data reading from a single Awair device. One call
is one GET on a fresh connection; there are no retries and no session is
shared between the exporter's request threads.
"""

import logging
from typing import Optional
from urllib.parse import urljoin

import requests

from .air_data import AirData, AirDataError, decode_air_data

AIR_DATA_PATH = '/air-data/latest'


class PollError(Exception):
    """Raised when the device could not be polled or its reply was unusable"""


class AwairClient:
    """Synchronous client for one Awair device"""

    def __init__(self, target: str, timeout: Optional[float] = None):
        """
        Initialize the client

        Args:
            target: Base URL of the device, e.g. ``http://192.168.1.20``
            timeout: Request timeout in seconds. None keeps the requests
                default (wait indefinitely)
        """
        self.target = target
        self.url = urljoin(target, AIR_DATA_PATH)
        self.timeout = timeout
        self.logger = logging.getLogger(__name__)

    def get_air_data(self) -> AirData:
        """Poll the device once and decode its reply"""
        self.logger.debug(f"sending request to Awair device: {self.url}")

        try:
            response = requests.get(self.url, timeout=self.timeout)
            response.raise_for_status()
            payload = response.json()
        except requests.RequestException as e:
            raise PollError(f"request to {self.url} failed: {e}") from e
        except ValueError as e:
            raise PollError(f"invalid JSON from {self.url}: {e}") from e

        try:
            data = decode_air_data(payload)
        except AirDataError as e:
            raise PollError(f"unexpected payload from {self.url}: {e}") from e

        self.logger.debug(f"got data: {data}")
        return data
