#!/usr/bin/env python3
"""
Awair Exporter CLI - Main entry point

Prometheus exporter for an Awair air-quality sensor. Settings come from
command-line flags, optionally layered over a YAML configuration file.
"""

import argparse
import sys
import logging
from typing import Any, Dict, Optional
from urllib.parse import urlparse

import yaml

from .awair_exporter import (
    AwairPrometheusExporter, ExporterConfig, DEFAULT_LISTEN_ADDR, DEFAULT_METRICS_PORT
)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog='awair-exporter',
        description='Prometheus exporter for an Awair air-quality sensor',
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Poll a device on every scrape of :8888/metrics
  %(prog)s --target http://192.168.1.20

  # Read settings from a YAML file, override the port
  %(prog)s -c config.yaml --metrics-port 9101
        """
    )

    parser.add_argument('--target',
                       help='Base URL of the Awair device (e.g. http://192.168.1.20)')
    parser.add_argument('--metrics-port', type=int,
                       help=f'Exporter HTTP port (default: {DEFAULT_METRICS_PORT})')
    parser.add_argument('--listen-addr',
                       help=f'Exporter listen address (default: {DEFAULT_LISTEN_ADDR})')
    parser.add_argument('-c', '--config',
                       help='Path to YAML configuration file')
    parser.add_argument('--log-level', default='INFO',
                       choices=['DEBUG', 'INFO', 'WARNING', 'ERROR'],
                       help='Log level (default: INFO)')
    return parser


def load_config_file(config_file: str) -> Dict[str, Any]:
    """
    Load exporter settings from a YAML file.

    Raises:
        ValueError: If the file is missing, is not valid YAML, or is not a mapping
    """
    try:
        with open(config_file, 'r') as f:
            config = yaml.safe_load(f)
    except FileNotFoundError:
        raise ValueError(f"Configuration file not found: {config_file}")
    except yaml.YAMLError as e:
        raise ValueError(f"Invalid YAML configuration: {e}")

    if config is None:
        return {}
    if not isinstance(config, dict):
        raise ValueError("Configuration file must contain a mapping")
    return config


def validate_target(target: Optional[str]) -> str:
    """Return ``target`` if it is an absolute http(s) URL, raise ValueError otherwise"""
    if not target:
        raise ValueError("a target URL is required (--target or 'target' in the config file)")

    parsed = urlparse(target)
    if parsed.scheme not in ('http', 'https') or not parsed.hostname:
        raise ValueError(f"invalid target URL: {target!r}")
    try:
        parsed.port
    except ValueError:
        raise ValueError(f"invalid port in target URL: {target!r}")
    return target


def build_config(args: argparse.Namespace, file_config: Optional[Dict[str, Any]] = None) -> ExporterConfig:
    """Merge CLI arguments over file settings and validate the result"""
    file_config = file_config or {}

    target = args.target or file_config.get('target')
    metrics_port = args.metrics_port
    if metrics_port is None:
        metrics_port = file_config.get('metrics_port', DEFAULT_METRICS_PORT)
    listen_addr = args.listen_addr or file_config.get('listen_addr', DEFAULT_LISTEN_ADDR)

    target = validate_target(target)

    try:
        metrics_port = int(metrics_port)
    except (TypeError, ValueError):
        raise ValueError(f"invalid metrics port: {metrics_port!r}")
    if not 0 < metrics_port < 65536:
        raise ValueError(f"metrics port out of range: {metrics_port}")

    return ExporterConfig(target=target, metrics_port=metrics_port, listen_addr=str(listen_addr))


def main(argv=None):
    parser = build_parser()
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=getattr(logging, args.log_level),
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
    )
    logger = logging.getLogger(__name__)

    file_config = {}
    if args.config:
        try:
            file_config = load_config_file(args.config)
        except ValueError as e:
            logger.error(str(e))
            sys.exit(1)

    try:
        config = build_config(args, file_config)
    except ValueError as e:
        parser.error(str(e))

    logger.info(f"Settings - target: {config.target}, listen: {config.listen_addr}:{config.metrics_port}")

    exporter = AwairPrometheusExporter(config)
    exporter.start()


if __name__ == '__main__':
    main()
