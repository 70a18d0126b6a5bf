"""Command-line interface to start the WebLogic exporter.

This CLI loads the YAML configuration, applies flag overrides, builds the
FastAPI app and serves it with uvicorn, over TLS when the config names a
certificate and key.

Usage
-----
    wls-exporter --config-file config.yaml --host 10.0.0.5 --port 7001
"""

from __future__ import annotations

import argparse
import importlib
import os
import sys
from pathlib import Path
from typing import Any, Dict, List, Optional, Tuple

from ..config.models import EnvSettings, ExporterConfig
from ..errors import ConfigurationError
from ..observability import setup_logging
from .http import create_app, load_exporter_config

DEFAULT_LISTEN_HOST = "0.0.0.0"


def parse_listen_address(address: str) -> Tuple[str, int]:
    """Split ``[HOST]:PORT`` into host and port.

    An empty host (``":9601"``) listens on all interfaces.

    Raises
    ------
    ConfigurationError
        If the port is missing or not an integer.
    """
    host, sep, port = address.rpartition(":")
    if not sep or not port.isdigit():
        raise ConfigurationError(
            f"Invalid listen address {address!r}, expected [HOST]:PORT"
        )
    host = host.strip("[]") or DEFAULT_LISTEN_HOST
    return host, int(port)


def apply_overrides(
    config: ExporterConfig, args: argparse.Namespace
) -> ExporterConfig:
    """Return ``config`` with explicitly given CLI flags applied."""
    overrides = {
        "host": args.host,
        "port": args.port,
        "listen_address": args.listen_address,
        "username": args.username,
        "password": args.password,
    }
    updates: Dict[str, Any] = {k: v for k, v in overrides.items() if v is not None}
    if not updates:
        return config
    data = config.model_dump()
    data.update(updates)
    return ExporterConfig.from_dict(data)


def build_parser() -> argparse.ArgumentParser:
    """Create the argument parser."""
    parser = argparse.ArgumentParser(description="WebLogic Prometheus exporter")
    parser.add_argument(
        "--config-file",
        dest="config_file",
        default="config.yaml",
        help="Configuration file path (default config.yaml)",
    )
    parser.add_argument(
        "--host", help="IP Address of the Weblogic Server instance to scrape"
    )
    parser.add_argument(
        "--port", type=int, help="Port of the Weblogic Server instance to scrape"
    )
    parser.add_argument(
        "--web.listen-address",
        dest="listen_address",
        help="Address to listen on for web interface and telemetry",
    )
    parser.add_argument("--username", help="Username for Weblogic Server")
    parser.add_argument("--password", help="Password for Weblogic Server")
    parser.add_argument(
        "--log-level",
        dest="log_level",
        choices=[
            "CRITICAL",
            "ERROR",
            "WARNING",
            "INFO",
            "DEBUG",
        ],
        help="Logging level (overrides environment)",
    )
    parser.add_argument(
        "-v",
        "--verbose",
        action="count",
        default=0,
        help="Increase verbosity (once sets DEBUG)",
    )
    return parser


def main(argv: Optional[List[str]] = None) -> None:
    """CLI entrypoint for running the exporter."""
    parser = build_parser()
    args = parser.parse_args(argv)

    # Determine effective log level
    env_level = os.environ.get("WLS_EXPORTER_LOG_LEVEL", "INFO").upper()
    effective_level = args.log_level or ("DEBUG" if args.verbose > 0 else env_level)
    # Apply early so subsequent imports use configured level
    setup_logging(effective_level)

    try:
        config = load_exporter_config(EnvSettings(), Path(args.config_file))
        config = apply_overrides(config, args)
        listen_host, listen_port = parse_listen_address(config.listen_address)
        app = create_app(config)
    except ConfigurationError as exc:
        print(f"Unable to start exporter: {exc}", file=sys.stderr)
        sys.exit(1)

    uvicorn = importlib.import_module("uvicorn")
    tls: Dict[str, Any] = {}
    if config.cert_path:
        tls = {"ssl_certfile": config.cert_path, "ssl_keyfile": config.key_path}
    uvicorn.run(
        app,
        host=listen_host,
        port=listen_port,
        log_level=effective_level.lower(),
        **tls,
    )


if __name__ == "__main__":
    main()
