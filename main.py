#!/usr/bin/env python3
# -*- coding: utf-8 -*-

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path
from typing import Dict, List, Optional, Sequence

PROJECT_ROOT = Path(__file__).resolve().parent
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

import httpx
import yaml
from pydantic import ValidationError

from config.load_config import load_pdb_config
from pdb_gateway.config.settings import get_settings
from pdb_gateway.core.exceptions import PdbError
from pdb_gateway.execution.executor import FailoverExecutor
from pdb_gateway.execution.http_client import HttpClientFactory
from pdb_gateway.models.common import RequestMode

logger = logging.getLogger(__name__)


def parse_params(pairs: Sequence[str]) -> Dict[str, str]:
    params: Dict[str, str] = {}
    for pair in pairs:
        key, sep, value = pair.partition("=")
        if not sep or not key:
            raise SystemExit(f"❌ Invalid --param '{pair}', expected key=value")
        params[key] = value
    return params


def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        description="PuppetDB request runner with server_urls failover",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument(
        "path",
        help="Path suffix, e.g. /pdb/query/v4/nodes",
    )
    parser.add_argument(
        "--config", "-c",
        type=str,
        default=None,
        help="YAML config with a 'puppetdb' section. If omitted -> environment / .env settings.",
    )
    parser.add_argument(
        "--param", "-p",
        action="append",
        default=[],
        help="Query parameter key=value (repeatable).",
    )
    parser.add_argument(
        "--command",
        action="store_true",
        default=False,
        help="Send as a command (POST) instead of a query (GET).",
    )
    parser.add_argument(
        "--data", "-d",
        type=str,
        default=None,
        help="Raw request body for --command, sent as is.",
    )
    parser.add_argument(
        "--verbose", "-v",
        action="store_true",
        default=False,
        help="DEBUG logging (same as DEBUG=true in settings).",
    )
    args = parser.parse_args(argv)
    if args.data is not None and not args.command:
        parser.error("--data is only sent with --command")
    return args


def main(argv: Optional[List[str]] = None) -> int:
    args = parse_args(argv)

    try:
        settings = get_settings()
        config = load_pdb_config(args.config) if args.config else settings.to_config()
    except (PdbError, ValidationError, yaml.YAMLError, FileNotFoundError, ValueError) as e:
        print(f"❌ Config error: {e}", file=sys.stderr)
        return 2

    logging.basicConfig(
        level=logging.DEBUG if (args.verbose or settings.DEBUG) else logging.INFO,
        format="%(asctime)s [%(levelname)s] %(message)s",
    )

    params = parse_params(args.param)
    mode = RequestMode.COMMAND if args.command else RequestMode.QUERY

    def action(http: httpx.Client, route: str) -> httpx.Response:
        if mode == RequestMode.COMMAND:
            return http.post(route, params=params, content=args.data or "")
        return http.get(route, params=params)

    with HttpClientFactory(settings, timeout=config.server_url_timeout) as factory:
        executor = FailoverExecutor(config, factory)
        try:
            response = executor.execute(args.path, mode, action)
        except PdbError as e:
            print(f"❌ {e}", file=sys.stderr)
            return 1

    print(response.text)
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
