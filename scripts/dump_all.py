#!/usr/bin/env python3
"""Dump all data the pymbapi library can fetch.

This script refreshes the OAuth2 tokens, discovers the resources
available for the vehicle, and prints the vehicle status plus every
resource value.  The rotated refresh token is written to a file so the
next run can use it.

Usage
-----
Set environment variables and run::

    export MB_ACCOUNT="client-id:client-secret"
    export MB_REFRESH_TOKEN="your-refresh-token"
    export MB_VIN="WDD..."
    python scripts/dump_all.py

Options::

    --token-file FILE    Read/write the refresh token from/to FILE
    --json               Output as machine-readable JSON
    --skip-vehicle       Skip the lock status / odometer containers
    --skip-custom        Skip resource discovery and values
    -v, --verbose        Enable DEBUG logging
"""

from __future__ import annotations

import argparse
import asyncio
import json
import logging
import sys
from pathlib import Path
from typing import Any

# Allow running from the repo root without installing the package.
_repo = Path(__file__).resolve().parent.parent
_src = _repo / "src"
if _src.is_dir():
    sys.path.insert(0, str(_src))

from pymbapi import MbConfigError, MercedesClient, MercedesConfig, TokenState  # noqa: E402
from pymbapi.session import TokenCallback  # noqa: E402


def _section(title: str) -> str:
    line = "=" * 60
    return f"\n{line}\n  {title}\n{line}"


def _save_token(path: Path | None) -> TokenCallback:
    def _callback(tokens: TokenState) -> None:
        if path is None:
            print(f"New refresh token: {tokens.refresh_token}", file=sys.stderr)
            return
        path.write_text(tokens.refresh_token + "\n", encoding="utf-8")

    return _callback


async def run(args: argparse.Namespace) -> int:
    token_file: Path | None = args.token_file
    overrides: dict[str, Any] = {}
    if token_file is not None and token_file.is_file():
        overrides["refresh_token"] = token_file.read_text(encoding="utf-8").strip()

    try:
        config = MercedesConfig.from_env(**overrides)
    except MbConfigError as exc:
        print(f"Configuration error: {exc}", file=sys.stderr)
        return 2

    result: dict[str, Any] = {"vin": config.vin}
    out: list[str] = []

    async with MercedesClient(config, on_token_refresh=_save_token(token_file)) as client:
        if not await client.login():
            print("Login failed; obtain a new refresh token.", file=sys.stderr)
            return 1

        if not args.skip_vehicle:
            vehicle = await client.get_vehicle_data()
            result["vehicle"] = vehicle.model_dump() if vehicle is not None else None
            out.append(_section("Vehicle status"))
            if vehicle is None:
                out.append("  <no data>")
            else:
                for key, value in vehicle.model_dump().items():
                    out.append(f"  {key}: {value}")

        if not args.skip_custom:
            awake = await client.is_awake()
            result["resources"] = list(client.catalog.fields)
            out.append(_section("Resources"))
            if not awake:
                out.append("  <resource discovery failed>")
            records = await client.get_custom_data() if awake else []
            result["custom_data"] = [record.model_dump(by_alias=True) for record in records]
            for record in records:
                out.append(f"  [{record.index}] {record.label}: {record.value}")

    if args.json:
        print(json.dumps(result, indent=2, default=str, ensure_ascii=False))
    else:
        print("\n".join(out))
    return 0


def main() -> None:
    parser = argparse.ArgumentParser(description="Dump Mercedes-Benz vehicle data")
    parser.add_argument("--token-file", type=Path, default=None, help="Refresh token file (read and updated)")
    parser.add_argument("--json", action="store_true", help="Output JSON")
    parser.add_argument("--skip-vehicle", action="store_true", help="Skip vehicle containers")
    parser.add_argument("--skip-custom", action="store_true", help="Skip resource discovery")
    parser.add_argument("-v", "--verbose", action="store_true", help="Enable DEBUG logging")
    args = parser.parse_args()

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    sys.exit(asyncio.run(run(args)))


if __name__ == "__main__":
    main()
