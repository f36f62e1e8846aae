#!/usr/bin/env python3
"""Dump every resource list the pynewsdesk library can fetch.

This script signs in, lists the first page of every resource and prints
both the parsed model fields **and** the raw API JSON so you can spot
fields that aren't parsed yet.

Usage
-----
Set environment variables and run::

    export NEWSDESK_BASE_URL="http://localhost:5000"
    export NEWSDESK_EMAIL="admin@example.com"
    export NEWSDESK_PASSWORD="your-password"
    python scripts/dump_all.py

Options::

    --resource NAME      Only list this resource (repeatable)
    --limit N            Page size (default: NEWSDESK_PAGE_SIZE or 10)
    --json               Output as machine-readable JSON
    --output FILE        Write output to FILE instead of stdout
"""

from __future__ import annotations

import argparse
import asyncio
import json
import logging
import os
import sys
from datetime import UTC, datetime
from pathlib import Path
from typing import Any

# Allow running from the repo root without installing the package.
_repo = Path(__file__).resolve().parent.parent
_src = _repo / "src"
if _src.is_dir():
    sys.path.insert(0, str(_src))

from pynewsdesk import NewsdeskClient, NewsdeskConfig, ResourceStore  # noqa: E402
from pynewsdesk._redact import redact_for_log  # noqa: E402
from pynewsdesk.resources import ALL_ENDPOINTS  # noqa: E402


def _section(title: str) -> str:
    line = "=" * 60
    return f"\n{line}\n  {title}\n{line}"


def _print_store(name: str, store: ResourceStore[Any], out: list[str]) -> dict[str, Any]:
    out.append(_section(name.upper()))
    if store.error:
        out.append(f"  ERROR: {store.error}")
        return {"error": store.error}

    if store.pagination is not None:
        p = store.pagination
        out.append(f"  page {p.page}/{p.pages}  total={p.total}  limit={p.limit}")

    records: list[dict[str, Any]] = []
    for item in store.items:
        parsed = item.model_dump(mode="json")
        out.append(f"\n  --- {item.id} ---")
        for key, value in parsed.items():
            if value not in (None, "", []):
                out.append(f"    {key:<22} = {value}")
        unparsed = sorted(set(item.raw) - set(item.model_dump(by_alias=True)) - {"__v"})
        if unparsed:
            out.append(f"    (unparsed keys: {', '.join(unparsed)})")
        records.append({"parsed": parsed, "raw": redact_for_log(item.raw)})
    return {"items": records}


async def main() -> None:
    parser = argparse.ArgumentParser(
        description="Dump every resource pynewsdesk can list, for debugging / development.",
    )
    parser.add_argument(
        "--resource",
        action="append",
        choices=sorted(ALL_ENDPOINTS),
        help="Only list this resource (default: all)",
    )
    parser.add_argument("--limit", type=int, help="Page size")
    parser.add_argument("--json", action="store_true", dest="json_mode", help="Output machine-readable JSON")
    parser.add_argument("--output", "-o", help="Write output to FILE instead of stdout")
    parser.add_argument("--verbose", "-v", action="store_true", help="Enable debug logging")
    args = parser.parse_args()

    if args.verbose:
        logging.basicConfig(level=logging.DEBUG, format="%(levelname)s %(name)s: %(message)s")
    else:
        logging.basicConfig(level=logging.WARNING)

    email = os.environ.get("NEWSDESK_EMAIL")
    password = os.environ.get("NEWSDESK_PASSWORD")
    if not email or not password:
        parser.error("NEWSDESK_EMAIL and NEWSDESK_PASSWORD must be set")

    config = NewsdeskConfig.from_env()
    result: dict[str, Any] = {
        "timestamp": datetime.now(UTC).isoformat(),
        "base_url": config.base_url,
        "resources": {},
    }

    out: list[str] = []
    out.append(_section("pynewsdesk dump_all"))
    out.append(f"  time      : {result['timestamp']}")
    out.append(f"  backend   : {config.base_url}")

    async with NewsdeskClient(config) as client:
        if await client.auth.login(email, password) is None:
            print(f"Login failed: {client.auth.state.error}", file=sys.stderr)
            sys.exit(1)
        user = client.auth.state.user
        out.append(f"  signed in : {user.email if user else '?'}")

        for name in args.resource or sorted(ALL_ENDPOINTS):
            store = client.store(name)
            await store.list(1, args.limit)
            result["resources"][name] = _print_store(name, store, out)

    if args.json_mode:
        payload = json.dumps(result, indent=2, default=str, ensure_ascii=False)
        if args.output:
            Path(args.output).write_text(payload, encoding="utf-8")
            print(f"JSON written to {args.output}", file=sys.stderr)
        else:
            print(payload)
        return

    if args.output:
        Path(args.output).write_text("\n".join(out) + "\n", encoding="utf-8")
        print(f"Output written to {args.output}")
    else:
        print("\n".join(out))


if __name__ == "__main__":
    asyncio.run(main())
