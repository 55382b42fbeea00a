#!/usr/bin/env python3
"""Smoke-test the bridge over stdio against a live Binary Ninja session.

The bridge is started as ``python -m binja_bridge --transport stdio`` and a
fixed list of read-only tools is called through the MCP client. The first
function reported by ``list_methods`` is reused for the decompile and IL
checks. Every check runs even after an earlier one fails; the script exits 1
if any check failed.
"""
from __future__ import annotations

import argparse
import asyncio
import os
import sys
from dataclasses import dataclass
from datetime import timedelta
from time import perf_counter
from typing import Any, Callable, Dict, List, Optional

import mcp.types as types
from mcp import StdioServerParameters, stdio_client
from mcp.client.session import ClientSession

from binja_bridge.utils.errors import is_error_text

Arguments = Callable[[argparse.Namespace, Dict[str, str]], Optional[Dict[str, Any]]]


@dataclass
class Check:
    tool: str
    arguments: Arguments
    remember: Optional[str] = None


@dataclass
class Outcome:
    tool: str
    ok: bool
    detail: str
    elapsed_ms: float


def _first_function(listing: str) -> str:
    for line in listing.splitlines():
        if line and not line.startswith("File:"):
            return line.split()[0]
    raise RuntimeError("list_methods returned no functions")


CHECKS: List[Check] = [
    Check("get_binary_status", lambda args, seen: None),
    Check("list_methods", lambda args, seen: {"limit": args.limit}, remember="function"),
    Check(
        "search_functions_by_name",
        lambda args, seen: {"query": args.function_query, "limit": args.limit},
    ),
    Check("decompile_function", lambda args, seen: {"name": seen["function"]}),
    Check("get_il", lambda args, seen: {"name_or_address": seen["function"], "view": "mlil"}),
    Check("list_sections", lambda args, seen: {"limit": args.limit}),
    Check("hexdump_address", lambda args, seen: {"address": args.hexdump_address, "length": 32}),
]


def _text_of(result: types.CallToolResult) -> str:
    return "\n".join(
        content.text for content in result.content if isinstance(content, types.TextContent)
    )


async def _run_check(
    session: ClientSession, check: Check, args: argparse.Namespace, seen: Dict[str, str]
) -> Outcome:
    start = perf_counter()
    try:
        arguments = check.arguments(args, seen)
        result = await session.call_tool(check.tool, arguments)
        text = _text_of(result)
        if result.isError or not text or is_error_text(text):
            raise RuntimeError(text or "empty result")
        if check.remember == "function":
            seen["function"] = _first_function(text)
        detail = text.splitlines()[0]
        ok = True
    except KeyError as exc:
        ok, detail = False, f"skipped, needs {exc.args[0]}"
    except Exception as exc:
        ok, detail = False, str(exc).splitlines()[0] if str(exc) else type(exc).__name__
    return Outcome(check.tool, ok, detail, (perf_counter() - start) * 1000.0)


async def run_checks(args: argparse.Namespace) -> List[Outcome]:
    env = dict(os.environ)
    if args.binja_host:
        env["BINJA_MCP_HOST"] = args.binja_host
    if args.binja_port:
        env["BINJA_MCP_PORT"] = str(args.binja_port)

    server = StdioServerParameters(
        command=args.python_command,
        args=["-m", "binja_bridge", "--transport", "stdio"],
        env=env,
    )
    outcomes: List[Outcome] = []
    seen: Dict[str, str] = {}
    async with stdio_client(server) as (read_stream, write_stream):
        async with ClientSession(
            read_stream, write_stream, read_timeout_seconds=timedelta(seconds=args.timeout)
        ) as session:
            info = (await session.initialize()).serverInfo
            print(f"connected to {info.name} {info.version}", file=sys.stderr)
            for check in CHECKS:
                outcomes.append(await _run_check(session, check, args, seen))
    return outcomes


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description=__doc__.splitlines()[0])
    parser.add_argument("--python-command", default=sys.executable)
    parser.add_argument("--binja-host", help="BINJA_MCP_HOST for the bridge process")
    parser.add_argument("--binja-port", type=int, help="BINJA_MCP_PORT for the bridge process")
    parser.add_argument("--function-query", default="main")
    parser.add_argument("--hexdump-address", default="0x401000")
    parser.add_argument("--limit", type=int, default=5)
    parser.add_argument("--timeout", type=float, default=30.0, help="per-call read timeout (s)")
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    outcomes = asyncio.run(run_checks(args))
    for outcome in outcomes:
        mark = "ok  " if outcome.ok else "FAIL"
        print(f"{mark} {outcome.tool:<26} {outcome.elapsed_ms:8.1f} ms  {outcome.detail}")
    return 0 if all(outcome.ok for outcome in outcomes) else 1


if __name__ == "__main__":
    raise SystemExit(main())
