"""Package entry point.

    python -m pickandgo --base-url http://localhost:9000/api --port 8080
"""

from __future__ import annotations

import argparse
import sys
from typing import Any

from pickandgo.core.config import ConfigResolver
from pickandgo.core.errors import ConfigError
from pickandgo.core.logging import set_colors, set_verbosity


def _parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    p = argparse.ArgumentParser(prog="pickandgo", description="Pick & Go web client")
    p.add_argument("--host", default=None)
    p.add_argument("--port", type=int, default=None)
    p.add_argument("--base-url", dest="base_url", default=None, help="backend API root")
    p.add_argument("--timeout", type=float, default=None, help="backend timeout in seconds")
    p.add_argument(
        "--log-level", dest="log_level", choices=["quiet", "normal", "verbose", "debug"]
    )
    return p.parse_args(argv)


def _cli_args(args: argparse.Namespace) -> dict[str, Any]:
    cli: dict[str, Any] = {}
    if args.base_url:
        cli.setdefault("api", {})["base_url"] = args.base_url
    if args.timeout is not None:
        cli.setdefault("api", {})["timeout_seconds"] = args.timeout
    if args.host:
        cli.setdefault("web", {})["host"] = args.host
    if args.port is not None:
        cli.setdefault("web", {})["port"] = args.port
    if args.log_level:
        cli.setdefault("logging", {})["level"] = args.log_level
    return cli


def main(argv: list[str] | None = None) -> int:
    args = _parse_args(argv)
    resolver = ConfigResolver(cli_args=_cli_args(args))

    try:
        level = resolver.resolve_logging_level()
        host = resolver.resolve_str("web.host")
        port = int(resolver.resolve("web.port")[0])
        color, _src = resolver.resolve("logging.color")
    except (ConfigError, ValueError) as e:
        print(f"Error: {e}", file=sys.stderr)
        return 2

    set_verbosity(level)
    set_colors(str(color).lower() not in {"0", "false", "no", "off"})

    import uvicorn

    from pickandgo.web import create_app

    uvicorn.run(
        create_app(config_resolver=resolver),
        host=host,
        port=port,
        log_level="debug" if level == "debug" else "info",
        access_log=False,
    )
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
