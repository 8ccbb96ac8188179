"""Stratus CLI: quick compute operations from the command line.

Usage examples::

    stratus --provider aws --service compute describe-volumes
    stratus -p aws -s compute --retries 3 describe-addresses -k '{"public_ips": ["1.2.3.4"]}'
    stratus -p gcp -s compute -c '{"project_id": "p"}' delete-backend-service web-backend
"""

from __future__ import annotations

import argparse
import json
import sys
from datetime import datetime
from typing import Any, Mapping

from stratus.base.exceptions import StratusError
from stratus.base.retry import retry


def _build_parser() -> argparse.ArgumentParser:
    """Build the argparse parser for the ``stratus`` CLI.

    Returns:
        Configured :class:`~argparse.ArgumentParser`.
    """
    parser = argparse.ArgumentParser(
        prog="stratus",
        description="Signed cloud compute API client",
    )
    parser.add_argument(
        "--provider", "-p",
        required=True,
        choices=["aws", "gcp"],
        help="Cloud provider",
    )
    parser.add_argument(
        "--service", "-s",
        default="compute",
        choices=["compute"],
        help="Cloud service",
    )
    parser.add_argument(
        "--config", "-c",
        type=str,
        default="{}",
        help='JSON config string (e.g. \'{"host":"ec2.us-west-1.amazonaws.com"}\')',
    )
    parser.add_argument(
        "--retries", "-r",
        type=int,
        default=1,
        help="Total attempts for transport failures (default: 1, no retry)",
    )
    parser.add_argument(
        "operation",
        help="Operation to perform (method name, e.g. describe-volumes)",
    )
    parser.add_argument(
        "args",
        nargs="*",
        help="Positional arguments for the operation",
    )
    parser.add_argument(
        "--kwargs", "-k",
        type=str,
        default="{}",
        help="JSON keyword arguments for the operation",
    )
    return parser


def _plain(value: Any) -> Any:
    """Convert a decoded record into JSON-serialisable builtins."""
    if isinstance(value, Mapping):
        return {key: _plain(val) for key, val in value.items()}
    if isinstance(value, (list, tuple)):
        return [_plain(val) for val in value]
    if isinstance(value, datetime):
        return value.isoformat()
    return value


def main(argv: list[str] | None = None) -> None:
    """CLI entry point.

    Parses arguments, creates a service client via the universal factory,
    and invokes the requested operation.  Results are printed as JSON.

    Args:
        argv: Optional argument list (defaults to ``sys.argv``).
    """
    parser = _build_parser()
    ns = parser.parse_args(argv)

    try:
        config: dict[str, Any] = json.loads(ns.config)
    except json.JSONDecodeError as e:
        print(f"Invalid --config JSON: {e}", file=sys.stderr)
        sys.exit(1)

    try:
        kwargs: dict[str, Any] = json.loads(ns.kwargs)
    except json.JSONDecodeError as e:
        print(f"Invalid --kwargs JSON: {e}", file=sys.stderr)
        sys.exit(1)

    if ns.retries < 1:
        print("--retries must be at least 1", file=sys.stderr)
        sys.exit(1)

    # Lazy-import to avoid loading provider SDKs for --help
    from stratus.factory import universal_factory

    try:
        svc = universal_factory(ns.service, ns.provider, config)
    except (ValueError, StratusError) as e:
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(1)

    method_name = ns.operation.replace("-", "_")
    method = getattr(svc, method_name, None)
    if method_name.startswith("_") or method is None or not callable(method):
        print(
            f"Unknown operation '{ns.operation}' for {ns.provider}/{ns.service}",
            file=sys.stderr,
        )
        sys.exit(1)

    try:
        result = retry(max_attempts=ns.retries)(method)(*ns.args, **kwargs)
    except StratusError as e:
        print(f"{type(e).__name__}: {e}", file=sys.stderr)
        sys.exit(1)
    except (TypeError, ValueError) as e:
        print(f"Operation failed: {e}", file=sys.stderr)
        sys.exit(1)

    if result is None:
        print("OK")
    else:
        print(json.dumps(_plain(result), indent=2, default=str))


if __name__ == "__main__":
    main()
