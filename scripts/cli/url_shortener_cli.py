#!/usr/bin/env python3
"""
Command-line client for a running URL shortener service.

Usage:
    python url_shortener_cli.py shorten <url> [--custom-code CODE]
    python url_shortener_cli.py get <short_code>
    python url_shortener_cli.py click <short_code>
    python url_shortener_cli.py delete <short_code>
    python url_shortener_cli.py history <short_code> [--limit N]
    python url_shortener_cli.py stats
    python url_shortener_cli.py health
"""

import argparse
import json
import os
import sys
from typing import Any, Dict, Optional

import requests


DEFAULT_BASE_URL = "http://localhost:3001"


class URLShortenerCLI:
    """HTTP client for the URL shortener API."""

    def __init__(
        self,
        base_url: str = DEFAULT_BASE_URL,
        timeout: float = 5.0,
        session: Optional[requests.Session] = None,
    ):
        """Initialize CLI.

        Args:
            base_url: Service base URL, including any API prefix
            timeout: Per-request timeout in seconds
            session: Optional requests session (tests pass a stub)
        """
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self.session = session or requests.Session()

    def _request(self, method: str, path: str, **kwargs) -> int:
        """Send one request, print the JSON outcome and return an exit status."""
        try:
            response = self.session.request(
                method,
                f"{self.base_url}{path}",
                timeout=self.timeout,
                **kwargs,
            )
        except requests.RequestException as e:
            self._print({"success": False, "error": f"Request failed: {str(e)}"}, stream=sys.stderr)
            return 1

        try:
            data: Dict[str, Any] = response.json()
        except ValueError:
            data = {"error": response.text or f"HTTP {response.status_code}"}

        if response.ok:
            self._print(data)
            return 0

        self._print(
            {"success": False, "status": response.status_code, "error": data.get("error")},
            stream=sys.stderr,
        )
        return 1

    @staticmethod
    def _print(payload: Dict[str, Any], stream=None):
        print(json.dumps(payload, indent=2), file=stream or sys.stdout)

    def shorten(self, url: str, custom_code: Optional[str] = None) -> int:
        """Shorten a URL."""
        body = {"originalUrl": url}
        if custom_code:
            body["customCode"] = custom_code
        return self._request("POST", "/shorten", json=body)

    def get(self, short_code: str) -> int:
        """Show the stored record for a short code."""
        return self._request("GET", f"/url/{short_code}")

    def click(self, short_code: str) -> int:
        """Record a click without following the redirect."""
        return self._request("POST", f"/url/{short_code}/click")

    def delete(self, short_code: str) -> int:
        """Delete a short code."""
        return self._request("DELETE", f"/url/{short_code}")

    def history(self, short_code: str, limit: int = 100) -> int:
        """Show recent clicks for a short code."""
        return self._request("GET", f"/url/{short_code}/clicks", params={"limit": limit})

    def stats(self) -> int:
        """Show service-wide statistics."""
        return self._request("GET", "/stats")

    def health(self) -> int:
        """Check service health."""
        return self._request("GET", "/health")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="URL Shortener CLI",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Shorten a URL (https:// is assumed when missing)
  %(prog)s shorten example.com/long/url

  # Shorten with custom code
  %(prog)s shorten https://example.com/long/url --custom-code mylink

  # Inspect, click and delete
  %(prog)s get mylink
  %(prog)s click mylink
  %(prog)s history mylink --limit 10
  %(prog)s delete mylink

  # Service-wide statistics and health
  %(prog)s stats
  %(prog)s health
        """
    )

    parser.add_argument(
        "--base-url",
        default=os.getenv("URL_SHORTENER_URL", DEFAULT_BASE_URL),
        help=f"Service URL (default: from URL_SHORTENER_URL env or {DEFAULT_BASE_URL})"
    )

    parser.add_argument(
        "--timeout",
        type=float,
        default=5.0,
        help="Request timeout in seconds"
    )

    subparsers = parser.add_subparsers(dest="command", help="Command to execute")

    shorten_parser = subparsers.add_parser("shorten", help="Shorten a URL")
    shorten_parser.add_argument("url", help="URL to shorten")
    shorten_parser.add_argument("--custom-code", help="Custom short code")

    for name, help_text in (
        ("get", "Show a short URL record"),
        ("click", "Record a click"),
        ("delete", "Delete a short URL"),
    ):
        command_parser = subparsers.add_parser(name, help=help_text)
        command_parser.add_argument("short_code", help="Short code")

    history_parser = subparsers.add_parser("history", help="Show recent clicks")
    history_parser.add_argument("short_code", help="Short code")
    history_parser.add_argument("--limit", type=int, default=100, help="Maximum number to return")

    subparsers.add_parser("stats", help="Show statistics")
    subparsers.add_parser("health", help="Check service health")

    return parser


def main(argv=None) -> int:
    """Main entry point."""
    parser = build_parser()
    args = parser.parse_args(argv)

    if not args.command:
        parser.print_help()
        return 1

    cli = URLShortenerCLI(base_url=args.base_url, timeout=args.timeout)

    if args.command == "shorten":
        return cli.shorten(args.url, args.custom_code)
    elif args.command == "get":
        return cli.get(args.short_code)
    elif args.command == "click":
        return cli.click(args.short_code)
    elif args.command == "delete":
        return cli.delete(args.short_code)
    elif args.command == "history":
        return cli.history(args.short_code, args.limit)
    elif args.command == "stats":
        return cli.stats()
    elif args.command == "health":
        return cli.health()

    parser.print_help()
    return 1


if __name__ == "__main__":
    sys.exit(main())
