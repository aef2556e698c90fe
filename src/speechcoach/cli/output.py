"""Command output: JSON documents on stdout, human-readable lines on stderr."""

from __future__ import annotations

import json
import sys


def output_json(data: dict | list, pretty: bool = False) -> None:
    print(json.dumps(data, indent=2 if pretty else None, default=str))


def output_text(text: str) -> None:
    print(text)


def error(message: str) -> None:
    print(f"Error: {message}", file=sys.stderr)


def progress(message: str) -> None:
    print(message, file=sys.stderr)
