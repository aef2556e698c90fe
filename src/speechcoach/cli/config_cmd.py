"""speechcoach config command: show/set configuration."""

from __future__ import annotations

import asyncio

import httpx
import typer
from rich.console import Console
from rich.prompt import Confirm, Prompt

from speechcoach.cli.output import output_json, output_text
from speechcoach.core.config import SpeechCoachConfig, get_config, save_config, validate_config
from speechcoach.core.constants import DEFAULT_BACKEND_URL, DEFAULT_GEMINI_API_BASE, DEFAULT_GEMINI_MODEL
from speechcoach.providers.backend import BackendClient

config_app = typer.Typer()

_console = Console(stderr=True)


def _validate_key(api_key: str, api_base: str = DEFAULT_GEMINI_API_BASE) -> bool:
    """List models with the key to verify it works. Returns True on success."""
    try:
        resp = httpx.get(
            f"{api_base.rstrip('/')}/models",
            headers={"x-goog-api-key": api_key},
            params={"pageSize": 1},
            timeout=10.0,
        )
    except httpx.HTTPError as e:
        _console.print(f"  [red]✗[/red] Validation failed: {e}")
        return False
    if not resp.is_success:
        _console.print(f"  [red]✗[/red] Validation failed: HTTP {resp.status_code}")
        return False
    return True


async def _probe_backend(config: SpeechCoachConfig) -> tuple[bool, dict | None]:
    async with BackendClient(config) as backend:
        if not await backend.health():
            return False, None
        return True, await backend.service_limits()


@config_app.command("show")
def config_show() -> None:
    """Show current configuration."""
    config = get_config()
    output_json({
        "gemini_api_key": "***" if config.has_gemini_key else "(not set)",
        "gemini_model": config.gemini_model,
        "gemini_api_base": config.gemini_api_base,
        "backend_url": config.backend_url or "(disabled)",
        "request_timeout_sec": config.request_timeout_sec,
        "poll_max_wait_sec": config.poll_max_wait_sec,
        "mock_fallback": config.mock_fallback,
        "mock_analysis": config.mock_analysis,
        "db_path": str(config.db_path),
    })


@config_app.command("path")
def config_path() -> None:
    """Show path to the database file."""
    config = get_config()
    output_text(str(config.db_path))


@config_app.command("setup")
def config_setup() -> None:
    """Interactive setup wizard for the Gemini key and analysis fallbacks."""
    _console.print()
    _console.print("[bold]Configure speechcoach[/bold]")
    _console.print()

    api_key = Prompt.ask("  Enter your Gemini API key", console=_console).strip()
    model = Prompt.ask("  Gemini model", console=_console, default=DEFAULT_GEMINI_MODEL)
    backend_url = Prompt.ask(
        "  Analysis backend URL (blank to disable)",
        console=_console,
        default=DEFAULT_BACKEND_URL,
    ).strip()
    mock_fallback = Confirm.ask(
        "  Fall back to sample feedback when every AI path fails?",
        console=_console,
        default=True,
    )

    config_data = {
        "gemini_api_key": api_key,
        "gemini_model": model,
        "backend_url": backend_url,
        "mock_fallback": mock_fallback,
    }

    if api_key:
        _console.print("  Validating API key...", end="")
        if _validate_key(api_key):
            _console.print(" [green]✓[/green]")
        elif not Confirm.ask("  Save anyway?", console=_console, default=False):
            _console.print("  Setup cancelled.")
            raise typer.Exit(1)

    path = save_config(config_data)

    _console.print()
    _console.print(f"  [green]✓[/green] Config saved to {path}")
    _console.print("  [green]✓[/green] Ready! Try: [bold]speechcoach add practice.mp4[/bold]")
    _console.print()


@config_app.command("check")
def config_check() -> None:
    """Report configuration problems and whether the backend answers."""
    config = get_config()
    problems = validate_config(config)
    backend_ok, backend_limits = asyncio.run(_probe_backend(config)) if config.backend_url else (None, None)
    output_json({
        "ok": not problems,
        "problems": problems,
        "gemini_configured": config.has_gemini_key,
        "backend_reachable": backend_ok,
        "backend_limits": backend_limits,
        "mock_fallback": config.mock_fallback,
    })
    if problems:
        raise typer.Exit(1)
