"""
CLI entrypoint.

doctor: print effective settings.
pages:  list the page registry.
visit:  open one registered page in Playwright and verify the settled location.
"""

from __future__ import annotations

import asyncio
from typing import List, Optional

import typer
from rich.console import Console
from rich.table import Table

from ..core.errors import NavigationError, RegistryError
from ..core.logging import configure_logging
from ..core.registry import REGISTRY, REGISTRY_VERSION, PageName
from ..core.settings import settings
from ..io.playwright_driver import PlaywrightBrowser
from ..pages.base import UrlMatch, navigate_page

app = typer.Typer(help="pom-kit CLI")
console = Console()


@app.callback()
def _setup(
    log_level: Optional[str] = typer.Option(None, "--log-level", help="Override POM_LOG_LEVEL"),
) -> None:
    configure_logging(log_level)


@app.command("doctor")
def doctor() -> None:
    """Environment check: print key settings to confirm CLI is usable."""
    console.print("[bold green]pom-kit[/] environment")
    console.print(f"- base url:   {settings.base_url}")
    console.print(f"- headless:   {settings.headless}")
    console.print(f"- navigation: {settings.navigation_timeout_ms}ms")
    console.print(
        f"- waits:      appear={settings.appear_timeout_ms}ms "
        f"interactive={settings.interactive_timeout_ms}ms probe={settings.probe_timeout_ms}ms"
    )
    console.print(f"- registry:   v{REGISTRY_VERSION}, {len(REGISTRY)} pages")


@app.command("pages")
def pages(
    base_url: Optional[str] = typer.Option(None, "--base-url", help="Prefix for rendered URLs"),
) -> None:
    """Print the page registry."""
    table = Table(title=f"Page Registry (v{REGISTRY_VERSION})", show_header=True, header_style="bold")
    table.add_column("name")
    table.add_column("title")
    table.add_column("url template")
    table.add_column("params", style="dim")

    base = settings.base_url if base_url is None else base_url
    for desc in REGISTRY:
        template = f"{base.rstrip('/')}{desc.url_template}"
        table.add_row(desc.name.value, desc.title, template, ", ".join(desc.placeholders) or "-")
    console.print(table)


def _parse_params(raw: List[str]) -> dict[str, str]:
    params: dict[str, str] = {}
    for item in raw:
        key, sep, value = item.partition("=")
        if not sep or not key:
            raise typer.BadParameter(f"expected key=value, got {item!r}", param_hint="--param")
        params[key] = value
    return params


@app.command("visit")
def visit(
    name: PageName = typer.Argument(..., help="Registered page name"),
    param: List[str] = typer.Option([], "--param", "-p", help="URL template value, key=value"),
    base_url: Optional[str] = typer.Option(None, "--base-url"),
    headless: bool = typer.Option(
        settings.headless, "--headless/--no-headless", help="Run browser headless"
    ),
    timeout_ms: int = typer.Option(settings.navigation_timeout_ms, "--timeout-ms"),
    prefix: bool = typer.Option(False, "--prefix", help="Accept sub-paths of the page url"),
) -> None:
    """
    Navigate to a registered page and check the browser settled on it.
    Exits 1 on navigation failure, 2 on bad input.
    """
    desc = REGISTRY.resolve(name)
    try:
        url = desc.url(settings.base_url if base_url is None else base_url, **_parse_params(param))
    except RegistryError as e:
        typer.secho(f"[visit] {e}", fg=typer.colors.RED)
        raise typer.Exit(code=2)

    async def _run() -> int:
        async with PlaywrightBrowser(headless=headless, slow_mo_ms=settings.slow_mo_ms) as browser:
            cap = await browser.new_capability()
            try:
                await navigate_page(
                    cap,
                    url,
                    timeout_ms=timeout_ms,
                    match=UrlMatch.PREFIX if prefix else UrlMatch.PATH,
                )
            except NavigationError as e:
                typer.secho(f"[visit] {desc.title}: FAIL {e}", fg=typer.colors.RED)
                return 1
            finally:
                await browser.close_capability(cap)
        return 0

    code = asyncio.run(_run())
    if code != 0:
        raise typer.Exit(code=code)
    typer.secho(f"[visit] {desc.title}: OK {url}", fg=typer.colors.GREEN)


def main() -> None:
    app()


if __name__ == "__main__":
    main()
