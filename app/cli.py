from __future__ import annotations

import logging
from pathlib import Path
from typing import NoReturn, Optional

import typer
from rich.console import Console
from rich.markup import escape

from app.config import AppSettings, load_settings
from app.wiring import LayoutContext, build_context
from domain.errors import LayoutEngineError, ValidationError
from domain.services.layout_options import options_for_select

app = typer.Typer(no_args_is_help=True)
console = Console()

_state: dict[str, AppSettings] = {}


@app.callback()
def main(
    config: Optional[Path] = typer.Option(
        None, "--config", help="YAML settings file (defaults to CMS_CONFIG_PATH).",
    ),
) -> None:
    settings = load_settings(config)
    logging.basicConfig(
        level=settings.layouts.log_level,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    _state["settings"] = settings


def _context() -> LayoutContext:
    settings = _state.get("settings") or load_settings()
    return build_context(settings)


def _fail(exc: LayoutEngineError) -> NoReturn:
    console.print(f"[red]{escape(str(exc))}[/]")
    if isinstance(exc, ValidationError):
        for message in exc.full_messages():
            console.print(f"  - {message}")
    raise typer.Exit(code=1) from exc


@app.command("app-layouts")
def list_app_layouts() -> None:
    context = _context()
    names = context.bootstrap.app_layout_names()
    if not names:
        console.print(
            f"[yellow]No application layouts found in {context.settings.layouts.app_layouts_dir}[/]"
        )
        raise typer.Exit(code=0)
    for name in names:
        console.print(name)


@app.command("bootstrap")
def bootstrap(site_id: str = typer.Argument(..., help="Site to create layouts for.")) -> None:
    context = _context()
    site = context.sites.get(site_id)
    if site is None:
        console.print(f"[red]Site not found:[/] {site_id}")
        raise typer.Exit(code=1)
    try:
        layouts = context.bootstrap.run(site)
    except LayoutEngineError as exc:
        _fail(exc)
    for layout in layouts:
        console.print(f"[green]Layout[/] {layout.identifier} ({layout.id})")


@app.command("tree")
def tree(
    site_id: str = typer.Argument(..., help="Site whose layouts are listed."),
    exclude: Optional[str] = typer.Option(None, help="Layout id to leave out with its subtree."),
) -> None:
    context = _context()
    excluded = context.layouts.get(exclude) if exclude else None
    try:
        options = options_for_select(
            context.layouts,
            site_id,
            exclude=excluded,
            spacer=context.settings.layouts.spacer,
        )
    except LayoutEngineError as exc:
        _fail(exc)
    if not options:
        console.print(f"[yellow]No layouts for site {site_id}[/]")
        raise typer.Exit(code=0)
    for label, layout_id in options:
        console.print(f"{escape(label)} [dim]{layout_id}[/]", highlight=False)


@app.command("render")
def render(page_id: str = typer.Argument(..., help="Page to render.")) -> None:
    context = _context()
    page = context.pages.get(page_id)
    if page is None:
        console.print(f"[red]Page not found:[/] {page_id}")
        raise typer.Exit(code=1)
    try:
        rendered = context.renderer.render(page)
    except LayoutEngineError as exc:
        _fail(exc)
    console.rule("head")
    console.print(rendered.head, markup=False, highlight=False)
    console.rule("content")
    console.print(rendered.content, markup=False, highlight=False)
    if rendered.css:
        console.rule("css")
        console.print(rendered.css, markup=False, highlight=False)


@app.command("invalidate")
def invalidate(layout_id: str = typer.Argument(..., help="Layout whose pages are reset.")) -> None:
    context = _context()
    layout = context.layouts.get(layout_id)
    if layout is None:
        console.print(f"[red]Layout not found:[/] {layout_id}")
        raise typer.Exit(code=1)
    report = context.invalidator.cascade(layout)
    console.print(
        f"[green]Cleared[/] {len(report.cleared_page_ids)} page(s) "
        f"across {len(report.visited_layout_ids)} layout(s)"
    )
    if not report.ok:
        console.print(f"[red]Failed layouts:[/] {', '.join(report.failed_layout_ids)}")
        raise typer.Exit(code=1)


if __name__ == "__main__":
    app()
