"""Command-line interface for the CSS comparison tool."""

import asyncio
from pathlib import Path

import typer
from playwright.async_api import Frame
from rich.console import Console
from rich.panel import Panel
from rich.table import Table

from .browser import BrowserManager, PageView, SmartPageLoader
from .config import settings
from .inspector import InspectSession
from .models import CssScanResult, InspectResult, PixelCompareResult
from .orchestrator import ScanOrchestrator
from .utils import setup_logging, validate_url

app = typer.Typer(
    name="css-compare",
    help="Compare the rendered CSS and screenshots of two web pages side by side.",
    no_args_is_help=True,
)
console = Console()


def _page_urls(left_url: str | None, right_url: str | None) -> tuple[str, str]:
    """Fill in URLs not given on the command line from settings."""
    return left_url or settings.left_url, right_url or settings.right_url


@app.command()
def scan(
    left_url: str = typer.Argument(None, help="Expected (left) page URL [default: CSS_COMPARE_LEFT_URL]"),
    right_url: str = typer.Argument(None, help="Actual (right) page URL [default: CSS_COMPARE_RIGHT_URL]"),
    output_dir: Path = typer.Option(None, "--output", "-o", help="Output directory"),
    screenshots: bool = typer.Option(False, "--screenshots", "-s", help="Also run pixel comparison"),
    page_name: str = typer.Option("page", "--name", "-n", help="Screenshot file name prefix"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable verbose logging"),
) -> None:
    """Scan every visible element of both pages and report CSS differences."""
    setup_logging(verbose)
    left_url, right_url = _page_urls(left_url, right_url)

    console.print(Panel.fit(
        f"[bold blue]CSS Compare[/bold blue]\n"
        f"Left:  [green]{left_url}[/green]\n"
        f"Right: [green]{right_url}[/green]\n"
        f"Screenshots: {'Yes' if screenshots else 'No'}",
        title="Starting Scan",
    ))

    try:
        orchestrator = ScanOrchestrator(
            left_url=left_url,
            right_url=right_url,
            output_dir=output_dir,
            capture_screenshots=screenshots,
            page_name=page_name,
        )
        result = asyncio.run(orchestrator.run())

        _display_scan_results(result)
        if orchestrator.pixel_result:
            _display_pixel_results(orchestrator.pixel_result)

        console.print(Panel.fit(
            f"JSON: [cyan]{orchestrator.storage.get_json_path()}[/cyan]\n"
            f"HTML Report: [bold green]{orchestrator.storage.get_report_path()}[/bold green]",
            title="Output Locations",
        ))

    except KeyboardInterrupt:
        console.print("\n[yellow]Scan cancelled by user[/yellow]")
        raise typer.Exit(1)
    except Exception as e:
        console.print(f"\n[red]Error: {str(e)}[/red]")
        raise typer.Exit(1)


@app.command()
def capture(
    left_url: str = typer.Argument(None, help="Expected (left) page URL [default: CSS_COMPARE_LEFT_URL]"),
    right_url: str = typer.Argument(None, help="Actual (right) page URL [default: CSS_COMPARE_RIGHT_URL]"),
    page_name: str = typer.Option(..., "--name", "-n", help="Screenshot file name prefix"),
    snapshot_dir: Path = typer.Option(None, "--snapshots", help="Snapshot directory"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable verbose logging"),
) -> None:
    """Screenshot both pages and compare them pixel by pixel."""
    setup_logging(verbose)
    left_url, right_url = _page_urls(left_url, right_url)

    try:
        orchestrator = ScanOrchestrator(
            left_url=left_url,
            right_url=right_url,
            page_name=page_name,
            snapshot_dir=snapshot_dir,
        )
        result = asyncio.run(orchestrator.run_capture())
        _display_pixel_results(result)

    except KeyboardInterrupt:
        console.print("\n[yellow]Capture cancelled by user[/yellow]")
        raise typer.Exit(1)
    except Exception as e:
        console.print(f"\n[red]Error: {str(e)}[/red]")
        raise typer.Exit(1)


@app.command()
def inspect(
    left_url: str = typer.Argument(None, help="Expected (left) page URL [default: CSS_COMPARE_LEFT_URL]"),
    right_url: str = typer.Argument(None, help="Actual (right) page URL [default: CSS_COMPARE_RIGHT_URL]"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable verbose logging"),
) -> None:
    """Open both pages and compare elements clicked in the left page."""
    setup_logging(verbose)
    left_url, right_url = _page_urls(left_url, right_url)

    try:
        asyncio.run(_run_inspect(validate_url(left_url), validate_url(right_url)))
    except KeyboardInterrupt:
        console.print("\n[yellow]Inspect mode stopped[/yellow]")
    except Exception as e:
        console.print(f"\n[red]Error: {str(e)}[/red]")
        raise typer.Exit(1)


async def _run_inspect(left_url: str, right_url: str) -> None:
    browser = BrowserManager(headless=False)
    await browser.start()

    try:
        left_page = await browser.open_page()
        right_page = await browser.open_page()
        await asyncio.gather(
            SmartPageLoader(left_page).goto(left_url),
            SmartPageLoader(right_page).goto(right_url),
        )

        session = InspectSession(
            PageView(left_page, "left"),
            PageView(right_page, "right"),
            on_result=_display_inspect_result,
            on_clear=lambda: console.print("[dim]Inspect panel cleared[/dim]"),
        )

        async def on_navigated(frame: Frame) -> None:
            if frame == left_page.main_frame:
                await session.handle_navigation()

        left_page.on("console", lambda message: session.handle_console_message(message.text))
        left_page.on("framenavigated", on_navigated)

        await session.activate()
        console.print(Panel.fit(
            "Click an element in the left page to compare it.\n"
            "Press [bold]Escape[/bold] in the page or Ctrl+C here to stop.",
            title="Inspect Mode",
        ))

        try:
            await session.wait_closed()
        finally:
            await session.deactivate()

    finally:
        await browser.stop()


def _display_scan_results(result: CssScanResult) -> None:
    """Display scan results in a formatted table."""
    console.print()

    table = Table(title="CSS Scan Summary", show_header=True)
    table.add_column("Metric", style="cyan")
    table.add_column("Value", style="green")

    table.add_row("Left Elements", str(result.left_count))
    table.add_row("Right Elements", str(result.right_count))
    table.add_row("Changed Elements", str(result.summary.changed_elements))
    table.add_row("Added Elements", str(result.summary.added_elements))
    table.add_row("Deleted Elements", str(result.summary.deleted_elements))
    table.add_row("Diff Properties", str(result.summary.total_diff_properties))

    console.print(table)

    if not result.has_differences:
        console.print("\n[green]No differences found: both pages have identical CSS[/green]")
        return

    if result.changed:
        console.print("\n[yellow]Most Changed Elements:[/yellow]")
        for element in result.changed[:5]:
            props = ", ".join(d.property for d in element.diffs[:4])
            more = f" (+{element.diff_count - 4} more)" if element.diff_count > 4 else ""
            console.print(f"  • <{element.tag}> {element.key}: {element.diff_count} props")
            console.print(f"    {props}{more}")


def _display_pixel_results(result: PixelCompareResult) -> None:
    table = Table(title="Pixel Comparison", show_header=True)
    table.add_column("Status", style="cyan")
    table.add_column("Images", style="green")

    table.add_row("Passed", str(result.passed))
    table.add_row("Failed", str(result.failed))
    table.add_row("New", str(result.new))
    table.add_row("Deleted", str(result.deleted))

    console.print(table)
    console.print(f"Report: [bold green]{result.report_path}[/bold green]")


def _display_inspect_result(result: InspectResult) -> None:
    """Print one inspect result as a diff table."""
    if result.mode_disabled:
        console.print("[yellow]Left page navigated; inspect mode disabled[/yellow]")
        return

    left = result.left
    title = f"<{left.tag}> {left.key} ({left.method.value})" if left else "Inspect"

    if result.error:
        console.print(Panel.fit(f"[red]{result.error}[/red]", title=title))
        return

    if not result.diffs:
        console.print(Panel.fit("[green]No differences[/green]", title=title))
        return

    table = Table(title=title, show_header=True)
    table.add_column("Property", style="cyan")
    table.add_column("Category")
    table.add_column("Left (Expected)", style="green")
    table.add_column("Right (Actual)", style="red")

    for diff in result.diffs:
        table.add_row(diff.property, diff.category.value, diff.expected, diff.actual)

    console.print(table)


@app.command()
def version() -> None:
    """Show version information."""
    from . import __version__
    console.print(f"CSS Compare version {__version__}")


if __name__ == "__main__":
    app()
