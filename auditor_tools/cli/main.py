# auditor_tools/cli/main.py

import logging
from pathlib import Path
from typing import Optional, Sequence

import click
from rich.console import Console
from rich.table import Table
from rich.text import Text
from tqdm import tqdm

from auditor_tools.core.app_state import JobResult, ObservableState
from auditor_tools.core.backend import LocalConversionBackend
from auditor_tools.core.config_manager import load_settings
from auditor_tools.core.event_log import Severity
from auditor_tools.core.shell import Shell
from auditor_tools.gui.log_panel import IncrementalLogView, LogLine, MemoryRenderTarget
from auditor_tools.gui.progress_panel import ProgressSnapshot, ProgressView
from auditor_tools.utils.logger import setup_logging

console = Console()
logger = logging.getLogger(__name__)

EXIT_JOB_FAILED = 1
EXIT_BACKEND_UNAVAILABLE = 2
SEVERITY_STYLES = {Severity.ERROR: "bold red", Severity.WARNING: "yellow", Severity.INFO: "cyan"}
SKIPPED_PREVIEW_LIMIT = 20


# --- Console Render Targets ---

class ConsoleRenderTarget:
    """
    Log render target that prints to a rich console. A terminal cannot take lines
    back, so a full render simply prints the new contents below the old ones.
    """

    def __init__(self, output: Console):
        self.console = output
        self.placeholder: Optional[str] = None
        self.printed = 0

    def _print(self, nodes: Sequence[LogLine]):
        for node in nodes:
            self.console.print(Text.assemble(
                (node.time_text, "dim"), " ",
                (f"[{node.severity.value}]", SEVERITY_STYLES[node.severity]), " ",
                node.message,
            ))
            self.printed += 1

    def replace_contents(self, nodes: Sequence[LogLine]):
        self.placeholder = None
        self._print(nodes)

    def append_nodes(self, nodes: Sequence[LogLine]):
        self._print(nodes)

    def show_placeholder(self, text: str):
        self.placeholder = text
        # Nothing printed yet: the empty terminal already says there are no logs.
        if self.printed:
            self.console.print(Text(text, style="dim italic"))

    def remove_placeholder(self) -> bool:
        had_placeholder = self.placeholder is not None
        self.placeholder = None
        return had_placeholder

    def scroll_to_end(self):
        pass


class TqdmProgressSink:
    """Feeds ProgressView snapshots into a tqdm bar; a new category starts a new bar."""

    def __init__(self, disable: bool = False):
        self.disable = disable
        self.bar = None
        self.category = None

    def __call__(self, snapshot: ProgressSnapshot):
        if not snapshot.is_processing:
            self.close()
            return
        total = snapshot.total if snapshot.total > 0 else None
        if self.bar is None or snapshot.category != self.category or self.bar.total != total:
            self.close()
            self.category = snapshot.category
            self.bar = tqdm(total=total, desc=snapshot.category or "Working", unit="file",
                            leave=False, disable=self.disable)
        self.bar.n = snapshot.current
        self.bar.refresh()

    def close(self):
        if self.bar is not None:
            self.bar.close()
        self.bar = None
        self.category = None


def _make_backend(ctx: click.Context, office_path: Optional[str]):
    backend = ctx.obj.get("backend")
    if backend is not None:
        return backend
    settings = ctx.obj["settings"]
    return LocalConversionBackend(office_path or settings.office_path)


def _print_summary(result: JobResult, status_message: str):
    processed = result.processed_count
    table = Table(title="Conversion Summary", show_header=False)
    table.add_column("Item", style="cyan")
    table.add_column("Value", style="bold magenta")
    table.add_row("Files Scanned", str(len(result.entries)))
    table.add_row("Files Processed", str(processed))
    table.add_row("Files Skipped", str(len(result.entries) - processed))
    table.add_row("Staging Folder", result.staging_path)
    table.add_row("LLM Output Folder", result.output_path)
    table.add_row("Report", result.report_path)
    console.print(table)

    skipped = [entry for entry in result.entries if not entry.processed]
    if skipped:
        skipped_table = Table(title="Skipped Files", style="yellow")
        skipped_table.add_column("File", style="green", no_wrap=True)
        skipped_table.add_column("Reason")
        for entry in skipped[:SKIPPED_PREVIEW_LIMIT]:
            skipped_table.add_row(entry.original_relative_path, entry.skip_reason or "")
        console.print(skipped_table)
        if len(skipped) > SKIPPED_PREVIEW_LIMIT:
            console.print(f"...and {len(skipped) - SKIPPED_PREVIEW_LIMIT} more.")
    console.print(f"[bold green]{status_message.splitlines()[0]}[/bold green]")


# --- Main Command Group ---
@click.group(context_settings=dict(help_option_names=['-h', '--help']))
@click.version_option(version="1.0.0", prog_name="Auditor Tools")
@click.pass_context
def cli(ctx: click.Context):
    """
    Auditor Tools - convert evidence folders and zip files into LLM-ready documents.

    Use `[COMMAND] --help` for more information on a specific command.
    """
    ctx.ensure_object(dict)
    ctx.obj.setdefault("settings", load_settings())
    # Rich renders the job log; the console handler would only duplicate it.
    setup_logging(console_level=logging.CRITICAL)


@cli.command()
@click.option('--office-path', type=click.Path(dir_okay=False), default=None,
              help="Path to the soffice executable (overrides settings).")
@click.pass_context
def check(ctx: click.Context, office_path: Optional[str]):
    """Checks that the office conversion engine can be found."""
    backend = _make_backend(ctx, office_path)
    shell = Shell(backend, IncrementalLogView(MemoryRenderTarget()), ProgressView())
    if shell.check_backend():
        console.print("[bold green]Office engine found. Ready to convert.[/bold green]")
        return
    console.print("[bold red]Office engine not found.[/bold red] Install LibreOffice or set "
                  "[yellow]EPT_LIBREOFFICE_PATH[/yellow] to the soffice executable.")
    ctx.exit(EXIT_BACKEND_UNAVAILABLE)


@cli.command()
@click.argument('path', type=click.Path(exists=True, file_okay=True, dir_okay=True, readable=True, path_type=Path))
@click.option('--level', type=click.Choice(['info', 'warning', 'error'], case_sensitive=False), default=None,
              help="Lowest severity shown in the log (default: from settings).")
@click.option('--office-path', type=click.Path(dir_okay=False), default=None,
              help="Path to the soffice executable (overrides settings).")
@click.option('--yes', '-y', is_flag=True, help="Start without asking for confirmation.")
@click.option('--open', 'open_output', is_flag=True, help="Open the LLM output folder when the job succeeds.")
@click.pass_context
def convert(ctx: click.Context, path: Path, level: Optional[str], office_path: Optional[str], yes: bool,
            open_output: bool):
    """Converts a folder or zip file into an LLM-ready output folder with an XLSX report."""
    threshold = Severity.parse(level or ctx.obj["settings"].default_severity)
    backend = _make_backend(ctx, office_path)

    progress_sink = TqdmProgressSink()
    shell = Shell(
        backend,
        IncrementalLogView(ConsoleRenderTarget(console)),
        ProgressView(progress_sink),
        state=ObservableState(threshold),
        revealer=ctx.obj.get("revealer"),
    )

    if not shell.check_backend():
        console.print("[bold red]Office engine not found.[/bold red] Run `auditor-tools cli check` for details.")
        ctx.exit(EXIT_BACKEND_UNAVAILABLE)

    selected = shell.handle_user_input(str(path))
    if selected is None:
        ctx.exit(EXIT_JOB_FAILED)

    console.print(f"[bold cyan]Input:[/bold cyan] [bright_magenta]{selected}[/bright_magenta]")
    if not yes:
        click.confirm("A staging copy and an _LLM output folder will be created next to the input. Proceed?",
                      abort=True)

    try:
        result = shell.run_job()
    finally:
        progress_sink.close()

    if result is None:
        console.print(f"[bold red]{shell.state.status_message}[/bold red]")
        ctx.exit(EXIT_JOB_FAILED)
    _print_summary(result, shell.state.status_message)
    if open_output:
        shell.reveal_output()
