# auditor_tools/main.py

import click

from auditor_tools.cli.main import cli


@click.group(context_settings=dict(help_option_names=['-h', '--help']))
def main():
    """
    Auditor Tools: desktop (GUI) and command-line file conversion for audit evidence.

    Example (GUI): python -m auditor_tools.main gui
    Example (CLI): python -m auditor_tools.main cli convert ./evidence
    """
    pass


@click.command()
def gui():
    """Launches the desktop application."""
    # Imported here so the CLI works on machines without a display or Qt.
    from auditor_tools.gui.main_window import run_gui
    run_gui()


main.add_command(gui)
main.add_command(cli, name='cli')

if __name__ == '__main__':
    main()
