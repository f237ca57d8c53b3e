"""Coloured console output and the terminal render target."""

import click

CURSOR_UP_ERASE_LINE = "\033[A\033[2K"


def print_error(msg: str) -> None:
    click.secho(f"ERROR: {msg}", fg="red", err=True)


def print_failure(msg: str) -> None:
    click.secho(msg, fg="red")


def print_info(msg: str) -> None:
    click.secho(msg, fg="blue")


def print_success(msg: str) -> None:
    click.secho(msg, fg="green")


def print_warn(msg: str) -> None:
    click.secho(msg, fg="yellow", bold=True)


class TerminalRenderTarget:
    """Writes progress blocks to stdout and erases them with ANSI escapes.

    A block is a list of lines; the first line is the progress header.
    Escapes are dropped by click when stdout is not a terminal unless
    color is forced.
    """

    def __init__(self, color=None):
        self._color = color

    def write_block(self, lines):
        header, *rest = lines
        click.secho(header, fg="blue", color=self._color)
        for line in rest:
            click.echo(line, color=self._color)

    def clear_last_block(self, line_count):
        click.echo(CURSOR_UP_ERASE_LINE * line_count, nl=False, color=self._color)
