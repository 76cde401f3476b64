"""Progress output for the packaging step."""

from __future__ import annotations

from typing import List, Tuple

import click


class Reporter:
    """Receives the human-facing messages produced while packaging."""

    def step(self, message: str) -> None:
        pass

    def line(self, message: str = "") -> None:
        pass

    def error(self, message: str) -> None:
        pass


class ClickReporter(Reporter):
    def step(self, message: str) -> None:
        click.secho(f"==> {message}", bold=True)

    def line(self, message: str = "") -> None:
        click.echo(message)

    def error(self, message: str) -> None:
        click.secho(message, fg="red", err=True)


class RecordingReporter(Reporter):
    """Keeps messages in memory; handy for tests and embedding."""

    def __init__(self):
        self.messages: List[Tuple[str, str]] = []

    def step(self, message: str) -> None:
        self.messages.append(("step", message))

    def line(self, message: str = "") -> None:
        self.messages.append(("line", message))

    def error(self, message: str) -> None:
        self.messages.append(("error", message))

    @property
    def steps(self) -> List[str]:
        return [message for kind, message in self.messages if kind == "step"]
