"""Run configuration assembled from the command line."""

from __future__ import annotations

from dataclasses import dataclass

STDOUT_DESTINATION = "-"


@dataclass(slots=True, frozen=True)
class FillOptions:
    source: str
    destination: str | None = None
    list_fields: bool = False
    fill_names: bool = False
    assignments: tuple[str, ...] = ()  # raw -s operands, malformed ones included
    verbose: bool = False

    @property
    def mutating(self) -> bool:
        return self.fill_names or bool(self.assignments)

    @property
    def should_write(self) -> bool:
        return self.destination is not None and self.mutating

    @property
    def to_stdout(self) -> bool:
        return self.destination == STDOUT_DESTINATION
