"""Run log for warnings and diagnostics written to stderr."""

import sys
from dataclasses import dataclass, field
from typing import TextIO


@dataclass
class RunLog:
    """Warnings and diagnostics captured during one invoice run."""

    silent: bool = False
    verbose: bool = False
    stream: TextIO | None = None
    details: list[tuple[str, str]] = field(default_factory=list)  # (kind, message)

    def _print(self, text: str) -> None:
        print(text, file=self.stream or sys.stderr)

    def warn(self, kind: str, message: str) -> None:
        """Record a non-fatal problem and report it on stderr."""
        self.details.append((kind, message))
        if not self.silent:
            self._print(f"Warning: {message}")

    def info(self, kind: str, message: str) -> None:
        """Record a diagnostic, only shown in verbose mode."""
        self.details.append((kind, message))
        if self.verbose and not self.silent:
            self._print(message)

    def kinds(self) -> list[str]:
        return [kind for kind, _ in self.details]
