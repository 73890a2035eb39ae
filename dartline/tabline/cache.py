"""Single-entry memo for the rendered tabline."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class Fingerprint:
    """Display-affecting host state the cached line was rendered for."""

    tabpage: int
    tabpage_count: int
    columns: int
    current_buffer: int
    modified: bool


class RenderCache:
    def __init__(self) -> None:
        self.line: str | None = None
        self.fingerprint: Fingerprint | None = None

    def lookup(self, fingerprint: Fingerprint) -> str | None:
        if self.line is None or self.fingerprint != fingerprint:
            return None
        return self.line

    def store(self, fingerprint: Fingerprint, line: str) -> None:
        self.fingerprint = fingerprint
        self.line = line

    def invalidate(self) -> None:
        self.line = None
        self.fingerprint = None
