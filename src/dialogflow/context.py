"""Build context passed into the forward and reverse transforms."""

from __future__ import annotations

from dataclasses import dataclass

from src.dialogflow.files import AgentFiles


@dataclass(frozen=True)
class BuildContext:
    """Resolved agent directory plus the active locale and stage.

    Transforms are not reentrant: callers must not run two builds against the same `files.root`
    at once.
    """

    locale: str
    files: AgentFiles
    stage: str | None = None

    @property
    def output_locale(self) -> str:
        """Locale as used in companion file names."""

        return self.locale.lower()
