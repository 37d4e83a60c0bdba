"""Project directory resolution."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

from src.project.config import ProjectConfig


@dataclass(frozen=True)
class ProjectPaths:
    """Resolved directories of a project, relative to its root."""

    root: Path
    config: ProjectConfig

    @property
    def models_dir(self) -> Path:
        return self.root / self.config.models_directory

    @property
    def build_dir(self) -> Path:
        return self.root / self.config.build_directory

    def platform_dir(self, platform: str) -> Path:
        return self.build_dir / platform
