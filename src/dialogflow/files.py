"""Dialogflow agent directory layout.

    <root>/
        agent.json
        package.json
        intents/<intent>.json
        intents/<intent>_usersays_<locale>.json
        entities/<entity>.json
        entities/<entity>_entries_<locale>.json

Companion files are recognized by the `usersays` / `entries` markers in their names. Locales in
file names are always lower-cased.
"""

from __future__ import annotations

import json
import logging
import re
import shutil
from collections.abc import Sequence
from dataclasses import dataclass
from pathlib import Path
from typing import Any

from pydantic import BaseModel, TypeAdapter, ValidationError

from src.dialogflow.schema import DialogflowEntity, DialogflowEntry, DialogflowIntent, UserSays

logger = logging.getLogger(__name__)

USERSAYS_MARKER = "usersays"
ENTRIES_MARKER = "entries"
AGENT_FILE = "agent.json"
PACKAGE_FILE = "package.json"
AGENT_PACKAGE_VERSION = "1.0.0"

_USER_SAYS_LIST = TypeAdapter(list[UserSays])
_ENTRY_LIST = TypeAdapter(list[DialogflowEntry])
_COMPANION_RE = re.compile(rf"_(?:{USERSAYS_MARKER}|{ENTRIES_MARKER})_(?P<locale>[^.]+)\.json$")


class AgentFileError(ValueError):
    """Raised when a native agent file cannot be read or does not match the agent schema."""


def user_says_filename(intent_name: str, locale: str) -> str:
    return f"{intent_name}_{USERSAYS_MARKER}_{locale.lower()}.json"


def entries_filename(entity_name: str, locale: str) -> str:
    return f"{entity_name}_{ENTRIES_MARKER}_{locale.lower()}.json"


def is_user_says_file(path: Path) -> bool:
    return USERSAYS_MARKER in path.name


def is_entries_file(path: Path) -> bool:
    return ENTRIES_MARKER in path.name


def _dump(payload: Any) -> Any:
    if isinstance(payload, BaseModel):
        return payload.model_dump(by_alias=True, exclude_none=True)
    if isinstance(payload, list):
        return [_dump(item) for item in payload]
    return payload


def write_json(path: Path, payload: Any) -> Path:
    """Write `payload` (models are dumped in their on-disk shape) as tab-indented JSON."""

    path.write_text(json.dumps(_dump(payload), indent="\t", ensure_ascii=False), encoding="utf-8")
    logger.debug("wrote path=%s", path)
    return path


def read_json(path: Path) -> Any:
    try:
        return json.loads(path.read_text(encoding="utf-8"))
    except (OSError, json.JSONDecodeError) as exc:
        raise AgentFileError(f"Cannot read {path}: {exc}") from exc


@dataclass(frozen=True)
class AgentFiles:
    """Reads and writes the files of one Dialogflow agent directory."""

    root: Path

    @property
    def intents_dir(self) -> Path:
        return self.root / "intents"

    @property
    def entities_dir(self) -> Path:
        return self.root / "entities"

    def exists(self) -> bool:
        return self.intents_dir.is_dir()

    def ensure_intents_dir(self) -> Path:
        self.intents_dir.mkdir(parents=True, exist_ok=True)
        return self.intents_dir

    def ensure_entities_dir(self) -> Path:
        self.entities_dir.mkdir(parents=True, exist_ok=True)
        return self.entities_dir

    # Writing

    def write_intent(self, intent: DialogflowIntent) -> Path:
        body = intent.model_copy(update={"user_says": None})
        return write_json(self.ensure_intents_dir() / f"{intent.name}.json", body)

    def write_user_says(self, intent_name: str, locale: str, records: Sequence[UserSays]) -> Path:
        path = self.ensure_intents_dir() / user_says_filename(intent_name, locale)
        return write_json(path, list(records))

    def write_entity(self, file_stem: str, entity: DialogflowEntity) -> Path:
        body = entity.model_copy(update={"entries": None})
        return write_json(self.ensure_entities_dir() / f"{file_stem}.json", body)

    def write_entries(
            self,
            file_stem: str,
            locale: str,
            entries: Sequence[DialogflowEntry],
    ) -> Path:
        path = self.ensure_entities_dir() / entries_filename(file_stem, locale)
        return write_json(path, list(entries))

    def write_agent(self, agent: dict[str, Any]) -> Path:
        self.root.mkdir(parents=True, exist_ok=True)
        write_json(self.root / PACKAGE_FILE, {"version": AGENT_PACKAGE_VERSION})
        return write_json(self.root / AGENT_FILE, agent)

    # Reading

    def intent_files(self) -> list[Path]:
        """Intent definition files (sample files excluded), sorted by name."""

        if not self.intents_dir.is_dir():
            return []
        return sorted(
            p for p in self.intents_dir.iterdir()
            if p.is_file() and p.suffix == ".json" and not is_user_says_file(p)
        )

    def entity_files(self) -> list[Path]:
        """Entity definition files (entries files excluded), sorted by name."""

        if not self.entities_dir.is_dir():
            return []
        return sorted(
            p for p in self.entities_dir.iterdir()
            if p.is_file() and p.suffix == ".json" and not is_entries_file(p)
        )

    def read_intent(self, path: Path) -> DialogflowIntent:
        try:
            return DialogflowIntent.model_validate(read_json(path))
        except ValidationError as exc:
            raise AgentFileError(f"Invalid intent file {path}: {exc}") from exc

    def read_entity(self, path: Path) -> DialogflowEntity:
        try:
            return DialogflowEntity.model_validate(read_json(path))
        except ValidationError as exc:
            raise AgentFileError(f"Invalid entity file {path}: {exc}") from exc

    def read_user_says(self, intent_name: str, locale: str) -> list[UserSays] | None:
        """Sample records for an intent, or `None` when the locale has no sample file."""

        path = self.intents_dir / user_says_filename(intent_name, locale)
        if not path.is_file():
            return None
        try:
            return _USER_SAYS_LIST.validate_python(read_json(path))
        except ValidationError as exc:
            raise AgentFileError(f"Invalid sample file {path}: {exc}") from exc

    def read_entries(self, entity_name: str, locale: str) -> list[DialogflowEntry] | None:
        """Entity values for a locale, or `None` when the locale has no entries file."""

        path = self.entities_dir / entries_filename(entity_name, locale)
        if not path.is_file():
            return None
        try:
            return _ENTRY_LIST.validate_python(read_json(path))
        except ValidationError as exc:
            raise AgentFileError(f"Invalid entries file {path}: {exc}") from exc

    def read_agent(self) -> dict[str, Any] | None:
        path = self.root / AGENT_FILE
        if not path.is_file():
            return None
        return read_json(path)

    def detect_locales(self) -> list[str]:
        """Locales that have at least one sample or entries file, sorted."""

        locales: set[str] = set()
        for directory in (self.intents_dir, self.entities_dir):
            if not directory.is_dir():
                continue
            for path in directory.iterdir():
                match = _COMPANION_RE.search(path.name)
                if match:
                    locales.add(match.group("locale"))
        return sorted(locales)

    def clean(self) -> None:
        """Delete the whole agent directory."""

        if self.root.exists():
            shutil.rmtree(self.root)
            logger.info("removed agent directory path=%s", self.root)
