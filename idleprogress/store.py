"""Save-store collaborators: where SaveState and goal progress live durably."""
from __future__ import annotations

import json
import logging
import os
import tempfile
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Any

from idleprogress.goal import MissionGoal, dump_goals
from idleprogress.state import SaveState

logger = logging.getLogger(__name__)

SAVE_FILE = "save.json"
GOALS_FILE = "missions.json"


class SaveStore(ABC):
    """Owns the live SaveState and knows how to persist it.

    ``state`` is None until the store is ready; consumers treat that as a
    warm-up period and do nothing.
    """

    state: SaveState | None = None

    @property
    def is_ready(self) -> bool:
        return self.state is not None

    @abstractmethod
    def load(self) -> SaveState: ...

    @abstractmethod
    def save(self) -> None: ...

    @abstractmethod
    def load_goals(self) -> list[dict[str, Any]] | None:
        """Previously persisted goal dicts, or None if nothing was saved."""

    @abstractmethod
    def save_goals(self, goals: list[MissionGoal]) -> None: ...


class MemorySaveStore(SaveStore):
    """In-process store. Keeps serialized snapshots so a restart can be simulated."""

    def __init__(self, state: SaveState | None = None) -> None:
        self.state = state
        self._snapshot: dict[str, Any] | None = state.to_dict() if state else None
        self._goals: list[dict[str, Any]] | None = None
        self.save_count = 0
        self.goal_save_count = 0

    def load(self) -> SaveState:
        if self._snapshot is None:
            self.state = SaveState()
        else:
            self.state = SaveState.from_dict(self._snapshot)
        return self.state

    def save(self) -> None:
        if self.state is None:
            return
        self._snapshot = self.state.to_dict()
        self.save_count += 1

    def load_goals(self) -> list[dict[str, Any]] | None:
        if self._goals is None:
            return None
        return [dict(g) for g in self._goals]

    def save_goals(self, goals: list[MissionGoal]) -> None:
        self._goals = dump_goals(goals)["missions"]
        self.goal_save_count += 1


class JsonSaveStore(SaveStore):
    """Stores ``save.json`` and ``missions.json`` in one directory."""

    def __init__(self, directory: str | Path) -> None:
        self.directory = Path(directory)
        self.state = None

    @property
    def save_path(self) -> Path:
        return self.directory / SAVE_FILE

    @property
    def goals_path(self) -> Path:
        return self.directory / GOALS_FILE

    def load(self) -> SaveState:
        if not self.save_path.exists():
            self.state = SaveState()
            self.save()
            return self.state
        try:
            data = json.loads(self.save_path.read_text(encoding="utf-8"))
            self.state = SaveState.from_dict(data)
        except (OSError, ValueError, TypeError) as e:
            logger.error("Could not read %s, starting fresh: %s", self.save_path, e)
            self.state = SaveState()
        return self.state

    def save(self) -> None:
        if self.state is None:
            return
        _write_json(self.save_path, self.state.to_dict())

    def load_goals(self) -> list[dict[str, Any]] | None:
        if not self.goals_path.exists():
            return None
        try:
            data = json.loads(self.goals_path.read_text(encoding="utf-8"))
        except (OSError, ValueError) as e:
            logger.error("Could not read %s: %s", self.goals_path, e)
            return None
        if isinstance(data, dict):
            data = data.get("missions")
        return data if isinstance(data, list) else None

    def save_goals(self, goals: list[MissionGoal]) -> None:
        _write_json(self.goals_path, dump_goals(goals))


def _write_json(path: Path, data: dict[str, Any]) -> None:
    """Write via a temp file in the same directory so a crash never leaves half a file."""
    path.parent.mkdir(parents=True, exist_ok=True)
    fd, tmp = tempfile.mkstemp(dir=path.parent, prefix=path.name, suffix=".tmp")
    try:
        with os.fdopen(fd, "w", encoding="utf-8") as f:
            json.dump(data, f, indent=2)
        os.replace(tmp, path)
    except OSError:
        logger.error("Failed to write %s", path)
        if os.path.exists(tmp):
            os.unlink(tmp)
        raise
