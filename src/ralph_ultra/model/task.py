"""Backlog items consumed by the planner."""
from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from ralph_ultra.model.enums import Complexity


@dataclass(frozen=True)
class Task:
    id: str
    title: str
    description: str = ""
    complexity: Complexity = Complexity.MEDIUM
    acceptance_criteria: tuple[str, ...] = ()

    @property
    def text(self) -> str:
        """All descriptive text, as handed to the task classifier."""
        return " ".join((self.title, self.description, *self.acceptance_criteria))

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Task:
        """Build a task from a PRD user story.

        Acceptance criteria may be plain strings or objects with a ``text`` key.
        """
        criteria: list[str] = []
        for item in data.get("acceptanceCriteria", data.get("acceptance_criteria", ())):
            if isinstance(item, str):
                criteria.append(item)
            elif isinstance(item, dict) and "text" in item:
                criteria.append(str(item["text"]))
        return cls(
            id=str(data["id"]),
            title=str(data.get("title", "")),
            description=str(data.get("description", "")),
            complexity=Complexity(data.get("complexity", Complexity.MEDIUM.value)),
            acceptance_criteria=tuple(criteria),
        )


@dataclass(frozen=True)
class Backlog:
    """An ordered list of tasks for one project."""

    project: str
    tasks: tuple[Task, ...] = ()

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Backlog:
        stories = data.get("userStories", data.get("tasks", ()))
        return cls(
            project=str(data.get("project", "")),
            tasks=tuple(Task.from_dict(s) for s in stories),
        )
