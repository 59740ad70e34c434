"""Default keyword classifier mapping free text to a task type.

The planner only depends on the ``text -> TaskType`` contract; this
classifier can be replaced by anything with the same shape.
"""
from __future__ import annotations

import re
from functools import lru_cache

from ralph_ultra.model.enums import TaskType
from ralph_ultra.model.task import Task

# Ties resolve to the earlier entry.
TASK_KEYWORDS: dict[TaskType, tuple[str, ...]] = {
    TaskType.COMPLEX_INTEGRATION: (
        "integration", "multi-system", "architecture", "orchestration",
        "microservice", "end-to-end", "full-stack", "cross-cutting",
    ),
    TaskType.MATHEMATICAL: (
        "algorithm", "calculation", "formula", "optimization",
        "compute", "math", "statistics", "probability",
    ),
    TaskType.BACKEND_API: (
        "endpoint", "rest", "graphql", "api", "route",
        "controller", "request", "response", "http",
    ),
    TaskType.BACKEND_LOGIC: (
        "service", "business logic", "validation", "processing",
        "workflow", "domain logic", "data processing",
    ),
    TaskType.FRONTEND_UI: (
        "component", "ui", "style", "css", "layout", "design", "visual",
        "responsive", "theme", "button", "form", "modal", "dashboard",
    ),
    TaskType.FRONTEND_LOGIC: (
        "hook", "state", "context", "reducer", "effect",
        "react", "vue", "store", "state management",
    ),
    TaskType.DATABASE: (
        "schema", "migration", "query", "database", "sql",
        "table", "index", "relation", "model",
    ),
    TaskType.TESTING: (
        "test", "spec", "mock", "jest", "vitest", "cypress",
        "e2e", "unit test", "integration test", "coverage",
    ),
    TaskType.DOCUMENTATION: (
        "documentation", "readme", "docs", "guide",
        "tutorial", "comment", "jsdoc", "api docs",
    ),
    TaskType.REFACTORING: (
        "refactor", "cleanup", "reorganize", "restructure",
        "simplify", "optimize", "improve",
    ),
    TaskType.BUGFIX: (
        "fix", "bug", "issue", "error", "crash", "defect", "problem", "broken",
    ),
    TaskType.DEVOPS: (
        "docker", "ci/cd", "pipeline", "deploy", "deployment",
        "kubernetes", "container", "build",
    ),
    TaskType.CONFIG: (
        "configuration", "config", "setup", "environment", "settings", "env", "dotenv",
    ),
}

TITLE_WEIGHT = 3


@lru_cache(maxsize=None)
def _pattern(keyword: str) -> re.Pattern[str]:
    return re.compile(rf"\b{re.escape(keyword)}\b", re.IGNORECASE)


def score_text(text: str, title: str = "") -> dict[TaskType, int]:
    """Keyword hit counts per task type; hits on keywords in *title* count triple."""
    combined = f"{title} {text}" if title else text
    title_lower = title.lower()
    scores: dict[TaskType, int] = {}
    for task_type, keywords in TASK_KEYWORDS.items():
        score = 0
        for keyword in keywords:
            hits = len(_pattern(keyword).findall(combined))
            if not hits:
                continue
            score += hits * (TITLE_WEIGHT if keyword in title_lower else 1)
        scores[task_type] = score
    return scores


def detect_task_type(text: str, title: str = "") -> TaskType:
    """Classify free text; ``unknown`` when no keyword matches."""
    best, best_score = TaskType.UNKNOWN, 0
    for task_type, score in score_text(text, title).items():
        if score > best_score:
            best, best_score = task_type, score
    return best


def classify_task(task: Task) -> TaskType:
    """Classify a backlog task, weighting its title."""
    return detect_task_type(" ".join((task.description, *task.acceptance_criteria)), task.title)
