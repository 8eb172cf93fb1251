"""Data models for Linear changelog reports.

Frozen dataclasses built from the GraphQL ``data`` payload:
    - Team
    - Project
    - Assignee
    - Issue
    - Report     (the flat query result)

Values compare and hash by content, so two issues whose teams share a name
land in the same changelog group.
"""

from dataclasses import dataclass, field
from typing import Any


class MalformedDataError(ValueError):
    """Raised when the Linear payload does not have the expected shape."""


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------

def _require_str(raw: dict, key: str, what: str) -> str:
    value = raw.get(key)
    if not isinstance(value, str):
        raise MalformedDataError(f"{what} is missing required field '{key}': {raw!r}")
    return value


def _optional_mapping(raw: dict, key: str) -> dict | None:
    value = raw.get(key)
    if value is None:
        return None
    if not isinstance(value, dict):
        raise MalformedDataError(f"Expected an object for '{key}', got {value!r}")
    return value


# ---------------------------------------------------------------------------
# Entities
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class Team:
    name: str

    @classmethod
    def from_dict(cls, raw: dict) -> "Team":
        return cls(name=_require_str(raw, "name", "Team"))


@dataclass(frozen=True)
class Project:
    name: str
    # Opaque: carried through, never rendered. Kept out of the hash because
    # the payload delivers it as a dict.
    lead: Any = field(default=None, hash=False)

    @classmethod
    def from_dict(cls, raw: dict) -> "Project":
        return cls(name=_require_str(raw, "name", "Project"), lead=raw.get("lead"))


@dataclass(frozen=True)
class Assignee:
    name: str
    email: str

    @classmethod
    def from_dict(cls, raw: dict) -> "Assignee":
        return cls(
            name=_require_str(raw, "name", "Assignee"),
            email=_require_str(raw, "email", "Assignee"),
        )


@dataclass(frozen=True)
class Issue:
    title: str
    assignee: Assignee | None = None
    url: str | None = None
    team: Team | None = None
    project: Project | None = None

    @classmethod
    def from_dict(cls, raw: dict) -> "Issue":
        """Build an Issue from one ``issues.nodes`` entry.

        Only ``title`` is mandatory; ``assignee``, ``url``, ``team`` and
        ``project`` may be null or absent.

        Raises:
            MalformedDataError: if ``title`` is missing or a nested object
                                has the wrong shape.
        """
        if not isinstance(raw, dict):
            raise MalformedDataError(f"Expected an issue object, got {raw!r}")

        assignee = _optional_mapping(raw, "assignee")
        team     = _optional_mapping(raw, "team")
        project  = _optional_mapping(raw, "project")
        url      = raw.get("url")
        if url is not None and not isinstance(url, str):
            raise MalformedDataError(f"Expected a string for 'url', got {url!r}")

        return cls(
            title=_require_str(raw, "title", "Issue"),
            assignee=Assignee.from_dict(assignee) if assignee is not None else None,
            url=url,
            team=Team.from_dict(team) if team is not None else None,
            project=Project.from_dict(project) if project is not None else None,
        )


@dataclass(frozen=True)
class Report:
    issues: tuple[Issue, ...] = ()

    @classmethod
    def from_dict(cls, data: dict) -> "Report":
        """Build a Report from the GraphQL ``data`` object.

        Expects ``{"issues": {"nodes": [...]}}``.
        """
        if not isinstance(data, dict):
            raise MalformedDataError(f"Expected a data object, got {data!r}")
        issues = data.get("issues")
        nodes = issues.get("nodes") if isinstance(issues, dict) else None
        if not isinstance(nodes, list):
            raise MalformedDataError("Response data has no 'issues.nodes' list")
        return cls(issues=tuple(Issue.from_dict(node) for node in nodes))
