"""Changelog report generator.

Functions:
    aggregate(issues)                          -> grouped document
    render(doc)                                -> str
    title_line(year, month)                    -> str
    get_changelog(client, year, month, ...)    -> str

A grouped document maps team -> project -> issues. Teams, projects and the
issues inside each group keep the order in which they first appear in the
query result; ``None`` keys stand for "no team" / "no project".
"""

import calendar
from typing import Iterable

from linear_changelog.client import LinearClient
from linear_changelog.models import Issue, Project, Report, Team
from linear_changelog.query import DONE_STATE, GITHUB_SOURCE_TYPE, build_query, window_for

GroupedDocument = dict[Team | None, dict[Project | None, list[Issue]]]

NO_TEAM    = "No team"
NO_PROJECT = "No project"

# Separates team sections: a markdown hard line break on an otherwise blank line
_TEAM_SEPARATOR = "  \n"


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------

def aggregate(issues: Iterable[Issue]) -> GroupedDocument:
    """Group *issues* by team, then by project, in first-occurrence order."""
    doc: GroupedDocument = {}
    for issue in issues:
        projects = doc.setdefault(issue.team, {})
        projects.setdefault(issue.project, []).append(issue)
    return doc


def render(doc: GroupedDocument) -> str:
    """Render a grouped document as markdown. An empty document gives ``""``."""
    sections = []
    for team, projects in doc.items():
        lines = [_team_heading(team)]
        for project, issues in projects.items():
            lines.append(_project_heading(project))
            lines.extend(_issue_item(issue) for issue in issues)
        sections.append("".join(lines))
    return _TEAM_SEPARATOR.join(sections)


def title_line(year: int, month: int) -> str:
    """Return ``# Changelog draft <MONTH> <year>``, e.g. ``# Changelog draft MARCH 2024``."""
    return f"# Changelog draft {calendar.month_name[month].upper()} {year}"


def get_changelog(
    client: LinearClient,
    year: int,
    month: int,
    *,
    source_type: str = GITHUB_SOURCE_TYPE,
    state: str | None = DONE_STATE,
) -> str:
    """Query the issues completed in (*year*, *month*) and render them.

    Raises whatever the client raises, and ``MalformedDataError`` if the
    response cannot be parsed; nothing is rendered in either case.
    """
    start, end = window_for(year, month)
    query = build_query(start, end, source_type=source_type, state=state)
    report = Report.from_dict(client.execute(query))
    return render(aggregate(report.issues))


# ---------------------------------------------------------------------------
# Internal helpers
# ---------------------------------------------------------------------------

def _team_heading(team: Team | None) -> str:
    return f"## {team.name if team is not None else NO_TEAM}\n"


def _project_heading(project: Project | None) -> str:
    return f"### {project.name if project is not None else NO_PROJECT}\n"


def _issue_item(issue: Issue) -> str:
    text = f"[{issue.title}]({issue.url})" if issue.url is not None else issue.title
    if issue.assignee is not None:
        text += f" @{issue.assignee.name}"
    return f"* {text}\n"
