"""Time window and GraphQL query construction.

Usage:
    start, end = window_for(2024, 12)          # (2024-12-01, 2025-01-01)
    spec = build_query(start, end)
    client.execute(spec)
"""

from dataclasses import dataclass
from datetime import date
from typing import Any

#: Attachment source type marking issues linked to a commit or pull request
GITHUB_SOURCE_TYPE = "github"

#: Workflow state an issue must be in to count as shipped
DONE_STATE = "Done"

ISSUES_QUERY = """\
query Changelog($filter: IssueFilter) {
  issues(filter: $filter) {
    nodes {
      assignee {
        name
        email
      }
      url
      title
      team {
        name
      }
      project {
        name
        lead {
          email
        }
      }
    }
  }
}
"""


# ---------------------------------------------------------------------------
# Time window
# ---------------------------------------------------------------------------

def window_for(year: int, month: int) -> tuple[date, date]:
    """Return the half-open ``[first day of month, first day of next month)``.

    An invalid month raises the ``ValueError`` from ``datetime.date``.
    """
    start = date(year, month, 1)
    if month == 12:
        end = date(year + 1, 1, 1)
    else:
        end = date(year, month + 1, 1)
    return start, end


# ---------------------------------------------------------------------------
# Query specification
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class QuerySpec:
    start: date
    end: date
    source_type: str = GITHUB_SOURCE_TYPE
    state: str | None = DONE_STATE

    @property
    def filter(self) -> dict[str, Any]:
        """The Linear ``IssueFilter`` object for this window."""
        issue_filter: dict[str, Any] = {}
        if self.state is not None:
            issue_filter["state"] = {"name": {"eq": self.state}}
        issue_filter["completedAt"] = {
            "gte": self.start.isoformat(),
            # Strict: an issue completed at midnight opening the next month
            # belongs to that month.
            "lt":  self.end.isoformat(),
        }
        issue_filter["attachments"] = {"sourceType": {"eq": self.source_type}}
        return issue_filter

    @property
    def variables(self) -> dict[str, Any]:
        return {"filter": self.filter}

    def payload(self) -> dict[str, Any]:
        """Return the JSON body for the GraphQL POST request."""
        return {"query": ISSUES_QUERY, "variables": self.variables}


def build_query(
    start: date,
    end: date,
    source_type: str = GITHUB_SOURCE_TYPE,
    state: str | None = DONE_STATE,
) -> QuerySpec:
    """Build the query selecting issues completed in ``[start, end)``."""
    return QuerySpec(start=start, end=end, source_type=source_type, state=state)
