from activity_graph.activities.source import (
    ActivitySource,
    HttpActivitySource,
    InMemoryActivitySource,
    get_activity_source,
)
from activity_graph.activities.board import ActivityBoard

__all__ = [
    "ActivitySource",
    "HttpActivitySource",
    "InMemoryActivitySource",
    "get_activity_source",
    "ActivityBoard",
]
