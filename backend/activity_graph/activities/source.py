from abc import ABC, abstractmethod
from typing import List

import requests

from activity_graph import config
from activity_graph.graph.errors import ActivitySourceError, InvalidActivityNameError
from activity_graph.graph.types import Activity


def clean_activity_name(name) -> str:
    if not isinstance(name, str) or not name.strip():
        raise InvalidActivityNameError(name)
    return name.strip()


class ActivitySource(ABC):
    @abstractmethod
    def list_activities(self) -> List[Activity]:
        """Return every known activity ordered by id"""
        pass

    @abstractmethod
    def create_activity(self, name: str) -> Activity:
        """Create an activity and return it with its new id"""
        pass


class InMemoryActivitySource(ActivitySource):
    """Serial ids, like the activities table of the catalog service."""

    def __init__(self, activities: List[Activity] = None):
        self._activities: List[Activity] = list(activities or [])
        self._next_id = 1 + max(
            (int(a.id) for a in self._activities if a.id.isdigit()),
            default=0,
        )

    def list_activities(self) -> List[Activity]:
        return list(self._activities)

    def create_activity(self, name: str) -> Activity:
        activity = Activity(id=str(self._next_id), name=clean_activity_name(name))
        self._next_id += 1
        self._activities.append(activity)
        return activity


class HttpActivitySource(ActivitySource):
    """Activity catalog served over HTTP (GET/POST {base_url}/activities)."""

    def __init__(self, base_url: str, timeout: float = config.ACTIVITY_SOURCE_TIMEOUT):
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout

    def list_activities(self) -> List[Activity]:
        url = f"{self.base_url}/activities"
        try:
            response = requests.get(url, timeout=self.timeout)
            response.raise_for_status()
        except requests.RequestException as e:
            raise ActivitySourceError(f"Could not list activities: {e}", url=url) from e

        return [Activity.from_dict(row) for row in response.json()]

    def create_activity(self, name: str) -> Activity:
        name = clean_activity_name(name)
        url = f"{self.base_url}/activities"
        try:
            response = requests.post(url, json={"name": name}, timeout=self.timeout)
            response.raise_for_status()
        except requests.RequestException as e:
            raise ActivitySourceError(f"Could not create activity: {e}", url=url) from e

        data = response.json()
        return Activity(id=str(data["id"]), name=data.get("name", name))


def get_activity_source() -> ActivitySource:
    if config.ACTIVITY_SOURCE_URL:
        return HttpActivitySource(config.ACTIVITY_SOURCE_URL)
    return InMemoryActivitySource()
