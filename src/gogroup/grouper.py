from __future__ import annotations

from typing import Protocol, runtime_checkable

from .config import GroupOrder


@runtime_checkable
class Grouper(Protocol):
    def group(self, path: str) -> int: ...


def is_std_path(path: str) -> bool:
    # A dot marks a remote (non-standard) package.
    return "." not in path


class ConfiguredGrouper:
    """Groups import paths according to a :class:`GroupOrder`."""

    __slots__ = ("order",)

    def __init__(self, order: GroupOrder | None = None) -> None:
        self.order = order or GroupOrder()

    def group(self, path: str) -> int:
        for prefix, group in self.order.prefixes:
            if path.startswith(prefix):
                return group
        if is_std_path(path):
            return self.order.std
        return self.order.other

    def __repr__(self) -> str:
        return f"ConfiguredGrouper({self.order.describe()!r})"


class CombinedGrouper:
    """Everything in one group."""

    def group(self, path: str) -> int:
        return 0


class StdOtherGrouper:
    def group(self, path: str) -> int:
        return 0 if is_std_path(path) else 1


class GoimportsGrouper:
    """Standard packages, then third party, then appengine, then local."""

    def group(self, path: str) -> int:
        if path.startswith("local/"):
            return 3
        if path.startswith("appengine"):
            return 2
        if not is_std_path(path):
            return 1
        return 0


class LocalMiddleGrouper:
    """Standard packages, then local, then third party."""

    def group(self, path: str) -> int:
        if path.startswith("local/"):
            return 1
        if not is_std_path(path):
            return 2
        return 0


class DepthGrouper:
    def group(self, path: str) -> int:
        return path.count("/")
