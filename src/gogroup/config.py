from __future__ import annotations

from dataclasses import dataclass
import os
import re
from typing import Iterable, Mapping

from .errors import OrderSpecError

ORDER_ENV_VAR = "GOGROUP_ORDER"
DEFAULT_STD_GROUP = 0
DEFAULT_OTHER_GROUP = 1

_PREFIX_SPEC_PATTERN = re.compile(r"^prefix=(.*)$")


@dataclass(frozen=True, slots=True)
class GroupOrder:
    """Import group ordering built from ``std``, ``other`` and ``prefix=X`` specs.

    Groups that are never mentioned keep the default ids (std 0, other 1), and
    configured groups are numbered from 2 in the order given, so anything the
    caller lists sorts after the unmentioned defaults.
    """

    std: int = DEFAULT_STD_GROUP
    other: int = DEFAULT_OTHER_GROUP
    # (prefix, group) pairs in configuration order; the first match wins.
    prefixes: tuple[tuple[str, int], ...] = ()

    def __post_init__(self) -> None:
        ids = [self.std, self.other, *(group for _, group in self.prefixes)]
        if len(set(ids)) != len(ids):
            raise OrderSpecError(self.describe(), "Duplicate group id in order specification")
        seen: set[str] = set()
        for prefix, _ in self.prefixes:
            if not prefix:
                raise OrderSpecError("prefix=", "Empty prefix in order specification")
            if prefix in seen:
                raise OrderSpecError(f"prefix={prefix}", "Duplicate order specification")
            seen.add(prefix)

    @property
    def was_set(self) -> bool:
        return bool(self.prefixes) or self.std != DEFAULT_STD_GROUP or self.other != DEFAULT_OTHER_GROUP

    def describe(self) -> str:
        names: dict[int, str] = {self.std: "std", self.other: "other"}
        for prefix, group in self.prefixes:
            names[group] = f"prefix={prefix}"
        return ",".join(names[group] for group in sorted(names))


def parse_order_specs(specs: Iterable[str]) -> GroupOrder:
    std = DEFAULT_STD_GROUP
    other = DEFAULT_OTHER_GROUP
    prefixes: list[tuple[str, int]] = []
    seen: set[str] = set()
    next_id = DEFAULT_OTHER_GROUP + 1

    for raw in specs:
        for part in raw.split(","):
            token = part.strip()
            if token in seen:
                raise OrderSpecError(token, "Duplicate order specification")
            if token == "std":
                std = next_id
            elif token == "other":
                other = next_id
            else:
                match = _PREFIX_SPEC_PATTERN.match(token)
                if match is None:
                    raise OrderSpecError(token)
                prefixes.append((match.group(1), next_id))
            seen.add(token)
            next_id += 1

    return GroupOrder(std=std, other=other, prefixes=tuple(prefixes))


def order_from_environment(environ: Mapping[str, str] | None = None) -> GroupOrder:
    env = os.environ if environ is None else environ
    value = env.get(ORDER_ENV_VAR, "").strip()
    if not value:
        return GroupOrder()
    return parse_order_specs([value])
