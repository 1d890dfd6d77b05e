# cartguard/services/verdict.py
from __future__ import annotations
from dataclasses import dataclass, field
from typing import List, Union

from ..schemas import UpdateAction


@dataclass(frozen=True)
class Accepted:
    actions: List[UpdateAction] = field(default_factory=list)


@dataclass(frozen=True)
class Rejected:
    status_code: int
    message: str


Verdict = Union[Accepted, Rejected]
