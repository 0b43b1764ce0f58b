"""Pick the single data source that changed since the last invocation.

The session keeps a :class:`TriggerState` with the last-seen count of every
source. Each UI event hands the current raw counts to :func:`arbitrate`, which
compares them with the stored ones in a fixed priority order (normal, then
Poisson, then file) and recomputes the dataset from the first source that
differs. Only that source's counter is updated.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, replace
from enum import Enum
from typing import Any, Callable, Dict, Optional

import numpy as np

from .data_sources import Dataset, generate_normal, generate_poisson

logger = logging.getLogger(__name__)


class Source(str, Enum):
    NORMAL = "normal"
    POISSON = "poisson"
    FILE = "file"


def _count(value: Any) -> int:
    try:
        num = int(value)
    except (TypeError, ValueError):
        return 0
    return max(num, 0)


@dataclass(frozen=True)
class TriggerState:
    normal_count: int = 0
    poisson_count: int = 0
    file_count: int = 0

    def to_dict(self) -> Dict[str, int]:
        return {
            "normal_count": self.normal_count,
            "poisson_count": self.poisson_count,
            "file_count": self.file_count,
        }

    @classmethod
    def from_dict(cls, data: Optional[Dict[str, Any]]) -> "TriggerState":
        if not isinstance(data, dict):
            return cls()
        return cls(
            normal_count=_count(data.get("normal_count")),
            poisson_count=_count(data.get("poisson_count")),
            file_count=_count(data.get("file_count")),
        )


@dataclass(frozen=True)
class TriggerInputs:
    normal_clicks: Optional[int] = 0
    poisson_clicks: Optional[int] = 0
    file_present: bool = False


@dataclass(frozen=True)
class ArbiterResult:
    state: TriggerState
    source: Optional[Source] = None
    dataset: Optional[Dataset] = None
    file_cleared: bool = False

    @property
    def is_empty(self) -> bool:
        return self.dataset is None


def observed_file_count(file_present: bool, state: TriggerState) -> int:
    # Presence-based: a pending file always reads as one past the stored count.
    if not file_present:
        return 0
    return state.file_count + 1


def arbitrate(
    inputs: TriggerInputs,
    state: TriggerState,
    load_file: Callable[[], Dataset],
    *,
    rng: Optional[np.random.Generator] = None,
) -> ArbiterResult:
    """Recompute the dataset from whichever source changed first.

    ``load_file`` is only called on the file branch. A ``FileParseError`` it
    raises propagates unchanged and the caller keeps its previous state.
    """
    normal_now = _count(inputs.normal_clicks)
    poisson_now = _count(inputs.poisson_clicks)
    file_now = observed_file_count(bool(inputs.file_present), state)
    logger.debug(
        "arbitrate observed normal=%d poisson=%d file=%d stored=%s",
        normal_now,
        poisson_now,
        file_now,
        state.to_dict(),
    )

    if normal_now != state.normal_count:
        logger.info("source=normal clicks %d -> %d", state.normal_count, normal_now)
        dataset = generate_normal(rng=rng)
        return ArbiterResult(
            state=replace(state, normal_count=normal_now),
            source=Source.NORMAL,
            dataset=dataset,
        )

    if poisson_now != state.poisson_count:
        logger.info("source=poisson clicks %d -> %d", state.poisson_count, poisson_now)
        dataset = generate_poisson(rng=rng)
        return ArbiterResult(
            state=replace(state, poisson_count=poisson_now),
            source=Source.POISSON,
            dataset=dataset,
        )

    if file_now != state.file_count:
        if file_now == 0:
            logger.info("source=file selection cleared (was %d)", state.file_count)
            return ArbiterResult(
                state=replace(state, file_count=0),
                source=Source.FILE,
                file_cleared=True,
            )
        logger.info("source=file load %d -> %d", state.file_count, file_now)
        dataset = load_file()
        return ArbiterResult(
            state=replace(state, file_count=file_now),
            source=Source.FILE,
            dataset=dataset,
        )

    logger.info("no source changed")
    return ArbiterResult(state=state)
