"""Catalog Types — immutable reference data supplied by the external catalog.

Invariants:
    - Harbor and TriviaQuestion are frozen: the core never mutates catalog data
    - A TriviaQuestion has exactly one correct answer, and it is one of its candidates
    - select_catalog_items never repeats an item until the catalog is exhausted
    - select_catalog_items never picks the same item for two consecutive rounds (catalog > 1)

Design Decisions:
    - Tuples for ordered sequences (hints, answers, types): hashable and immutable
    - Selection takes an injected random.Random: deterministic in tests, shuffled in production
"""

import random
from dataclasses import dataclass, field
from typing import Sequence, TypeVar

from harbor_quest.core.domain_types import (
    AnswerId, Difficulty, HarborId, Language, QuestionId,
)
from harbor_quest.core.errors import CatalogEmptyError, InvalidInputError
from harbor_quest.core.geo import Coordinate

T = TypeVar("T")


@dataclass(frozen=True)
class Harbor:
    """A guest harbor whose location the player must find."""
    id: HarborId
    name: str
    coordinate: Coordinate
    difficulty: Difficulty = Difficulty.MEDIUM
    hints: tuple[str, ...] = ()
    region: str | None = None
    harbor_types: tuple[str, ...] = ()
    notable_feature: str | None = None
    description: str | None = None
    language: Language = Language.FI


@dataclass(frozen=True)
class TriviaAnswer:
    id: AnswerId
    text: str


@dataclass(frozen=True)
class TriviaQuestion:
    """A multiple-choice question with one marked-correct answer."""
    id: QuestionId
    prompt: str
    answers: tuple[TriviaAnswer, ...]
    correct_answer_id: AnswerId
    difficulty: Difficulty = Difficulty.MEDIUM
    explanation: str | None = None
    language: Language = Language.FI
    answer_ids: frozenset[AnswerId] = field(init=False, repr=False, compare=False)

    def __post_init__(self) -> None:
        ids = frozenset(a.id for a in self.answers)
        if len(ids) != len(self.answers):
            raise InvalidInputError(
                f"Question {self.id} has duplicate answer ids", "answers",
            )
        if self.correct_answer_id not in ids:
            raise InvalidInputError(
                f"Question {self.id} marks unknown answer "
                f"'{self.correct_answer_id}' as correct",
                "correct_answer_id",
            )
        object.__setattr__(self, "answer_ids", ids)


def select_catalog_items(
    items: Sequence[T], count: int, rng: random.Random, catalog: str,
    difficulty: Difficulty | None = None,
) -> list[T]:
    """Pick `count` items: shuffled, no repeats until every item was used once."""
    if not items:
        raise CatalogEmptyError(
            catalog, difficulty.value if difficulty else None,
        )
    picked: list[T] = []
    while len(picked) < count:
        batch = list(items)
        rng.shuffle(batch)
        if picked and len(batch) > 1 and batch[0] == picked[-1]:
            # a new pass never opens with the item the previous pass ended on
            batch[0], batch[-1] = batch[-1], batch[0]
        picked.extend(batch[: count - len(picked)])
    return picked
