"""Root conftest — shared test configuration and catalog builders."""

import os

import pytest

os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite:///:memory:")
os.environ.setdefault("LOG_FORMAT", "text")

from harbor_quest.core.catalog import Harbor, TriviaAnswer, TriviaQuestion  # noqa: E402
from harbor_quest.core.domain_types import (  # noqa: E402
    AnswerId, HarborId, QuestionId,
)
from harbor_quest.core.geo import Coordinate  # noqa: E402

HELSINKI = Coordinate(60.1699, 24.9384)


@pytest.fixture
def make_harbor():
    """Build a Harbor; defaults to the South Harbour of Helsinki with three hints."""
    def _make(
        harbor_id: str = "h-helsinki",
        coordinate: Coordinate = HELSINKI,
        hints: tuple[str, ...] = ("Capital city", "Market square", "Ferries to Tallinn"),
        **kwargs,
    ) -> Harbor:
        return Harbor(
            id=HarborId(harbor_id), name=kwargs.pop("name", "Eteläsatama"),
            coordinate=coordinate, hints=hints, **kwargs,
        )
    return _make


@pytest.fixture
def make_question():
    """Build a three-answer TriviaQuestion whose correct answer is "1"."""
    def _make(question_id: str = "q-1", correct: str = "1", **kwargs) -> TriviaQuestion:
        return TriviaQuestion(
            id=QuestionId(question_id),
            prompt=kwargs.pop("prompt", "Which sea lies south of Helsinki?"),
            answers=(
                TriviaAnswer(AnswerId("0"), "Bothnian Sea"),
                TriviaAnswer(AnswerId("1"), "Gulf of Finland"),
                TriviaAnswer(AnswerId("2"), "Lake Saimaa"),
            ),
            correct_answer_id=AnswerId(correct),
            **kwargs,
        )
    return _make
