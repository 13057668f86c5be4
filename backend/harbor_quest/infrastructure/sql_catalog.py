"""SQL Catalogs — HarborCatalog / TriviaCatalog backed by the harbors and trivia_questions tables.

Invariants:
    - Rows are mapped to frozen core types; invalid rows are skipped and logged, never served
    - Results are ordered by name / creation time so "ordered sequence" is stable
    - difficulty=None means every tier

Design Decisions:
    - Mapping functions are module-level and pure so they are testable without a DB
"""

import logging
from typing import Sequence

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from harbor_quest.core.catalog import Harbor, TriviaAnswer, TriviaQuestion
from harbor_quest.core.domain_types import (
    AnswerId, Difficulty, HarborId, Language, QuestionId,
)
from harbor_quest.core.errors import HarborQuestError
from harbor_quest.core.geo import Coordinate
from harbor_quest.models.harbor import HarborRecord
from harbor_quest.models.trivia_question import TriviaQuestionRecord

logger = logging.getLogger(__name__)


def harbor_from_record(row: HarborRecord) -> Harbor:
    return Harbor(
        id=HarborId(str(row.id)),
        name=row.name,
        coordinate=Coordinate(row.latitude, row.longitude),
        difficulty=Difficulty(row.difficulty),
        hints=tuple(row.hints or ()),
        region=row.region,
        harbor_types=tuple(row.harbor_types or ()),
        notable_feature=row.notable_feature,
        description=row.description,
        language=Language(row.language),
    )


def question_from_record(row: TriviaQuestionRecord) -> TriviaQuestion:
    answers = tuple(
        TriviaAnswer(id=AnswerId(str(i)), text=text)
        for i, text in enumerate(row.answers or ())
    )
    return TriviaQuestion(
        id=QuestionId(str(row.id)),
        prompt=row.question,
        answers=answers,
        correct_answer_id=AnswerId(str(row.correct_answer)),
        difficulty=Difficulty(row.difficulty),
        explanation=row.explanation,
        language=Language(row.language),
    )


class SqlHarborCatalog:
    def __init__(self, db: AsyncSession):
        self._db = db

    async def fetch_harbors(
        self, language: Language, difficulty: Difficulty | None = None,
    ) -> Sequence[Harbor]:
        query = select(HarborRecord).where(HarborRecord.language == language.value)
        if difficulty is not None:
            query = query.where(HarborRecord.difficulty == difficulty.value)
        result = await self._db.execute(query.order_by(HarborRecord.name))
        harbors = []
        for row in result.scalars().all():
            try:
                harbors.append(harbor_from_record(row))
            except (HarborQuestError, ValueError) as e:
                logger.warning(f"Skipping invalid harbor row {row.id}: {e}")
        return harbors


class SqlTriviaCatalog:
    def __init__(self, db: AsyncSession):
        self._db = db

    async def fetch_questions(
        self, language: Language, difficulty: Difficulty | None = None,
    ) -> Sequence[TriviaQuestion]:
        query = select(TriviaQuestionRecord).where(
            TriviaQuestionRecord.language == language.value,
        )
        if difficulty is not None:
            query = query.where(TriviaQuestionRecord.difficulty == difficulty.value)
        result = await self._db.execute(
            query.order_by(TriviaQuestionRecord.created_at),
        )
        questions = []
        for row in result.scalars().all():
            try:
                questions.append(question_from_record(row))
            except (HarborQuestError, ValueError) as e:
                logger.warning(f"Skipping invalid trivia row {row.id}: {e}")
        return questions
