"""ORM Models — SQLAlchemy declarative models for catalog and score tables.

Invariants:
    - All models inherit from Base (db/base.py)
    - Catalog tables (harbors, trivia_questions) are read-only to the game
    - GameScore is the aggregate root for a persisted session; RoundRecord rows belong to it

Design Decisions:
    - One file per entity for locality
    - All models imported here so SQLAlchemy resolves string-based relationship()
      references before any query runs
"""

from harbor_quest.models.harbor import HarborRecord  # noqa: F401
from harbor_quest.models.trivia_question import TriviaQuestionRecord  # noqa: F401
from harbor_quest.models.game_score import GameScore  # noqa: F401
from harbor_quest.models.round_record import RoundRecord  # noqa: F401
