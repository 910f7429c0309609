"""Default Catalog — the stores and operations served by crudserve.main:app.

Invariants:
    - Every shape here is an ordinary pydantic model; nothing registers itself
    - notes is SQL-backed, owned by settings.default_user_id

Design Decisions:
    - Lives outside services/: owners supply their own catalog and pass the
      registry to create_app(); this one exists so the service runs out of the box
"""

from pydantic import BaseModel, Field

from crudserve.config import Settings, get_settings
from crudserve.core.domain_types import UserId
from crudserve.infrastructure.sql_store import SqlStore
from crudserve.services.registry import Registry


class Note(BaseModel):
    """A short titled note."""
    title: str = Field(max_length=200)
    body: str = Field("", max_length=10_000)
    tags: list[str] = Field(default_factory=list)

    def validate_self(self) -> None:
        if not self.title.strip():
            raise ValueError("title cannot be empty or whitespace")
        if len(set(self.tags)) != len(self.tags):
            raise ValueError("tags must be unique")


class WordCountRequest(BaseModel):
    text: str

    def validate_self(self) -> None:
        if not self.text.strip():
            raise ValueError("text cannot be empty or whitespace")


class WordCountResponse(BaseModel):
    words: int
    characters: int
    unique_words: int


class WordCount:
    """Counts words in a text. Fails on texts above max_words."""

    def __init__(self, max_words: int = 100_000):
        self.max_words = max_words

    def process(
        self, request: WordCountRequest,
    ) -> tuple[WordCountResponse | None, ValueError | None]:
        words = request.text.split()
        if len(words) > self.max_words:
            return None, ValueError(
                f"text has {len(words)} words, limit is {self.max_words}",
            )
        return WordCountResponse(
            words=len(words),
            characters=len(request.text),
            unique_words=len({w.lower() for w in words}),
        ), None


def build_registry(settings: Settings | None = None) -> Registry:
    settings = settings or get_settings()
    owner = UserId(settings.default_user_id)
    return (
        Registry()
        .register_store(SqlStore("notes", Note, user_id=owner))
        .register_operation("/ops/word-count", WordCount())
    )
