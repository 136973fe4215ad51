"""Application service (use case) for Comment operations."""

from collections import Counter
from collections.abc import Callable, Iterable
from typing import Any

from scenario_manager.application.collections import FIELD_SCENARIO_ID
from scenario_manager.application.schemas import CommentCreate, CommentUpdate
from scenario_manager.application.services.record_collection import RecordCollection
from scenario_manager.application.services.records import comment_to_document
from scenario_manager.application.services.subscription import Subscription
from scenario_manager.domain.entities import Comment, RecordPatch


class CommentService:
    """Orchestrates comments on scenarios, always oldest first."""

    def __init__(self, comments: RecordCollection[Comment]):
        self._comments = comments

    async def list_comments(self, scenario_id: str | None = None) -> list[Comment]:
        """Comments of one scenario, or of every scenario when no id is given."""
        where = (FIELD_SCENARIO_ID, scenario_id) if scenario_id is not None else None
        return await self._comments.get_all(where)

    async def add_comment(self, scenario_id: str, data: CommentCreate) -> Comment:
        comment = Comment(scenario_id=scenario_id, author=data.author, text=data.text)
        return await self._comments.create(comment_to_document(comment))

    async def update_comment(self, comment_id: str, data: CommentUpdate) -> RecordPatch:
        return await self._comments.update(comment_id, {"text": data.text})

    async def delete_comment(self, comment_id: str) -> bool:
        return await self._comments.delete(comment_id)

    async def subscribe_comments(
        self,
        scenario_id: str,
        callback: Callable[[list[Comment]], Any],
    ) -> Subscription:
        return await self._comments.subscribe(callback, where=(FIELD_SCENARIO_ID, scenario_id))

    @staticmethod
    def count_by_scenario(comments: Iterable[Comment]) -> dict[str, int]:
        """Number of comments per scenario id, for list badges."""
        return dict(Counter(comment.scenario_id for comment in comments))
