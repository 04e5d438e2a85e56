"""
Ticket sprint models.
"""

from typing import Any

from ..base import ApiModel, str_or_none
from ..constants import EMPTY_STRING


class TicketSprintInfo(ApiModel):
    """
    Model representing a sprint a ticket belongs to.
    """

    id: int | None = None
    name: str = EMPTY_STRING
    state: str = EMPTY_STRING
    board_id: int | None = None
    start_date: str | None = None
    end_date: str | None = None
    complete_date: str | None = None
    goal: str | None = None

    @classmethod
    def from_api_response(
        cls, data: dict[str, Any], **kwargs: Any
    ) -> "TicketSprintInfo":
        """
        Create a TicketSprintInfo from a structured sprint object.

        Jira Cloud returns sprint custom-field values as objects; legacy
        descriptor strings are parsed by the extractor instead.
        """
        if not data or not isinstance(data, dict):
            return cls()

        def to_int(value: Any) -> int | None:
            try:
                return int(value)
            except (TypeError, ValueError):
                return None

        return cls(
            id=to_int(data.get("id")),
            name=str(data.get("name") or EMPTY_STRING),
            state=str(data.get("state") or EMPTY_STRING).lower(),
            board_id=to_int(data.get("boardId", data.get("rapidViewId"))),
            start_date=str_or_none(data.get("startDate")),
            end_date=str_or_none(data.get("endDate")),
            complete_date=str_or_none(data.get("completeDate")),
            goal=str_or_none(data.get("goal")),
        )
