"""
UI Session State

DESIGN DECISION: The state a screen needs between events (is the form
creating or editing, which record, what the list is filtered by) is an
explicit immutable value. Handlers take the current state and return
the next one; nothing is read from or written to ambient UI state.
"""

from enum import Enum
from typing import Optional

from pydantic import BaseModel, ConfigDict, model_validator

from orcamentos.models.budget import BudgetQuery, SortKey


class FormMode(str, Enum):
    """What submitting the form will do."""
    CREATE = "create"
    EDITING = "editing"


class SessionState(BaseModel):
    """
    Immutable session state.

    Use the helper methods to derive a new state; instances are frozen.
    """
    model_config = ConfigDict(frozen=True)

    mode: FormMode = FormMode.CREATE
    editing_id: Optional[str] = None

    search_text: str = ""
    category: str = ""
    sort_key: SortKey = SortKey.NONE

    @model_validator(mode='after')
    def check_mode(self) -> 'SessionState':
        """editing_id is set exactly when editing."""
        if self.mode == FormMode.EDITING and not self.editing_id:
            raise ValueError("Editing mode requires an editing_id")
        if self.mode == FormMode.CREATE and self.editing_id is not None:
            raise ValueError("Create mode cannot carry an editing_id")
        return self

    @property
    def is_editing(self) -> bool:
        return self.mode == FormMode.EDITING

    @property
    def query(self) -> BudgetQuery:
        return BudgetQuery(
            search_text=self.search_text,
            category=self.category,
            sort_key=self.sort_key,
        )

    def _replace(self, **changes) -> 'SessionState':
        """Derive a new state, re-running the validators."""
        return SessionState(**{**self.model_dump(), **changes})

    def start_editing(self, item_id: str) -> 'SessionState':
        return self._replace(mode=FormMode.EDITING, editing_id=item_id)

    def reset_form(self) -> 'SessionState':
        return self._replace(mode=FormMode.CREATE, editing_id=None)

    def with_query(
        self,
        search_text: Optional[str] = None,
        category: Optional[str] = None,
        sort_key: Optional[SortKey] = None,
    ) -> 'SessionState':
        """Return a state with the given list controls replaced (None keeps)."""
        update = {}
        if search_text is not None:
            update["search_text"] = search_text
        if category is not None:
            update["category"] = category
        if sort_key is not None:
            update["sort_key"] = sort_key
        return self._replace(**update)
