"""
Persisted UI preferences.

Preferences live in a JSON file under a fixed namespace key. There is no
schema versioning: keys the current model does not know are dropped on
load, and an unreadable file falls back to defaults.
"""

import json
import logging
from pathlib import Path
from typing import Dict, Literal, Optional, Tuple

from pydantic import BaseModel, ValidationError

from cashflow_mcp.core.state import (
    DEFAULT_FORM_FIELD_ORDER,
    DEFAULT_PAGE_SIZE,
    DEFAULT_TABLE_COLUMNS,
    AppState,
)
from cashflow_mcp.models.query import FilterSpec
from cashflow_mcp.models.ui import (
    FilterVisibility,
    FormFieldVisibility,
    TableColumn,
    TagSuggestion,
)
from cashflow_mcp.utils.files import write_json_atomic

logger = logging.getLogger(__name__)

STORAGE_NAMESPACE = "transaction-storage"

DEFAULT_PREFS_PATH = Path.home() / ".cashflow" / "preferences.json"


class UIPreferences(BaseModel):
    """The subset of application state that survives restarts."""

    model_config = {"extra": "ignore"}

    view_mode: Literal["table", "grid", "calendar"] = "table"
    page_size: int = DEFAULT_PAGE_SIZE
    filters: Optional[FilterSpec] = None
    table_columns: Tuple[TableColumn, ...] = DEFAULT_TABLE_COLUMNS
    form_field_visibility: FormFieldVisibility = FormFieldVisibility()
    form_field_order: Dict[str, int] = DEFAULT_FORM_FIELD_ORDER
    filter_visibility: FilterVisibility = FilterVisibility()
    tag_suggestions: Tuple[TagSuggestion, ...] = ()

    @classmethod
    def from_state(cls, state: AppState, view_mode: str = "table") -> "UIPreferences":
        return cls(
            view_mode=view_mode,
            page_size=state.page_size,
            filters=state.filters,
            table_columns=state.table_columns,
            form_field_visibility=state.form_field_visibility,
            form_field_order=state.form_field_order,
            filter_visibility=state.filter_visibility,
            tag_suggestions=state.tag_suggestions,
        )

    def apply_to(self, state: AppState) -> AppState:
        """Overlay these preferences onto ``state``."""
        changes = {
            "page_size": self.page_size,
            "table_columns": self.table_columns,
            "form_field_visibility": self.form_field_visibility,
            "form_field_order": self.form_field_order,
            "filter_visibility": self.filter_visibility,
            "tag_suggestions": self.tag_suggestions,
        }
        if self.filters is not None:
            changes["filters"] = self.filters
        return state.model_copy(update=changes)


class PreferencesStore:
    """Loads and saves UIPreferences as a namespaced JSON blob."""

    def __init__(self, path: Optional[Path] = None):
        self.path = Path(path) if path is not None else DEFAULT_PREFS_PATH

    def load(self) -> UIPreferences:
        """
        Read preferences from disk.

        Returns:
            Stored preferences, or defaults when the file is missing or invalid
        """
        if not self.path.is_file():
            return UIPreferences()
        try:
            document = json.loads(self.path.read_text(encoding="utf-8"))
            return UIPreferences.model_validate(document.get(STORAGE_NAMESPACE, {}))
        except (OSError, json.JSONDecodeError, AttributeError, ValidationError) as e:
            logger.warning(f"Ignoring unreadable preferences at {self.path}: {e}")
            return UIPreferences()

    def save(self, preferences: UIPreferences) -> None:
        write_json_atomic(self.path, {STORAGE_NAMESPACE: preferences.model_dump(mode="json")})
