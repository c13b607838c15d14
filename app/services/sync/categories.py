"""
Folder Categories
The closed set of Drive folder types and the columns each one maps to
"""
from enum import Enum
from typing import Dict, Iterable, List, NamedTuple, Optional


class FolderCategory(str, Enum):
    """Document classes that can each have their own source folder."""

    STRATEGY = "strategy"
    MEETINGS = "meetings"
    FINANCIAL = "financial"
    PROJECTS = "projects"


class FolderColumns(NamedTuple):
    """Columns on user_drive_connections for one folder type."""

    folder_id: str
    folder_name: str
    selected_folder_ids: str


# Explicit lookup table (no column names built by string concatenation)
FOLDER_COLUMNS: Dict[FolderCategory, FolderColumns] = {
    FolderCategory.STRATEGY: FolderColumns(
        folder_id="strategy_folder_id",
        folder_name="strategy_folder_name",
        selected_folder_ids="selected_strategy_folder_ids",
    ),
    FolderCategory.MEETINGS: FolderColumns(
        folder_id="meetings_folder_id",
        folder_name="meetings_folder_name",
        selected_folder_ids="selected_meetings_folder_ids",
    ),
    FolderCategory.FINANCIAL: FolderColumns(
        folder_id="financial_folder_id",
        folder_name="financial_folder_name",
        selected_folder_ids="selected_financial_folder_ids",
    ),
    FolderCategory.PROJECTS: FolderColumns(
        folder_id="projects_folder_id",
        folder_name="projects_folder_name",
        selected_folder_ids="selected_projects_folder_ids",
    ),
}

DEFAULT_CATEGORIES: List[FolderCategory] = list(FolderCategory)


def normalize_categories(categories: Optional[Iterable[str]]) -> List[FolderCategory]:
    """
    Turn requested folder types into an ordered, de-duplicated list.

    None means every category. Unknown names raise ValueError.
    """
    if categories is None:
        return list(DEFAULT_CATEGORIES)

    ordered: List[FolderCategory] = []
    for raw in categories:
        category = FolderCategory(raw)
        if category not in ordered:
            ordered.append(category)
    return ordered
