"""
Tests for the pure result aggregation.
"""
import pytest

from app.services.sync.categories import FolderCategory, FOLDER_COLUMNS, normalize_categories
from app.services.sync.models import SyncOutcome
from app.services.sync.orchestration.folder_sync import aggregate_outcomes


def _outcome(category, success, sent=0, failed=0):
    return SyncOutcome(category=category, success=success, files_sent=sent, files_failed=failed)


class TestAggregateOutcomes:
    def test_empty_is_vacuous_success(self):
        result = aggregate_outcomes([])

        assert result.success is True
        assert result.results == []
        assert (result.total_files_sent, result.total_files_failed) == (0, 0)

    def test_all_successful(self):
        result = aggregate_outcomes([
            _outcome(FolderCategory.STRATEGY, True, 3, 1),
            _outcome(FolderCategory.MEETINGS, True, 7, 0),
        ])

        assert result.success is True
        assert (result.total_files_sent, result.total_files_failed) == (10, 1)

    def test_one_failure_fails_overall_and_keeps_order(self):
        outcomes = [
            _outcome(FolderCategory.FINANCIAL, True, 2, 0),
            _outcome(FolderCategory.STRATEGY, False, 1, 4),
            _outcome(FolderCategory.PROJECTS, True, 0, 0),
        ]

        result = aggregate_outcomes(outcomes)

        assert result.success is False
        assert [o.category for o in result.results] == [
            FolderCategory.FINANCIAL, FolderCategory.STRATEGY, FolderCategory.PROJECTS
        ]
        assert (result.total_files_sent, result.total_files_failed) == (3, 4)


class TestCategories:
    def test_every_category_has_columns(self):
        assert set(FOLDER_COLUMNS) == set(FolderCategory)

    def test_default_is_all_categories(self):
        assert normalize_categories(None) == list(FolderCategory)

    def test_duplicates_removed_in_order(self):
        assert normalize_categories(["meetings", "strategy", "meetings"]) == [
            FolderCategory.MEETINGS, FolderCategory.STRATEGY
        ]

    def test_unknown_category_rejected(self):
        with pytest.raises(ValueError):
            normalize_categories(["marketing"])
