"""
Unit Tests for Exclusion List and Watchlist Accessors.

Test Aspects Covered:
    ✅ Business Logic: Exclude/restore, group CRUD, add/remove codes
    ✅ Edge Cases: Duplicates, unknown groups, blank names, last group
    ✅ Error Handling: Store read/write failures fall back, never raise
    ✅ Data Quality: Codes canonicalized, malformed documents tolerated
    ✅ Idempotency: Repeated exclude/add are no-ops
"""

from __future__ import annotations

import logging
from unittest.mock import Mock

import pytest

from quote_screener.domain.entities import DEFAULT_GROUP_ID, DEFAULT_GROUP_NAME
from quote_screener.storage import (
    ExclusionList,
    InMemoryStore,
    JsonFileStore,
    WatchlistStore,
    add_group,
    add_to_group,
    exclude,
    is_excluded,
    remove_from_group,
    remove_group,
    rename_group,
    restore,
)


def failing_store() -> Mock:
    store = Mock()
    store.get.side_effect = OSError("disk unavailable")
    store.set.side_effect = OSError("disk unavailable")
    return store


class TestExclusionList:
    """Test cases for ExclusionList."""

    def test_empty_by_default(self, exclusion_list: ExclusionList) -> None:
        assert exclusion_list.entries() == []
        assert exclusion_list.codes() == []

    def test_exclude_and_query(self, exclusion_list: ExclusionList) -> None:
        """
        SCENARIO: Exclude a bare code with name and reason
        EXPECTED: Stored canonically with millisecond timestamp
        """
        # Act
        added = exclusion_list.exclude("600519", name="贵州茅台", reason="估值过高")

        # Assert
        assert added is True
        entry = exclusion_list.entries()[0]
        assert entry.code == "sh600519"
        assert entry.name == "贵州茅台"
        assert entry.excluded_at == 1_719_558_000_000
        assert exclusion_list.is_excluded("sh600519")
        assert exclusion_list.is_excluded("600519")
        assert exclusion_list.reason_for("600519") == "估值过高"

    def test_exclude_twice_is_noop(self, exclusion_list: ExclusionList) -> None:
        """
        SCENARIO: Exclude the same code twice with different reasons
        EXPECTED: One entry, original reason kept
        """
        exclusion_list.exclude("sz000001", reason="first")
        added = exclusion_list.exclude("000001", reason="second")

        assert added is False
        assert len(exclusion_list.entries()) == 1
        assert exclusion_list.reason_for("sz000001") == "first"

    def test_restore(self, exclusion_list: ExclusionList) -> None:
        exclusion_list.exclude("sh600000")
        exclusion_list.exclude("sz000001")

        assert exclusion_list.restore("600000") is True
        assert exclusion_list.restore("600000") is False
        assert exclusion_list.codes() == ["sz000001"]

    def test_reason_for_unknown_code(self, exclusion_list: ExclusionList) -> None:
        assert exclusion_list.reason_for("sh600000") is None

    def test_empty_code_ignored(self, exclusion_list: ExclusionList) -> None:
        assert exclusion_list.exclude("") is False
        assert exclusion_list.entries() == []

    def test_persisted_document_shape(self, memory_store, exclusion_list) -> None:
        """
        SCENARIO: Inspect the stored document
        EXPECTED: List of {code, name, reason, excludedAt} under stock_excluded
        """
        exclusion_list.exclude("sh600000", "浦发银行", "")

        assert memory_store.get("stock_excluded") == [
            {
                "code": "sh600000",
                "name": "浦发银行",
                "reason": "",
                "excludedAt": 1_719_558_000_000,
            }
        ]

    def test_read_failure_falls_back(self, caplog) -> None:
        """
        SCENARIO: Store raises on read and write
        EXPECTED: Empty list, no exception, warning logged
        """
        exclusions = ExclusionList(failing_store())

        with caplog.at_level(logging.WARNING):
            assert exclusions.codes() == []
            assert exclusions.is_excluded("sh600000") is False
            exclusions.exclude("sh600000")

        assert "Failed to read exclusion list" in caplog.text
        assert "Failed to persist exclusion list" in caplog.text

    def test_malformed_document_tolerated(self) -> None:
        """
        SCENARIO: Stored document is not a list, or has junk entries
        EXPECTED: Valid entries kept, junk skipped
        """
        assert ExclusionList(InMemoryStore({"stock_excluded": {"a": 1}})).entries() == []

        store = InMemoryStore(
            {"stock_excluded": ["junk", {"code": "600000", "excludedAt": 5}]}
        )
        assert ExclusionList(store).codes() == ["sh600000"]


class TestWatchlistStore:
    """Test cases for WatchlistStore."""

    def test_default_group(self, watchlist_store: WatchlistStore) -> None:
        """
        SCENARIO: Nothing stored yet
        EXPECTED: One empty default group
        """
        watchlist = watchlist_store.load()

        assert len(watchlist.groups) == 1
        assert watchlist.groups[0].id == DEFAULT_GROUP_ID
        assert watchlist.groups[0].name == DEFAULT_GROUP_NAME
        assert watchlist.groups[0].codes == []

    def test_add_to_default_group(self, watchlist_store: WatchlistStore) -> None:
        assert watchlist_store.add_to_group("600519") is True
        assert watchlist_store.add_to_group("sh600519") is False
        assert watchlist_store.all_codes() == ["sh600519"]
        assert watchlist_store.is_in_watchlist("600519")

    def test_unknown_group_falls_back_to_first(self, watchlist_store) -> None:
        """
        SCENARIO: Add to a group id that does not exist
        EXPECTED: Code lands in the first group
        """
        watchlist_store.add_to_group("sz000001", "nope")
        assert watchlist_store.load().groups[0].codes == ["sz000001"]

    def test_add_group_names_and_ids(self, watchlist_store) -> None:
        """
        SCENARIO: Create a named group and a blank-named group
        EXPECTED: Timestamp ids, blank name becomes 分组<n+1>
        """
        # Act
        first = watchlist_store.add_group("白酒")
        second = watchlist_store.add_group("  ")

        # Assert
        groups = watchlist_store.load().groups
        assert first == "group_1719558000000"
        assert second != first
        assert [g.name for g in groups] == [DEFAULT_GROUP_NAME, "白酒", "分组3"]

    def test_remove_from_one_group(self, watchlist_store) -> None:
        group_id = watchlist_store.add_group("科技")
        watchlist_store.add_to_group("sh688981")
        watchlist_store.add_to_group("sh688981", group_id)

        assert watchlist_store.remove_from_group("sh688981", group_id) is True
        assert watchlist_store.all_codes() == ["sh688981"]

    def test_remove_from_all_groups(self, watchlist_store) -> None:
        """
        SCENARIO: Remove without a group id
        EXPECTED: Code removed from every group
        """
        group_id = watchlist_store.add_group("科技")
        watchlist_store.add_to_group("sh688981")
        watchlist_store.add_to_group("688981", group_id)

        assert watchlist_store.remove_from_group("688981") is True
        assert watchlist_store.is_in_watchlist("sh688981") is False
        assert watchlist_store.remove_from_group("688981") is False

    def test_all_codes_deduplicated(self, watchlist_store) -> None:
        group_id = watchlist_store.add_group("B")
        watchlist_store.add_to_group("sh600000")
        watchlist_store.add_to_group("sz000001", group_id)
        watchlist_store.add_to_group("sh600000", group_id)

        assert watchlist_store.all_codes() == ["sh600000", "sz000001"]

    def test_rename_group(self, watchlist_store) -> None:
        assert watchlist_store.rename_group(DEFAULT_GROUP_ID, "核心持仓") is True
        assert watchlist_store.rename_group(DEFAULT_GROUP_ID, "   ") is False
        assert watchlist_store.rename_group("missing", "x") is False
        assert watchlist_store.load().groups[0].name == "核心持仓"

    def test_remove_group(self, watchlist_store) -> None:
        group_id = watchlist_store.add_group("临时")

        assert watchlist_store.remove_group(group_id) is True
        assert watchlist_store.remove_group(group_id) is False
        assert [g.id for g in watchlist_store.load().groups] == [DEFAULT_GROUP_ID]

    def test_last_group_never_removed(self, watchlist_store) -> None:
        """
        SCENARIO: Remove the only group
        EXPECTED: Refused, group still present
        """
        assert watchlist_store.remove_group(DEFAULT_GROUP_ID) is False
        assert len(watchlist_store.load().groups) == 1

    def test_read_failure_falls_back(self) -> None:
        watchlist = WatchlistStore(failing_store())
        assert watchlist.load().groups[0].id == DEFAULT_GROUP_ID
        assert watchlist.add_to_group("sh600000") is True
        assert watchlist.all_codes() == []

    def test_legacy_document_canonicalized(self) -> None:
        """
        SCENARIO: Stored groups hold bare and duplicate codes
        EXPECTED: Codes canonicalized and deduplicated on load
        """
        store = InMemoryStore(
            {"stock_watchlist": [{"id": "default", "name": "自选", "codes": ["600000", "sh600000"]}]}
        )
        assert WatchlistStore(store).all_codes() == ["sh600000"]

    def test_persisted_document_shape(self, memory_store, watchlist_store) -> None:
        watchlist_store.add_to_group("600000")

        assert memory_store.get("stock_watchlist") == {
            "groups": [{"id": "default", "name": "默认分组", "codes": ["sh600000"]}]
        }

    def test_saved_groups_kept_on_mutation(self) -> None:
        """
        SCENARIO: Store holds a {"groups": [...]} document with two groups
        EXPECTED: Adding a code keeps both groups and their codes
        """
        # Arrange
        store = InMemoryStore(
            {
                "stock_watchlist": {
                    "groups": [
                        {"id": "default", "name": "默认分组", "codes": ["sh600000"]},
                        {"id": "group_1", "name": "银行", "codes": ["sz000001"]},
                    ]
                }
            }
        )
        watchlist = WatchlistStore(store)

        # Act
        watchlist.add_to_group("sh600519")

        # Assert
        assert watchlist.all_codes() == ["sh600000", "sh600519", "sz000001"]
        assert [g.id for g in watchlist.load().groups] == ["default", "group_1"]

    def test_group_without_id_skipped(self, caplog) -> None:
        """
        SCENARIO: Stored group lacks an id
        EXPECTED: Group skipped with a warning, accessors keep working
        """
        # Arrange
        store = InMemoryStore(
            {
                "stock_watchlist": {
                    "groups": [
                        {"name": "x", "codes": ["600000"]},
                        {"id": "group_1", "name": "银行", "codes": ["000001"]},
                    ]
                }
            }
        )

        # Act
        with caplog.at_level(logging.WARNING):
            codes = WatchlistStore(store).all_codes()

        # Assert
        assert codes == ["sz000001"]
        assert "Skipping malformed watchlist group" in caplog.text

    def test_only_groups_without_id_fall_back(self) -> None:
        store = InMemoryStore({"stock_watchlist": [{"name": "x", "codes": ["600000"]}]})
        watchlist = WatchlistStore(store)

        assert watchlist.load().groups[0].id == DEFAULT_GROUP_ID
        assert watchlist.add_to_group("600000") is True
        assert watchlist.all_codes() == ["sh600000"]


class TestModuleAccessors:
    """Test cases for the store-argument accessors."""

    def test_accessors_share_store(self, tmp_path) -> None:
        """
        SCENARIO: Use module-level functions against a file store
        EXPECTED: State persists across calls and accessor instances
        """
        # Arrange
        store = JsonFileStore(tmp_path)

        # Act
        exclude(store, "000656", "*ST金科", "退市风险")
        group_id = add_group(store, "银行")
        add_to_group(store, "600000", group_id)
        rename_group(store, group_id, "大金融")

        # Assert
        assert is_excluded(store, "sz000656")
        assert restore(store, "sz000656") is True
        assert not is_excluded(store, "000656")
        watchlist = WatchlistStore(JsonFileStore(tmp_path)).load()
        assert watchlist.find_group(group_id).name == "大金融"
        assert watchlist.find_group(group_id).codes == ["sh600000"]
        assert remove_from_group(store, "sh600000") is True
        assert remove_group(store, group_id) is True


@pytest.mark.parametrize("code", ["sh600000", "600000"])
def test_exclusion_visible_to_fresh_accessor(memory_store, code: str) -> None:
    """
    SCENARIO: Exclude through one accessor, read through another
    EXPECTED: Same store state
    """
    ExclusionList(memory_store).exclude(code)
    assert ExclusionList(memory_store).is_excluded("sh600000")
