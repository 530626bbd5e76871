"""
Regex queries, removal, traversal and aggregation on entity sets.
"""

import re

import pytest

from starentity import EntitySet, InvalidArgumentError, SetConfig, StarEntityConfig, set_config

from sample_entities import ItemEntity


def tags(entity_set):
    return entity_set.aggregate("tag")


class TestFind:

    def test_find_reindexes_matches(self, items):
        found = items.find({"name": "x"})

        assert found.count() == 2
        assert tags(found) == ["a", "c"]
        assert found.first().tag == "a"
        assert found.get(1).tag == "c"
        assert found.get(2) is None

    def test_find_leaves_source_untouched(self, items):
        found = items.find({"name": "y"})
        assert items.count() == 3
        assert found is not items
        assert found.first() is items.get(1)

    def test_find_keeps_declared_type(self, items):
        found = items.find({"name": "nothing"})
        assert found.count() == 0
        assert found.entity_type is ItemEntity

    def test_patterns_are_searched(self, items):
        assert items.find_keys({"name": "^x$"}) == [0, 2]
        assert items.find_keys({"price": "^2"}) == [1]
        assert items.find_keys({"tag": "[bc]"}) == [1, 2]

    def test_none_values_match_as_empty_string(self, items):
        items.append({"name": "z"})
        assert items.find_keys({"tag": "^$"}) == [3]

    def test_unknown_field_matches_as_empty_string(self, items):
        assert items.find_keys({"missing": "."}) == []
        assert items.find_keys({"missing": "^$"}) == [0, 1, 2]

    def test_all_fields_must_match(self, items):
        assert items.find({"name": "x", "tag": "c"}).aggregate("tag") == ["c"]

    def test_partial_matches_are_not_emitted(self, items):
        assert items.find_keys({"name": "x", "tag": "b"}) == [], "Every query field must match"


class TestFindKeys:

    def test_key_repeated_per_query_field(self, items):
        assert items.find_keys({"name": "x", "tag": "."}) == [0, 0, 2, 2]

    def test_duplicates_do_not_change_find(self, items):
        assert tags(items.find({"name": "x", "tag": "."})) == ["a", "c"]

    def test_unique_keys_from_set_config(self):
        entity_set = EntitySet(ItemEntity, [{"name": "x", "tag": "a"}, {"name": "x", "tag": "b"}],
                               config=SetConfig(unique_find_keys=True))
        assert entity_set.find_keys({"name": "x", "tag": "."}) == [0, 1]

    def test_unique_keys_from_global_config(self):
        set_config(StarEntityConfig.from_dict({"sets": {"unique_find_keys": True}}))
        entity_set = EntitySet(ItemEntity, [{"name": "x", "tag": "a"}])
        assert entity_set.config.unique_find_keys
        assert entity_set.find_keys({"name": "x", "tag": "a"}) == [0]

    def test_limit(self, items):
        assert items.find_keys({"name": "x"}, limit=1) == [0]
        assert items.find_keys({"name": "."}, limit=2) == [0, 1]

    def test_offset(self, items):
        assert items.find_keys({"name": "x"}, offset=1) == [2]
        assert items.find_keys({"name": "x"}, offset=3) == []

    def test_limit_and_offset(self, items):
        assert tags(items.find({"name": "."}, limit=1, offset=1)) == ["b"]

    def test_empty_query(self, items):
        assert items.find_keys({}) == []
        assert items.find({}).count() == 0

    def test_query_must_be_a_mapping(self, items):
        with pytest.raises(InvalidArgumentError):
            items.find_keys("name")

    def test_invalid_pattern_raises(self, items):
        with pytest.raises(re.error):
            items.find_keys({"name": "("})

    def test_invalid_pattern_raises_on_empty_set(self):
        with pytest.raises(re.error):
            EntitySet(ItemEntity).find({"name": "[unclosed"})

    def test_slashes_need_no_escaping(self):
        entity_set = EntitySet(ItemEntity, [{"name": "a/b"}, {"name": "ab"}])
        assert entity_set.find_keys({"name": "a/b"}) == [0]


class TestSingleResults:

    def test_find_key(self, items):
        assert items.find_key({"name": "x"}) == 0
        assert items.find_key({"name": "y"}) == 1
        assert items.find_key({"name": "z"}) is None

    def test_find_one(self, items):
        assert items.find_one({"name": "y"}) is items.get(1)
        assert items.find_one({"tag": "c"}).price == 3.0
        assert items.find_one({"name": "z"}) is None
        assert items.count() == 3


class TestRemove:

    def test_remove_matching(self, items):
        items.remove({"name": "x"})
        assert tags(items) == ["b"]
        assert items.find_keys({"name": "y"}) == [0]

    def test_remove_with_duplicate_keys(self, items):
        items.remove({"name": "x", "tag": "."})
        assert tags(items) == ["b"]

    def test_remove_without_matches(self, items):
        items.remove({"name": "nobody"})
        assert items.count() == 3


class TestWalkAggregate:

    def test_walk_visits_in_order(self, items):
        seen = []
        assert items.walk(lambda item: seen.append(item.tag)) is items
        assert seen == ["a", "b", "c"]

    def test_walk_can_mutate_members(self, items):
        items.walk(lambda item: setattr(item, "price", item.price * 10))
        assert items.aggregate("price") == [10.0, 20.0, 30.0]

    def test_walk_requires_callable(self, items):
        with pytest.raises(InvalidArgumentError):
            items.walk(None)

    def test_aggregate(self, items):
        assert items.aggregate("name") == ["x", "y", "x"]
        assert items.aggregate("missing") == [None, None, None]
        assert EntitySet(ItemEntity).aggregate("name") == []
