"""
Tests for default catalogs and the merge of persisted documents over them.
"""
from yeartrace.services.defaults import default_settings, merge_settings


class TestDefaultSettings:
    def test_seed_catalogs(self):
        s = default_settings()
        assert [b.id for b in s.behaviors] == ["b1", "b2", "b3"]
        assert [t.min_score for t in s.status_tiers] == [0, 3, 6, 9]
        assert s.behaviors[1].max_count == 10
        assert s.behaviors[0].max_count is None
        assert s.goals == []
        assert s.records == {}

    def test_each_call_is_independent(self):
        a = default_settings()
        a.behaviors[0].score = 99
        a.status_tiers.pop()
        b = default_settings()
        assert b.behaviors[0].score == 1
        assert len(b.status_tiers) == 4


class TestMergeSettings:
    def test_none_gives_defaults(self):
        assert merge_settings(None) == default_settings()

    def test_non_mapping_gives_defaults(self):
        assert merge_settings(["not", "a", "dict"]) == default_settings()
        assert merge_settings("garbage") == default_settings()

    def test_missing_goals_defaulted(self):
        raw = {
            "behaviors": [{"id": "x", "name": "Run", "score": 3, "repeatable": False, "type": "habit"}],
            "statusTiers": [{"id": "t", "name": "Any", "minScore": 0, "color": "red"}],
            "records": {},
        }
        s = merge_settings(raw)
        assert s.goals == []
        assert [b.id for b in s.behaviors] == ["x"]
        assert s.status_tiers[0].min_score == 0

    def test_arrays_replaced_not_merged(self):
        raw = {"behaviors": [{"id": "only", "name": "Only"}]}
        s = merge_settings(raw)
        assert [b.id for b in s.behaviors] == ["only"]
        # untouched keys keep their defaults
        assert len(s.status_tiers) == 4

    def test_empty_list_is_kept(self):
        s = merge_settings({"statusTiers": []})
        assert s.status_tiers == []

    def test_malformed_field_falls_back(self):
        raw = {
            "behaviors": "oops",
            "statusTiers": [{"id": "t1", "minScore": "not a number"}],
            "goals": None,
        }
        s = merge_settings(raw)
        defaults = default_settings()
        assert s.behaviors == defaults.behaviors
        assert s.status_tiers == defaults.status_tiers
        assert s.goals == []

    def test_malformed_record_skipped_others_kept(self):
        raw = {
            "records": {
                "2024-03-01": {"date": "2024-03-01", "behaviors": {"b1": True}, "score": 1,
                               "statusTierId": "t1"},
                "2024-03-02": {"behaviors": "broken"},
            }
        }
        s = merge_settings(raw)
        assert list(s.records) == ["2024-03-01"]
        assert s.records["2024-03-01"].status_tier_id == "t1"

    def test_non_date_record_keys_skipped(self):
        raw = {"records": {
            "notadate": {"date": "notadate", "behaviors": {"b1": True}},
            "2024-02-30": {"date": "2024-02-30", "behaviors": {"b1": True}},
            "2024-03-01": {"date": "2024-03-01", "behaviors": {"b1": True}},
        }}
        assert list(merge_settings(raw).records) == ["2024-03-01"]

    def test_record_date_follows_key(self):
        raw = {"records": {"2024-03-01": {"date": "1999-01-01", "behaviors": {}},
                           "2024-03-02": {"behaviors": {"b3": True}}}}
        records = merge_settings(raw).records
        assert records["2024-03-01"].date == "2024-03-01"
        assert records["2024-03-02"].date == "2024-03-02"

    def test_records_not_a_mapping(self):
        assert merge_settings({"records": [1, 2]}).records == {}

    def test_unknown_keys_ignored(self):
        s = merge_settings({"theme": "dark", "goals": []})
        assert not hasattr(s, "theme")

    def test_camel_case_fields_read(self):
        raw = {
            "behaviors": [{"id": "b", "name": "Water", "score": 1, "repeatable": True,
                           "type": "habit", "maxCount": 8, "category": "health"}],
            "goals": [{"id": "g", "title": "Read", "level": "year",
                       "dateRange": {"start": "2024-01-01", "end": "2024-12-31"},
                       "status": "in-progress"}],
        }
        s = merge_settings(raw)
        assert s.behaviors[0].max_count == 8
        assert s.behaviors[0].category == "health"
        assert s.goals[0].date_range.end == "2024-12-31"
        assert s.goals[0].status == "in-progress"

    def test_bool_and_count_values_preserved(self):
        raw = {"records": {"2024-01-01": {"date": "2024-01-01",
                                          "behaviors": {"b1": True, "b2": 4}}}}
        behaviors = merge_settings(raw).records["2024-01-01"].behaviors
        assert behaviors["b1"] is True
        assert behaviors["b2"] == 4 and not isinstance(behaviors["b2"], bool)
