"""Test routing — OpenALaw keyword classification."""
from __future__ import annotations

import json

import pytest

from openalaw.routing import (
    BASE_DIR,
    DEFAULT_ANALYSIS_KEYWORDS,
    DEFAULT_CODE_KEYWORDS,
    DEFAULT_SYSTEM_KEYWORDS,
    Coordinates,
    ExecutionTarget,
    KeywordRules,
    classify_task,
    extract_coordinates,
    first_match,
    load_keyword_rules,
    requires_system_interaction,
)


# ===================================================================
# Classification
# ===================================================================


class TestClassifyTask:
    @pytest.mark.unit
    @pytest.mark.parametrize("keyword", DEFAULT_CODE_KEYWORDS)
    def test_code_keywords_route_local(self, keyword):
        assert classify_task(f"please {keyword.upper()} this") is ExecutionTarget.LOCAL

    @pytest.mark.unit
    @pytest.mark.parametrize("keyword", DEFAULT_ANALYSIS_KEYWORDS)
    def test_analysis_keywords_route_remote(self, keyword):
        assert classify_task(f"please {keyword} this") is ExecutionTarget.REMOTE

    @pytest.mark.unit
    def test_code_beats_analysis_regardless_of_position(self):
        assert classify_task("Analyze and summarize, then debug") is ExecutionTarget.LOCAL
        assert classify_task("python: think hard") is ExecutionTarget.LOCAL

    @pytest.mark.unit
    def test_no_keywords_defaults_local(self):
        assert classify_task("make me a sandwich") is ExecutionTarget.LOCAL

    @pytest.mark.unit
    def test_empty_string_defaults_local(self):
        assert classify_task("") is ExecutionTarget.LOCAL

    @pytest.mark.unit
    def test_substring_match_without_tokenization(self):
        # "decoder" contains "code"; "overthinking" contains "think"
        assert classify_task("fix the decoder") is ExecutionTarget.LOCAL
        assert classify_task("stop overthinking") is ExecutionTarget.REMOTE

    @pytest.mark.unit
    def test_target_is_str_enum(self):
        assert ExecutionTarget.LOCAL == "local"
        assert ExecutionTarget.REMOTE == "remote"

    @pytest.mark.unit
    def test_custom_rules(self):
        rules = KeywordRules(code=("kotlin",), analysis=("ponder",))
        assert classify_task("ponder kotlin", rules) is ExecutionTarget.LOCAL
        assert classify_task("ponder life", rules) is ExecutionTarget.REMOTE
        # default keywords no longer apply
        assert classify_task("summarize this", rules) is ExecutionTarget.LOCAL

    def test_custom_rules_match_case_insensitively(self):
        rules = KeywordRules(analysis=("Ponder",), system=("Launch",))
        assert rules.analysis == ("ponder",)
        assert classify_task("ponder this", rules) is ExecutionTarget.REMOTE
        assert classify_task("PONDER this", rules) is ExecutionTarget.REMOTE
        assert requires_system_interaction("launch the camera", rules) is True


class TestRequiresSystemInteraction:
    @pytest.mark.unit
    def test_tap_detected(self):
        assert requires_system_interaction("please tap the button") is True

    @pytest.mark.unit
    def test_summarize_not_detected(self):
        assert requires_system_interaction("summarize this text") is False

    @pytest.mark.unit
    @pytest.mark.parametrize("keyword", DEFAULT_SYSTEM_KEYWORDS)
    def test_every_system_keyword(self, keyword):
        assert requires_system_interaction(f"x {keyword.title()} y") is True

    @pytest.mark.unit
    def test_short_keywords_match_inside_words(self):
        assert requires_system_interaction("I am happy") is True  # "app"
        assert requires_system_interaction("build it") is True    # "ui"

    @pytest.mark.unit
    def test_independent_of_classification(self):
        task = "debug the swipe gesture"
        assert classify_task(task) is ExecutionTarget.LOCAL
        assert requires_system_interaction(task) is True


class TestFirstMatch:
    @pytest.mark.unit
    def test_returns_first_listed_keyword(self):
        assert first_match("Swipe then TAP", ("tap", "swipe")) == "tap"

    @pytest.mark.unit
    def test_none_when_absent(self):
        assert first_match("nothing", ("tap",)) is None


# ===================================================================
# Coordinates
# ===================================================================


class TestExtractCoordinates:
    @pytest.mark.unit
    def test_basic_pair(self):
        assert extract_coordinates("tap 10 and 20") == Coordinates(x=10, y=20)

    @pytest.mark.unit
    def test_no_numbers(self):
        assert extract_coordinates("no numbers here") is None

    @pytest.mark.unit
    def test_single_number(self):
        assert extract_coordinates("tap 42") is None

    @pytest.mark.unit
    def test_first_pair_wins(self):
        assert extract_coordinates("click 1,2 then 3,4") == Coordinates(1, 2)

    @pytest.mark.unit
    def test_date_like_text_still_parses(self):
        assert extract_coordinates("from 2024 to 10") == Coordinates(2024, 10)

    @pytest.mark.unit
    def test_to_dict(self):
        assert Coordinates(5, 6).to_dict() == {"x": 5, "y": 6}


# ===================================================================
# Keyword rules
# ===================================================================


class TestKeywordRules:
    @pytest.mark.unit
    def test_defaults(self):
        rules = KeywordRules()
        assert rules.code == DEFAULT_CODE_KEYWORDS
        assert rules.analysis == DEFAULT_ANALYSIS_KEYWORDS
        assert rules.system == DEFAULT_SYSTEM_KEYWORDS

    @pytest.mark.unit
    def test_from_dict_partial_override_lowercases(self):
        rules = KeywordRules.from_dict({"system": ["Scroll", "LAUNCH"]})
        assert rules.system == ("scroll", "launch")
        assert rules.code == DEFAULT_CODE_KEYWORDS

    @pytest.mark.unit
    def test_from_dict_unknown_group(self):
        with pytest.raises(ValueError, match="Unknown keyword group"):
            KeywordRules.from_dict({"music": ["jazz"]})

    @pytest.mark.unit
    def test_from_dict_non_list(self):
        with pytest.raises(ValueError, match="must be a list"):
            KeywordRules.from_dict({"code": "python"})

    @pytest.mark.unit
    def test_to_dict_round_trip(self):
        rules = KeywordRules(code=("a",), analysis=("b",), system=("c",))
        assert KeywordRules.from_dict(rules.to_dict()) == rules

    def test_load_from_file(self, keywords_file):
        rules = load_keyword_rules(keywords_file)
        assert rules.analysis == ("ponder", "reflect")
        assert rules.code == DEFAULT_CODE_KEYWORDS

    def test_missing_file_uses_defaults(self, tmp_path):
        assert load_keyword_rules(tmp_path / "absent.json") == KeywordRules()

    def test_malformed_file_raises(self, tmp_path):
        path = tmp_path / "bad.json"
        path.write_text("{not json", encoding="utf-8")
        with pytest.raises(json.JSONDecodeError):
            load_keyword_rules(path)

    def test_shipped_config_matches_defaults(self):
        path = BASE_DIR / "configs" / "keywords.json"
        assert path.is_file()
        assert KeywordRules.from_file(path) == KeywordRules()
