"""Tests for docskills.selector.TemplateSelector."""

import pytest

from docskills.selector import Audience, TemplateSelector


@pytest.fixture
def selector(registry):
    return TemplateSelector(registry)


@pytest.mark.parametrize("request_text,expected", [
    ("Write a README", "readme"),
    ("write a readme for my project", "readme"),
    ("Write a SKILL.md for an agent", "skill-md"),
    ("Document this repo for Claude Code", "claude-md"),
    ("Create a CLAUDE.md with our build commands", "claude-md"),
    ("write a tutorial for beginners", "tutorial"),
    ("a quickstart so users get up and running", "quickstart"),
    ("Write a how-to guide for rotating API keys", "how-to"),
    ("We need release notes for v2.0", "changelog"),
    ("API reference for the client module", "reference"),
    ("an architecture overview explaining the design rationale", "explanation"),
    ("a machine-readable rule catalog for code review agents", "rule-catalog"),
])
def test_selects_expected_template(selector, request_text, expected):
    selection = selector.select(request_text)
    assert selection["needs_clarification"] is False
    assert selection["template"] == expected


def test_readme_is_human(selector):
    selection = selector.select("Write a README")
    assert selection["audience"] == "human"
    assert selection["reason"] == "matched readme"


def test_skill_md_for_agent_is_never_human(selector):
    selection = selector.select("Write a SKILL.md for an agent")
    assert selection["audience"] == "agent"
    assert selection["template"] == "skill-md"
    assert selection["candidates"] == ["skill-md"]


@pytest.mark.parametrize("request_text", ["", "   ", "\n\t", None])
def test_empty_request_needs_clarification(selector, request_text):
    selection = selector.select(request_text)
    assert selection["needs_clarification"] is True
    assert selection["template"] is None
    assert selection["reason"] == "empty request"
    assert "AI agent" in selection["question"]


@pytest.mark.parametrize("request_text", [
    "write some documentation",
    "help me document this",
    "docs please",
])
def test_fully_ambiguous_request_needs_clarification(selector, request_text):
    selection = selector.select(request_text)
    assert selection["needs_clarification"] is True
    assert selection["template"] is None
    assert selection["reason"] == "no template matched"


def test_candidates_from_both_audiences_need_clarification(selector):
    selection = selector.select("a changelog or a rule catalog")
    assert selection["needs_clarification"] is True
    assert set(selection["candidates"]) == {"changelog", "rule-catalog"}
    assert selection["reason"] == "ambiguous audience"
    assert "changelog" in selection["question"]


def test_audience_cue_breaks_cross_audience_tie(selector):
    selection = selector.select("a changelog or a rule catalog for our developers")
    assert selection["template"] == "changelog"
    assert selection["audience"] == "human"


def test_audience_without_template_uses_default(selector):
    human = selector.select("write docs for new developers")
    agent = selector.select("write docs for our AI agents")

    assert human["template"] == "readme"
    assert human["reason"] == "default human template"
    assert agent["template"] == "skill-md"
    assert agent["reason"] == "default agent template"


def test_more_specific_trigger_wins(selector):
    # "tutorial" and "beginner" both vote for the tutorial template
    selection = selector.select("a beginner tutorial with a quickstart section")
    assert selection["template"] == "tutorial"
    assert selection["candidates"][0] == "tutorial"


def test_selection_is_deterministic(selector):
    first = selector.select("Write a SKILL.md for an agent")
    second = selector.select("Write a SKILL.md for an agent")
    assert first == second


def test_render_returns_identical_bytes(selector):
    first_sel, first_body = selector.render("Write a README")
    second_sel, second_body = selector.render("Write a README")

    assert first_sel == second_sel
    assert first_body is not None
    assert first_body.encode("utf-8") == second_body.encode("utf-8")
    assert first_body.startswith("# README template")


def test_render_clarification_has_no_body(selector):
    selection, body = selector.render("")
    assert selection["needs_clarification"] is True
    assert body is None


@pytest.mark.parametrize("text,expected", [
    ("for the llm", Audience.AGENT),
    ("for new contributors", Audience.HUMAN),
    ("for people and for agents", None),
    ("plain text", None),
])
def test_detect_audience(selector, text, expected):
    assert selector.detect_audience(text) == expected


def test_clarification_question_is_localized(selector):
    from docskills.strings import Strings
    Strings.set_language("ko")
    selection = selector.select("")
    assert "AI 에이전트" in selection["question"]
    assert selection["reason"] == "빈 요청"


def test_clear_winner_across_audiences_is_selected(selector):
    # three changelog phrases against one rule-catalog phrase
    selection = selector.select(
        "a changelog with release notes and version history, and a rule catalog"
    )
    assert selection["needs_clarification"] is False
    assert selection["template"] == "changelog"
    assert selection["candidates"] == ["changelog", "rule-catalog"]


def test_named_template_beats_audience_cues(selector):
    # "llm" and "agent" outvote "readme" on audience, but README is named outright
    selection = selector.select("Write a README for my LLM agent project")
    assert selection["template"] == "readme"
    assert selection["audience"] == "human"


def test_named_alias_beats_audience_cues(selector):
    selection = selector.select("release notes for our llm agent platform")
    assert selection["template"] == "changelog"


def test_trigger_inside_longer_word_does_not_vote(selector):
    selection = selector.select("email the recipient list")
    assert selection["needs_clarification"] is True
    assert selection["reason"] == "no template matched"
