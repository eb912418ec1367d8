import pytest

from skillsense.models import SkillState, SkillType
from skillsense.services import skill_extractor
from skillsense.services.skill_extractor import (
    build_extraction_prompt, extract_skills_from_text,
    normalize_skill_records, skills_from_payload, state_for_confidence,
)


def test_prompt_lists_clusters_and_text():
    prompt = build_extraction_prompt("Built a Django API")
    assert "Built a Django API" in prompt
    assert "Programming & Development" in prompt


def test_state_follows_unlock_threshold():
    assert state_for_confidence(0.49) == SkillState.LOCKED
    assert state_for_confidence(0.5) == SkillState.UNLOCKED


def test_normalize_fills_defaults():
    [skill] = normalize_skill_records([{"skill_name": " SQL "}], "Text")

    assert skill.skill_name == "SQL"
    assert skill.skill_type == SkillType.EXPLICIT
    assert skill.confidence_score == 0.8
    assert skill.cluster == "Other"
    assert skill.microstory == "No story available"
    assert skill.state == SkillState.UNLOCKED
    assert skill.evidence == []
    assert skill.source == "Text"


def test_normalize_drops_unusable_records():
    records = [None, "Python", {"confidence_score": 0.9}, {"skill_name": "   "}, {"skill_name": "Go"}]
    assert [s.skill_name for s in normalize_skill_records(records, "Text")] == ["Go"]


@pytest.mark.parametrize("raw, expected", [
    (1.7, 1.0),
    (-0.2, 0.0),
    ("0.65", 0.65),
    ("high", 0.8),
    (float("nan"), 0.8),
])
def test_confidence_is_coerced_into_range(raw, expected):
    [skill] = normalize_skill_records([{"skill_name": "X", "confidence_score": raw}], "Text")
    assert skill.confidence_score == pytest.approx(expected)


def test_evidence_is_capped_and_cleaned():
    record = {"skill_name": "Python", "evidence": ["a", "", 3, "b", "c", "d"]}
    [skill] = normalize_skill_records([record], "Text")
    assert skill.evidence == ["a", "b", "c"]


def test_model_state_is_kept_when_trusted():
    record = {"skill_name": "Python", "confidence_score": 0.9, "state": "locked"}
    [trusted] = normalize_skill_records([record], "Text")
    [derived] = normalize_skill_records([record], "GitHub", trust_state=False)

    assert trusted.state == SkillState.LOCKED
    assert derived.state == SkillState.UNLOCKED


def test_invalid_type_and_state_fall_back():
    record = {"skill_name": "Empathy", "skill_type": "soft", "state": "maybe", "confidence_score": 0.3}
    [skill] = normalize_skill_records([record], "Text")
    assert skill.skill_type == SkillType.EXPLICIT
    assert skill.state == SkillState.LOCKED


def test_skills_from_payload_accepts_known_shapes():
    assert skills_from_payload({"skills": [{"skill_name": "A"}]}) == [{"skill_name": "A"}]
    assert skills_from_payload([{"skill_name": "B"}]) == [{"skill_name": "B"}]
    assert skills_from_payload({"result": "nothing"}) == []
    assert skills_from_payload("text") == []


async def test_blank_text_skips_the_model(monkeypatch):
    async def fail(*args, **kwargs):
        raise AssertionError("generate_json should not be called")

    monkeypatch.setattr(skill_extractor, "generate_json", fail)
    assert await extract_skills_from_text("   ") == []
    assert await extract_skills_from_text(None) == []


async def test_extract_labels_candidates_with_source(monkeypatch):
    prompts = []

    async def fake_generate_json(prompt, temperature=0.7, max_output_tokens=None):
        prompts.append(prompt)
        return {"skills": [
            {"skill_name": "Python", "skill_type": "explicit", "confidence_score": 0.9,
             "evidence": ["5 years of Python"], "cluster": "Programming & Development",
             "microstory": "Built ETL pipelines", "state": "unlocked"},
            {"skill_name": "Mentoring", "skill_type": "implicit", "confidence_score": 0.4},
        ]}

    monkeypatch.setattr(skill_extractor, "generate_json", fake_generate_json)

    skills = await extract_skills_from_text("5 years of Python, mentored juniors", source="Document")

    assert "mentored juniors" in prompts[0]
    assert [s.skill_name for s in skills] == ["Python", "Mentoring"]
    assert all(s.source == "Document" for s in skills)
    assert skills[1].skill_type == SkillType.IMPLICIT
    assert skills[1].state == SkillState.LOCKED
