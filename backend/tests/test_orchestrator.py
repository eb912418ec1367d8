import asyncio

import pytest

from skillsense.schemas.skill import SourceState, SourceStatus
from skillsense.services.adapters import DocumentInput, GitHubAccount
from skillsense.services.github_extractor import GitHubError
from skillsense.services import orchestrator
from skillsense.services.orchestrator import (
    AggregateExtractionResult, ExtractionSources, NoInputError,
    run_aggregate_extraction, summarize_extraction,
)

from conftest import FakeAdapter, make_candidate


@pytest.fixture
def fake_adapters():
    return {
        "Document": FakeAdapter("Document", [make_candidate("Python", 0.9, "Document")]),
        "Text": FakeAdapter("Text", [make_candidate("python", 0.5, "Text"), make_candidate("Writing", 0.7, "Text")]),
        "GitHub": FakeAdapter("GitHub", [make_candidate("Docker", 0.6, "GitHub")]),
    }


async def test_no_sources_is_rejected_before_any_adapter_runs(fake_adapters):
    with pytest.raises(NoInputError):
        await run_aggregate_extraction(ExtractionSources(), adapters=fake_adapters)

    assert all(not adapter.payloads for adapter in fake_adapters.values())


async def test_blank_text_and_username_do_not_count_as_sources(fake_adapters):
    sources = ExtractionSources(text="   ", github=GitHubAccount(username="  "))
    with pytest.raises(NoInputError):
        await run_aggregate_extraction(sources, adapters=fake_adapters)


async def test_all_sources_are_merged(fake_adapters):
    sources = ExtractionSources(
        document=DocumentInput("cv.pdf", b"%PDF"),
        text="I write docs",
        github=GitHubAccount(username="octocat"),
    )
    result = await run_aggregate_extraction(sources, adapters=fake_adapters)

    assert [s.name for s in result.sources] == ["Document", "GitHub", "Text"]
    assert all(s.status == SourceState.COMPLETED for s in result.sources)
    assert {s.name: s.skills_count for s in result.sources} == {"Document": 1, "GitHub": 1, "Text": 2}
    assert result.candidate_count == 4

    names = [s.skill_name for s in result.merged_skills]
    assert names == ["Python", "Docker", "Writing"]
    python = result.merged_skills[0]
    assert python.confidence_score == pytest.approx(0.7)
    assert python.source == "Document, Text"


async def test_only_present_sources_run(fake_adapters):
    result = await run_aggregate_extraction(ExtractionSources(text="notes"), adapters=fake_adapters)

    assert [s.name for s in result.sources] == ["Text"]
    assert fake_adapters["Text"].payloads == ["notes"]
    assert not fake_adapters["Document"].payloads
    assert not fake_adapters["GitHub"].payloads


async def test_failing_source_does_not_abort_the_others(fake_adapters):
    fake_adapters["GitHub"] = FakeAdapter("GitHub", error=GitHubError("GitHub API error: 404"))
    sources = ExtractionSources(text="notes", github=GitHubAccount(username="ghost"))

    result = await run_aggregate_extraction(sources, adapters=fake_adapters)

    statuses = {s.name: s for s in result.sources}
    assert statuses["GitHub"].status == SourceState.ERROR
    assert statuses["GitHub"].skills_count == 0
    assert statuses["GitHub"].error == "GitHub API error: 404"
    assert statuses["Text"].status == SourceState.COMPLETED
    assert [s.skill_name for s in result.merged_skills] == ["python", "Writing"]
    assert all(s.source == "Text" for s in result.merged_skills)


async def test_long_error_messages_are_truncated(fake_adapters):
    fake_adapters["Text"] = FakeAdapter("Text", error=RuntimeError("x" * 500))
    result = await run_aggregate_extraction(ExtractionSources(text="notes"), adapters=fake_adapters)
    assert len(result.sources[0].error) == 200


async def test_auto_merge_off_passes_candidates_through(fake_adapters):
    sources = ExtractionSources(document=DocumentInput("cv.txt", b"cv"), text="notes")
    result = await run_aggregate_extraction(sources, adapters=fake_adapters, auto_merge=False)

    assert [s.skill_name for s in result.merged_skills] == ["Python", "python", "Writing"]
    assert result.merged_skills[0].confidence_score == 0.9


async def test_sources_run_concurrently():
    started = asyncio.Event()

    class WaitingAdapter(FakeAdapter):
        async def extract(self, payload):
            await asyncio.wait_for(started.wait(), timeout=1)
            return [make_candidate("Waited", source=self.label)]

    class SignallingAdapter(FakeAdapter):
        async def extract(self, payload):
            started.set()
            return [make_candidate("Signalled", source=self.label)]

    adapters = {
        "Document": WaitingAdapter("Document"),
        "Text": SignallingAdapter("Text"),
    }
    sources = ExtractionSources(document=DocumentInput("a.txt", b"a"), text="b")

    result = await run_aggregate_extraction(sources, adapters=adapters)

    assert {s.skill_name for s in result.merged_skills} == {"Waited", "Signalled"}
    assert all(s.status == SourceState.COMPLETED for s in result.sources)


async def test_one_failure_among_three_sources(fake_adapters):
    fake_adapters["Document"] = FakeAdapter("Document", error=ValueError("Could not read cv.pdf"))
    sources = ExtractionSources(
        document=DocumentInput("cv.pdf", b"%PDF"),
        text="I write docs",
        github=GitHubAccount(username="octocat"),
    )

    result = await run_aggregate_extraction(sources, adapters=fake_adapters)

    assert [s.status for s in result.sources] == [
        SourceState.ERROR, SourceState.COMPLETED, SourceState.COMPLETED,
    ]
    assert result.sources[0].error == "Could not read cv.pdf"
    assert {s.name: s.skills_count for s in result.completed_sources} == {"GitHub": 1, "Text": 2}
    assert [s.skill_name for s in result.merged_skills] == ["Docker", "python", "Writing"]
    assert summarize_extraction(result, saved=True).endswith(
        "GitHub: 1 skills | Text: 2 skills. Partial success - failed sources: Document"
    )


async def test_statuses_move_from_pending_to_processing(monkeypatch):
    created = []
    seen = {}

    def recording_status(name):
        status = SourceStatus(name=name)
        created.append((status, status.status))
        return status

    class InspectingAdapter(FakeAdapter):
        async def extract(self, payload):
            [status] = [s for s, _ in created if s.name == self.label]
            seen[self.label] = status.status
            return [make_candidate(self.label, source=self.label)]

    monkeypatch.setattr(orchestrator, "SourceStatus", recording_status)
    adapters = {"Document": InspectingAdapter("Document"), "Text": InspectingAdapter("Text")}
    sources = ExtractionSources(document=DocumentInput("a.txt", b"a"), text="b")

    result = await run_aggregate_extraction(sources, adapters=adapters)

    assert [initial for _, initial in created] == [SourceState.PENDING, SourceState.PENDING]
    assert seen == {"Document": SourceState.PROCESSING, "Text": SourceState.PROCESSING}
    assert all(s.status == SourceState.COMPLETED for s in result.sources)


async def test_source_without_an_adapter_is_marked_failed(fake_adapters):
    adapters = {"Text": fake_adapters["Text"]}
    sources = ExtractionSources(document=DocumentInput("cv.pdf", b"%PDF"), text="notes")

    result = await run_aggregate_extraction(sources, adapters=adapters)

    document, text = result.sources
    assert document.status == SourceState.ERROR
    assert document.error == "No extractor available for Document"
    assert text.status == SourceState.COMPLETED
    assert [s.skill_name for s in result.merged_skills] == ["python", "Writing"]


async def test_empty_adapter_mapping_is_not_replaced_by_defaults(monkeypatch):
    def fail():
        raise AssertionError("default adapters should not be built")

    monkeypatch.setattr(orchestrator, "default_adapters", fail)

    result = await run_aggregate_extraction(ExtractionSources(text="notes"), adapters={})

    assert result.sources[0].status == SourceState.ERROR
    assert result.merged_skills == []


def _result(skills, statuses):
    return AggregateExtractionResult(
        merged_skills=skills,
        sources=[SourceStatus(name=n, status=st, skills_count=c) for n, st, c in statuses],
    )


def test_summary_when_saved():
    result = _result(
        [make_candidate("A"), make_candidate("B")],
        [("Document", SourceState.COMPLETED, 1), ("Text", SourceState.COMPLETED, 1)],
    )
    assert summarize_extraction(result, saved=True) == (
        "Unified skill extraction complete: 2 total skills saved. "
        "Document: 1 skills | Text: 1 skills"
    )


def test_summary_reports_partial_success():
    result = _result(
        [make_candidate("A")],
        [("GitHub", SourceState.ERROR, 0), ("Text", SourceState.COMPLETED, 1)],
    )
    summary = summarize_extraction(result, saved=True)
    assert summary.endswith("Partial success - failed sources: GitHub")


def test_summary_when_save_failed():
    result = _result([make_candidate("A")], [("Text", SourceState.COMPLETED, 1)])
    assert summarize_extraction(result, saved=False).startswith(
        "Extracted 1 skills but failed to save them"
    )


def test_summary_when_everything_failed():
    result = _result([], [("Text", SourceState.ERROR, 0), ("GitHub", SourceState.ERROR, 0)])
    assert summarize_extraction(result, saved=False) == (
        "No skills were extracted from the provided sources. All sources failed: Text, GitHub"
    )


def test_summary_lists_sources_that_found_nothing():
    result = _result([], [("Text", SourceState.COMPLETED, 0)])
    assert summarize_extraction(result, saved=True) == (
        "No skills were extracted from the provided sources. Text: 0 skills"
    )
