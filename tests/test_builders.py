"""Tests for the builder registry and the category builders."""

import pytest

from conftest import NOW, SOURCE, make_finding
from workflow_insights.builders import (
    BuilderRegistry,
    build_incompatible_antivirus_insights,
    build_noisy_process_tree_insights,
    default_registry,
)
from workflow_insights.context import BuildContext, CancelToken
from workflow_insights.errors import GenerationCancelled, UnknownCategory
from workflow_insights.models import InsightType, OSPartition, OSType


def _context(by_os=None, insight_type=InsightType.INCOMPATIBLE_ANTIVIRUS, cancel=None):
    return BuildContext(
        insight_type=insight_type,
        partition=OSPartition(by_os=by_os or {OSType.MACOS: ("e1",), OSType.WINDOWS: ("e2",)}),
        source=SOURCE,
        now=NOW,
        cancel=cancel,
    )


class TestBuilderRegistry:
    def test_default_registry_has_all_categories(self):
        assert default_registry().categories() == ["incompatible_antivirus", "noisy_process_tree"]

    def test_unknown_category_raises(self):
        registry = default_registry()
        with pytest.raises(UnknownCategory) as exc:
            registry.build("policy_response_failure", [], _context())
        assert exc.value.category == "policy_response_failure"
        assert "incompatible_antivirus" in exc.value.known

    def test_register_rejects_duplicates(self):
        registry = BuilderRegistry()
        registry.register(InsightType.INCOMPATIBLE_ANTIVIRUS, build_incompatible_antivirus_insights)
        with pytest.raises(ValueError, match="already registered"):
            registry.register("incompatible_antivirus", build_incompatible_antivirus_insights)

    def test_register_replace(self):
        registry = BuilderRegistry()
        registry.register(InsightType.INCOMPATIBLE_ANTIVIRUS, build_incompatible_antivirus_insights)
        registry.register(InsightType.INCOMPATIBLE_ANTIVIRUS, lambda findings, ctx: [], replace=True)
        assert registry.build("incompatible_antivirus", [make_finding("AV", ("/a", None))], _context()) == []

    def test_register_rejects_unknown_insight_type(self):
        registry = BuilderRegistry()
        with pytest.raises(ValueError, match="not an InsightType"):
            registry.register("unsigned_binary", build_incompatible_antivirus_insights)
        assert "unsigned_binary" not in registry
        assert registry.categories() == []

    def test_validate_fails_fast_on_missing_builder(self):
        registry = BuilderRegistry()
        registry.register(InsightType.INCOMPATIBLE_ANTIVIRUS, build_incompatible_antivirus_insights)
        registry.validate([InsightType.INCOMPATIBLE_ANTIVIRUS])
        with pytest.raises(UnknownCategory, match="noisy_process_tree"):
            registry.validate()

    def test_contains(self):
        registry = default_registry()
        assert InsightType.NOISY_PROCESS_TREE in registry
        assert "incompatible_antivirus" in registry
        assert "nope" not in registry
        assert 42 not in registry

    def test_dispatch_uses_registered_builder(self):
        calls = []
        registry = BuilderRegistry()
        registry.register(InsightType.NOISY_PROCESS_TREE, lambda findings, ctx: calls.append(findings) or [])
        registry.build(InsightType.NOISY_PROCESS_TREE, [], _context())
        assert calls == [[]]


class TestIncompatibleAntivirusBuilder:
    def test_path_based_records_per_os(self):
        finding = make_finding("AV-X", ("/usr/bin/av", None), ("/usr/bin/av", None))
        records = build_incompatible_antivirus_insights([finding], _context())
        assert len(records) == 2
        by_os = {r.exception_list_items[0].os_types[0]: r for r in records}
        assert by_os[OSType.MACOS].target.ids == ("e1",)
        assert by_os[OSType.WINDOWS].target.ids == ("e2",)
        for record in records:
            (entry,) = record.exception_list_items[0].entries
            assert entry.field == "process.executable.caseless"
            assert entry.value == "/usr/bin/av"
            assert record.message == "Incompatible antiviruses detected"
            assert record.exception_list_items[0].list_id == "endpoint_trusted_apps"

    def test_signature_on_macos_only(self):
        finding = make_finding("AV-X", ("/x", "SIG1"))
        records = build_incompatible_antivirus_insights([finding], _context({OSType.MACOS: ("e1", "e2")}))
        assert len(records) == 1
        (entry,) = records[0].exception_list_items[0].entries
        assert entry.field == "process.code_signature"
        assert entry.value == "SIG1"
        assert records[0].target.ids == ("e1", "e2")

    def test_empty_evidence_is_noop(self):
        records = build_incompatible_antivirus_insights([make_finding("AV-Y")], _context())
        assert records == []

    def test_findings_are_independent(self):
        findings = [
            make_finding("AV-A", ("/a", None)),
            make_finding("AV-B", ("/b", "SIG-B")),
        ]
        records = build_incompatible_antivirus_insights(findings, _context())
        assert [r.value for r in records] == ["AV-A", "AV-A", "AV-B", "AV-B"]
        fields = [r.exception_list_items[0].entries[0].field for r in records]
        assert fields == [
            "process.executable.caseless",
            "process.executable.caseless",
            "process.code_signature",
            "process.Ext.code_signature",
        ]

    def test_cancel_between_findings(self):
        token = CancelToken()
        token.cancel()
        with pytest.raises(GenerationCancelled):
            build_incompatible_antivirus_insights(
                [make_finding("AV-A", ("/a", None))], _context(cancel=token),
            )


class TestNoisyProcessTreeBuilder:
    def test_labels(self):
        finding = make_finding("chatty.exe", ("C:\\chatty.exe", None))
        records = build_noisy_process_tree_insights(
            [finding], _context({OSType.WINDOWS: ("e2",)}, insight_type=InsightType.NOISY_PROCESS_TREE),
        )
        assert len(records) == 1
        assert records[0].message == "Noisy process trees detected"
        assert records[0].type == InsightType.NOISY_PROCESS_TREE
        assert records[0].exception_list_items[0].list_id == "endpoint_event_filters"
