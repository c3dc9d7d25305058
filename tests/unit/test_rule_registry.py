#  Copyright (c) 2025 Tom Villani, Ph.D.
"""Unit tests for the rewrite rule registry."""

from unittest.mock import MagicMock, patch

import pytest

from mdweave.ast.traversal import KEEP
from mdweave.options import VideoOptions
from mdweave.transforms import CalloutRule, RewriteRule, RuleMetadata, RuleRegistry, VideoRule


class RuleA(RewriteRule):
    """Test rule A."""

    name = "rule-a"

    def selection_set(self):
        return frozenset({("paragraph", None)})

    def rewrite(self, node, index, parent):
        return KEEP


class RuleB(RuleA):
    """Test rule B - runs after A."""

    name = "rule-b"
    after = ("rule-a",)


class RuleC(RuleA):
    """Test rule C - runs after B."""

    name = "rule-c"
    after = ("rule-b",)


class CycleX(RuleA):
    """Half of a cycle."""

    name = "cycle-x"
    after = ("cycle-y",)


class CycleY(RuleA):
    """Other half of a cycle."""

    name = "cycle-y"
    after = ("cycle-x",)


@pytest.fixture
def registry(fresh_registry):
    """Provide an empty registry that skips built-in registration."""
    fresh_registry._initialized = True
    return fresh_registry


@pytest.fixture
def sample_metadata():
    """Create sample rule metadata."""
    return RuleMetadata(name="rule-a", description="Test rule", rule_class=RuleA)


@pytest.mark.unit
class TestRuleRegistry:
    """Tests for RuleRegistry class."""

    def test_singleton(self):
        """Test registry is a singleton."""
        assert RuleRegistry() is RuleRegistry()

    def test_builtins_registered(self, fresh_registry):
        """Test the built-in rules are available without entry points."""
        assert fresh_registry.list_rules() == ["callout", "video"]
        assert isinstance(fresh_registry.get_rule("callout"), CalloutRule)
        assert isinstance(fresh_registry.get_rule("video"), VideoRule)

    def test_register_and_get(self, registry, sample_metadata):
        """Test registering a rule."""
        registry.register(sample_metadata)

        assert registry.has_rule("rule-a")
        assert registry.get_metadata("rule-a").description == "Test rule"
        assert isinstance(registry.get_rule("rule-a"), RuleA)

    def test_register_duplicate_warning(self, registry, sample_metadata, caplog):
        """Test warning when registering a duplicate rule."""
        registry.register(sample_metadata)
        registry.register(sample_metadata)
        assert "already registered" in caplog.text.lower()

    def test_unregister(self, registry, sample_metadata):
        """Test unregistering a rule."""
        registry.register(sample_metadata)
        assert registry.unregister("rule-a") is True
        assert registry.unregister("rule-a") is False
        assert not registry.has_rule("rule-a")

    def test_get_unknown(self, registry):
        """Test unknown names raise KeyError."""
        with pytest.raises(KeyError):
            registry.get_metadata("missing")

    def test_get_rule_with_option_overrides(self, fresh_registry):
        """Test keyword overrides are applied to the rule's options."""
        rule = fresh_registry.get_rule("video", strict=True)
        assert rule.options == VideoOptions(strict=True)

    def test_get_rule_with_options_object(self, fresh_registry):
        """Test an options object is passed through."""
        options = VideoOptions(wrapper_class="player")
        assert fresh_registry.get_rule("video", options).options is options

    def test_list_rules_by_tag(self, fresh_registry):
        """Test filtering by tag."""
        assert fresh_registry.list_rules(tags=["media"]) == ["video"]
        assert fresh_registry.list_rules(tags=["directives"]) == ["callout", "video"]

    def test_clear_restores_builtins(self, fresh_registry, sample_metadata):
        """Test clearing drops custom rules and brings built-ins back."""
        fresh_registry.register(sample_metadata)
        fresh_registry.clear()
        assert fresh_registry.list_rules() == ["callout", "video"]


@pytest.mark.unit
class TestResolveDependencies:
    """Tests for dependency ordering."""

    def test_chain_pulls_in_dependencies(self, registry):
        """Test dependencies are added and ordered first."""
        for cls in (RuleA, RuleB, RuleC):
            registry.register(RuleMetadata(name=cls.name, description="", rule_class=cls))

        assert registry.resolve_dependencies(["rule-c"]) == ["rule-a", "rule-b", "rule-c"]

    def test_priority_breaks_ties(self, registry):
        """Test lower priority runs first among independent rules."""
        registry.register(RuleMetadata(name="rule-a", description="", rule_class=RuleA, priority=50))
        registry.register(RuleMetadata(name="zzz", description="", rule_class=RuleA, priority=10))

        assert registry.resolve_dependencies(["rule-a", "zzz"]) == ["zzz", "rule-a"]

    def test_missing_dependency(self, registry):
        """Test a missing dependency is a ValueError."""
        registry.register(RuleMetadata(name="rule-b", description="", rule_class=RuleB))
        with pytest.raises(ValueError, match="rule-a"):
            registry.resolve_dependencies(["rule-b"])

    def test_cycle(self, registry):
        """Test circular dependencies are detected."""
        registry.register(RuleMetadata(name="cycle-x", description="", rule_class=CycleX))
        registry.register(RuleMetadata(name="cycle-y", description="", rule_class=CycleY))
        with pytest.raises(ValueError, match="Circular"):
            registry.resolve_dependencies(["cycle-x"])


@pytest.mark.unit
class TestPluginDiscovery:
    """Tests for entry point discovery."""

    def _entry_points(self, *entries):
        selected = MagicMock()
        selected.select.return_value = list(entries)
        return selected

    def test_discovers_metadata(self, registry, sample_metadata):
        """Test entry points loading RuleMetadata are registered."""
        ep = MagicMock()
        ep.name = "rule-a"
        ep.load.return_value = sample_metadata

        with patch("importlib.metadata.entry_points", return_value=self._entry_points(ep)):
            assert registry.discover_plugins() == 1
        assert registry.has_rule("rule-a")

    def test_skips_wrong_type(self, registry, caplog):
        """Test entry points returning something else are skipped."""
        ep = MagicMock()
        ep.name = "bogus"
        ep.load.return_value = object()

        with patch("importlib.metadata.entry_points", return_value=self._entry_points(ep)):
            assert registry.discover_plugins() == 0
        assert "did not return RuleMetadata" in caplog.text

    def test_skips_failed_imports(self, registry, caplog):
        """Test import failures are logged and skipped."""
        ep = MagicMock()
        ep.name = "broken"
        ep.load.side_effect = ImportError("no module")

        with patch("importlib.metadata.entry_points", return_value=self._entry_points(ep)):
            assert registry.discover_plugins() == 0
        assert "Failed to load rule entry point 'broken'" in caplog.text


@pytest.mark.unit
class TestRuleMetadata:
    """Tests for RuleMetadata validation."""

    def test_empty_name(self):
        """Test names must be non-empty."""
        with pytest.raises(ValueError):
            RuleMetadata(name="", description="", rule_class=RuleA)

    def test_rule_class_checked(self):
        """Test the class must be a RewriteRule."""
        with pytest.raises(ValueError):
            RuleMetadata(name="x", description="", rule_class=dict)  # type: ignore[arg-type]

    def test_negative_priority(self):
        """Test priorities are non-negative."""
        with pytest.raises(ValueError):
            RuleMetadata(name="x", description="", rule_class=RuleA, priority=-1)

    def test_dependencies_from_rule_class(self):
        """Test dependencies come from the rule's after declaration."""
        assert RuleMetadata(name="rule-b", description="", rule_class=RuleB).dependencies == ["rule-a"]

    def test_options_override_without_options_class(self):
        """Test keyword overrides need an options class."""
        metadata = RuleMetadata(name="rule-a", description="", rule_class=RuleA)
        with pytest.raises(ValueError):
            metadata.create_instance(strict=True)

    def test_to_dict(self):
        """Test the listing summary."""
        data = RuleMetadata(name="rule-b", description="d", rule_class=RuleB, tags=["t"]).to_dict()
        assert data["after"] == ["rule-a"]
        assert data["tags"] == ["t"]
