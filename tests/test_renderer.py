"""Tests for the template renderer and stub loading."""

import pytest

from pytest_scaffold_mcp.core.errors import NotFoundError
from pytest_scaffold_mcp.core.generators import StubLoader, render
from pytest_scaffold_mcp.core.generators.renderer import join_blocks, placeholders


# =============================================================================
# Renderer Tests
# =============================================================================

class TestRender:
    """Tests for placeholder substitution."""

    def test_substitutes_placeholders(self):
        """Known placeholders are replaced, with or without inner spaces."""
        result = render("from {{ module }} import {{name}}", {"module": "app.models", "name": "User"})
        assert result == "from app.models import User"

    def test_empty_map_is_identity(self):
        """Rendering with no substitutions returns the template unchanged."""
        template = "def test_{{ slug }}():\n    pass\n"
        assert render(template, {}) == template

    def test_unknown_placeholders_are_kept(self):
        """Placeholders without an entry stay in the output."""
        assert render("{{ a }} {{ b }}", {"a": "1"}) == "1 {{ b }}"

    def test_single_pass(self):
        """Substituted text is never rendered again."""
        assert render("{{a}}", {"a": "{{b}}", "b": "X"}) == "{{b}}"

    def test_repeated_placeholder(self):
        """Every occurrence of a placeholder is replaced."""
        assert render("{{ x }}-{{ x }}", {"x": "y"}) == "y-y"

    def test_placeholders_lists_names(self):
        """placeholders() reports each name once."""
        assert placeholders("{{ a }} {{b}} {{ a }} {{ not valid }}") == {"a", "b"}


class TestJoinBlocks:
    """Tests for joining generated test functions."""

    def test_blocks_separated_by_two_blank_lines(self):
        """Blocks are joined PEP 8 style; empty blocks are dropped."""
        assert join_blocks(["def a():\n    pass\n", "", "def b():\n    pass"]) == (
            "def a():\n    pass\n\n\ndef b():\n    pass"
        )

    def test_no_blocks(self):
        """Nothing to join yields an empty string."""
        assert join_blocks([]) == ""


# =============================================================================
# Stub Loader Tests
# =============================================================================

class TestStubLoader:
    """Tests for bundled and custom stubs."""

    def test_loads_bundled_stub(self):
        """Bundled stubs ship with the package."""
        loader = StubLoader()
        assert "{{ model_class }}" in loader.load("model_test")
        assert loader.exists("controller_test")

    def test_custom_stub_takes_precedence(self, tmp_path):
        """A stub in the custom directory overrides the bundled one."""
        (tmp_path / "model_test.stub").write_text("# custom {{ model_class }}\n")
        loader = StubLoader(tmp_path)
        assert loader.load("model_test") == "# custom {{ model_class }}\n"
        assert "{{ controller_class }}" in loader.load("controller_test")

    def test_missing_stub_raises(self):
        """Unknown stub names raise NotFoundError."""
        loader = StubLoader()
        assert loader.exists("no_such_stub") is False
        with pytest.raises(NotFoundError):
            loader.load("no_such_stub")

    @pytest.mark.parametrize("name", [
        "model_test",
        "model_relationships_test",
        "model_scopes_test",
        "model_validation_test",
        "controller_test",
        "api_controller_test",
        "component_test",
        "admin_resource_test",
        "admin_page_test",
        "admin_list_page_test",
        "admin_create_page_test",
        "admin_edit_page_test",
        "admin_view_page_test",
    ])
    def test_stub_placeholders_are_snake_case(self, name):
        """Stub placeholder names are lowercase identifiers."""
        names = placeholders(StubLoader().load(name))
        assert names
        assert all(n == n.lower() for n in names)
