"""Unit tests for the frozen parser and renderer options."""

from dataclasses import FrozenInstanceError, fields

import pytest

from markbridge.options import (
    BaseParserOptions,
    BaseRendererOptions,
    EditorParserOptions,
    MarkdownParserOptions,
    MarkdownRendererOptions,
)


@pytest.mark.unit
class TestDefaults:
    """Tests for default option values."""

    def test_markdown_parser_defaults(self):
        """Test parser defaults."""
        options = MarkdownParserOptions()
        assert options.validate is True
        assert options.trim_text is False
        assert options.tag_info is False

    def test_markdown_renderer_defaults(self):
        """Test renderer defaults."""
        options = MarkdownRendererOptions()
        assert options.no_index is False
        assert options.escape_special is True
        assert options.bullet_symbol == "-"
        assert options.code_fence_min == 3

    def test_class_hierarchy(self):
        """Test that options share the parser and renderer bases."""
        assert isinstance(MarkdownParserOptions(), BaseParserOptions)
        assert isinstance(EditorParserOptions(), BaseParserOptions)
        assert isinstance(MarkdownRendererOptions(), BaseRendererOptions)

    def test_fields_carry_help_metadata(self):
        """Test that every option documents itself."""
        for options_class in (MarkdownParserOptions, MarkdownRendererOptions, EditorParserOptions):
            for option in fields(options_class):
                assert option.metadata.get("help"), f"{options_class.__name__}.{option.name} has no help"


@pytest.mark.unit
class TestImmutability:
    """Tests for frozen options and cloning."""

    def test_frozen(self):
        """Test that options cannot be mutated."""
        options = MarkdownRendererOptions()
        with pytest.raises(FrozenInstanceError):
            options.no_index = True

    def test_create_updated(self):
        """Test that create_updated returns a modified copy."""
        original = MarkdownParserOptions()
        updated = original.create_updated(tag_info=True)

        assert updated.tag_info is True
        assert original.tag_info is False
        assert isinstance(updated, MarkdownParserOptions)

    def test_create_updated_unknown_field(self):
        """Test that unknown fields are rejected by create_updated."""
        with pytest.raises(TypeError):
            MarkdownParserOptions().create_updated(colour="red")

    def test_field_names(self):
        """Test the option field names of each class."""
        assert MarkdownParserOptions.field_names() == {"validate", "trim_text", "tag_info"}
        assert EditorParserOptions.field_names() == {"validate"}
        renderer_fields = {"no_index", "escape_special", "bullet_symbol", "code_fence_min"}
        assert MarkdownRendererOptions.field_names() == renderer_fields


@pytest.mark.unit
class TestRendererValidation:
    """Tests for renderer option validation."""

    @pytest.mark.parametrize("symbol", ["-", "*", "+"])
    def test_valid_bullets(self, symbol):
        """Test the three bullet markers."""
        assert MarkdownRendererOptions(bullet_symbol=symbol).bullet_symbol == symbol

    @pytest.mark.parametrize("symbol", ["", "•", "1."])
    def test_invalid_bullets(self, symbol):
        """Test that other markers are rejected."""
        with pytest.raises(ValueError, match="bullet_symbol"):
            MarkdownRendererOptions(bullet_symbol=symbol)

    def test_short_fence_rejected(self):
        """Test the minimum fence length."""
        with pytest.raises(ValueError, match="code_fence_min"):
            MarkdownRendererOptions(code_fence_min=2)

    def test_validation_applies_to_updates(self):
        """Test that create_updated also validates."""
        with pytest.raises(ValueError):
            MarkdownRendererOptions().create_updated(bullet_symbol="x")
