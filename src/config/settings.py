"""
Application settings and configuration

Uses pydantic-settings for type-safe configuration via environment variables.
All settings use SMARTYFMT_ prefix (e.g., SMARTYFMT_WRAP_LINE_LENGTH=100).

Settings can also be loaded from a .env file in the project root.
"""

from typing import List

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class AppSettings(BaseSettings):
    """
    Application configuration via environment variables.

    Environment variables use SMARTYFMT_ prefix.

    Examples:
        SMARTYFMT_WRAP_LINE_LENGTH=120
        SMARTYFMT_INDENT_INNER_HTML=true
        SMARTYFMT_EXTRA_WRAP_TAGS='["widget"]'
    """

    model_config = SettingsConfigDict(
        env_prefix="SMARTYFMT_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
    )

    # Beautifier configuration
    indent_inner_html: bool = Field(
        default=False,
        description="Indent <head> and <body> sections relative to <html>",
    )

    max_preserve_newlines: int = Field(
        default=2,
        ge=0,
        description="Longest run of line breaks kept (0 keeps all, 1 drops every blank line)",
    )

    preserve_newlines: bool = Field(
        default=True,
        description="Keep existing blank lines (up to max_preserve_newlines)",
    )

    wrap_line_length: int = Field(
        default=80,
        gt=0,
        description="Width above which a directive is split over several lines",
    )

    wrap_attributes: str = Field(
        default="auto",
        description=(
            "Attribute wrapping policy passed to an injected beautifier; "
            "the built-in re-indenter keeps attribute layout as written"
        ),
    )

    end_with_newline: bool = Field(
        default=False,
        description="End formatted output with a trailing newline",
    )

    # Placeholder configuration
    placeholder_prefix: str = Field(
        default="___SMARTYFMT_TOKEN_",
        description="Prefix of opaque directive placeholders (must survive the beautifier as a word)",
    )

    placeholder_suffix: str = Field(
        default="___",
        description="Suffix of opaque directive placeholders",
    )

    element_prefix: str = Field(
        default="smartyfmt-",
        description="Name prefix of synthetic elements standing in for block directives",
    )

    literal_start_marker: str = Field(
        default="___SMARTYFMT_LITERAL_START___",
        description="Comment body replacing an opening {literal} directive",
    )

    literal_end_marker: str = Field(
        default="___SMARTYFMT_LITERAL_END___",
        description="Comment body replacing a closing {/literal} directive",
    )

    # Tag taxonomy extensions
    extra_start_tags: List[str] = Field(default_factory=list, description="Additional block-start directive names")
    extra_middle_tags: List[str] = Field(default_factory=list, description="Additional else-like directive names")
    extra_end_tags: List[str] = Field(default_factory=list, description="Additional block-end directive names")
    extra_wrap_tags: List[str] = Field(default_factory=list, description="Additional attribute-wrapped directive names")
    extra_logic_tags: List[str] = Field(default_factory=list, description="Additional boolean-expression directive names")

    # CLI configuration
    default_pattern: str = Field(
        default="**/*.tpl",
        description="Glob (relative to inputdir) selecting the templates to format",
    )

    def placeHolder_make(self, index: int) -> str:
        """
        Generate an opaque placeholder string for the directive token at given index.

        Args:
            index: Zero-based id of the directive token

        Returns:
            Placeholder string (e.g., "___SMARTYFMT_TOKEN_0___")

        Example:
            >>> settings = AppSettings()
            >>> settings.placeHolder_make(0)
            '___SMARTYFMT_TOKEN_0___'
        """
        return f"{self.placeholder_prefix}{index}{self.placeholder_suffix}"

    def tokenIndex_extract(self, placeholder: str) -> int | None:
        """
        Read the token index back out of a placeholder string.

        Args:
            placeholder: Text that may be a placeholder

        Returns:
            Token index, or None when placeholder is not one

        Example:
            >>> AppSettings().tokenIndex_extract('___SMARTYFMT_TOKEN_7___')
            7
        """
        prefix, suffix = self.placeholder_prefix, self.placeholder_suffix
        if not (placeholder.startswith(prefix) and placeholder.endswith(suffix)):
            return None
        digits = placeholder[len(prefix) : len(placeholder) - len(suffix)]
        return int(digits) if digits.isdigit() else None


# Singleton instance - import this in your code
appsettings = AppSettings()
