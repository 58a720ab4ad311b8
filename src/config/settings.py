"""
Application settings and configuration

Uses pydantic-settings for type-safe configuration via environment variables.
All settings use MDTRANSFORM_ prefix (e.g., MDTRANSFORM_LIST_INDENT_SIZE=2).

Settings can also be loaded from a .env file in the project root.
"""

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class AppSettings(BaseSettings):
    """
    Application configuration via environment variables.

    Environment variables use MDTRANSFORM_ prefix.

    Examples:
        MDTRANSFORM_LIST_INDENT_SIZE=2
        MDTRANSFORM_CLAMP_LIST_INDENT=false
        MDTRANSFORM_DEBUG_MODE=true
    """

    model_config = SettingsConfigDict(
        env_prefix="MDTRANSFORM_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
    )

    # List configuration
    list_indent_size: int = Field(
        default=4,
        ge=1,
        description="Number of leading spaces that make up one list nesting level",
    )

    clamp_list_indent: bool = Field(
        default=True,
        description="Clamp list indent jumps to one level deeper than the previous item",
    )

    # Export configuration
    separate_adjacent_lists: bool = Field(
        default=True,
        description="Insert a blank line between two adjacent lists so they stay apart on re-import",
    )

    # CLI configuration
    debug_mode: bool = Field(
        default=False,
        description="Dump the imported document tree when running at the highest verbosity",
    )

    def indent_fromWhitespace(self, whitespace: str) -> int:
        """
        Derive a list nesting level from leading whitespace.

        Args:
            whitespace: Leading whitespace captured in front of a list marker

        Returns:
            Nesting level (floor of length divided by list_indent_size)

        Example:
            >>> settings = AppSettings()
            >>> settings.indent_fromWhitespace("        ")
            2
        """
        return len(whitespace) // self.list_indent_size

    def indent_toWhitespace(self, depth: int) -> str:
        """
        Leading whitespace written in front of a list marker at a given depth.

        Example:
            >>> AppSettings().indent_toWhitespace(1)
            '    '
        """
        return " " * (depth * self.list_indent_size)


# Singleton instance - import this in your code
appsettings = AppSettings()
