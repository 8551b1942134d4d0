"""
Application settings and configuration

Uses pydantic-settings for type-safe configuration via environment variables.
All settings use MDPRETTIFY_ prefix (e.g., MDPRETTIFY_DEFAULT_LANGUAGE=js).

Settings can also be loaded from a .env file in the project root.
"""

import shlex
from typing import List, Optional

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class AppSettings(BaseSettings):
    """
    Application configuration via environment variables.

    Environment variables use MDPRETTIFY_ prefix.

    Examples:
        MDPRETTIFY_PRETTIER_COMMAND="npx prettier"
        MDPRETTIFY_DEFAULT_LANGUAGE=js
        MDPRETTIFY_MARKDOWN_ONLY=true
    """

    model_config = SettingsConfigDict(
        env_prefix="MDPRETTIFY_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
    )

    # Formatter configuration
    prettier_command: str = Field(
        default="prettier",
        description="Command used to run Prettier (split with shell rules, e.g. 'npx prettier')",
    )

    print_width: Optional[int] = Field(
        default=None,
        description="Line width passed to Prettier as --print-width",
    )

    # Pipeline configuration
    default_language: Optional[str] = Field(
        default=None,
        description="Standing default language before any language-all directive",
    )

    markdown_only: bool = Field(
        default=False,
        description="Format the whole buffer as markdown without code segmentation",
    )

    final_pass: bool = Field(
        default=True,
        description="Run the whole-buffer markdown pass after block substitution",
    )

    # CLI configuration
    file_pattern: str = Field(
        default="*.md",
        description="Glob used to discover markdown sources in the input directory",
    )

    def command_split(self, override: Optional[str] = None) -> List[str]:
        """
        Split the formatter command into argv form.

        Args:
            override: Command string to use instead of prettier_command

        Returns:
            Argument list (e.g., ['npx', 'prettier'])

        Example:
            >>> AppSettings(prettier_command="npx prettier").command_split()
            ['npx', 'prettier']
        """
        return shlex.split(override or self.prettier_command)


# Singleton instance - import this in your code
appsettings = AppSettings()
