"""
Application settings and configuration

Uses pydantic-settings for type-safe configuration via environment variables.
All settings use CONTENT_FACTORY_ prefix (e.g., CONTENT_FACTORY_USE_LOGS=true).

Settings can also be loaded from a .env file in the project root.
"""

from typing import List

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class AppSettings(BaseSettings):
    """
    Application configuration via environment variables.

    Environment variables use CONTENT_FACTORY_ prefix.

    Examples:
        CONTENT_FACTORY_USE_LOGS=true
        CONTENT_FACTORY_CONFIG_FILE=tools.config.py
        CONTENT_FACTORY_GLOB_MAX_DEPTH=4
    """

    model_config = SettingsConfigDict(
        env_prefix="CONTENT_FACTORY_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
    )

    # Directive syntax
    filter_tag: str = Field(
        default="content-factory-filter",
        description="Tag name of the visibility filter directive",
    )

    include_tag: str = Field(
        default="content-factory-include-file",
        description="Tag name of the file inclusion directive",
    )

    root_prefix: str = Field(
        default="@/",
        description="Prefix marking a path as relative to the project root",
    )

    missing_file_template: str = Field(
        default="[MISSING FILE: {path}]",
        description="Text substituted for an include whose file cannot be read",
    )

    # Discovery
    config_file: str = Field(
        default="content-factory.config.py",
        description="Configuration module looked up in the project root",
    )

    glob_ignore: List[str] = Field(
        default_factory=lambda: ["**/node_modules/**"],
        description="Glob patterns never returned by file discovery",
    )

    glob_max_depth: int = Field(
        default=10,
        description="Maximum directory depth searched by file discovery",
    )

    encoding: str = Field(
        default="utf-8",
        description="Encoding used for every source read and output write",
    )

    # Output configuration
    use_logs: bool = Field(
        default=False,
        description="Emit informational progress messages while running",
    )

    def missingFile_make(self, path: str) -> str:
        """
        Build the marker substituted for an unreadable include.

        Example:
            >>> AppSettings().missingFile_make("./nope.md")
            '[MISSING FILE: ./nope.md]'
        """
        return self.missing_file_template.format(path=path)


# Singleton instance - import this in your code
appsettings = AppSettings()
