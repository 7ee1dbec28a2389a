"""Editor settings schema and validation using Pydantic.

This module defines the settings schema that validates and coerces editor
settings from the various sources (environment, files, host) into the
correct types with proper defaults.
"""

from typing import Annotated, Any, Literal

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, NoDecode, SettingsConfigDict

# Settings that map onto engine options when no local configuration exists
FORMATTING_OPTION_FIELDS = {
    "print_width": "printWidth",
    "tab_width": "tabWidth",
    "use_tabs": "useTabs",
    "semi": "semi",
    "single_quote": "singleQuote",
    "jsx_single_quote": "jsxSingleQuote",
    "quote_props": "quoteProps",
    "trailing_comma": "trailingComma",
    "bracket_spacing": "bracketSpacing",
    "jsx_bracket_same_line": "jsxBracketSameLine",
    "arrow_parens": "arrowParens",
    "end_of_line": "endOfLine",
    "prose_wrap": "proseWrap",
    "html_whitespace_sensitivity": "htmlWhitespaceSensitivity",
}


class EditorSettings(BaseSettings):
    """Pydantic settings schema for the editor integration.

    Environment variables use the ``PRETTIER_EDIT_`` prefix, e.g.
    ``PRETTIER_EDIT_REQUIRE_CONFIG=true``.
    """

    model_config = SettingsConfigDict(
        env_prefix="PRETTIER_EDIT_",
        env_file=None,
        case_sensitive=False,
        extra="ignore",  # Unknown keys from files or hosts are dropped
    )

    # --- Integration behavior ---

    disable_languages: Annotated[list[str], NoDecode] = Field(
        default_factory=list,
        description="Language ids that are never formatted",
    )
    require_config: bool = Field(
        default=False,
        description="Only format when a prettier configuration file exists",
    )
    config_path: str | None = Field(
        default=None,
        description="Explicit configuration file, relative to the workspace or absolute",
    )
    ignore_path: str = Field(
        default=".prettierignore",
        description="Ignore file, relative to the workspace or absolute",
    )
    use_editor_config: bool = Field(
        default=True,
        description="Take .editorconfig into account when resolving options",
    )
    prettier_path: str | None = Field(
        default=None,
        description="Directory of a prettier package to use when none is local",
    )

    # --- Legacy integration toggles (deprecated, only trigger a warning) ---

    eslint_integration: bool = False
    tslint_integration: bool = False
    stylelint_integration: bool = False

    # --- Fallback formatting options ---

    print_width: int = Field(default=80, ge=1)
    tab_width: int = Field(default=2, ge=0)
    use_tabs: bool = False
    semi: bool = True
    single_quote: bool = False
    jsx_single_quote: bool = False
    quote_props: Literal["as-needed", "consistent", "preserve"] = "as-needed"
    trailing_comma: Literal["none", "es5", "all"] = "none"
    bracket_spacing: bool = True
    jsx_bracket_same_line: bool = False
    arrow_parens: Literal["avoid", "always"] = "avoid"
    end_of_line: Literal["auto", "lf", "crlf", "cr"] = "auto"
    prose_wrap: Literal["always", "never", "preserve"] = "preserve"
    html_whitespace_sensitivity: Literal["css", "strict", "ignore"] = "css"

    @field_validator("disable_languages", mode="before")
    @classmethod
    def parse_language_list(cls, v: Any) -> Any:
        """Accept comma-separated strings as well as lists."""
        if isinstance(v, str):
            return [item.strip() for item in v.split(",") if item.strip()]
        return v

    def to_dict(self) -> dict[str, Any]:
        return self.model_dump()

    def to_prettier_options(self) -> dict[str, Any]:
        """Engine options derived from the fallback formatting settings."""
        return {
            option: getattr(self, field)
            for field, option in FORMATTING_OPTION_FIELDS.items()
        }
