"""Parser modes and configuration options."""

from dataclasses import dataclass
from enum import StrEnum


class ParseMode(StrEnum):
    """Top-level parser behavior profile."""

    SCRIPT = "script"
    SOURCE = "source"


@dataclass(frozen=True, slots=True)
class ParserOptions:
    """Feature flags controlling grammar compatibility."""

    mode: ParseMode = ParseMode.SCRIPT
    allow_top_level_statements: bool = True

    @staticmethod
    def for_mode(mode: ParseMode) -> "ParserOptions":
        if mode == ParseMode.SOURCE:
            return ParserOptions(mode=mode, allow_top_level_statements=False)

        return ParserOptions(mode=mode, allow_top_level_statements=True)
