"""Mapper configuration."""

from dataclasses import dataclass
from enum import StrEnum


class UnsupportedPolicy(StrEnum):
    """What to do when a construct has no mapping rule."""

    ABORT = "abort"
    SKIP_DECLARATION = "skip_declaration"
    SKIP_FILE = "skip_file"


@dataclass(frozen=True, slots=True)
class MapperOptions:
    unsupported: UnsupportedPolicy = UnsupportedPolicy.ABORT
    verify: bool = False
