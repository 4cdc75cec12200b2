"""CST to lossless tree mapping."""

from kotlinpy.mapping.errors import InconsistentTriviaError, MappingError, UnsupportedConstructError
from kotlinpy.mapping.mapper import (
    KotlinTreeMapper,
    MappedTree,
    detect_line_ending,
    map_node,
    map_source_file,
    map_tree,
)
from kotlinpy.mapping.options import MapperOptions, UnsupportedPolicy
from kotlinpy.mapping.trivia import Direction, build_space, capture_trivia

__all__ = [
    "Direction",
    "InconsistentTriviaError",
    "KotlinTreeMapper",
    "MappedTree",
    "MapperOptions",
    "MappingError",
    "UnsupportedConstructError",
    "UnsupportedPolicy",
    "build_space",
    "capture_trivia",
    "detect_line_ending",
    "map_node",
    "map_source_file",
    "map_tree",
]
