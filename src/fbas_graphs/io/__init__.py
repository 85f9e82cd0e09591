"""File output for fbas-graphs"""

from .writer import (
    DEFAULT_OUTPUT_DIR,
    WrittenArtifacts,
    create_output_dir,
    output_paths,
    write_files,
    write_outputs
)

__all__ = [
    'DEFAULT_OUTPUT_DIR',
    'WrittenArtifacts',
    'create_output_dir',
    'output_paths',
    'write_files',
    'write_outputs'
]
