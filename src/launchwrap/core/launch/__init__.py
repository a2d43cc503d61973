"""
Launch-line processing.

Modules:
    tokenizer: @argfile tokenizer (quoting, escapes, comments, continuations)
    debug: JDWP agent parameter parsing
    builder: LaunchConfiguration builder for JVM-style launch lines
    cmdline: Quoting rule and immutable command-line values
"""

from launchwrap.core.launch.builder import (
    LaunchConfigurationBuilder,
    build_configuration,
    read_argument_file,
)
from launchwrap.core.launch.cmdline import CommandLine, ProcessSpec, QuotedParts, quote
from launchwrap.core.launch.debug import parse_debug_spec, parse_jdwp_bool
from launchwrap.core.launch.tokenizer import tokenize

__all__ = [
    # Tokenizer
    "tokenize",
    # Debug
    "parse_debug_spec",
    "parse_jdwp_bool",
    # Builder
    "LaunchConfigurationBuilder",
    "build_configuration",
    "read_argument_file",
    # Command lines
    "CommandLine",
    "ProcessSpec",
    "QuotedParts",
    "quote",
]
