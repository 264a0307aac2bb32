"""
annodocs - Annotation Markdown to fumadocs MDX transpiler

Core transform library: scanner, content parsers, emitter and reverse
matcher, plus the file handling used by the command line front end.
"""

__version__ = "1.0.0"

from .scanner import Scanner, attributes_parse
from .validator import Validator
from .components import ComponentRegistry
from .emitter import Emitter
from .reverse import ReverseMatcher
from .transpiler import Transpiler
from .files import FileHandler
from .log import LOG, state_connectToLogger

__all__ = [
    "Scanner",
    "attributes_parse",
    "Validator",
    "ComponentRegistry",
    "Emitter",
    "ReverseMatcher",
    "Transpiler",
    "FileHandler",
    "LOG",
    "state_connectToLogger",
    "__version__",
]
