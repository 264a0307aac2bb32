"""
annodocs - Annotation Markdown to fumadocs MDX transpiler

Converts `:::type` annotated Markdown into fumadocs-ui component markup
and back again.
"""

__version__ = "1.0.0"

from .lib import Transpiler, FileHandler, ComponentRegistry, LOG, state_connectToLogger

__all__ = ["Transpiler", "FileHandler", "ComponentRegistry", "LOG", "state_connectToLogger", "__version__"]
