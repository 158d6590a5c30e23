"""Resource creators for hosted control planes."""

from hostplane.resources.compiler import CompileResult, compile_all, create, identity
from hostplane.resources.context import TemplateContext
from hostplane.resources.registry import Creator, CreatorRegistry, default_registry

__all__ = [
    "CompileResult",
    "Creator",
    "CreatorRegistry",
    "TemplateContext",
    "compile_all",
    "create",
    "default_registry",
    "identity",
]
