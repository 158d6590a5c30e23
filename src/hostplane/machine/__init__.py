"""Worker machine manifests."""

from hostplane.machine.compiler import compile_machine

__all__ = ["compile_machine"]
