"""Read-only snapshot interface for namespaced objects."""

from abc import ABC, abstractmethod
from typing import Any


class ObjectView(ABC):
    """Read-only view over a set of namespaced objects of one kind.

    Views are snapshots: they are populated before a compile and never
    written to by the compiler. Objects are plain dicts in Kubernetes JSON
    shape (``metadata.name``, ``metadata.resourceVersion``, ``spec``, ...).
    """

    @abstractmethod
    def get(self, namespace: str, name: str) -> dict[str, Any] | None:
        """Get an object by namespace and name.

        Args:
            namespace: Object namespace
            name: Object name

        Returns:
            The object, or None if the snapshot does not contain it

        Raises:
            SnapshotError: If the view cannot be read
        """
