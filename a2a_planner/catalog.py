"""
Operation Catalog - the operations the planner may call remotely.

Any zero-argument callable returning a list of ``OperationDescriptor``
can serve as a catalog provider; ``OperationCatalog`` is the in-memory
implementation used by the CLI and loaded from configuration.
"""

import logging
import re
from dataclasses import dataclass
from pathlib import Path
from typing import Callable, Iterable, Optional, Union

import yaml

logger = logging.getLogger(__name__)

OPERATION_NAME_PATTERN = re.compile(r"^[a-z][a-z_]*$")

# Placeholder param hints that mean "takes no parameters".
_EMPTY_PARAM_HINTS = {"", "-", "{}"}


@dataclass(frozen=True)
class OperationDescriptor:
    """A remote operation as shown to the LLM."""

    operation: str
    params: str = ""
    description: str = ""

    def __post_init__(self) -> None:
        if not OPERATION_NAME_PATTERN.match(self.operation):
            raise ValueError(
                f"Invalid operation name {self.operation!r}: "
                "must be lowercase letters and underscores"
            )
        if self.params.strip() in _EMPTY_PARAM_HINTS:
            object.__setattr__(self, "params", "")

    def summary_line(self) -> str:
        """Format as a bullet for the operation tool description."""
        if self.params:
            return f"- {self.operation}: {self.description} [params: {self.params}]"
        return f"- {self.operation}: {self.description}"


OperationCatalogProvider = Callable[[], list[OperationDescriptor]]


class OperationCatalog:
    """In-memory catalog of operation descriptors, keyed by name."""

    def __init__(self, operations: Optional[Iterable[OperationDescriptor]] = None):
        self._operations: dict[str, OperationDescriptor] = {}
        for op in operations or ():
            self.add(op)

    def __call__(self) -> list[OperationDescriptor]:
        return list(self._operations.values())

    def __len__(self) -> int:
        return len(self._operations)

    def __contains__(self, operation: str) -> bool:
        return operation in self._operations

    def add(self, descriptor: OperationDescriptor) -> None:
        """Add a descriptor, replacing any previous one with the same name."""
        if descriptor.operation in self._operations:
            logger.debug("Replacing operation '%s'", descriptor.operation)
        self._operations[descriptor.operation] = descriptor

    def register(self, operation: str, params: str = "", description: str = "") -> None:
        """Register an operation from its fields."""
        self.add(
            OperationDescriptor(
                operation=operation, params=params, description=description
            )
        )

    def get(self, operation: str) -> Optional[OperationDescriptor]:
        """Get a descriptor by name."""
        return self._operations.get(operation)

    def get_summary(self) -> str:
        """Formatted list of all operations for prompts."""
        return "\n".join(op.summary_line() for op in self._operations.values())

    @classmethod
    def from_entries(cls, entries: Iterable[dict]) -> "OperationCatalog":
        """Build a catalog from ``{operation, params, description}`` dicts."""
        catalog = cls()
        for entry in entries:
            try:
                catalog.register(
                    operation=str(entry["operation"]),
                    params=str(entry.get("params") or ""),
                    description=str(entry.get("description") or ""),
                )
            except (KeyError, TypeError, ValueError) as e:
                raise ValueError(f"Invalid operation entry {entry!r}: {e}") from e
        return catalog


def load_operations_file(path: Union[str, Path]) -> OperationCatalog:
    """
    Load a catalog from a YAML file.

    The file holds either a top-level list of entries or a mapping with
    an ``operations`` key.
    """
    config_path = Path(path)
    with open(config_path, "r") as f:
        raw = yaml.safe_load(f)

    if raw is None:
        logger.warning("Operations file %s is empty", config_path)
        return OperationCatalog()
    entries = raw.get("operations", []) if isinstance(raw, dict) else raw
    if not isinstance(entries, list):
        raise ValueError(f"Operations file {config_path} must contain a list")

    catalog = OperationCatalog.from_entries(entries)
    logger.debug("Loaded %d operations from %s", len(catalog), config_path)
    return catalog
