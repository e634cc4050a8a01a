"""
Descriptor Registry
===================

Thread-safe, process-lifetime cache of TableDescriptors keyed by mapper
class.

Each mapper class is resolved at most once. The first caller resolves
under a lock owned by that mapper class; concurrent first callers for the
same mapper wait for it and then read the stored descriptor, while other
mapper classes resolve independently. Failed resolutions are not stored,
so the next call retries from scratch.

Usage:
    from mapper.registry import get_descriptor_registry

    table = get_descriptor_registry().get_or_resolve(UserMapper)
    table.table_name
"""

from threading import Lock
from typing import Callable, Dict, Optional

from .descriptor import TableDescriptor

from utils.logger import log_descriptor_resolved, log_resolution_error

Resolver = Callable[[type], TableDescriptor]


class DescriptorRegistry:
    """
    Mapper-class to TableDescriptor cache.

    Attributes:
        _descriptors: Resolved descriptors by mapper class
        _lock: Guards creation of per-mapper locks
        _locks: One resolution lock per mapper class
        _resolver: Function building a descriptor from a mapper class
    """

    def __init__(self, resolver: Optional[Resolver] = None):
        """
        Initialize an empty registry.

        Args:
            resolver: Descriptor factory, TableDescriptor.of by default
        """
        self._descriptors: Dict[type, TableDescriptor] = {}
        self._lock = Lock()
        self._locks: Dict[type, Lock] = {}
        self._resolver = resolver or TableDescriptor.of

    def get(self, mapper_type: type) -> Optional[TableDescriptor]:
        """Return the cached descriptor for ``mapper_type`` without resolving."""
        return self._descriptors.get(mapper_type)

    def get_or_resolve(self, mapper_type: type) -> TableDescriptor:
        """
        Return the descriptor for ``mapper_type``, resolving it on first use.

        Raises:
            MapperConfigurationError: If the mapper or its record type is misconfigured
        """
        table = self._descriptors.get(mapper_type)
        if table is not None:
            return table

        with self._lock_for(mapper_type):
            # Double-check: another thread may have resolved while we waited
            table = self._descriptors.get(mapper_type)
            if table is not None:
                return table

            try:
                table = self._resolver(mapper_type)
            except Exception as e:
                log_resolution_error(e, mapper_type)
                raise

            self._descriptors[mapper_type] = table

        log_descriptor_resolved(mapper_type, table)
        return table

    def _lock_for(self, mapper_type: type) -> Lock:
        with self._lock:
            lock = self._locks.get(mapper_type)
            if lock is None:
                lock = self._locks[mapper_type] = Lock()
            return lock

    def __contains__(self, mapper_type: type) -> bool:
        return mapper_type in self._descriptors

    def __len__(self) -> int:
        return len(self._descriptors)


# Global registry instance
_registry: Optional[DescriptorRegistry] = None
_registry_lock = Lock()


def get_descriptor_registry() -> DescriptorRegistry:
    """
    Get the process-wide descriptor registry.

    Thread-safe lazy initialization ensures only one registry exists.
    """
    global _registry
    if _registry is None:
        with _registry_lock:
            if _registry is None:
                _registry = DescriptorRegistry()
    return _registry


def reset_descriptor_registry() -> None:
    """Discard every cached descriptor (useful for testing)."""
    global _registry
    with _registry_lock:
        _registry = DescriptorRegistry()
