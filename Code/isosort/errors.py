"""Exceptions raised by the isosort package."""


class IsometricSortError(Exception):
    """Base class for all isosort errors."""


class ReentrantSortError(IsometricSortError):
    """A sort pass was started while another pass on the same world was running."""


class RegistryLockedError(IsometricSortError):
    """The registry was mutated from inside a sort pass."""


class UnknownSorterTypeError(IsometricSortError):
    """No relation graph builder is registered for the requested sorter type."""
