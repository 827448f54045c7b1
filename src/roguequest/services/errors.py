"""Service-layer exceptions."""


class FactoryError(Exception):
    """Raised when a runtime unit cannot be created from definitions."""


class SaveLoadError(Exception):
    """Raised when save or load operations fail."""


class RunStateError(Exception):
    """Raised when a progression call does not fit the current run state."""
