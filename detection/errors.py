"""Exceptions raised by the detection core."""


class DetectionError(Exception):
    """Base class for failures of a detection run."""


class EmptyInputError(DetectionError, ValueError):
    """Raised when there is no data to analyze."""

    def __init__(self, message: str = "Cannot analyze an empty sequence"):
        super().__init__(message)
