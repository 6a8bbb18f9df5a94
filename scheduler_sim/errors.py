from __future__ import annotations

from typing import Optional


class ConfigurationError(ValueError):
    """
    Raised when a simulation is configured with input the engine cannot run.
    """

    def __init__(self, message: str, index: Optional[int] = None, name: Optional[str] = None):
        if index is not None:
            label = f"process #{index}" if name is None else f"process #{index} ({name})"
            message = f"{label}: {message}"
        super().__init__(message)
        self.index = index
        self.name = name
