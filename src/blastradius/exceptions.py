"""Custom exceptions for blastradius."""


class BlastRadiusError(Exception):
    """Base exception for all blastradius errors."""


class ConfigError(BlastRadiusError):
    """Configuration-related errors."""


class ParserError(BlastRadiusError):
    """Source parsing errors."""


class NotInitializedError(BlastRadiusError):
    """Raised when a component is queried before ``initialize`` was called."""

    def __init__(self, component: str):
        super().__init__(
            f"{component} is not initialized. Call initialize() first."
        )
        self.component = component


class EngineError(BlastRadiusError):
    """Blast radius engine errors."""


class EngineNotInitializedError(EngineError, NotInitializedError):
    """Raised when analysis is requested from an uninitialized engine."""

    def __init__(self):
        NotInitializedError.__init__(self, "BlastRadiusEngine")


class EngineBusyError(EngineError):
    """Raised when a build is requested while another one is in flight."""
