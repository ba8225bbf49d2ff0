"""Exceptions raised while building a sizing field."""


class SizingError(Exception):
    """Base class for sizing-field construction failures."""


class ConfigurationError(SizingError):
    """Raised when a requested criterion lacks the data it needs."""


class MissingCriterionError(ConfigurationError):
    """Raised when the automatic timestep has no distance or feature-size layer to use."""


class ConvergenceError(SizingError):
    """Raised when the gradient limiter exhausts its iteration budget."""

    def __init__(self, message, iterations=None):
        super().__init__(message)
        self.iterations = iterations


class GeometryDegenerate(SizingError):
    """Raised when a channel stencil would exceed the safety bound."""

    def __init__(self, message, stencil=None):
        super().__init__(message)
        self.stencil = stencil
