# exceptions.py


class ImbSamplerError(Exception):
    """Base class for every error raised by the resampling algorithms."""


class InvalidParameter(ImbSamplerError, ValueError):
    """
    A discrete parameter (version, strategy, distance, metric...) is outside
    the supported enumeration.
    """
    def __init__(self, name, value, allowed=None):
        self.name = name
        self.value = value
        self.allowed = allowed
        message = f"Invalid value {value!r} for parameter '{name}'"
        if allowed is not None:
            message += f": expected one of {list(allowed)}"
        super().__init__(message)


class DegenerateInput(ImbSamplerError, ValueError):
    """The data cannot be processed (too few classes, empty pools...)."""


class InsufficientNeighbours(DegenerateInput):
    pass


class DegenerateTrainingSet(DegenerateInput):
    pass


class EmptyIndex(DegenerateInput):
    pass
