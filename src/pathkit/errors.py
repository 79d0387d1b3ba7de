# pathkit/errors.py


class PathkitError(Exception):
    """Base for every error raised by pathkit."""


class EmptyPointSetError(PathkitError, ValueError):
    pass


class InvalidIndexError(PathkitError, IndexError):
    pass


class NegativeWeightError(PathkitError, ValueError):
    pass


class PivotSequenceExhausted(PathkitError, RuntimeError):
    pass


class UnreachableTargetError(PathkitError, LookupError):
    def __init__(self, source: int, target: int):
        super().__init__(f"target {target} is unreachable from source {source}")
        self.source, self.target = source, target
