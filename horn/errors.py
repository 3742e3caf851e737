"""Exception types raised by the horn profile library."""


class ParameterError(ValueError):
    """Horn parameters failed validation.

    ``errors`` holds every violation found; the message joins them one per
    line so a caller can fix all of them in a single pass.
    """

    def __init__(self, errors):
        self.errors = list(errors)
        super().__init__(
            "Parameter validation failed:\n" + "\n".join(self.errors)
        )


class UnsupportedShapeError(ParameterError):
    """Cross-section kind or transition region the engine cannot handle."""


class MathDomainError(ValueError):
    """Argument outside the domain of a math utility (log of <= 0, x/0)."""
