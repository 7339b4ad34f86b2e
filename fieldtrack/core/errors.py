class ValidationError(ValueError):
    """User input rejected before any database call."""


class TimerStateError(ValidationError):
    """Transition not allowed from the timer's current state."""


class MissingColumnsError(ValidationError):
    def __init__(self, headers):
        self.headers = list(headers)
        super().__init__(f"Required columns not found. Found headers: {', '.join(self.headers)}")


class NotFoundError(LookupError):
    pass
