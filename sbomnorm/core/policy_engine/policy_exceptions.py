class PolicyError(Exception):
    """
    Base exception for all policy-related failures.
    """

    pass


class PolicyViolation(PolicyError):
    """
    Raised in strict mode when a compliance policy drops packages.
    """

    def __init__(self, message: str, dropped_ids=()):
        super().__init__(message)
        self.dropped_ids = tuple(dropped_ids)


class PolicyConfigurationError(PolicyError):
    """
    Raised when a configuration mapping is structurally invalid.
    """

    pass
