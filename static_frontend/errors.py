"""
Errors raised while provisioning a static frontend.
"""


class StaticFrontendError(Exception):
    """Base exception for all provisioning errors"""

    def __init__(self, message: str):
        self.message = message
        super().__init__(self.message)

    def __str__(self):
        return f"{type(self).__name__}: {self.message}"


class InvalidDomainError(StaticFrontendError):
    """Raised when a target domain has no registered-domain suffix"""

    def __init__(self, domain: str, message: str = ""):
        self.domain = domain
        super().__init__(message or f"No TLD found on {domain!r}")


class ZoneNotFoundError(StaticFrontendError):
    """Raised when no hosted zone owns the parent domain"""

    def __init__(self, parent_domain: str, detail: str = ""):
        self.parent_domain = parent_domain
        message = f"No hosted zone found for {parent_domain!r}"
        if detail:
            message = f"{message} ({detail})"
        super().__init__(message)


class ValidationTimeoutError(StaticFrontendError):
    """Raised when the certificate authority never confirms the DNS challenge"""
    pass


class ResourceConflictError(StaticFrontendError):
    """Raised when the provider rejects a create/update because of an existing resource"""
    pass
