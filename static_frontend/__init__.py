from static_frontend.component import ApiOrigin, ContentOrigin, LogsTarget, StaticFrontend
from static_frontend.config import ProviderSettings, StackSettings
from static_frontend.domains import DomainParts, split_domain
from static_frontend.errors import (
    InvalidDomainError,
    ResourceConflictError,
    StaticFrontendError,
    ValidationTimeoutError,
    ZoneNotFoundError,
)

__all__ = [
    'ApiOrigin',
    'ContentOrigin',
    'DomainParts',
    'InvalidDomainError',
    'LogsTarget',
    'ProviderSettings',
    'ResourceConflictError',
    'StackSettings',
    'StaticFrontend',
    'StaticFrontendError',
    'ValidationTimeoutError',
    'ZoneNotFoundError',
    'split_domain',
]
