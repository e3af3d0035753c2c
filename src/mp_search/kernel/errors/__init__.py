"""Kernel error hierarchy — public re-export surface.

Hierarchy::

    BaseError
    ├── ApplicationError         (application.py)
    │   └── ConfigError
    │       ├── MissingRequiredSettingError
    │       └── InvalidSettingValueError
    ├── DomainError              (domain.py)
    │   └── ValidationError
    │       ├── InvalidKeepAliveError
    │       └── InvalidScrollCursorError
    └── InfrastructureError      (infrastructure.py)
        └── SerializationError
            └── CorruptedSearchDocumentError
"""

from mp_search.kernel.errors.application import (
    ApplicationError,
    ConfigError,
    InvalidSettingValueError,
    MissingRequiredSettingError,
)
from mp_search.kernel.errors.base import BaseError
from mp_search.kernel.errors.domain import (
    DomainError,
    InvalidKeepAliveError,
    InvalidScrollCursorError,
    ValidationError,
)
from mp_search.kernel.errors.infrastructure import (
    CorruptedSearchDocumentError,
    InfrastructureError,
    SerializationError,
)

__all__ = [
    "ApplicationError",
    "BaseError",
    "ConfigError",
    "CorruptedSearchDocumentError",
    "DomainError",
    "InfrastructureError",
    "InvalidSettingValueError",
    "InvalidKeepAliveError",
    "InvalidScrollCursorError",
    "MissingRequiredSettingError",
    "SerializationError",
    "ValidationError",
]
