"""
Authenticated Principal

The caller identity resolved once at the request boundary and passed
explicitly into use cases.
"""

from dataclasses import dataclass
from uuid import UUID


@dataclass(frozen=True)
class AuthenticatedPrincipal:
    user_id: UUID
