"""
Permission system for class and subject management.

Main components:
- roles: closed Role enum and the capability tier classifier
- principal: Principal, AccessScope and CapabilityDescriptor
- resolver: PermissionResolver (resolve, can_access_subject)
- guard: AccessGuard and the class/subject route dependencies
- content: AccessibleContentAggregator
- query_builders: class query filtering per principal
- auth: token authentication and Principal creation

Only the leaf modules are re-exported here; import the others from their
modules directly.
"""

from .roles import (
    Role,
    CapabilityTier,
    RoleNotApplicableError,
    classify_role,
)

from .principal import (
    Principal,
    AccessScope,
    CapabilityDescriptor,
)

__all__ = [
    "Role",
    "CapabilityTier",
    "RoleNotApplicableError",
    "classify_role",
    "Principal",
    "AccessScope",
    "CapabilityDescriptor",
]
