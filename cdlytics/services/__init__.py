"""Service layer exports."""

from .resource import ApiResource, Listener, ResourceState, ResourceStatus

__all__ = [
    "ApiResource",
    "Listener",
    "ResourceState",
    "ResourceStatus",
]
