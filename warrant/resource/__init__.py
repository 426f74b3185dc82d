"""
Resource resolution for Warrant.

Turns a declared resource, the request parameters and the path parameters
into concrete model classes, records and a relation to load from.
"""

from warrant.resource.info import (
    ParentResourceInfo,
    PrimaryResourceInfo,
    ResourceInfo,
)
from warrant.resource.properties import ActionCategory, ResourceProperties
from warrant.resource.resource import Resource

__all__ = [
    "ActionCategory",
    "ParentResourceInfo",
    "PrimaryResourceInfo",
    "Resource",
    "ResourceInfo",
    "ResourceProperties",
]
