"""
Business services for Tripkeeper.

- lifecycle.py: generic create/update/soft-delete/restore/purge per resource type
- resources.py: trip, mileage and expense definitions and service construction
- purge.py: scheduled sweep removing expired tombstones
- trash.py: cross-type trash view used by the trash endpoints
"""

from core.services.lifecycle import ResourceDefinition, ResourceService
from core.services.purge import PurgeOptions, run_purge
from core.services.resources import RESOURCE_DEFINITIONS, build_services, make_service

__all__ = [
    "RESOURCE_DEFINITIONS",
    "PurgeOptions",
    "ResourceDefinition",
    "ResourceService",
    "build_services",
    "make_service",
    "run_purge",
]
