"""
Marine operations: vessels, overhauls, crew and maintenance.
"""

from .vessels import VesselManager
from .overhauls import OverhaulManager
from .crew import CrewManager, certification_status
from .maintenance import MaintenanceManager

__all__ = [
    "VesselManager",
    "OverhaulManager",
    "CrewManager",
    "certification_status",
    "MaintenanceManager",
]
