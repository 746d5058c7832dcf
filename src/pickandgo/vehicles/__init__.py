"""Vehicle draft, validation and file staging."""

from pickandgo.vehicles.draft import FormStore, VehicleDraft, empty_draft
from pickandgo.vehicles.staging import DocumentStaging, FileRef, PhotoStaging
from pickandgo.vehicles.validation import validate_step

__all__ = [
    "DocumentStaging",
    "FileRef",
    "FormStore",
    "PhotoStaging",
    "VehicleDraft",
    "empty_draft",
    "validate_step",
]
