"""Enumerations shared by the ORM models, schemas and services."""

import enum


class ProjectStatus(str, enum.Enum):
    UNDER_PROCUREMENT = "Under Procurement"
    NOT_YET_STARTED = "Not Yet Started"
    ONGOING = "Ongoing"
    FOR_FINAL_INSPECTION = "For Final Inspection and Punchlisting"
    COMPLETED = "Completed"


class FieldGroup(str, enum.Enum):
    BASIC_INFO = "basicInfo"
    TIMELINES = "timelines"
    CONTRACT_FUNDS = "contractFunds"
    ACCOMPLISHMENT = "accomplishment"
    ONGOING_EXTRAS = "ongoingExtras"
    COMPLETION_EXTRAS = "completionExtras"


class AttachmentKind(str, enum.Enum):
    PHOTO = "photo"
    DOCUMENT = "document"
    CERTIFICATE = "certificate"


class LocationError(str, enum.Enum):
    PERMISSION_DENIED = "PERMISSION_DENIED"
    POSITION_UNAVAILABLE = "POSITION_UNAVAILABLE"
    TIMEOUT = "TIMEOUT"
