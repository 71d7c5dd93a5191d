"""Pydantic schemas for the project registry."""

from datetime import date, datetime
from decimal import Decimal, InvalidOperation

from pydantic import BaseModel, ConfigDict, Field, field_serializer, field_validator

from insighted.models.enums import AttachmentKind, LocationError, ProjectStatus


def _coerce_number(value, *, integral: bool):
    """Malformed numeric entry becomes zero instead of a validation error."""
    if value is None or isinstance(value, bool):
        return 0
    try:
        number = Decimal(str(value).strip().replace(",", ""))
    except InvalidOperation:
        return 0
    if not number.is_finite():
        return 0
    return int(number) if integral else number


def _blank_to_none(value):
    if isinstance(value, str) and not value.strip():
        return None
    return value


class Coordinates(BaseModel):
    latitude: float = Field(ge=-90, le=90)
    longitude: float = Field(ge=-180, le=180)
    accuracy: float | None = Field(default=None, ge=0)
    captured_at: datetime | None = Field(default=None, alias="capturedAt")

    model_config = ConfigDict(populate_by_name=True)


class Project(BaseModel):
    """One construction project record.

    An empty ``id`` means the record has not been persisted yet.
    """

    id: str = ""

    # Location
    region: str = ""
    division: str = ""
    barangay: str = ""
    school_id: str = Field(default="", alias="schoolId")
    school_name: str = Field(default="", alias="schoolName")

    # Naming
    project_name: str = Field(default="", alias="projectName")
    project_id: str = Field(default="", alias="projectId")
    contract_id: str = Field(default="", alias="contractId")

    # Schedule
    year: int = 0
    batch_of_funds: str = Field(default="", alias="batchOfFunds")
    invitation_to_bid: date | None = Field(default=None, alias="invitationToBid")
    pre_submission_conference: date | None = Field(default=None, alias="preSubmissionConference")
    bid_opening: date | None = Field(default=None, alias="bidOpening")
    resolution_to_award: date | None = Field(default=None, alias="resolutionToAward")
    notice_to_proceed: date | None = Field(default=None, alias="noticeToProceed")
    target_completion_date: date | None = Field(default=None, alias="targetCompletionDate")
    actual_completion_date: date | None = Field(default=None, alias="actualCompletionDate")

    # Funding
    project_allocation: Decimal = Field(default=Decimal("0"), alias="projectAllocation")
    contractor_name: str = Field(default="", alias="contractorName")

    # Progress
    status: ProjectStatus = ProjectStatus.NOT_YET_STARTED
    accomplishment_percentage: int = Field(default=0, alias="accomplishmentPercentage")
    status_as_of_date: date | None = Field(default=None, alias="statusAsOfDate")

    # Evidence (file names only)
    photos: list[str] = Field(default_factory=list)
    documents: list[str] = Field(default_factory=list)
    certificate_url: str | None = Field(default=None, alias="certificateUrl")
    coordinates: Coordinates | None = None

    other_remarks: str | None = Field(default=None, alias="otherRemarks")

    model_config = ConfigDict(populate_by_name=True)

    @field_validator("year", mode="before")
    @classmethod
    def _coerce_year(cls, value):
        return max(_coerce_number(value, integral=True), 0)

    @field_validator("accomplishment_percentage", mode="before")
    @classmethod
    def _coerce_accomplishment(cls, value):
        return min(max(_coerce_number(value, integral=True), 0), 100)

    @field_validator("project_allocation", mode="before")
    @classmethod
    def _coerce_allocation(cls, value):
        number = Decimal(str(_coerce_number(value, integral=False)))
        return number if number > 0 else Decimal("0")

    @field_validator(
        "invitation_to_bid",
        "pre_submission_conference",
        "bid_opening",
        "resolution_to_award",
        "notice_to_proceed",
        "target_completion_date",
        "actual_completion_date",
        "status_as_of_date",
        "certificate_url",
        "other_remarks",
        mode="before",
    )
    @classmethod
    def _blank_optional(cls, value):
        return _blank_to_none(value)

    @field_serializer("project_allocation", when_used="json")
    def _allocation_as_number(self, value: Decimal) -> float:
        return float(value)

    @property
    def is_persisted(self) -> bool:
        return bool(self.id)

    def to_api(self) -> dict:
        """Serialize to the camelCase response dict."""
        return self.model_dump(mode="json", by_alias=True)


class LocationFix(BaseModel):
    """A geolocation reading reported by the host, or the reason it failed."""

    latitude: float | None = Field(default=None, ge=-90, le=90)
    longitude: float | None = Field(default=None, ge=-180, le=180)
    accuracy: float | None = Field(default=None, ge=0)
    timestamp: datetime | None = None
    error: LocationError | None = None

    model_config = ConfigDict(populate_by_name=True)


class AttachmentRequest(BaseModel):
    kind: AttachmentKind
    file_name: str = Field(min_length=1, max_length=255, alias="fileName")

    model_config = ConfigDict(populate_by_name=True)


class RegionalReportRequest(BaseModel):
    region: str = Field(min_length=1, max_length=255)
