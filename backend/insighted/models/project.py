"""Project model."""

from datetime import date, datetime
from decimal import Decimal

import sqlalchemy as sa
from sqlalchemy.orm import Mapped, mapped_column

from insighted.db.base import Base
from insighted.models.enums import ProjectStatus


class ProjectRecord(Base):
    __tablename__ = "Project"

    id: Mapped[str] = mapped_column(sa.Text, primary_key=True)
    # Store order: higher position = created later = listed first
    position: Mapped[int] = mapped_column(sa.Integer, nullable=False)

    region: Mapped[str] = mapped_column(sa.Text, default="")
    division: Mapped[str] = mapped_column(sa.Text, default="")
    barangay: Mapped[str] = mapped_column(sa.Text, default="")
    school_id: Mapped[str] = mapped_column("schoolId", sa.Text, default="")
    school_name: Mapped[str] = mapped_column("schoolName", sa.Text, default="")

    project_name: Mapped[str] = mapped_column("projectName", sa.Text, default="")
    project_id: Mapped[str] = mapped_column("projectId", sa.Text, default="")
    contract_id: Mapped[str] = mapped_column("contractId", sa.Text, default="")

    year: Mapped[int] = mapped_column(sa.Integer, default=0)
    batch_of_funds: Mapped[str] = mapped_column("batchOfFunds", sa.Text, default="")
    invitation_to_bid: Mapped[date | None] = mapped_column("invitationToBid", sa.Date)
    pre_submission_conference: Mapped[date | None] = mapped_column("preSubmissionConference", sa.Date)
    bid_opening: Mapped[date | None] = mapped_column("bidOpening", sa.Date)
    resolution_to_award: Mapped[date | None] = mapped_column("resolutionToAward", sa.Date)
    notice_to_proceed: Mapped[date | None] = mapped_column("noticeToProceed", sa.Date)
    target_completion_date: Mapped[date | None] = mapped_column("targetCompletionDate", sa.Date)
    actual_completion_date: Mapped[date | None] = mapped_column("actualCompletionDate", sa.Date)

    project_allocation: Mapped[Decimal] = mapped_column(
        "projectAllocation", sa.Numeric(18, 2), default=Decimal("0")
    )
    contractor_name: Mapped[str] = mapped_column("contractorName", sa.Text, default="")

    status: Mapped[ProjectStatus] = mapped_column(
        sa.Enum(ProjectStatus, name="ProjectStatus", values_callable=lambda e: [m.value for m in e]),
        nullable=False,
    )
    accomplishment_percentage: Mapped[int] = mapped_column("accomplishmentPercentage", sa.Integer, default=0)
    status_as_of_date: Mapped[date | None] = mapped_column("statusAsOfDate", sa.Date)

    photos: Mapped[list] = mapped_column(sa.JSON, default=list)
    documents: Mapped[list] = mapped_column(sa.JSON, default=list)
    certificate_url: Mapped[str | None] = mapped_column("certificateUrl", sa.Text)
    coordinates: Mapped[dict | None] = mapped_column(sa.JSON)

    other_remarks: Mapped[str | None] = mapped_column("otherRemarks", sa.Text)

    created_at: Mapped[datetime] = mapped_column(
        "createdAt", sa.DateTime(timezone=False), server_default=sa.func.now()
    )
    updated_at: Mapped[datetime] = mapped_column(
        "updatedAt", sa.DateTime(timezone=False), default=sa.func.now(), onupdate=sa.func.now()
    )

    __table_args__ = (
        sa.UniqueConstraint("position", name="Project_position_key"),
    )
