"""Application model."""

from sqlalchemy import Column, ForeignKey, Integer, Numeric, String, Text, UniqueConstraint
from sqlalchemy.orm import relationship

from marketplace.database import Base
from marketplace.models.enums import ApplicationStatus
from marketplace.models.mixins import TimestampMixin


class Application(Base, TimestampMixin):
    """A freelancer's proposal for a project. One per (project, freelancer)."""

    __tablename__ = "applications"
    __table_args__ = (
        UniqueConstraint("project_id", "freelancer_id", name="uq_applications_project_freelancer"),
    )

    id = Column(Integer, primary_key=True, index=True)
    project_id = Column(
        Integer, ForeignKey("projects.id", ondelete="CASCADE"), nullable=False, index=True
    )
    freelancer_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    proposal = Column(Text, nullable=False)
    bid = Column(Numeric(14, 2), nullable=True)
    status = Column(String(50), nullable=False, default=ApplicationStatus.PENDING.value)

    # Relationships
    project = relationship("Project", back_populates="applications")
    freelancer = relationship("User", backref="applications")

    @property
    def project_title(self) -> str | None:
        return self.project.title if self.project else None

    @property
    def project_budget(self):
        return self.project.budget if self.project else None

    @property
    def project_budget_currency(self) -> str | None:
        return self.project.budget_currency if self.project else None

    @property
    def project_status(self) -> str | None:
        return self.project.status if self.project else None

    @property
    def project_employer_id(self) -> int | None:
        return self.project.employer_id if self.project else None

    @property
    def freelancer_name(self) -> str | None:
        return self.freelancer.name if self.freelancer else None

    @property
    def freelancer_email(self) -> str | None:
        return self.freelancer.email if self.freelancer else None

    @property
    def freelancer_image(self) -> str | None:
        return self.freelancer.image if self.freelancer else None
