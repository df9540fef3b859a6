"""Project and ProjectSkill models."""

from sqlalchemy import JSON, Column, ForeignKey, Integer, Numeric, String, Text, UniqueConstraint
from sqlalchemy.orm import relationship

from marketplace.database import Base
from marketplace.models.enums import Currency, ProjectStatus
from marketplace.models.mixins import TimestampMixin


class Project(Base, TimestampMixin):
    """Project posted by an employer."""

    __tablename__ = "projects"

    id = Column(Integer, primary_key=True, index=True)
    title = Column(String(255), nullable=False)
    description = Column(Text, nullable=True)
    category = Column(String(255), nullable=True, index=True)  # category name, not an FK
    budget = Column(Numeric(14, 2), nullable=True)
    budget_currency = Column(String(3), nullable=False, default=Currency.COP.value)
    employer_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    status = Column(String(50), nullable=False, default=ProjectStatus.OPEN.value, index=True)
    # Shown as "Otro (<name>)" while the linked category suggestion is pending
    suggested_category_name = Column(String(255), nullable=True)
    suggested_skills = Column(JSON, nullable=True)

    # Relationships
    employer = relationship("User", backref="projects")
    skill_entries = relationship(
        "ProjectSkill",
        back_populates="project",
        cascade="all, delete-orphan",
        order_by="ProjectSkill.position",
    )
    applications = relationship(
        "Application", back_populates="project", cascade="all, delete-orphan"
    )

    @property
    def skills_required(self) -> list[str]:
        """Required skills in the order they were given."""
        return [entry.name for entry in self.skill_entries]

    @skills_required.setter
    def skills_required(self, names: list[str]) -> None:
        # Reuse rows for names that survive so the (project_id, name) unique
        # constraint never sees an insert before the matching delete.
        existing = {entry.name: entry for entry in self.skill_entries}
        entries = []
        for position, name in enumerate(dict.fromkeys(names)):
            entry = existing.get(name) or ProjectSkill(name=name)
            entry.position = position
            entries.append(entry)
        self.skill_entries = entries

    @property
    def employer_name(self) -> str | None:
        return self.employer.name if self.employer else None

    @property
    def employer_email(self) -> str | None:
        return self.employer.email if self.employer else None

    @property
    def employer_image(self) -> str | None:
        return self.employer.image if self.employer else None


class ProjectSkill(Base):
    """A skill required by a project. Unique per project."""

    __tablename__ = "project_skills"
    __table_args__ = (
        UniqueConstraint("project_id", "name", name="uq_project_skills_project_name"),
    )

    id = Column(Integer, primary_key=True, index=True)
    project_id = Column(
        Integer, ForeignKey("projects.id", ondelete="CASCADE"), nullable=False, index=True
    )
    name = Column(String(255), nullable=False, index=True)
    position = Column(Integer, nullable=False, default=0)

    # Relationships
    project = relationship("Project", back_populates="skill_entries")
