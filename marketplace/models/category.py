"""Category and CategorySkill models."""

from sqlalchemy import JSON, Column, ForeignKey, Integer, String, UniqueConstraint
from sqlalchemy.orm import relationship

from marketplace.database import Base
from marketplace.models.enums import CategoryStatus
from marketplace.models.mixins import TimestampMixin


class Category(Base, TimestampMixin):
    """Project category, either seeded (approved) or suggested by a user (pending)."""

    __tablename__ = "categories"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String(255), nullable=False)
    slug = Column(String(255), unique=True, nullable=False, index=True)
    status = Column(String(50), nullable=False, default=CategoryStatus.APPROVED.value, index=True)
    suggested_by = Column(Integer, ForeignKey("users.id"), nullable=True, index=True)
    # The project that prompted the suggestion
    related_project_id = Column(
        Integer, ForeignKey("projects.id", ondelete="SET NULL"), nullable=True
    )
    suggested_skills = Column(JSON, nullable=True)  # raw list from the suggester

    # Relationships
    suggester = relationship("User", backref="suggested_categories")
    related_project = relationship("Project")
    skills = relationship(
        "CategorySkill",
        back_populates="category",
        cascade="all, delete-orphan",
        order_by="CategorySkill.id",
    )

    @property
    def is_pending(self) -> bool:
        """Check if the category still awaits admin review."""
        return self.status == CategoryStatus.PENDING.value


class CategorySkill(Base):
    """Canonical skill attached to a category. Unique per category."""

    __tablename__ = "category_skills"
    __table_args__ = (
        UniqueConstraint("category_id", "name", name="uq_category_skills_category_name"),
    )

    id = Column(Integer, primary_key=True, index=True)
    category_id = Column(
        Integer, ForeignKey("categories.id", ondelete="CASCADE"), nullable=False, index=True
    )
    name = Column(String(255), nullable=False)

    # Relationships
    category = relationship("Category", back_populates="skills")
