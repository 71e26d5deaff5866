# --------------------------------------------------------------
# Hiring API – Data Models (SQLModel)
# - Careers (bilingual job postings)
# - Applications (applicant ↔ optional career, one CV each)
# - Service sections with ordered items and reviews
# - User accounts
# Bilingual fields are stored as <name>_en / <name>_ar columns,
# schemas.py exposes them as {en, ar} values.
# --------------------------------------------------------------

from datetime import datetime, timezone
from enum import Enum
from typing import List, Optional

from sqlalchemy import JSON, Column, UniqueConstraint
from sqlmodel import Field, Relationship, SQLModel


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


class Role(str, Enum):
    ADMIN = "admin"
    HR = "hr"
    USER = "user"


class ApplicationStatus(str, Enum):
    PENDING = "Pending"
    REVIEWED = "Reviewed"
    ACCEPTED = "Accepted"
    REJECTED = "Rejected"


# 💼 Career
class Career(SQLModel, table=True):
    id: Optional[int] = Field(default=None, primary_key=True)

    title_en: str = Field(index=True)
    title_ar: str
    department_en: str = Field(index=True)
    department_ar: str = Field(index=True)
    location_en: str = Field(index=True)
    location_ar: str = Field(index=True)
    employment_type_en: str = Field(index=True)
    employment_type_ar: str = Field(index=True)

    # card + details page
    short_description_en: Optional[str] = None
    short_description_ar: Optional[str] = None
    description_en: Optional[str] = None
    description_ar: Optional[str] = None
    responsibilities_en: List[str] = Field(default_factory=list, sa_column=Column(JSON))
    responsibilities_ar: List[str] = Field(default_factory=list, sa_column=Column(JSON))
    requirements_en: List[str] = Field(default_factory=list, sa_column=Column(JSON))
    requirements_ar: List[str] = Field(default_factory=list, sa_column=Column(JSON))

    is_active: bool = Field(default=True, index=True)
    order: Optional[int] = None
    created_at: datetime = Field(default_factory=utcnow, index=True)
    updated_at: datetime = Field(default_factory=utcnow)

    applications: List["Application"] = Relationship(back_populates="career")


# 📄 Application
class Application(SQLModel, table=True):
    __table_args__ = (UniqueConstraint("email", "career_id", name="uq_application_email_career"),)

    id: Optional[int] = Field(default=None, primary_key=True)
    career_id: Optional[int] = Field(default=None, foreign_key="career.id", index=True, ondelete="SET NULL")

    full_name: str
    email: str = Field(index=True)  # always lowercase
    phone: str

    cv_url: str
    cv_file_id: str = Field(index=True)
    custom_id: str

    status: ApplicationStatus = Field(default=ApplicationStatus.PENDING, index=True)
    created_at: datetime = Field(default_factory=utcnow, index=True)
    updated_at: datetime = Field(default_factory=utcnow)

    career: Optional[Career] = Relationship(back_populates="applications")


# 🧩 Service section (header + items + reviews)
class ServiceSection(SQLModel, table=True):
    id: Optional[int] = Field(default=None, primary_key=True)

    title_en: str = Field(index=True)
    title_ar: str
    sub_title_en: str
    sub_title_ar: str
    description_en: str
    description_ar: str
    image_url: Optional[str] = None
    image_file_id: Optional[str] = None

    custom_id: str
    is_active: bool = Field(default=True, index=True)

    rating_value: float = 0.0
    review_count: int = 0

    # compare-and-set token, bumped on every write through the catalog service
    version: int = Field(default=1)
    created_at: datetime = Field(default_factory=utcnow, index=True)
    updated_at: datetime = Field(default_factory=utcnow)

    items: List["ServiceItem"] = Relationship(
        back_populates="section",
        sa_relationship_kwargs={"cascade": "all, delete-orphan", "order_by": "ServiceItem.order"},
    )
    reviews: List["Review"] = Relationship(
        back_populates="section",
        sa_relationship_kwargs={"cascade": "all, delete-orphan", "order_by": "Review.id"},
    )


class ServiceItem(SQLModel, table=True):
    __table_args__ = (UniqueConstraint("section_id", "order", name="uq_item_section_order"),)

    id: Optional[int] = Field(default=None, primary_key=True)
    section_id: int = Field(foreign_key="servicesection.id", index=True, ondelete="CASCADE")

    title_en: str
    title_ar: str
    category_en: str
    category_ar: str
    description_en: str
    description_ar: str
    order: int

    image_url: Optional[str] = None
    image_file_id: Optional[str] = None
    custom_id: Optional[str] = None

    section: Optional[ServiceSection] = Relationship(back_populates="items")


class Review(SQLModel, table=True):
    id: Optional[int] = Field(default=None, primary_key=True)
    section_id: int = Field(foreign_key="servicesection.id", index=True, ondelete="CASCADE")

    author_name: str
    rating: float
    body: str
    # [{"url": ..., "file_id": ...}]
    screenshots: List[dict] = Field(default_factory=list, sa_column=Column(JSON))
    created_at: datetime = Field(default_factory=utcnow)

    section: Optional[ServiceSection] = Relationship(back_populates="reviews")


# 👤 User
class User(SQLModel, table=True):
    id: Optional[int] = Field(default=None, primary_key=True)
    user_name: str
    email: str = Field(index=True, unique=True)
    hashed_password: str
    role: Role = Field(default=Role.USER, index=True)
    is_active: bool = Field(default=True, index=True)

    image_url: Optional[str] = None
    image_file_id: Optional[str] = None
    custom_id: str

    token: Optional[str] = None
    forget_code: Optional[str] = None

    created_at: datetime = Field(default_factory=utcnow)
    updated_at: datetime = Field(default_factory=utcnow)
