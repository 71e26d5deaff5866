# 🔹 FILE: hiring_api/schemas.py
# -----------------------
# 🧩 Imports
from datetime import datetime
from typing import Any, Dict, List, Literal, Optional, Union

from pydantic import BaseModel, EmailStr, Field, TypeAdapter, field_validator

from .models import (
    Application,
    ApplicationStatus,
    Career,
    Review,
    Role,
    ServiceItem,
    ServiceSection,
    User,
)
from .utils.normalize import (
    EMPLOYMENT_TYPES_AR,
    EMPLOYMENT_TYPES_EN,
    norm_employment_type_en,
    split_lines,
)

Lang = Literal["en", "ar"]


# 🌐 Bilingual values
class BilingualText(BaseModel):
    """Both languages are required together."""
    en: str = Field(min_length=1)
    ar: str = Field(min_length=1)


class BilingualList(BaseModel):
    en: List[str] = Field(default_factory=list)
    ar: List[str] = Field(default_factory=list)

    @field_validator("en", "ar", mode="before")
    @classmethod
    def _lines(cls, v: Union[str, List[str], None]):
        # textarea input arrives as one newline separated string
        return split_lines(v) if v is not None else []


class EmploymentType(BilingualText):
    @field_validator("en")
    @classmethod
    def _known_en(cls, v: str) -> str:
        v = norm_employment_type_en(v)
        if v not in EMPLOYMENT_TYPES_EN:
            raise ValueError(f"must be one of {', '.join(EMPLOYMENT_TYPES_EN)}")
        return v

    @field_validator("ar")
    @classmethod
    def _known_ar(cls, v: str) -> str:
        v = v.strip()
        if v not in EMPLOYMENT_TYPES_AR:
            raise ValueError(f"must be one of {', '.join(EMPLOYMENT_TYPES_AR)}")
        return v


def bilingual(obj: Any, name: str) -> Optional[BilingualText]:
    en, ar = getattr(obj, f"{name}_en"), getattr(obj, f"{name}_ar")
    if en is None and ar is None:
        return None
    return BilingualText.model_construct(en=en, ar=ar)


def bilingual_from_form(en: Optional[str], ar: Optional[str]) -> Optional[BilingualText]:
    """Multipart forms send <field>_en / <field>_ar; either both or neither."""
    if en is None and ar is None:
        return None
    return BilingualText(en=en, ar=ar)


class AttachmentOut(BaseModel):
    url: str
    file_id: Optional[str] = None

    @classmethod
    def maybe(cls, url: Optional[str], file_id: Optional[str]) -> Optional["AttachmentOut"]:
        return cls(url=url, file_id=file_id) if url else None


class BulkDeleteIn(BaseModel):
    # shape is checked by the services so "not a list" gets the same message as []
    ids: Any = None


# 🧾 Auth / users
class RegisterIn(BaseModel):
    user_name: str = Field(min_length=1)
    email: EmailStr
    password: str = Field(min_length=6)


class LoginIn(BaseModel):
    email: EmailStr
    password: str


class ForgotPasswordIn(BaseModel):
    email: EmailStr


class NewPasswordIn(BaseModel):
    new_password: str = Field(min_length=6)


class UserOut(BaseModel):
    id: int
    user_name: str
    email: EmailStr
    role: Role
    is_active: bool
    image: Optional[AttachmentOut] = None
    created_at: Optional[datetime] = None

    @classmethod
    def from_model(cls, user: User) -> "UserOut":
        return cls(
            id=user.id,
            user_name=user.user_name,
            email=user.email,
            role=user.role,
            is_active=user.is_active,
            image=AttachmentOut.maybe(user.image_url, user.image_file_id),
            created_at=user.created_at,
        )


# 💼 Careers
class CareerCreate(BaseModel):
    title: BilingualText
    department: BilingualText
    location: BilingualText
    employment_type: EmploymentType
    short_description: Optional[BilingualText] = None
    description: Optional[BilingualText] = None
    responsibilities: Optional[BilingualList] = None
    requirements: Optional[BilingualList] = None
    is_active: bool = True
    order: Optional[int] = None


class CareerUpdate(BaseModel):
    title: Optional[BilingualText] = None
    department: Optional[BilingualText] = None
    location: Optional[BilingualText] = None
    employment_type: Optional[EmploymentType] = None
    short_description: Optional[BilingualText] = None
    description: Optional[BilingualText] = None
    responsibilities: Optional[BilingualList] = None
    requirements: Optional[BilingualList] = None
    is_active: Optional[bool] = None
    order: Optional[int] = None


class CareerSummary(BaseModel):
    id: int
    title: BilingualText

    @classmethod
    def from_model(cls, career: Career) -> "CareerSummary":
        return cls(id=career.id, title=bilingual(career, "title"))


class CareerOut(BaseModel):
    id: int
    title: BilingualText
    department: BilingualText
    location: BilingualText
    employment_type: BilingualText
    short_description: Optional[BilingualText] = None
    description: Optional[BilingualText] = None
    responsibilities: BilingualList
    requirements: BilingualList
    is_active: bool
    order: Optional[int] = None
    created_at: datetime
    updated_at: datetime

    @classmethod
    def from_model(cls, career: Career) -> "CareerOut":
        return cls(
            id=career.id,
            title=bilingual(career, "title"),
            department=bilingual(career, "department"),
            location=bilingual(career, "location"),
            employment_type=bilingual(career, "employment_type"),
            short_description=bilingual(career, "short_description"),
            description=bilingual(career, "description"),
            responsibilities=BilingualList(en=career.responsibilities_en or [], ar=career.responsibilities_ar or []),
            requirements=BilingualList(en=career.requirements_en or [], ar=career.requirements_ar or []),
            is_active=career.is_active,
            order=career.order,
            created_at=career.created_at,
            updated_at=career.updated_at,
        )

    def localized(self, lang: Lang) -> Dict[str, Any]:
        def pick(v):
            return getattr(v, lang) if v is not None else None

        return {
            "id": self.id,
            "title": pick(self.title),
            "department": pick(self.department),
            "location": pick(self.location),
            "employment_type": pick(self.employment_type),
            "short_description": pick(self.short_description),
            "description": pick(self.description),
            "responsibilities": pick(self.responsibilities),
            "requirements": pick(self.requirements),
        }


# 📨 Applications
class StatusUpdateIn(BaseModel):
    status: ApplicationStatus


class ApplicationOut(BaseModel):
    id: int
    career_id: Optional[int] = None
    career: Optional[CareerSummary] = None
    full_name: str
    email: str
    phone: str
    cv: AttachmentOut
    custom_id: str
    status: ApplicationStatus
    created_at: datetime
    updated_at: datetime

    @classmethod
    def from_model(cls, app: Application, with_career: bool = True) -> "ApplicationOut":
        return cls(
            id=app.id,
            career_id=app.career_id,
            career=CareerSummary.from_model(app.career) if with_career and app.career else None,
            full_name=app.full_name,
            email=app.email,
            phone=app.phone,
            cv=AttachmentOut(url=app.cv_url, file_id=app.cv_file_id),
            custom_id=app.custom_id,
            status=app.status,
            created_at=app.created_at,
            updated_at=app.updated_at,
        )


class ApplicationDetailOut(ApplicationOut):
    career: Optional[CareerOut] = None

    @classmethod
    def from_model(cls, app: Application, with_career: bool = True) -> "ApplicationDetailOut":
        base = ApplicationOut.from_model(app, with_career=False).model_dump()
        base["career"] = CareerOut.from_model(app.career) if app.career else None
        return cls(**base)


# 🧩 Service catalog
class SectionHeaderIn(BaseModel):
    title: BilingualText
    sub_title: BilingualText
    description: BilingualText


class SectionHeaderPatch(BaseModel):
    title: Optional[BilingualText] = None
    sub_title: Optional[BilingualText] = None
    description: Optional[BilingualText] = None


class ServiceItemIn(BaseModel):
    title: BilingualText
    category: BilingualText
    description: BilingualText
    order: int


# `services` form field of a section create: a JSON array of items
ServiceItemList = TypeAdapter(List[ServiceItemIn])


class ServiceItemPatch(BaseModel):
    title: Optional[BilingualText] = None
    category: Optional[BilingualText] = None
    description: Optional[BilingualText] = None
    order: Optional[int] = None


class ReviewIn(BaseModel):
    author_name: str = Field(min_length=1)
    rating: float = Field(ge=0, le=5)
    body: str = ""


class ServiceItemOut(BaseModel):
    id: int
    title: BilingualText
    category: BilingualText
    description: BilingualText
    order: int
    image: Optional[AttachmentOut] = None
    custom_id: Optional[str] = None

    @classmethod
    def from_model(cls, item: ServiceItem) -> "ServiceItemOut":
        return cls(
            id=item.id,
            title=bilingual(item, "title"),
            category=bilingual(item, "category"),
            description=bilingual(item, "description"),
            order=item.order,
            image=AttachmentOut.maybe(item.image_url, item.image_file_id),
            custom_id=item.custom_id,
        )


class ReviewOut(BaseModel):
    id: int
    author_name: str
    rating: float
    body: str
    screenshots: List[AttachmentOut] = Field(default_factory=list)
    created_at: datetime

    @classmethod
    def from_model(cls, review: Review) -> "ReviewOut":
        return cls(
            id=review.id,
            author_name=review.author_name,
            rating=review.rating,
            body=review.body,
            screenshots=[AttachmentOut(**s) for s in review.screenshots or []],
            created_at=review.created_at,
        )


class AggregateRating(BaseModel):
    rating_value: float
    review_count: int


class SectionOut(BaseModel):
    id: int
    title: BilingualText
    sub_title: BilingualText
    description: BilingualText
    image: Optional[AttachmentOut] = None
    custom_id: str
    is_active: bool
    aggregate_rating: AggregateRating
    items: List[ServiceItemOut]
    reviews: List[ReviewOut]
    created_at: datetime
    updated_at: datetime

    @classmethod
    def from_model(cls, section: ServiceSection) -> "SectionOut":
        return cls(
            id=section.id,
            title=bilingual(section, "title"),
            sub_title=bilingual(section, "sub_title"),
            description=bilingual(section, "description"),
            image=AttachmentOut.maybe(section.image_url, section.image_file_id),
            custom_id=section.custom_id,
            is_active=section.is_active,
            aggregate_rating=AggregateRating(
                rating_value=section.rating_value,
                review_count=section.review_count,
            ),
            items=[ServiceItemOut.from_model(i) for i in section.items],
            reviews=[ReviewOut.from_model(r) for r in section.reviews],
            created_at=section.created_at,
            updated_at=section.updated_at,
        )

    def localized(self, lang: Lang) -> Dict[str, Any]:
        return {
            "id": self.id,
            "header": {
                "title": getattr(self.title, lang),
                "sub_title": getattr(self.sub_title, lang),
                "description": getattr(self.description, lang),
                "image": self.image.model_dump() if self.image else None,
            },
            "services": [
                {
                    "id": i.id,
                    "title": getattr(i.title, lang),
                    "category": getattr(i.category, lang),
                    "description": getattr(i.description, lang),
                    "order": i.order,
                    "image": i.image.model_dump() if i.image else None,
                }
                for i in self.items
            ],
            "is_active": self.is_active,
            "created_at": self.created_at.isoformat(),
            "updated_at": self.updated_at.isoformat(),
        }


class StatsOut(BaseModel):
    applications: int
    services: int
    careers: int
