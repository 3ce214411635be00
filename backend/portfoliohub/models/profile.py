"""
Portfolio (profile) record model for the portfolio database.

Item models carry the same constraints as the profile editor form, so a
record that round-trips through the API is always one the editor accepts.
"""
from enum import Enum
from typing import Annotated, Optional

from pydantic import AfterValidator, BaseModel, BeforeValidator, Field, HttpUrl, TypeAdapter
from pydantic.alias_generators import to_camel

_http_url = TypeAdapter(HttpUrl)


def optional_url(value: Optional[str]) -> str:
    """Accept an http(s) URL or an empty string; keep the caller's spelling."""
    if value is None or value == "":
        return ""
    _http_url.validate_python(value)
    return value


def required_url(value: str) -> str:
    _http_url.validate_python(value)
    return value


OptionalUrl = Annotated[str, BeforeValidator(optional_url)]
RequiredUrl = Annotated[str, AfterValidator(required_url)]


class PictureShape(str, Enum):
    ROUNDED_FULL = "rounded-full"
    ROUNDED_LG = "rounded-lg"
    ROUNDED_NONE = "rounded-none"


class PictureSize(str, Enum):
    SMALL = "small"
    MEDIUM = "medium"
    LARGE = "large"


class TextAlign(str, Enum):
    LEFT = "text-left"
    CENTER = "text-center"
    RIGHT = "text-right"


class SocialPlatform(str, Enum):
    LINKEDIN = "linkedin"
    GITHUB = "github"
    TWITTER = "twitter"
    INSTAGRAM = "instagram"
    FACEBOOK = "facebook"
    WHATSAPP = "whatsapp"


class ProfileItem(BaseModel):
    """camelCase on the wire, snake_case in Python and in MongoDB."""

    class Config:
        alias_generator = to_camel
        populate_by_name = True


class Skill(ProfileItem):
    name: str = Field(..., min_length=1, description="Skill name")


class Project(ProfileItem):
    title: str = Field(..., min_length=1)
    description: str = Field(..., min_length=1)
    image_url: OptionalUrl = ""
    link: OptionalUrl = ""


class WorkExperience(ProfileItem):
    company: str = Field(..., min_length=1)
    role: str = Field(..., min_length=1)
    start_date: str = Field(..., min_length=1)
    end_date: Optional[str] = None
    description: Optional[str] = None


class OrganizationExperience(ProfileItem):
    organization: str = Field(..., min_length=1)
    role: str = Field(..., min_length=1)
    start_date: str = Field(..., min_length=1)
    end_date: Optional[str] = None
    description: Optional[str] = None


class Education(ProfileItem):
    institution: str = Field(..., min_length=1)
    degree: str = Field(..., min_length=1)
    field_of_study: Optional[str] = None
    start_date: str = Field(..., min_length=1)
    end_date: Optional[str] = None


class Certification(ProfileItem):
    name: str = Field(..., min_length=1)
    issuing_organization: str = Field(..., min_length=1)
    issue_date: Optional[str] = None
    credential_id: Optional[str] = None


class Course(ProfileItem):
    name: str = Field(..., min_length=1)
    platform: Optional[str] = None
    completion_date: Optional[str] = None


class Testimonial(ProfileItem):
    name: str = Field(..., min_length=1)
    feedback: str = Field(..., min_length=1)
    company: Optional[str] = None


class SocialLink(ProfileItem):
    platform: SocialPlatform
    url: RequiredUrl

    class Config:
        use_enum_values = True


class ProfileRecord(ProfileItem):
    """
    Portfolio document model for MongoDB portfolio_db.portfolios collection.
    Keyed by the owning account identifier, which never leaves the server.
    """
    account_id: str = Field(..., alias="_id", exclude=True, description="Owning account identifier")
    full_name: str = ""
    title: str = ""
    bio: str = ""
    profile_picture_url: OptionalUrl = ""
    profile_picture_shape: PictureShape = PictureShape.ROUNDED_FULL
    profile_picture_size: PictureSize = PictureSize.MEDIUM
    text_align: TextAlign = TextAlign.LEFT
    theme: str = "default"
    website: OptionalUrl = ""
    skills: list[Skill] = Field(default_factory=list)
    projects: list[Project] = Field(default_factory=list)
    work_experiences: list[WorkExperience] = Field(default_factory=list)
    organization_experiences: list[OrganizationExperience] = Field(default_factory=list)
    educations: list[Education] = Field(default_factory=list)
    certifications: list[Certification] = Field(default_factory=list)
    courses: list[Course] = Field(default_factory=list)
    testimonials: list[Testimonial] = Field(default_factory=list)
    social_media: list[SocialLink] = Field(default_factory=list)

    class Config:
        populate_by_name = True
        use_enum_values = True
