"""
Profile editor and public page schemas.
"""
from typing import Optional

from pydantic import BaseModel, Field

from portfoliohub.models.profile import (
    Certification,
    Course,
    Education,
    OptionalUrl,
    OrganizationExperience,
    PictureShape,
    PictureSize,
    ProfileItem,
    ProfileRecord,
    Project,
    Skill,
    SocialLink,
    Testimonial,
    TextAlign,
    WorkExperience,
)

BIO_MAX_LENGTH = 300


class ProfileUpdate(ProfileItem):
    """
    Editor save, camelCase keys. Only the fields present in the body are
    written (merge); lists replace the stored list as a whole.
    """
    full_name: Optional[str] = Field(None, min_length=1)
    title: Optional[str] = Field(None, min_length=1)
    bio: Optional[str] = Field(None, min_length=1, max_length=BIO_MAX_LENGTH)
    profile_picture_url: Optional[OptionalUrl] = None
    profile_picture_shape: Optional[PictureShape] = None
    profile_picture_size: Optional[PictureSize] = None
    text_align: Optional[TextAlign] = None
    theme: Optional[str] = Field(None, min_length=1)
    website: Optional[OptionalUrl] = None
    skills: Optional[list[Skill]] = None
    projects: Optional[list[Project]] = None
    work_experiences: Optional[list[WorkExperience]] = None
    organization_experiences: Optional[list[OrganizationExperience]] = None
    educations: Optional[list[Education]] = None
    certifications: Optional[list[Certification]] = None
    courses: Optional[list[Course]] = None
    testimonials: Optional[list[Testimonial]] = None
    social_media: Optional[list[SocialLink]] = None


class ProfileResponse(BaseModel):
    """Profile as returned to its owner or to public visitors."""
    username: Optional[str] = Field(None, description="Public username, when known")
    profile: ProfileRecord


class PublicPortfolioResponse(BaseModel):
    """Public page data for /portfolio/{username}."""
    username: str
    profile: ProfileRecord
