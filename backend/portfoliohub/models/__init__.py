"""
Pydantic models for database documents and data structures.
"""
from portfoliohub.models.principal import Principal, IdentityProviderKind
from portfoliohub.models.account import Account, UsernameRegistryEntry
from portfoliohub.models.profile import (
    ProfileRecord,
    Skill,
    Project,
    WorkExperience,
    OrganizationExperience,
    Education,
    Certification,
    Course,
    Testimonial,
    SocialLink,
    SocialPlatform,
    PictureShape,
    PictureSize,
    TextAlign,
)

__all__ = [
    "Principal",
    "IdentityProviderKind",
    "Account",
    "UsernameRegistryEntry",
    "ProfileRecord",
    "Skill",
    "Project",
    "WorkExperience",
    "OrganizationExperience",
    "Education",
    "Certification",
    "Course",
    "Testimonial",
    "SocialLink",
    "SocialPlatform",
    "PictureShape",
    "PictureSize",
    "TextAlign",
]
