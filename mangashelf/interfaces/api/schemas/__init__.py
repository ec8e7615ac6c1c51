from .activity import ActivityCreate, ActivityEntryRead
from .auth import AuthStateRead, IdentityRead, Token
from .blog import BlogPageRead, BlogPostRead, PostFormRead, PostWrite
from .settings import WebhookSettingsRead, WebhookSettingsWrite
from .users import UserRoleRead

__all__ = [
    "ActivityCreate",
    "ActivityEntryRead",
    "AuthStateRead",
    "BlogPageRead",
    "BlogPostRead",
    "IdentityRead",
    "PostFormRead",
    "PostWrite",
    "Token",
    "UserRoleRead",
    "WebhookSettingsRead",
    "WebhookSettingsWrite",
]
