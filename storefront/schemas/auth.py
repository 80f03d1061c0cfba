"""
Auth schemas for signed-in users and sign-up profiles
"""

from pydantic import BaseModel, ConfigDict, Field
from typing import Optional


class SessionUser(BaseModel):
    """User returned by the auth provider for the current session"""
    uid: str
    email: str
    display_name: Optional[str] = None
    email_verified: bool = False
    id_token: Optional[str] = Field(None, repr=False)
    refresh_token: Optional[str] = Field(None, repr=False)

    def storage_mirror(self) -> dict:
        """Fields cached in local storage; tokens stay out of it"""
        return {
            "uid": self.uid,
            "email": self.email,
            "displayName": self.display_name,
            "emailVerified": self.email_verified,
        }


class SignUpProfile(BaseModel):
    """Profile fields collected on the sign-up form"""
    model_config = ConfigDict(extra="allow")

    fullName: Optional[str] = None
    phone: Optional[str] = None
