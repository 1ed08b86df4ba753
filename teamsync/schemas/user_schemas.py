from pydantic import Field

from teamsync.schemas.common import CamelModel


class PasswordChange(CamelModel):
    """
    Schema for changing a password.

    current_password is required when users change their own password
    and ignored on an admin reset.
    """

    current_password: str | None = None
    new_password: str = Field(..., min_length=8, max_length=128)
