"""User entity."""

from sqlmodel import Field, SQLModel


class User(SQLModel, table=True):
    """Slack user stored in the archive.

    Attributes:
        id: Slack user ID.
        name: Account name.
        real_name: Full name from the profile.
        display_name: Display name from the profile (may be empty).
        image_url: Avatar URL.
        email: Email address from the profile.
        deleted: Whether the account was deactivated.
        is_bot: Whether the account is a bot.
    """

    __tablename__ = "users"

    id: str = Field(primary_key=True)
    name: str
    real_name: str = Field(default="")
    display_name: str = Field(default="")
    image_url: str = Field(default="")
    email: str = Field(default="")
    deleted: bool = Field(default=False)
    is_bot: bool = Field(default=False)

    @property
    def shown_name(self) -> str:
        """Name to show next to a message."""
        return self.display_name or self.real_name or self.name
