"""Channel entity."""

from sqlmodel import Field, SQLModel


class Channel(SQLModel, table=True):
    """Slack channel stored in the archive.

    Attributes:
        id: Slack channel ID.
        name: Channel name without the leading '#'. Unique.
        topic: Channel topic at export time.
        purpose: Channel purpose at export time.
    """

    __tablename__ = "channels"

    id: str = Field(primary_key=True)
    name: str = Field(unique=True, index=True)
    topic: str = Field(default="")
    purpose: str = Field(default="")
