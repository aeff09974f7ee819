"""ChannelCatalog protocol."""

from typing import Protocol

from slackvault.domain.entities.channel import Channel


class ChannelCatalog(Protocol):
    """Read access to archived channels."""

    async def list_all(self, *, timeout: float | None = None) -> list[Channel]:
        """List all channels sorted by name ascending.

        Raises:
            StoreUnavailableError: If the store cannot be reached.
        """
        ...

    async def get_by_name(
        self, name: str, *, timeout: float | None = None
    ) -> Channel:
        """Get a channel by name.

        Raises:
            NotFoundError: If no channel has that name.
            StoreUnavailableError: If the store cannot be reached.
        """
        ...

    async def get_channel_info(
        self, name: str, *, timeout: float | None = None
    ) -> Channel:
        """Get a channel by name for callers that hold no channel listing.

        Same contract as get_by_name().
        """
        ...
