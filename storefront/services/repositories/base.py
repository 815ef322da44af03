"""Base repository with shared records client."""

from storefront.services.records import RecordsClient


class BaseRepository:
    """Base class for all repositories."""

    def __init__(self, client: RecordsClient) -> None:
        self.client = client
