"""Root of the SharePoint REST API object model."""

from __future__ import annotations

from typing import Any, Optional

from .profiles import Profiles
from .search import Search
from .site import Site
from .utility import Utility
from .utils import RequestConfig


class SP:
    """Entry point to a site's REST API."""

    def __init__(self, client: Any, site_url: str, config: Optional[RequestConfig] = None) -> None:
        self.client = client
        self.site_url = site_url
        self.config = config

    def conf(self, config: Optional[RequestConfig]) -> "SP":
        self.config = config
        return self

    def to_url(self) -> str:
        """The site URL."""
        return self.site_url

    def site(self) -> Site:
        """Site collection API object."""
        return Site(self.client, f"{self.to_url()}/_api/Site", self.config)

    def search(self) -> Search:
        """Search API object."""
        return Search(self.client, f"{self.to_url()}/_api/Search", self.config)

    def profiles(self) -> Profiles:
        """User profiles API object."""
        return Profiles(
            self.client, f"{self.to_url()}/_api/sp.userprofiles.peoplemanager", self.config
        )

    def utility(self) -> Utility:
        """Utilities API object."""
        return Utility(self.client, self.to_url(), self.config)

    def metadata(self) -> bytes:
        """The service's ``$metadata`` document."""
        return self.client.get(f"{self.to_url()}/_api/$metadata", self.config)