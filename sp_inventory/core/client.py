"""SharePoint Online connection and listing services."""

import logging
from abc import ABC, abstractmethod
from typing import Any, Dict, Iterable, List, Optional
from urllib.parse import urlencode

import click
from office365.runtime.auth.client_credential import ClientCredential
from office365.runtime.auth.user_credential import UserCredential
from office365.runtime.client_object import ClientObject
from office365.runtime.queries.service_operation import ServiceOperationQuery
from office365.sharepoint.client_context import ClientContext
from office365.sharepoint.listitems.collection import ListItemCollection
from office365.sharepoint.tenant.administration.sites.properties_collection import (
    SitePropertiesCollection)
from office365.sharepoint.tenant.administration.sites.properties_enumerable_filter import (
    SitePropertiesEnumerableFilter)
from office365.sharepoint.tenant.administration.tenant import Tenant

from .models import SiteRecord

DOCUMENT_LIBRARY = "Documents"
PAGE_SIZE = 1000
PERSONAL_SITE_FILTER = "Url -like '-my.sharepoint.com/personal/'"
PERSONAL_SITE_MARKER = "-my.sharepoint.com/personal/"
NEXT_START_INDEX = "NextStartIndexFromSharePoint"

# PnP Management Shell multi-tenant application
MANAGEMENT_SHELL_CLIENT_ID = "31359c7f-bd7e-475c-86db-fdb8c937548e"

ITEM_SELECT = [
    "UniqueId", "Title", "FileLeafRef", "File_x0020_Type", "File_x0020_Size", "FileRef",
    "Created", "Modified", "_IsCurrentVersion", "IsCheckedoutToLocal",
    "Author/Title", "Author/EMail", "Editor/Title", "Editor/EMail",
    "CheckoutUser/Title", "SharedWithUsers/Title", "File/Length",
]
ITEM_EXPAND = ["Author", "Editor", "CheckoutUser", "SharedWithUsers", "File"]


def item_fields(item: ClientObject) -> Dict[str, Any]:
    """Field values of a listed item.

    Expanded navigation properties such as ``File`` arrive as client objects;
    they are reduced to their own property dictionaries.
    """
    fields = {}
    for name, value in item.properties.items():
        if isinstance(value, ClientObject):
            value = dict(value.properties)
        fields[name] = value
    return fields


class SharePointClient(ABC):
    """The connection and listing calls the inventory depends on."""

    @abstractmethod
    def connect_admin(self, admin_url: str) -> Any:
        """Connect to the tenant admin site, raising on failure."""

    @abstractmethod
    def connect_site(self, site_url: str) -> Any:
        """Connect to one site with the credential used for the admin site."""

    @abstractmethod
    def list_sites(self, admin_connection: Any, filter_expression: str,
                   include_personal: bool = False) -> List[SiteRecord]:
        """List site collections matching a server-side filter."""

    @abstractmethod
    def list_items(self, site_connection: Any, library: str = DOCUMENT_LIBRARY,
                   page_size: int = PAGE_SIZE) -> Iterable[Dict[str, Any]]:
        """List the field values of every item in a library."""

    @abstractmethod
    def register_management_consent(self, tenant_name: str) -> str:
        """Start the one-time admin consent flow and return its URL."""


class Office365Client(SharePointClient):
    """SharePointClient backed by the Office365-REST-Python-Client library."""

    def __init__(self, client_id: Optional[str] = None, client_secret: Optional[str] = None,
                 username: Optional[str] = None, password: Optional[str] = None,
                 open_browser: bool = True):
        """Initialize client.

        Args:
            client_id: Azure AD application id for app-only authentication.
            client_secret: Secret for ``client_id``.
            username: User principal name for user authentication.
            password: Password for ``username``.
            open_browser: Whether the consent flow opens the URL in a browser.
        """
        self.client_id = client_id
        self.open_browser = open_browser
        self.credential = self._build_credential(client_id, client_secret, username, password)
        self.logger = logging.getLogger(__name__)

    @staticmethod
    def _build_credential(client_id, client_secret, username, password):
        if client_id and client_secret:
            return ClientCredential(client_id, client_secret)
        if username and password:
            return UserCredential(username, password)
        return None

    def _context(self, url: str) -> ClientContext:
        if self.credential is None:
            raise ValueError("No credentials configured: provide a client id and secret "
                             "or a username and password")
        return ClientContext(url).with_credentials(self.credential)

    def connect_admin(self, admin_url: str) -> ClientContext:
        ctx = self._context(admin_url)
        # Forces authentication so a bad tenant or credential fails here
        ctx.web.get().execute_query()
        self.logger.debug(f"Connected to {admin_url}")
        return ctx

    def connect_site(self, site_url: str) -> ClientContext:
        return self._context(site_url)

    def list_sites(self, admin_connection: ClientContext, filter_expression: str,
                   include_personal: bool = False) -> List[SiteRecord]:
        sites = self._query_sites(admin_connection, filter_expression, include_personal)
        admin_connection.execute_query()

        records = []
        next_start_index = None
        for site in sites:
            next_start_index = site.properties.get(NEXT_START_INDEX) or next_start_index
            url = site.properties.get("Url")
            if not url:
                continue
            is_personal = PERSONAL_SITE_MARKER in url
            if is_personal and not include_personal:
                continue
            records.append(SiteRecord(url=url, is_personal=is_personal))

        if next_start_index:
            self.logger.warning(f"Filter {filter_expression!r} returned a partial site list; "
                                f"sites from start index {next_start_index} on are not included")
        self.logger.debug(f"Filter {filter_expression!r} matched {len(records)} sites")
        return records

    @staticmethod
    def _query_sites(admin_connection: ClientContext, filter_expression: str,
                     include_personal: bool) -> SitePropertiesCollection:
        """Queue a tenant site query; OneDrive sites are only returned on request."""
        tenant = Tenant(admin_connection)
        spe_filter = SitePropertiesEnumerableFilter(
            Filter=filter_expression or None,
            IncludeDetail=False,
            IncludePersonalSite=1 if include_personal else None,
        )
        sites = SitePropertiesCollection(admin_connection, tenant.sites.resource_path)
        admin_connection.add_query(ServiceOperationQuery(
            tenant, "getSitePropertiesFromSharePointByFilters", None,
            {"speFilter": spe_filter}, None, sites))
        return sites

    def list_items(self, site_connection: ClientContext, library: str = DOCUMENT_LIBRARY,
                   page_size: int = PAGE_SIZE) -> Iterable[Dict[str, Any]]:
        items = self._query_items(site_connection, library, page_size)
        site_connection.execute_query()
        # Iterating a paged collection fetches the following pages
        for item in items:
            yield item_fields(item)

    @staticmethod
    def _query_items(site_connection: ClientContext, library: str,
                     page_size: int) -> ListItemCollection:
        doc_lib = site_connection.web.lists.get_by_title(library)
        return (doc_lib.items.paged(page_size)
                .select(ITEM_SELECT)
                .expand(ITEM_EXPAND)
                .get())

    def register_management_consent(self, tenant_name: str) -> str:
        client_id = self.client_id or MANAGEMENT_SHELL_CLIENT_ID
        authority = f"{tenant_name}.onmicrosoft.com" if tenant_name else "organizations"
        url = (f"https://login.microsoftonline.com/{authority}/adminconsent?"
               + urlencode({"client_id": client_id}))
        if self.open_browser:
            click.launch(url)
        return url
