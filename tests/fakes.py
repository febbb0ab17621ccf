"""In-memory stand-ins for the SharePoint services."""

from sp_inventory.core.client import SharePointClient


def make_item(leaf_name="Report.docx", **fields):
    """Field values shaped like a document library item."""
    item = {
        "UniqueId": "7b3c1f0e-0000-4000-8000-000000000001",
        "Title": None,
        "FileLeafRef": leaf_name,
        "File_x0020_Type": leaf_name.rsplit(".", 1)[-1] if "." in leaf_name else None,
        "File_x0020_Size": "2048",
        "Created": "2024-01-05T10:00:00Z",
        "Modified": "2024-02-01T08:30:00Z",
        "Author": {"Title": "Ana Lopez", "EMail": "ana@contoso.com"},
        "Editor": {"Title": "Sam Reed", "EMail": "sam@contoso.com"},
        "_IsCurrentVersion": True,
        "IsCheckedoutToLocal": False,
        "FileRef": f"/sites/team/Shared Documents/{leaf_name}",
    }
    item.update(fields)
    return item


class FakeClient(SharePointClient):
    """Records every call and serves canned sites and items."""

    def __init__(self, sites=None, personal_sites=None, items=None, admin_error=None,
                 site_error=None, personal_error=None, failing_sites=()):
        self.sites = sites or []
        self.personal_sites = personal_sites or []
        self.items = items or {}
        self.admin_error = admin_error
        self.site_error = site_error
        self.personal_error = personal_error
        self.failing_sites = set(failing_sites)
        self.calls = []

    def calls_named(self, name):
        return [call for call in self.calls if call[0] == name]

    def connect_admin(self, admin_url):
        self.calls.append(("connect_admin", admin_url))
        if self.admin_error:
            raise self.admin_error
        return "admin"

    def connect_site(self, site_url):
        self.calls.append(("connect_site", site_url))
        return site_url

    def list_sites(self, admin_connection, filter_expression, include_personal=False):
        self.calls.append(("list_sites", filter_expression, include_personal))
        if include_personal:
            if self.personal_error:
                raise self.personal_error
            return list(self.personal_sites)
        if self.site_error:
            raise self.site_error
        return list(self.sites)

    def list_items(self, site_connection, library="Documents", page_size=1000):
        self.calls.append(("list_items", site_connection, library, page_size))
        if site_connection in self.failing_sites:
            raise RuntimeError("(403) Access denied")
        return list(self.items.get(site_connection, []))

    def register_management_consent(self, tenant_name):
        self.calls.append(("consent", tenant_name))
        return f"https://login.microsoftonline.com/{tenant_name}.onmicrosoft.com/adminconsent"
