"""
Tests for release URL and header construction.
"""

from binfetch.release.locator import LATEST, asset_url, auth_headers, url_prefix


class TestUrlPrefix:
    """Test url_prefix templates."""

    def test_latest(self):
        assert (
            url_prefix("andrioid", "md-social", LATEST)
            == "https://github.com/andrioid/md-social/releases/latest/download/"
        )

    def test_tag(self):
        assert (
            url_prefix("andrioid", "md-social", "v1.2.3")
            == "https://github.com/andrioid/md-social/releases/download/v1.2.3/"
        )

    def test_version_not_altered(self):
        """Test the version is used verbatim, without adding a 'v' prefix."""
        prefix = url_prefix("o", "r", "1.2.3")
        assert prefix.endswith("/releases/download/1.2.3/")

    def test_latest_forms_differ(self):
        assert url_prefix("o", "r", "latest") != url_prefix("o", "r", "v1.2.3")

    def test_custom_host(self):
        prefix = url_prefix("o", "r", "v1", host="git.example.com")
        assert prefix == "https://git.example.com/o/r/releases/download/v1/"


class TestAssetUrl:
    """Test asset name encoding."""

    def test_plain_name(self):
        assert asset_url("https://h/p/", "tool-linux-amd64.gz") == (
            "https://h/p/tool-linux-amd64.gz"
        )

    def test_encodes_like_uri_component(self):
        """Test reserved characters are percent-encoded."""
        assert asset_url("https://h/p/", "a b/c+d#e") == "https://h/p/a%20b%2Fc%2Bd%23e"

    def test_keeps_unreserved_marks(self):
        assert asset_url("https://h/p/", "t_(x)~!*'.zip") == "https://h/p/t_(x)~!*'.zip"


class TestAuthHeaders:
    """Test authorization headers."""

    def test_no_credential(self):
        assert auth_headers(None) == {}
        assert auth_headers("") == {}

    def test_bearer(self):
        assert auth_headers("ghp_secret") == {"Authorization": "Bearer ghp_secret"}
