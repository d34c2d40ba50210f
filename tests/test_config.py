from __future__ import annotations

import os
from unittest.mock import patch

import pytest

from member_portal import config as cfg
from member_portal.errors import ConfigError
from member_portal.models import PageLink


class TestParseLinks:
    def test_pairs(self) -> None:
        assert cfg.parse_links("Wiki|https://wiki.example.org, Mail|mailto:vorstand@x.de") == [
            PageLink("Wiki", "https://wiki.example.org"),
            PageLink("Mail", "mailto:vorstand@x.de"),
        ]

    def test_skips_incomplete_entries(self) -> None:
        assert cfg.parse_links("NoUrl|, |/x, plain, Ok|/ok") == [PageLink("Ok", "/ok")]

    def test_env_override(self) -> None:
        with patch.dict(os.environ, {"PORTAL_MEMBER_LINKS": "Intern|/intern/"}):
            assert cfg.get_member_links() == [PageLink("Intern", "/intern/")]

    def test_defaults(self) -> None:
        with patch.dict(os.environ, {"PORTAL_EXTERNAL_LINKS": ""}):
            assert cfg.get_external_links() == cfg.DEFAULT_EXTERNAL_LINKS


class TestDirectoryCredentials:
    def test_complete(self) -> None:
        env = {
            "PORTAL_DIRECTORY_USER": "portal",
            "PORTAL_DIRECTORY_PASSWORD": "s3cret",
            "PORTAL_DIRECTORY_URL": "https://directory.example.org/api",
        }
        with patch.dict(os.environ, env):
            creds = cfg.directory_credentials()
        assert creds.username == "portal"
        assert creds.url == "https://directory.example.org/api"

    def test_reports_missing_vars(self) -> None:
        env = {
            "PORTAL_DIRECTORY_USER": "portal",
            "PORTAL_DIRECTORY_PASSWORD": " ",
            "PORTAL_DIRECTORY_URL": "",
        }
        with patch.dict(os.environ, env):
            with pytest.raises(ConfigError) as exc_info:
                cfg.directory_credentials()
        assert exc_info.value.missing == ["PORTAL_DIRECTORY_PASSWORD", "PORTAL_DIRECTORY_URL"]


class TestFixedSettings:
    def test_page_ttl(self) -> None:
        assert cfg.PAGE_TTL_SECONDS == 300.0
