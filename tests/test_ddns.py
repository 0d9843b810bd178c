"""Tests for the dynamic DNS workflow and the r53ddns CLI."""

from unittest.mock import patch, MagicMock

import pytest
import requests

from r53simple.base.exceptions import TransportError, ValidationError, ZoneNotFoundError
from r53simple.ddns import (
    DEFAULT_IP_URL,
    build_upserts,
    fetch_public_ip,
    main,
    qualify_host,
    update_hosts,
)


def _ip_response(text: str, status: int = 200) -> requests.Response:
    resp = requests.Response()
    resp.status_code = status
    resp._content = text.encode()
    resp.encoding = "utf-8"
    return resp


@pytest.fixture(autouse=True)
def _no_env_credentials(monkeypatch):
    for var in ("AWS_ACCESS_KEY", "AWS_SECRET_KEY", "AWS_ACCESS_KEY_ID", "AWS_SECRET_ACCESS_KEY"):
        monkeypatch.delenv(var, raising=False)


# --- fetch_public_ip ---

class TestFetchPublicIp:
    @patch("r53simple.ddns.requests.get")
    def test_success(self, mock_get):
        mock_get.return_value = _ip_response("203.0.113.7\n")
        assert fetch_public_ip() == "203.0.113.7"
        mock_get.assert_called_once_with(DEFAULT_IP_URL, timeout=5.0)

    @patch("r53simple.ddns.requests.get")
    def test_connection_failure(self, mock_get):
        mock_get.side_effect = requests.ConnectTimeout("timed out")
        with pytest.raises(TransportError, match="connection failed"):
            fetch_public_ip()

    @patch("r53simple.ddns.requests.get")
    def test_http_error(self, mock_get):
        mock_get.return_value = _ip_response("nope", status=404)
        with pytest.raises(TransportError):
            fetch_public_ip()

    @patch("r53simple.ddns.requests.get")
    def test_empty(self, mock_get):
        mock_get.return_value = _ip_response("")
        with pytest.raises(TransportError, match="empty answer"):
            fetch_public_ip()

    @patch("r53simple.ddns.requests.get")
    def test_not_an_address(self, mock_get):
        mock_get.return_value = _ip_response("<html>")
        with pytest.raises(ValidationError):
            fetch_public_ip()


# --- change construction ---

class TestQualifyHost:
    @pytest.mark.parametrize(
        "host, expected",
        [
            ("www", "www.example.com."),
            ("www.example.com", "www.example.com."),
            ("www.example.com.", "www.example.com."),
            ("example.com", "example.com."),
            ("a.b", "a.b.example.com."),
        ],
    )
    def test_qualify(self, host, expected):
        assert qualify_host(host, "example.com") == expected

    def test_build_upserts(self):
        changes = build_upserts(["www", "vpn"], "example.com.", "203.0.113.7", ttl=60)
        assert [c.name for c in changes] == ["www.example.com.", "vpn.example.com."]
        assert all(c.action == "UPSERT" and c.type == "A" and c.ttl == 60 for c in changes)
        assert all(c.values == ["203.0.113.7"] for c in changes)

    def test_build_upserts_negative_ttl(self):
        with pytest.raises(ValidationError, match="invalid change"):
            build_upserts(["www"], "example.com.", "203.0.113.7", ttl=-1)


class TestUpdateHosts:
    def test_single_batch(self):
        client = MagicMock()
        client.find_zone_id.return_value = "Z123"
        client.change_record_sets.return_value = {"Id": "/change/C1", "Status": "PENDING"}
        info = update_hosts(client, "example.com", ["www", "vpn"], "203.0.113.7")
        assert info["Status"] == "PENDING"
        client.find_zone_id.assert_called_once_with("example.com.")
        client.change_record_sets.assert_called_once()
        zone_id, changes = client.change_record_sets.call_args[0]
        assert zone_id == "Z123"
        assert len(changes) == 2

    def test_no_hosts(self):
        with pytest.raises(ValidationError):
            update_hosts(MagicMock(), "example.com", [], "203.0.113.7")

    def test_bad_ttl_checked_before_zone_lookup(self):
        client = MagicMock()
        with pytest.raises(ValidationError):
            update_hosts(client, "example.com", ["www"], "203.0.113.7", ttl=-1)
        client.find_zone_id.assert_not_called()
        client.change_record_sets.assert_not_called()

    def test_zone_missing(self):
        client = MagicMock()
        client.find_zone_id.side_effect = ZoneNotFoundError("failed to get hosted zone ID")
        with pytest.raises(ZoneNotFoundError):
            update_hosts(client, "example.com", ["www"], "203.0.113.7")
        client.change_record_sets.assert_not_called()


# --- CLI ---

class TestMain:
    @patch("r53simple.ddns.Route53Client")
    @patch("r53simple.ddns.fetch_public_ip", return_value="203.0.113.7")
    def test_success(self, mock_ip, mock_client_cls, capsys):
        client = mock_client_cls.return_value
        client.find_zone_id.return_value = "Z123"
        client.change_record_sets.return_value = {"Id": "/change/C1", "Status": "PENDING"}
        main(["-i", "AKID", "-k", "secret", "-z", "example.com", "-H", "www"])
        out = capsys.readouterr().out
        assert "203.0.113.7 /change/C1 PENDING" in out
        config = mock_client_cls.call_args[0][0]
        assert config.access_key == "AKID"
        assert config.response_format == "object"

    @patch("r53simple.ddns.Route53Client")
    def test_credentials_from_env(self, mock_client_cls, monkeypatch, capsys):
        monkeypatch.setenv("AWS_ACCESS_KEY", "ENVKEY")
        monkeypatch.setenv("AWS_SECRET_KEY", "ENVSECRET")
        mock_client_cls.return_value.change_record_sets.return_value = {}
        main(["-z", "example.com", "-H", "www", "--ip", "198.51.100.1"])
        config = mock_client_cls.call_args[0][0]
        assert config.access_key == "ENVKEY"
        assert config.secret_key == "ENVSECRET"

    @patch("r53simple.ddns.Route53Client")
    def test_ntp_flags(self, mock_client_cls):
        mock_client_cls.return_value.change_record_sets.return_value = {}
        main(["-i", "a", "-k", "b", "-z", "example.com", "-H", "www", "--ip", "198.51.100.1",
              "--use-ntp", "--ntp-server", "time.example.net"])
        config = mock_client_cls.call_args[0][0]
        assert config.use_ntp is True
        assert config.ntp_server == "time.example.net"

    def test_missing_credentials(self, capsys):
        with pytest.raises(SystemExit) as exc_info:
            main(["-z", "example.com", "-H", "www", "--ip", "198.51.100.1"])
        assert exc_info.value.code == 1
        assert "access_key is required" in capsys.readouterr().err

    @patch("r53simple.ddns.fetch_public_ip", side_effect=TransportError("connection failed."))
    def test_ip_lookup_failure(self, mock_ip, capsys):
        with pytest.raises(SystemExit) as exc_info:
            main(["-i", "a", "-k", "b", "-z", "example.com", "-H", "www"])
        assert exc_info.value.code == 1
        assert "connection failed." in capsys.readouterr().err

    @patch("r53simple.ddns.Route53Client")
    def test_zone_not_found(self, mock_client_cls, capsys):
        mock_client_cls.return_value.find_zone_id.side_effect = ZoneNotFoundError(
            "failed to get hosted zone ID for example.com."
        )
        with pytest.raises(SystemExit) as exc_info:
            main(["-i", "a", "-k", "b", "-z", "example.com", "-H", "www", "--ip", "198.51.100.1"])
        assert exc_info.value.code == 1
        assert "failed to get hosted zone ID" in capsys.readouterr().err

    def test_zone_required(self):
        with pytest.raises(SystemExit) as exc_info:
            main(["-H", "www"])
        assert exc_info.value.code == 2

    @patch("r53simple.ddns.Route53Client")
    def test_negative_ttl(self, mock_client_cls, capsys):
        with pytest.raises(SystemExit) as exc_info:
            main(["-i", "a", "-k", "b", "-z", "example.com", "-H", "www",
                  "--ip", "198.51.100.1", "--ttl", "-1"])
        assert exc_info.value.code == 1
        assert "invalid change" in capsys.readouterr().err
        mock_client_cls.return_value.find_zone_id.assert_not_called()
