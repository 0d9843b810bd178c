"""Tests for the r53simple CLI."""

from unittest.mock import patch

import pytest

from r53simple.base.exceptions import RemoteError
from r53simple.cli import _parse_params, main


@pytest.fixture(autouse=True)
def _env_credentials(monkeypatch):
    monkeypatch.setenv("AWS_ACCESS_KEY", "AKID")
    monkeypatch.setenv("AWS_SECRET_KEY", "secret")


class TestParseParams:
    def test_pairs(self):
        assert _parse_params(["zone_id=Z1", "change_id=C=2"]) == {
            "zone_id": "Z1",
            "change_id": "C=2",
        }

    def test_invalid(self):
        with pytest.raises(ValueError):
            _parse_params(["zone_id"])

    @pytest.mark.parametrize("pair", ["action=GetChange", "request=x", " action =x"])
    def test_reserved_keys(self, pair):
        with pytest.raises(ValueError, match="cannot be passed"):
            _parse_params([pair])


class TestMain:
    def test_list_actions(self, capsys):
        main(["--list-actions"])
        out = capsys.readouterr().out.split()
        assert "ChangeResourceRecordSets" in out
        assert len(out) == 11

    def test_action_required(self):
        with pytest.raises(SystemExit) as exc_info:
            main([])
        assert exc_info.value.code == 2

    @patch("r53simple.client.Route53Client.send")
    def test_object_result_printed_as_json(self, mock_send, capsys):
        mock_send.return_value = {"HostedZone": {"Id": "/hostedzone/Z1"}}
        main(["GetHostedZone", "-p", "zone_id=Z1", "--format", "object"])
        out = capsys.readouterr().out
        assert '"Id": "/hostedzone/Z1"' in out
        mock_send.assert_called_once_with("GetHostedZone", zone_id="Z1")

    @patch("r53simple.client.Route53Client.send")
    def test_content_file(self, mock_send, tmp_path, capsys):
        batch = tmp_path / "batch.xml"
        batch.write_text("<batch/>")
        mock_send.return_value = "<ok/>"
        main(["ChangeResourceRecordSets", "-p", "zone_id=Z1", "-c", str(batch), "-f", "raw"])
        assert capsys.readouterr().out.strip() == "<ok/>"
        assert mock_send.call_args[1]["content"] == "<batch/>"

    def test_missing_content_file(self, tmp_path, capsys):
        with pytest.raises(SystemExit) as exc_info:
            main(["CreateHealthCheck", "-c", str(tmp_path / "missing.xml")])
        assert exc_info.value.code == 1
        assert "Invalid arguments" in capsys.readouterr().err

    @patch("r53simple.client.Route53Client.send")
    def test_operation_failure(self, mock_send, capsys):
        mock_send.side_effect = RemoteError("Invalid request", status_code=400)
        with pytest.raises(SystemExit) as exc_info:
            main(["ListHostedZones"])
        assert exc_info.value.code == 1
        assert "Operation failed: Invalid request" in capsys.readouterr().err

    def test_unknown_action(self, capsys):
        with pytest.raises(SystemExit) as exc_info:
            main(["Bogus"])
        assert exc_info.value.code == 1
        assert "unknown action: Bogus" in capsys.readouterr().err

    @patch("r53simple.client.Route53Client.send")
    def test_reserved_param_rejected(self, mock_send, capsys):
        with pytest.raises(SystemExit) as exc_info:
            main(["GetHostedZone", "-p", "request=x"])
        assert exc_info.value.code == 1
        assert "Invalid arguments" in capsys.readouterr().err
        mock_send.assert_not_called()
