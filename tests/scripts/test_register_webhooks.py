"""Tests for scripts/register_webhooks.py"""

import argparse
import importlib.util
from pathlib import Path
from unittest.mock import MagicMock, patch

import pytest

from fpp_api.webhooks import DeliveryMethod, RegisterResult

SCRIPT_PATH = Path(__file__).resolve().parents[2] / "scripts" / "register_webhooks.py"
SHOP = "test-shop.myfunpinpin.com"


@pytest.fixture(scope="module")
def script():
    spec = importlib.util.spec_from_file_location("register_webhooks", SCRIPT_PATH)
    module = importlib.util.module_from_spec(spec)
    spec.loader.exec_module(module)
    return module


class TestParseTopic:
    def test_topic_and_path(self, script):
        assert script.parse_topic("PRODUCTS_CREATE:/webhooks") == ("PRODUCTS_CREATE", "/webhooks")

    def test_pub_sub_address_keeps_colons(self, script):
        assert script.parse_topic("PRODUCTS_CREATE:pubsub://p:t") == ("PRODUCTS_CREATE", "pubsub://p:t")

    @pytest.mark.parametrize("value", ["PRODUCTS_CREATE", ":/webhooks", "PRODUCTS_CREATE:"])
    def test_invalid(self, script, value):
        with pytest.raises(argparse.ArgumentTypeError):
            script.parse_topic(value)


class TestRegisterTopics:
    def test_adds_handlers_and_registers(self, script):
        registry = MagicMock()
        registry.register_all.return_value = {"PRODUCTS_CREATE": RegisterResult(True)}

        results = script.register_topics(
            registry, [("PRODUCTS_CREATE", "/webhooks")], "tok", SHOP, DeliveryMethod.HTTP,
        )

        registry.add_handler.assert_called_once()
        assert registry.add_handler.call_args[0][:2] == ("PRODUCTS_CREATE", "/webhooks")
        registry.register_all.assert_called_once_with(
            access_token="tok", shop=SHOP, delivery_method=DeliveryMethod.HTTP,
        )
        assert results["PRODUCTS_CREATE"].success is True


class TestMain:
    def _run(self, script, argv, results, context):
        with patch.object(script, "load_context", return_value=context), \
                patch.object(script, "setup_logging"), \
                patch.object(script, "register_topics", return_value=results) as mock_register:
            code = script.main(argv)
        return code, mock_register

    def test_success(self, script, context, capsys):
        code, mock_register = self._run(
            script,
            ["--shop", SHOP, "--topic", "PRODUCTS_CREATE:/webhooks", "--token", "tok"],
            {"PRODUCTS_CREATE": RegisterResult(True)},
            context,
        )

        assert code == 0
        assert "OK" in capsys.readouterr().out
        args = mock_register.call_args[0]
        assert args[1] == [("PRODUCTS_CREATE", "/webhooks")]
        assert args[2:] == ("tok", SHOP, DeliveryMethod.HTTP)

    def test_failure_exit_code(self, script, context, capsys):
        code, _ = self._run(
            script,
            ["--shop", SHOP, "--topic", "PRODUCTS_CREATE:/webhooks", "--token", "tok"],
            {"PRODUCTS_CREATE": RegisterResult(False, {"error": "x"})},
            context,
        )

        assert code == 1
        assert "FAILED" in capsys.readouterr().out

    def test_token_from_env(self, script, context, monkeypatch):
        monkeypatch.setenv("FPP_ACCESS_TOKEN", "env_tok")
        _, mock_register = self._run(
            script,
            ["--shop", SHOP, "--topic", "PRODUCTS_CREATE:/webhooks"],
            {},
            context,
        )

        assert mock_register.call_args[0][2] == "env_tok"

    def test_missing_token(self, script, context, monkeypatch, capsys):
        monkeypatch.delenv("FPP_ACCESS_TOKEN", raising=False)
        code, mock_register = self._run(
            script, ["--shop", SHOP, "--topic", "PRODUCTS_CREATE:/webhooks"], {}, context,
        )

        assert code == 1
        mock_register.assert_not_called()
        assert "No access token" in capsys.readouterr().out
