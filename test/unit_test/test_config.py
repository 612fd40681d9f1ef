"""
Unit tests for configuration loading and logging setup
"""

import logging
import os
import tempfile
import unittest
from pathlib import Path
from unittest.mock import patch

from earn_staking.config import (
    Config,
    RpcConfig,
    StakingConfig,
    TxConfig,
    LoggingConfig,
    setup_logging,
)
from earn_staking.program.constants import STAKING_PROGRAM_ID
from earn_staking.errors import ConfigurationError, ErrorCode


class TestEnvParsing(unittest.TestCase):
    """Values come from the environment with typed fallbacks"""

    def test_defaults(self):
        with patch.dict(os.environ, {}, clear=True):
            rpc = RpcConfig()
            self.assertEqual(rpc.url, "")
            self.assertEqual(rpc.timeout_seconds, 30.0)
            self.assertEqual(rpc.max_retries, 3)
            self.assertEqual(rpc.retry_delay_seconds, 0.5)
            self.assertEqual(rpc.commitment, "confirmed")

            self.assertEqual(StakingConfig().program_id, STAKING_PROGRAM_ID)
            self.assertEqual(TxConfig().compute_units, 0)
            self.assertEqual(TxConfig().compute_unit_price, 0)
            self.assertEqual(LoggingConfig().log_file, "")

    def test_overrides(self):
        env = {
            "SOLANA_RPC_URL": "https://rpc.example.com",
            "RPC_TIMEOUT_SECONDS": "12.5",
            "RPC_MAX_RETRIES": "7",
            "RPC_COMMITMENT": "finalized",
            "STAKING_PROGRAM_ID": "11111111111111111111111111111111",
            "TX_COMPUTE_UNITS": "200000",
        }
        with patch.dict(os.environ, env, clear=True):
            config = Config()

        self.assertEqual(config.rpc.url, "https://rpc.example.com")
        self.assertEqual(config.rpc.timeout_seconds, 12.5)
        self.assertEqual(config.rpc.max_retries, 7)
        self.assertEqual(config.rpc.commitment, "finalized")
        self.assertEqual(config.staking.program_id, "11111111111111111111111111111111")
        self.assertEqual(config.tx.compute_units, 200_000)

    def test_invalid_numbers_fall_back(self):
        with patch.dict(os.environ, {"RPC_TIMEOUT_SECONDS": "soon", "RPC_MAX_RETRIES": "many"}, clear=True):
            rpc = RpcConfig()

        self.assertEqual(rpc.timeout_seconds, 30.0)
        self.assertEqual(rpc.max_retries, 3)

    def test_bool_parsing(self):
        for raw, expected in [("true", True), ("1", True), ("YES", True), ("off", False), ("0", False)]:
            with patch.dict(os.environ, {"LOG_CONSOLE": raw}, clear=True):
                self.assertEqual(LoggingConfig().console_output, expected, raw)

    def test_log_level(self):
        self.assertEqual(LoggingConfig(log_level="debug").level, logging.DEBUG)
        self.assertEqual(LoggingConfig(log_level="bogus").level, logging.INFO)


class TestSetupLogging(unittest.TestCase):

    def tearDown(self):
        logger = logging.getLogger("earn_staking_test")
        for handler in logger.handlers[:]:
            handler.close()
            logger.removeHandler(handler)

    def test_console_only(self):
        log_config = LoggingConfig(log_file="", log_level="WARNING", console_output=True)
        logger = setup_logging(log_config, logger_name="earn_staking_test")

        self.assertEqual(logger.level, logging.WARNING)
        self.assertEqual(len(logger.handlers), 1)
        child = logging.getLogger("earn_staking_test.infra.rpc")
        self.assertEqual(child.getEffectiveLevel(), logging.WARNING)
        self.assertFalse(child.isEnabledFor(logging.INFO))

    def test_default_config_has_no_file_handler(self):
        with patch.dict(os.environ, {}, clear=True):
            log_config = LoggingConfig()
        logger = setup_logging(log_config, logger_name="earn_staking_test")

        self.assertEqual(len(logger.handlers), 1)
        self.assertNotIsInstance(logger.handlers[0], logging.FileHandler)

    def test_file_handler_creates_directory(self):
        with tempfile.TemporaryDirectory() as tmp:
            log_file = Path(tmp) / "nested" / "staking.log"
            log_config = LoggingConfig(log_file=str(log_file), log_level="INFO", console_output=False)

            logger = setup_logging(log_config, logger_name="earn_staking_test")
            logger.info("hello")
            for handler in logger.handlers:
                handler.flush()

            self.assertTrue(log_file.exists())
            self.assertIn("hello", log_file.read_text(encoding="utf-8"))
            self.tearDown()

    def test_repeated_setup_replaces_handlers(self):
        log_config = LoggingConfig(log_file="", console_output=True)
        setup_logging(log_config, logger_name="earn_staking_test")
        logger = setup_logging(log_config, logger_name="earn_staking_test")

        self.assertEqual(len(logger.handlers), 1)


class TestClientConfiguration(unittest.TestCase):

    def test_missing_rpc_url(self):
        from earn_staking import StakingClient
        from earn_staking.config import config

        with patch.object(config.rpc, "url", ""):
            with self.assertRaises(ConfigurationError) as ctx:
                StakingClient()
        self.assertEqual(ctx.exception.code, ErrorCode.CONFIG_MISSING)

    def test_rpc_url_from_config(self):
        from earn_staking import StakingClient
        from earn_staking.config import config

        with patch.object(config.rpc, "url", "https://rpc.example.com"):
            client = StakingClient()
        self.assertEqual(client.rpc.endpoint, "https://rpc.example.com")


if __name__ == "__main__":
    unittest.main()
