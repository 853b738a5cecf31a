"""
Unit tests for correlation IDs and error classification
"""

import logging
import unittest

from arb_client.errors import ErrorCode
from arb_client.infra.tracing import (
    classify_error,
    CorrelationContext,
    generate_correlation_id,
    get_correlation_id,
    set_correlation_id,
    log_with_correlation,
)


class TestClassifyError(unittest.TestCase):
    """Tests for error classification"""

    def test_timeout_error_is_transient(self):
        """Timeout errors should be classified as transient"""
        error = Exception("Connection timeout after 30 seconds")
        is_transient, error_code = classify_error(error)

        self.assertTrue(is_transient)
        self.assertEqual(error_code, ErrorCode.RPC_TIMEOUT)

    def test_network_error_is_transient(self):
        """Network errors should be classified as connection failures"""
        error = Exception("Network connection failed: ECONNRESET")
        is_transient, error_code = classify_error(error)

        self.assertTrue(is_transient)
        self.assertEqual(error_code, ErrorCode.RPC_CONNECTION_FAILED)

    def test_rate_limit_error(self):
        """Rate limit errors should be identified"""
        error = Exception("Too many requests, rate limit exceeded")
        is_transient, error_code = classify_error(error)

        self.assertTrue(is_transient)
        self.assertEqual(error_code, ErrorCode.RPC_RATE_LIMITED)

    def test_503_error_is_transient(self):
        """HTTP 503 errors should be transient"""
        error = Exception("Service temporarily unavailable: 503")
        is_transient, error_code = classify_error(error)

        self.assertTrue(is_transient)
        self.assertEqual(error_code, ErrorCode.RPC_INVALID_RESPONSE)

    def test_unknown_error_not_classified(self):
        """Unknown errors should not be classified"""
        error = Exception("execution reverted")
        is_transient, error_code = classify_error(error)

        self.assertFalse(is_transient)
        self.assertIsNone(error_code)


class TestCorrelationId(unittest.TestCase):
    """Tests for correlation ID context"""

    def test_generate_is_unique(self):
        ids = {generate_correlation_id() for _ in range(100)}
        self.assertEqual(len(ids), 100)

    def test_context_sets_and_restores(self):
        self.assertIsNone(get_correlation_id())

        with CorrelationContext("transfer") as cid:
            self.assertTrue(cid.startswith("transfer_"))
            self.assertEqual(get_correlation_id(), cid)

        self.assertIsNone(get_correlation_id())

    def test_nested_contexts(self):
        with CorrelationContext("outer") as outer:
            with CorrelationContext("inner") as inner:
                self.assertEqual(get_correlation_id(), inner)
            self.assertEqual(get_correlation_id(), outer)

    def test_set_correlation_id_token(self):
        token = set_correlation_id("fixed")
        try:
            self.assertEqual(get_correlation_id(), "fixed")
        finally:
            set_correlation_id(None)
        self.assertIsNotNone(token)

    def test_log_with_correlation_prefixes_message(self):
        test_logger = logging.getLogger("arb_client.test_tracing")

        with self.assertLogs(test_logger, level="INFO") as captured:
            with CorrelationContext("transfer") as cid:
                log_with_correlation(logging.INFO, "signed", "transfer", log=test_logger, stage="signed")

        self.assertEqual(len(captured.records), 1)
        record = captured.records[0]
        self.assertIn(f"[{cid}]", record.getMessage())
        self.assertIn("[transfer]", record.getMessage())
        self.assertEqual(record.correlation_id, cid)
        self.assertEqual(record.stage, "signed")


if __name__ == "__main__":
    unittest.main()
