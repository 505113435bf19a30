"""
Unit tests for correlation ID logging helpers
"""

import logging
import sys
import unittest
from pathlib import Path

# Add parent to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent.parent))

from koinos_adapter.infra.correlation import (
    CorrelationContext,
    generate_correlation_id,
    get_correlation_id,
    log_with_correlation,
    set_correlation_id,
)


class TestCorrelationContext(unittest.TestCase):
    """Tests for correlation ID context management"""

    def test_generate_correlation_id(self):
        """Test correlation ID generation"""
        cid1 = generate_correlation_id()
        cid2 = generate_correlation_id()

        # Should be 12 hex characters
        self.assertEqual(len(cid1), 12)
        self.assertTrue(all(c in "0123456789abcdef" for c in cid1))
        self.assertNotEqual(cid1, cid2)

    def test_correlation_context_basic(self):
        """Test basic correlation context usage"""
        self.assertIsNone(get_correlation_id())

        with CorrelationContext() as cid:
            self.assertEqual(get_correlation_id(), cid)
            self.assertEqual(len(cid), 12)

        self.assertIsNone(get_correlation_id())

    def test_correlation_context_with_prefix(self):
        with CorrelationContext("wait") as cid:
            self.assertTrue(cid.startswith("wait_"))

    def test_nested_context_reuses_outer_id(self):
        """Nested contexts log under the outer ID"""
        with CorrelationContext("call") as outer:
            with CorrelationContext("call") as inner:
                self.assertEqual(inner, outer)
            self.assertEqual(get_correlation_id(), outer)
        self.assertIsNone(get_correlation_id())

    def test_set_and_reset(self):
        token = set_correlation_id("manual")
        try:
            self.assertEqual(get_correlation_id(), "manual")
        finally:
            from koinos_adapter.infra.correlation import _correlation_id
            _correlation_id.reset(token)
        self.assertIsNone(get_correlation_id())


class TestLogWithCorrelation(unittest.TestCase):
    """Tests for structured log records"""

    def test_message_and_extra_fields(self):
        log = logging.getLogger("koinos_adapter.test_correlation")
        with self.assertLogs(log, level="WARNING") as captured:
            with CorrelationContext("call") as cid:
                log_with_correlation(
                    logging.WARNING,
                    "Node A failed",
                    "chain.get_head_info",
                    2,
                    None,
                    log=log,
                    endpoint="A",
                )

        record = captured.records[0]
        self.assertEqual(
            record.getMessage(),
            f"[{cid}] [chain.get_head_info] [2/-] Node A failed",
        )
        self.assertEqual(record.correlation_id, cid)
        self.assertEqual(record.operation, "chain.get_head_info")
        self.assertEqual(record.endpoint, "A")

    def test_without_context_or_attempt(self):
        log = logging.getLogger("koinos_adapter.test_correlation")
        with self.assertLogs(log, level="INFO") as captured:
            log_with_correlation(logging.INFO, "hello", "wait", log=log)

        self.assertEqual(captured.records[0].getMessage(), "[wait] hello")


if __name__ == "__main__":
    unittest.main()
