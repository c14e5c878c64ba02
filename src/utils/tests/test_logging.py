"""Tests for the JSON log formatter."""

import json
import logging
import sys
import unittest

from utils.logging import JSONFormatter


class TestJSONFormatter(unittest.TestCase):

    def _record(self, msg, extra=None, exc_info=None):
        record = logging.LogRecord('users', logging.INFO, __file__, 1, msg, None, exc_info)
        for key, value in (extra or {}).items():
            setattr(record, key, value)
        return record

    def test_extra_fields_are_included(self):
        line = JSONFormatter().format(self._record("User created", {"userId": "abc123"}))

        data = json.loads(line)
        self.assertEqual(data['message'], 'User created')
        self.assertEqual(data['level'], 'INFO')
        self.assertEqual(data['logger'], 'users')
        self.assertEqual(data['userId'], 'abc123')
        self.assertTrue(data['timestamp'].endswith('Z'))

    def test_exception_is_formatted(self):
        try:
            raise RuntimeError("boom")
        except RuntimeError:
            record = self._record("Failed", exc_info=sys.exc_info())

        data = json.loads(JSONFormatter().format(record))
        self.assertIn('RuntimeError: boom', data['exception'])


if __name__ == '__main__':
    unittest.main()
