import json
import logging
import sys
import unittest
from pathlib import Path

ROOT = Path(__file__).resolve().parents[2]
sys.path.insert(0, str(ROOT / "packages" / "core"))
sys.path.insert(0, str(ROOT / "packages" / "link"))

from tuicom_core.logging_setup import RUN_ID, JsonFormatter


def make_record(msg, **extra):
    record = logging.LogRecord("tuicom.session", logging.INFO, __file__, 1, msg, None, None)
    for key, value in extra.items():
        setattr(record, key, value)
    return record


class JsonFormatterTests(unittest.TestCase):
    def test_context_fields_are_copied(self):
        line = JsonFormatter().format(make_record("baud rate set", event="baud_set", baud=9600))
        payload = json.loads(line)
        self.assertEqual(payload["event"], "baud_set")
        self.assertEqual(payload["baud"], 9600)
        self.assertEqual(payload["run"], RUN_ID)
        self.assertEqual(payload["logger"], "tuicom.session")
        self.assertNotIn("port", payload)

    def test_exception_is_formatted(self):
        try:
            raise OSError("unplugged")
        except OSError:
            record = make_record("device lost")
            record.exc_info = sys.exc_info()
        payload = json.loads(JsonFormatter().format(record))
        self.assertIn("unplugged", payload["exc"])


if __name__ == "__main__":
    unittest.main()
