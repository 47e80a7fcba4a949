import os
import sys
import unittest

current_script_path = os.path.abspath(__file__)
project_root = os.path.dirname(os.path.dirname(current_script_path))
sys.path.append(project_root)

from jsvalidate.constants import FORMATS
from jsvalidate.errors import InvalidDateTimeError, InvalidFormatError, InvalidIPv6Error
from jsvalidate.formats import (check_format, is_date_time, is_domain_name, is_email, is_ipv4, is_ipv6,
                                is_uri_reference)


class TestFormats(unittest.TestCase):
    """Test the checkers behind the format keyword."""

    def test_date_time(self):
        for value in ("2024-02-29T12:00:00Z", "2024-01-01T00:00:00.123+05:30", "1999-12-31t23:59:59z"):
            with self.subTest(value=value):
                self.assertTrue(is_date_time(value))
        for value in ("2023-02-29T12:00:00Z", "2024-01-01 00:00:00Z", "2024-01-01T00:00:00",
                      "2024-01-01T25:00:00Z", "2024-01-01T00:00:00+24:00", "2024-1-1T00:00:00Z", ""):
            with self.subTest(value=value):
                self.assertFalse(is_date_time(value))

    def test_email(self):
        self.assertTrue(is_email("user@example.com"))
        self.assertTrue(is_email("John Doe <john@example.com>"))
        self.assertFalse(is_email("not-an-email"))
        self.assertFalse(is_email("user@"))
        self.assertFalse(is_email(""))
        self.assertTrue(is_email("<a@b.com>"))
        self.assertFalse(is_email("<a@b"))
        self.assertFalse(is_email("x <a@b> junk"))
        self.assertFalse(is_email("a@b junk"))

    def test_hostname(self):
        for value in ("example.com", "a-b.example", "localhost", "x_y.example.com", "a1.b2"):
            with self.subTest(value=value):
                self.assertTrue(is_domain_name(value))
        for value in ("", "-a.com", "a-.com", "a..com", ".a.com", "123", "1.2.3.4",
                      "ex ample.com", "a" * 64 + ".com", ("a" * 60 + ".") * 5):
            with self.subTest(value=value):
                self.assertFalse(is_domain_name(value))

    def test_ipv4(self):
        self.assertTrue(is_ipv4("192.168.0.1"))
        self.assertTrue(is_ipv4("0.0.0.0"))
        self.assertFalse(is_ipv4("256.1.1.1"))
        self.assertFalse(is_ipv4("1.2.3"))
        self.assertFalse(is_ipv4("::1"))
        self.assertFalse(is_ipv4("1.2.3.4 "))

    def test_ipv6(self):
        """Only the digit and colon forms of IPv6 are accepted."""
        self.assertTrue(is_ipv6("::1"))
        self.assertTrue(is_ipv6("1:2:3:4:5:6:7:8"))
        self.assertTrue(is_ipv6("2001:0:0:0:0:0:0:1"))
        self.assertFalse(is_ipv6("2001:db8::1"))
        self.assertFalse(is_ipv6("1.2.3.4"))
        self.assertFalse(is_ipv6(":::"))
        self.assertFalse(is_ipv6(""))

    def test_uri(self):
        for value in ("http://example.com/a?b#c", "relative/path", "urn:isbn:0451450523", "#frag", "%41"):
            with self.subTest(value=value):
                self.assertTrue(is_uri_reference(value))
        for value in ("http://[::1", "http://ex ample.com", "%zz", "http://example.com:99999", "a\nb"):
            with self.subTest(value=value):
                self.assertFalse(is_uri_reference(value))

    def test_check_format_raises_specific_error(self):
        with self.assertRaises(InvalidDateTimeError) as cm:
            check_format("yesterday", "date-time", "#/when")
        self.assertEqual(cm.exception.path, "#/when")
        self.assertEqual(cm.exception.format, "date-time")
        with self.assertRaises(InvalidIPv6Error):
            check_format("fe80::1", "ipv6")

    def test_every_format_has_checker(self):
        for format_name in FORMATS:
            with self.subTest(format_name=format_name):
                with self.assertRaises(InvalidFormatError) as cm:
                    check_format(" ", format_name)
                self.assertIsNot(type(cm.exception), InvalidFormatError)

    def test_unknown_format(self):
        with self.assertRaises(InvalidFormatError) as cm:
            check_format("x", "color")
        self.assertIs(type(cm.exception), InvalidFormatError)
        self.assertEqual(cm.exception.format, "color")


if __name__ == '__main__':
    unittest.main()
