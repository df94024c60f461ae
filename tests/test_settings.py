import os
import unittest
from unittest import mock

from otpgen.base32 import generate_secret
from otpgen.settings import DEFAULTS, get_setting, load_otp_settings
from otpgen.totp import generate_hotp, generate_totp


SECRET = "GEZDGNBVGY3TQOJQGEZDGNBVGY3TQOJQ"


class TestSettings(unittest.TestCase):
    def test_defaults(self):
        with mock.patch.dict(os.environ, {}, clear=True):
            s = load_otp_settings()
            self.assertEqual(s.algorithm, "sha1")
            self.assertEqual(s.digits, 6)
            self.assertEqual(s.period, 30)
            self.assertEqual(s.secret_length, 24)
            self.assertEqual(get_setting("digits"), DEFAULTS["digits"])

    def test_environment_overrides(self):
        env = {
            "OTPGEN_ALGORITHM": "SHA512",
            "OTPGEN_DIGITS": "8",
            "OTPGEN_PERIOD": "60",
            "OTPGEN_SECRET_LENGTH": "32",
        }
        with mock.patch.dict(os.environ, env, clear=True):
            self.assertEqual(len(generate_secret()), 32)
            r = generate_totp({"secret": SECRET, "time": 59})
            self.assertEqual(r.algorithm, "sha512")
            self.assertEqual(r.digits, 8)
            self.assertEqual(r.period, 60)

    def test_invalid_values_fall_back(self):
        env = {"OTPGEN_ALGORITHM": "md5", "OTPGEN_DIGITS": "lots", "OTPGEN_PERIOD": "0"}
        with mock.patch.dict(os.environ, env, clear=True):
            s = load_otp_settings()
            self.assertEqual(s.algorithm, "sha1")
            self.assertEqual(s.digits, 6)
            self.assertEqual(s.period, 30)

    def test_caller_values_win(self):
        with mock.patch.dict(os.environ, {"OTPGEN_DIGITS": "8"}, clear=True):
            r = generate_hotp({"secret": SECRET, "digits": 6})
            self.assertEqual(r.password, "755224")
