import unittest
from datetime import datetime
from decimal import Decimal

from pydantic import ValidationError

from btcchina.connector.btc_china import btc_china_constants as CONSTANTS
from btcchina.connector.btc_china.btc_china_utils import (
    BTCChinaConfigMap,
    construct_param_array,
    json_param,
    param_to_str,
    query_param,
    validate_scalar_params,
)
from btcchina.exceptions import BTCChinaValidationError


class BTCChinaUtilsTest(unittest.TestCase):

    def test_construct_param_array_skips_leading_slot(self):
        self.assertEqual(["a", "b"], construct_param_array(["handler", "a", "b"], 3))

    def test_construct_param_array_stops_at_max_args(self):
        self.assertEqual(["a", "b"], construct_param_array(["handler", "a", "b", "c"], 2))

    def test_construct_param_array_drops_everything_after_a_hole(self):
        # "c" is supplied but position 2 is absent, so nothing past position 1 is sent
        self.assertEqual(["a"], construct_param_array(["handler", "a", None, "c"], 3))

    def test_construct_param_array_with_missing_first_position(self):
        self.assertEqual([], construct_param_array(["handler", None, "b"], 3))

    def test_construct_param_array_with_no_args(self):
        self.assertEqual([], construct_param_array(["handler"], 3))

    def test_construct_param_array_keeps_falsy_values(self):
        self.assertEqual([False, 0, ""], construct_param_array(["handler", False, 0, ""], 3))

    def test_validate_scalar_params_accepts_scalars(self):
        validate_scalar_params(["BTCCNY", 1, 2.5, True, Decimal("0.01")])

    def test_validate_scalar_params_rejects_other_values(self):
        for param in (datetime(2020, 1, 1), {"a": 1}, [1], None, float("nan"), float("-inf"), Decimal("sNaN")):
            with self.assertRaises(BTCChinaValidationError):
                validate_scalar_params(["BTCCNY", param])

    def test_param_to_str(self):
        self.assertEqual("true", param_to_str(True))
        self.assertEqual("false", param_to_str(False))
        self.assertEqual("", param_to_str(None))
        self.assertEqual("2", param_to_str(2.0))
        self.assertEqual("2.5", param_to_str(2.5))
        self.assertEqual("0.00001", param_to_str(Decimal("1E-5")))
        self.assertEqual("15", param_to_str(15))
        self.assertEqual("BTCCNY", param_to_str("BTCCNY"))

    def test_json_param(self):
        self.assertEqual("1.5", json_param(Decimal("1.5")))
        self.assertEqual(True, json_param(True))
        self.assertEqual(3, json_param(3))

    def test_query_param(self):
        self.assertEqual("true", query_param(True))
        self.assertEqual("1.5", query_param(Decimal("1.5")))
        self.assertEqual(10, query_param(10))
        self.assertEqual("btccny", query_param("btccny"))

    def test_config_map_defaults(self):
        config_map = BTCChinaConfigMap()

        self.assertIsNone(config_map.api_key)
        self.assertIsNone(config_map.secret_key)
        self.assertEqual(CONSTANTS.REST_URL, config_map.server)
        self.assertEqual(30000, config_map.timeout_ms)

    def test_config_map_hides_secrets(self):
        config_map = BTCChinaConfigMap(api_key="someKey", secret_key="someSecret")

        self.assertEqual("someSecret", config_map.secret_key.get_secret_value())
        self.assertNotIn("someSecret", repr(config_map))

    def test_config_map_strips_trailing_slash_from_server(self):
        config_map = BTCChinaConfigMap(server="https://api.example.com/")

        self.assertEqual("https://api.example.com", config_map.server)

    def test_config_map_rejects_non_positive_timeout(self):
        with self.assertRaises(ValidationError):
            BTCChinaConfigMap(timeout_ms=0)

    def test_config_map_rejects_unknown_fields(self):
        with self.assertRaises(ValidationError):
            BTCChinaConfigMap(passphrase="x")
