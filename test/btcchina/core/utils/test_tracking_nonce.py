import unittest
from unittest.mock import patch

from btcchina.core.utils.tracking_nonce import NonceCreator


class NonceCreatorTest(unittest.TestCase):
    def setUp(self) -> None:
        super().setUp()
        self.nonce_creator = NonceCreator()

    @patch("btcchina.core.utils.tracking_nonce.NonceCreator._time")
    def test_nonce_is_microseconds_of_current_time(self, time_mock):
        time_mock.return_value = 1640000000.5

        self.assertEqual(1640000000500000, self.nonce_creator.get_tracking_nonce())

    @patch("btcchina.core.utils.tracking_nonce.NonceCreator._time")
    def test_nonces_in_same_microsecond_do_not_repeat(self, time_mock):
        time_mock.return_value = 1.0

        first = self.nonce_creator.get_tracking_nonce()
        second = self.nonce_creator.get_tracking_nonce()
        third = self.nonce_creator.get_tracking_nonce()

        self.assertEqual([1000000, 1000001, 1000002], [first, second, third])

    @patch("btcchina.core.utils.tracking_nonce.NonceCreator._time")
    def test_nonce_does_not_go_back_with_clock(self, time_mock):
        time_mock.side_effect = [2.0, 1.0, 3.0]

        self.assertEqual(2000000, self.nonce_creator.get_tracking_nonce())
        self.assertEqual(2000001, self.nonce_creator.get_tracking_nonce())
        self.assertEqual(3000000, self.nonce_creator.get_tracking_nonce())

    def test_explicit_timestamp(self):
        self.assertEqual(1000000, self.nonce_creator.get_tracking_nonce(ts_us=1000000))
        self.assertEqual(1000001, self.nonce_creator.get_tracking_nonce(ts_us=999999))

    def test_consecutive_nonces_with_real_clock_are_increasing(self):
        nonces = [self.nonce_creator.get_tracking_nonce() for _ in range(100)]

        self.assertEqual(sorted(set(nonces)), nonces)
