import unittest

from timecodec import (
    format_time_12,
    is_canonical,
    parse_time_to_min,
    parse_typed_time,
    split_24_to_12,
    to_24_hour,
)


class TestTo24Hour(unittest.TestCase):
    def test_round_trip_every_12h_time(self) -> None:
        for meridiem in ("AM", "PM"):
            for hour in range(1, 13):
                for minute in range(60):
                    canonical = to_24_hour(str(hour), str(minute), meridiem)
                    self.assertEqual(
                        tuple(split_24_to_12(canonical)),
                        (str(hour), f"{minute:02d}", meridiem),
                        canonical,
                    )

    def test_zero_or_blank_hour_means_no_time(self) -> None:
        self.assertEqual(to_24_hour("0", "30", "AM"), "")
        self.assertEqual(to_24_hour("", "30", "PM"), "")
        self.assertEqual(to_24_hour(None, None, "AM"), "")
        self.assertEqual(to_24_hour("abc", "10", "AM"), "")

    def test_noon_and_midnight(self) -> None:
        self.assertEqual(to_24_hour("12", "00", "AM"), "00:00")
        self.assertEqual(to_24_hour("12", "15", "PM"), "12:15")

    def test_unparsable_minute_defaults_to_zero(self) -> None:
        self.assertEqual(to_24_hour("7", "x", "PM"), "19:00")
        self.assertEqual(to_24_hour("7", "", "AM"), "07:00")

    def test_meridiem_is_case_insensitive(self) -> None:
        self.assertEqual(to_24_hour("9", "5", "pm"), "21:05")


class TestDisplayHelpers(unittest.TestCase):
    def test_split_empty(self) -> None:
        self.assertEqual(tuple(split_24_to_12("")), ("", "", "AM"))

    def test_split_afternoon(self) -> None:
        self.assertEqual(tuple(split_24_to_12("13:05")), ("1", "05", "PM"))

    def test_format_time_12(self) -> None:
        self.assertEqual(format_time_12("13:05"), "1:05 PM")
        self.assertEqual(format_time_12("00:00"), "12:00 AM")
        self.assertEqual(format_time_12("12:30"), "12:30 PM")
        self.assertEqual(format_time_12("09:07"), "9:07 AM")
        self.assertEqual(format_time_12(""), "")

    def test_parse_time_to_min(self) -> None:
        self.assertEqual(parse_time_to_min("09:30"), 570)
        self.assertEqual(parse_time_to_min("00:00"), 0)
        self.assertEqual(parse_time_to_min(""), 0)
        self.assertEqual(parse_time_to_min(None), 0)
        self.assertEqual(parse_time_to_min("junk"), 0)

    def test_is_canonical(self) -> None:
        self.assertTrue(is_canonical(""))
        self.assertTrue(is_canonical("09:30"))
        self.assertTrue(is_canonical("23:59"))
        self.assertFalse(is_canonical("24:00"))
        self.assertFalse(is_canonical("09:3"))
        self.assertFalse(is_canonical("9.30"))


class TestParseTypedTime(unittest.TestCase):
    def test_accepted_forms(self) -> None:
        self.assertEqual(tuple(parse_typed_time("9:30 pm")), ("9", "30", "PM"))
        self.assertEqual(tuple(parse_typed_time("9pm")), ("9", "00", "PM"))
        self.assertEqual(tuple(parse_typed_time("12:05a.m.")), ("12", "05", "AM"))
        self.assertEqual(tuple(parse_typed_time(" 7:5 AM ")), ("7", "05", "AM"))

    def test_rejected_forms(self) -> None:
        for text in ("13:00 pm", "0:30 am", "9:75 am", "noon", "9:30", ""):
            with self.assertRaises(ValueError, msg=text):
                parse_typed_time(text)


if __name__ == "__main__":
    unittest.main(verbosity=2)
