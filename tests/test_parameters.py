"""
Tests for the Parameters store and the codec config dataclasses.
"""

import json
import os
import tempfile
import unittest

from slcode.common.pattern import Bitdepth, Color, Orientation
from slcode.core.constants import (
    PARAMETERS_EMPTY,
    PARAMETERS_FILE_DOES_NOT_EXIST,
    PARAMETERS_FILE_INVALID,
    PARAMETERS_FILE_WRITE_FAILED,
)
from slcode.core.parameters import Parameters
from slcode.structured_light.gray_code import GrayCodeConfig
from slcode.structured_light.three_phase import ThreePhaseConfig


class TestParameters(unittest.TestCase):
    """Named entry storage."""

    def setUp(self):
        self.temp_dir = tempfile.TemporaryDirectory()

    def tearDown(self):
        self.temp_dir.cleanup()

    def test_set_get_contains_remove(self):
        params = Parameters()
        params.set("PatternRows", 1140).set("IncludeInverted", True)

        self.assertEqual(params.count(), 2)
        self.assertTrue(params.contains("PatternRows"))
        self.assertIn("IncludeInverted", params)
        self.assertEqual(params.get("PatternRows"), 1140)
        self.assertEqual(params.get("Missing", 7), 7)

        self.assertTrue(params.remove("PatternRows"))
        self.assertFalse(params.remove("PatternRows"))
        self.assertEqual(list(params), ["IncludeInverted"])

        params.clear()
        self.assertTrue(params.is_empty())

    def test_empty_name_rejected(self):
        with self.assertRaises(ValueError):
            Parameters().set("", 1)

    def test_save_and_load_with_enums(self):
        path = os.path.join(self.temp_dir.name, "settings.json")
        params = Parameters({
            "PatternColumns": 912,
            "PatternColor": Color.WHITE,
            "PatternOrientation": Orientation.HORIZONTAL,
            "Bitdepth": Bitdepth.MONO_8BPP,
            "MeasureRegions": 114.0,
        })

        self.assertFalse(params.save(path).has_errors())

        loaded = Parameters()
        result = loaded.load(path)
        self.assertFalse(result.has_errors())
        self.assertEqual(loaded, params)
        self.assertIs(loaded.get("PatternOrientation"), Orientation.HORIZONTAL)

    def test_saved_file_is_plain_json(self):
        path = os.path.join(self.temp_dir.name, "settings.json")
        Parameters({"PatternColor": Color.RED}).save(path)

        with open(path) as f:
            data = json.load(f)
        self.assertEqual(data, {"PatternColor": {"enum": "Color", "name": "RED"}})

    def test_load_missing_file(self):
        result = Parameters().load(os.path.join(self.temp_dir.name, "nope.json"))
        self.assertTrue(result.contains_error(PARAMETERS_FILE_DOES_NOT_EXIST))

    def test_load_invalid_file(self):
        path = os.path.join(self.temp_dir.name, "broken.json")
        with open(path, "w") as f:
            f.write("{ not json")

        params = Parameters({"Keep": 1})
        result = params.load(path)
        self.assertTrue(result.contains_error(PARAMETERS_FILE_INVALID))
        self.assertEqual(params.get("Keep"), 1)

    def test_load_unknown_enum(self):
        path = os.path.join(self.temp_dir.name, "unknown.json")
        with open(path, "w") as f:
            json.dump({"X": {"enum": "NotAnEnum", "name": "A"}}, f)

        result = Parameters().load(path)
        self.assertTrue(result.contains_error(PARAMETERS_FILE_INVALID))

    def test_save_empty(self):
        path = os.path.join(self.temp_dir.name, "empty.json")
        result = Parameters().save(path)
        self.assertTrue(result.contains_error(PARAMETERS_EMPTY))
        self.assertFalse(os.path.exists(path))

    def test_save_unserializable_value(self):
        path = os.path.join(self.temp_dir.name, "object.json")
        result = Parameters({"Platform": object()}).save(path)
        self.assertTrue(result.contains_error(PARAMETERS_FILE_WRITE_FAILED))
        self.assertFalse(os.path.exists(path))

    def test_save_to_missing_directory(self):
        path = os.path.join(self.temp_dir.name, "missing", "settings.json")
        result = Parameters({"PatternRows": 10}).save(path)
        self.assertTrue(result.contains_error(PARAMETERS_FILE_WRITE_FAILED))


class TestConfigParameters(unittest.TestCase):
    """Conversion between config dataclasses and Parameters."""

    def test_gray_code_config_from_parameters(self):
        params = Parameters({
            "PatternRows": 100,
            "PatternColumns": 200,
            "PatternColor": Color.GREEN,
            "PatternOrientation": Orientation.VERTICAL,
            "IncludeInverted": False,
            "PixelThreshold": 12,
            "SomethingElse": "ignored",
        })
        config = GrayCodeConfig.from_parameters(params)

        self.assertEqual(config.pattern_rows, 100)
        self.assertEqual(config.pattern_columns, 200)
        self.assertEqual(config.pattern_color, Color.GREEN)
        self.assertFalse(config.include_inverted)
        self.assertEqual(config.pixel_threshold, 12)
        self.assertEqual(config.sequence_count, 0)
        self.assertEqual(config.measure_regions, 0.0)

    def test_unset_fields_are_not_written(self):
        params = GrayCodeConfig(pattern_rows=10).to_parameters()
        self.assertTrue(params.contains("PatternRows"))
        self.assertFalse(params.contains("PatternColumns"))
        self.assertFalse(params.contains("IncludeInverted"))
        self.assertEqual(params.get("SequenceCount"), 0)

    def test_three_phase_config_round_trip(self):
        config = ThreePhaseConfig(
            pattern_rows=32,
            pattern_columns=64,
            pattern_color=Color.BLUE,
            pattern_orientation=Orientation.HORIZONTAL,
            bitdepth=Bitdepth.MONO_7BPP,
            pixels_per_period=16,
            repeat_phases=2,
            over_sample=4,
        )
        restored = ThreePhaseConfig.from_parameters(config.to_parameters())
        self.assertEqual(restored, config)
        self.assertEqual(config.to_parameters().get("Oversampling"), 4)


if __name__ == '__main__':
    unittest.main()
