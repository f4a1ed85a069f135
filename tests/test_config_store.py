import json
import sys
import tempfile
import unittest
from pathlib import Path

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from cultivation.core.constants import DEFAULT_CONFIG
from cultivation.services.config_store import (
    ConfigSaveError,
    ConfigStore,
    InvalidOptionValue,
    StoreUnavailable,
    UnknownOptionError,
)


class ConfigStoreTests(unittest.TestCase):
    def setUp(self) -> None:
        self._tmp = tempfile.TemporaryDirectory()
        self.config_path = Path(self._tmp.name) / "cultivation" / "configuration.json"
        self.store = ConfigStore(self.config_path)

    def tearDown(self) -> None:
        self._tmp.cleanup()

    def _read_file(self) -> dict:
        return json.loads(self.config_path.read_text(encoding="utf-8"))

    def test_load_all_without_file_raises(self) -> None:
        with self.assertRaises(StoreUnavailable):
            self.store.load_all()

    def test_load_all_with_corrupt_file_raises(self) -> None:
        self.config_path.parent.mkdir(parents=True)
        self.config_path.write_text("{not json", encoding="utf-8")
        with self.assertRaises(StoreUnavailable):
            self.store.load_all()

    def test_load_all_with_non_object_raises(self) -> None:
        self.config_path.parent.mkdir(parents=True)
        self.config_path.write_text("[1, 2]", encoding="utf-8")
        with self.assertRaises(StoreUnavailable):
            self.store.load_all()

    def test_ensure_defaults_only_writes_once(self) -> None:
        self.assertTrue(self.store.ensure_defaults())
        self.assertEqual(self._read_file(), DEFAULT_CONFIG)

        self.store.set("language", "fr")
        self.assertFalse(self.store.ensure_defaults())
        self.assertEqual(self._read_file()["language"], "fr")

    def test_load_all_maps_keys_and_defaults(self) -> None:
        self.config_path.parent.mkdir(parents=True)
        self.config_path.write_text(
            json.dumps(
                {
                    "grasscutter_path": "C:/gc/grasscutter.jar",
                    "customBackground": "https://example.com/x.png",
                    "grasscutter_with_game": True,
                    "java_path": "",
                }
            ),
            encoding="utf-8",
        )
        record = self.store.load_all()
        self.assertEqual(record.grasscutter_path, "C:/gc/grasscutter.jar")
        self.assertEqual(record.custom_background, "https://example.com/x.png")
        self.assertTrue(record.grasscutter_with_game)
        self.assertIsNone(record.java_path)
        self.assertEqual(record.language, "en")
        self.assertEqual(record.theme, "default")
        self.assertFalse(record.swag_mode)

    def test_set_is_visible_to_immediate_get(self) -> None:
        self.store.ensure_defaults()
        self.store.set("client_version", "3.2.0")
        self.assertEqual(self.store.get("client_version"), "3.2.0")
        self.assertEqual(ConfigStore(self.config_path).get("client_version"), "3.2.0")

    def test_set_keeps_other_keys(self) -> None:
        self.store.ensure_defaults()
        self.store.set("java_path", "/usr/bin/java")
        self.store.set("theme", "dark")
        data = self._read_file()
        self.assertEqual(data["java_path"], "/usr/bin/java")
        self.assertEqual(data["theme"], "dark")
        self.assertEqual(data["language"], "en")

    def test_set_without_file_starts_from_defaults(self) -> None:
        self.store.set("swag_mode", True)
        data = self._read_file()
        self.assertTrue(data["swag_mode"])
        self.assertEqual(data["theme"], "default")

    def test_invalid_value_is_rejected_before_writing(self) -> None:
        self.store.ensure_defaults()
        with self.assertRaises(InvalidOptionValue):
            self.store.set("grasscutter_with_game", "yes")
        with self.assertRaises(InvalidOptionValue):
            self.store.set("java_path", 42)
        self.assertEqual(self._read_file(), DEFAULT_CONFIG)

    def test_unknown_key_is_rejected(self) -> None:
        self.store.ensure_defaults()
        with self.assertRaises(UnknownOptionError):
            self.store.set("not_an_option", "x")
        with self.assertRaises(UnknownOptionError):
            self.store.get("not_an_option")

    def test_get_without_file_returns_none(self) -> None:
        self.assertIsNone(self.store.get("language"))

    def test_set_on_corrupt_file_leaves_it_untouched(self) -> None:
        self.config_path.parent.mkdir(parents=True)
        corrupt = b'{"game_install_path": "D:/Games/GenshinImpact.exe", "language": '
        self.config_path.write_bytes(corrupt)

        with self.assertRaises(ConfigSaveError):
            self.store.set("java_path", "/usr/bin/java")
        self.assertEqual(self.config_path.read_bytes(), corrupt)

    def test_get_on_corrupt_file_raises(self) -> None:
        self.config_path.parent.mkdir(parents=True)
        self.config_path.write_text("{not json", encoding="utf-8")
        with self.assertRaises(StoreUnavailable):
            self.store.get("language")

    def test_no_temp_files_left_behind(self) -> None:
        self.store.ensure_defaults()
        self.store.set("theme", "dark")
        leftovers = [p.name for p in self.config_path.parent.iterdir() if p.suffix == ".tmp"]
        self.assertEqual(leftovers, [])


if __name__ == "__main__":
    unittest.main()
