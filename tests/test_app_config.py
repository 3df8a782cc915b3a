import pathlib
import sys
import tempfile
import unittest
import unittest.mock

# Ensure src/ is on path for direct test execution
ROOT = pathlib.Path(__file__).resolve().parents[1]
SRC = ROOT / "src"
if str(SRC) not in sys.path:
    sys.path.insert(0, str(SRC))

from sensorlog.config.app_config import AppConfig, AppPaths, load_app_config  # noqa: E402
from sensorlog.config.sampling import LocationRequest, SAMPLING_PRESETS, resolve_preset  # noqa: E402


class AppConfigTest(unittest.TestCase):
    def test_missing_file_gives_defaults(self):
        cfg = load_app_config("/nonexistent/sensorlog.yaml")
        self.assertEqual(cfg, AppConfig())
        self.assertEqual(cfg.storage_filename, "sensor_data.json")
        self.assertEqual(cfg.location.interval_ms, 5000)
        self.assertEqual(cfg.location.fastest_interval_ms, 2000)

    def test_bundled_defaults_load(self):
        cfg = load_app_config(AppPaths().default_config_file)
        self.assertEqual(cfg.backend, "simulated")
        self.assertEqual(cfg.sampling_preset, "normal")
        self.assertEqual(cfg.map_center, (52.52, 13.405))
        self.assertEqual(cfg.map_zoom, 15.0)

    def test_yaml_values_and_fallbacks(self):
        with tempfile.TemporaryDirectory() as tmpdir:
            path = pathlib.Path(tmpdir) / "sensorlog.yaml"
            path.write_text(
                "backend: Android\n"
                "storage_filename: ../escape.json\n"
                "sampling_preset: Game\n"
                "location:\n"
                "  interval_ms: 1000\n"
                "  fastest_interval_ms: 3000\n"
                "  priority: bogus\n"
                "map:\n"
                "  center: [200, 13]\n"
                "  zoom: -1\n",
                encoding="utf-8",
            )

            cfg = load_app_config(path)

        self.assertEqual(cfg.backend, "termux")
        self.assertEqual(cfg.storage_filename, "sensor_data.json")
        self.assertEqual(cfg.sampling_preset, "game")
        self.assertEqual(cfg.location.interval_ms, 1000)
        self.assertEqual(cfg.location.fastest_interval_ms, 1000)
        self.assertEqual(cfg.location.priority, "high_accuracy")
        self.assertEqual(cfg.map_center, (52.52, 13.405))
        self.assertEqual(cfg.map_zoom, 15.0)

    def test_non_mapping_yaml_raises(self):
        with tempfile.TemporaryDirectory() as tmpdir:
            path = pathlib.Path(tmpdir) / "sensorlog.yaml"
            path.write_text("- just\n- a list\n", encoding="utf-8")
            with self.assertRaises(ValueError):
                load_app_config(path)

    def test_round_trip_mapping(self):
        cfg = AppConfig(backend="termux", sampling_preset="ui", location=LocationRequest(interval_ms=8000))
        self.assertEqual(AppConfig.from_mapping(cfg.to_mapping()), cfg)

    def test_env_overrides_data_root(self):
        with tempfile.TemporaryDirectory() as tmpdir:
            with unittest.mock.patch.dict("os.environ", {"SENSORLOG_DATA_ROOT": tmpdir}):
                paths = AppPaths()
            self.assertEqual(paths.data_root, pathlib.Path(tmpdir))

    def test_ensure_creates_data_and_log_dirs(self):
        with tempfile.TemporaryDirectory() as tmpdir:
            data_root = pathlib.Path(tmpdir) / "data"
            logs = pathlib.Path(tmpdir) / "nested" / "logs"
            env = {"SENSORLOG_DATA_ROOT": str(data_root), "SENSORLOG_LOG_DIR": str(logs)}
            with unittest.mock.patch.dict("os.environ", env):
                paths = AppPaths()
            paths.ensure()
            paths.ensure()
            self.assertTrue(data_root.is_dir())
            self.assertTrue(logs.is_dir())


class SamplingPresetTest(unittest.TestCase):
    def test_four_presets_in_order(self):
        self.assertEqual([p.label for p in SAMPLING_PRESETS.values()], ["Normal", "UI", "Game", "Fastest"])

    def test_resolve_by_key_or_label(self):
        self.assertEqual(resolve_preset("ui").label, "UI")
        self.assertEqual(resolve_preset("Fastest").key, "fastest")
        self.assertEqual(resolve_preset("warp speed").key, "normal")
        self.assertEqual(resolve_preset(None).key, "normal")


if __name__ == "__main__":
    unittest.main()
