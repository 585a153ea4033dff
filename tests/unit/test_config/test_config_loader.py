# SPDX-License-Identifier: LGPL-3.0-or-later
"""
Unit Tests for configuration loading

Tests YAML config file loading, merging, and the converter section.
"""

import argparse
import logging
import tempfile
import unittest
from pathlib import Path

from vmi2domain.config.config_loader import Config, ConverterConfig
from vmi2domain.core.exceptions import ConfigurationError, Fatal

LOG = logging.getLogger("vmi2domain.test.config")


class TestConverterConfig(unittest.TestCase):
    def test_defaults(self):
        cfg = ConverterConfig()
        self.assertEqual(cfg.primary_pod_interface_name, "eth0")
        self.assertEqual(cfg.multiqueue_max_queues, 8)
        self.assertEqual(cfg.vhostuser_socket_dir, "/var/lib/cni/vhostuser/")
        self.assertEqual(cfg.default_vm_cidr, "10.0.2.0/24")
        self.assertEqual(cfg.default_protocol, "TCP")
        self.assertEqual(cfg.vhostuser_queue_size, 1024)
        self.assertFalse(cfg.strict_network_names)

    def test_from_mapping(self):
        cfg = ConverterConfig.from_mapping(
            {"multiqueue_max_queues": 16, "default_vm_cidr": " 10.1.0.0/16 ", "strict_network_names": True}
        )
        self.assertEqual(cfg.multiqueue_max_queues, 16)
        self.assertEqual(cfg.default_vm_cidr, "10.1.0.0/16")
        self.assertTrue(cfg.strict_network_names)
        self.assertEqual(cfg.primary_pod_interface_name, "eth0")

    def test_empty_mapping_is_default(self):
        self.assertEqual(ConverterConfig.from_mapping(None), ConverterConfig())
        self.assertEqual(ConverterConfig.from_mapping({}), ConverterConfig())

    def test_unknown_key(self):
        with self.assertRaises(ConfigurationError) as cm:
            ConverterConfig.from_mapping({"max_queues": 4})
        self.assertIn("max_queues", str(cm.exception))

    def test_type_checks(self):
        for bad in (
            {"multiqueue_max_queues": 0},
            {"multiqueue_max_queues": "8"},
            {"multiqueue_max_queues": True},
            {"strict_network_names": "yes"},
            {"default_protocol": ""},
        ):
            with self.subTest(bad=bad):
                with self.assertRaises(ConfigurationError):
                    ConverterConfig.from_mapping(bad)

    def test_not_a_mapping(self):
        with self.assertRaises(ConfigurationError):
            ConverterConfig.from_mapping(["eth0"])  # type: ignore[arg-type]


class TestConfigFiles(unittest.TestCase):
    def test_load_many_merges_later_over_earlier(self):
        with tempfile.TemporaryDirectory() as td:
            td = Path(td)
            base = td / "base.yaml"
            base.write_text(
                "output: json\nconverter:\n  multiqueue_max_queues: 4\n  default_protocol: UDP\n",
                encoding="utf-8",
            )
            override = td / "override.yaml"
            override.write_text("converter:\n  multiqueue_max_queues: 2\n", encoding="utf-8")

            conf = Config.load_many(LOG, [base, override])

        self.assertEqual(conf["output"], "json")
        self.assertEqual(conf["converter"], {"multiqueue_max_queues": 2, "default_protocol": "UDP"})
        cfg = Config.converter_config(conf)
        self.assertEqual(cfg.multiqueue_max_queues, 2)
        self.assertEqual(cfg.default_protocol, "UDP")

    def test_expand_configs_directory(self):
        with tempfile.TemporaryDirectory() as td:
            td = Path(td)
            (td / "20-b.yaml").write_text("a: 2\n", encoding="utf-8")
            (td / "10-a.yml").write_text("a: 1\n", encoding="utf-8")
            (td / "notes.txt").write_text("ignored\n", encoding="utf-8")

            paths = Config.expand_configs(LOG, [str(td)])

        self.assertEqual([p.name for p in paths], ["10-a.yml", "20-b.yaml"])

    def test_load_one_empty_file(self):
        with tempfile.TemporaryDirectory() as td:
            p = Path(td) / "empty.yaml"
            p.write_text("", encoding="utf-8")
            self.assertEqual(Config.load_one(LOG, p), {})

    def test_load_one_errors(self):
        with tempfile.TemporaryDirectory() as td:
            td = Path(td)
            bad = td / "bad.yaml"
            bad.write_text("a: [1, 2\n", encoding="utf-8")
            scalar = td / "scalar.yaml"
            scalar.write_text("just text\n", encoding="utf-8")

            for path in (bad, scalar, td / "missing.yaml"):
                with self.subTest(path=path.name):
                    with self.assertRaises(Fatal) as cm:
                        Config.load_one(LOG, path)
                    self.assertEqual(cm.exception.code, 2)

    def test_apply_as_defaults(self):
        parser = argparse.ArgumentParser()
        parser.add_argument("--output", default="xml")
        parser.add_argument("--json-logs", dest="json_logs", action="store_true")

        Config.apply_as_defaults(LOG, parser, {"output": "summary", "json-logs": True, "converter": {}})

        args = parser.parse_args([])
        self.assertEqual(args.output, "summary")
        self.assertTrue(args.json_logs)
        self.assertEqual(parser.parse_args(["--output", "json"]).output, "json")


if __name__ == "__main__":
    unittest.main()
