# SPDX-License-Identifier: LGPL-3.0-or-later
import unittest

from vmi2domain.config.config_loader import ConverterConfig
from vmi2domain.converter.context import ConverterContext
from vmi2domain.converter.queues import (
    CPUTopology,
    calculate_network_queues,
    calculate_requested_vcpus,
    get_cpu_topology,
    parse_cpu_quantity,
)
from vmi2domain.core.exceptions import ConfigurationError
from vmi2domain.vmi.model import CPU, Resources, VirtualMachineInstanceSpec


class TestCPUTopology(unittest.TestCase):
    """Test guest CPU topology derivation."""

    def test_defaults_to_single_cpu(self):
        self.assertEqual(get_cpu_topology(VirtualMachineInstanceSpec()), CPUTopology(1, 1, 1))

    def test_explicit_topology(self):
        spec = VirtualMachineInstanceSpec(cpu=CPU(cores=4, sockets=2, threads=2))
        topo = get_cpu_topology(spec)
        self.assertEqual(topo, CPUTopology(sockets=2, cores=4, threads=2))
        self.assertEqual(calculate_requested_vcpus(topo), 16)

    def test_unset_fields_default_to_one(self):
        topo = get_cpu_topology(VirtualMachineInstanceSpec(cpu=CPU(cores=3)))
        self.assertEqual(topo, CPUTopology(sockets=1, cores=3, threads=1))

    def test_sockets_from_cpu_limit(self):
        spec = VirtualMachineInstanceSpec(resources=Resources(requests={"cpu": "2"}, limits={"cpu": "3"}))
        self.assertEqual(get_cpu_topology(spec).sockets, 3)

    def test_sockets_from_cpu_request(self):
        spec = VirtualMachineInstanceSpec(resources=Resources(requests={"cpu": "1500m"}))
        self.assertEqual(get_cpu_topology(spec).sockets, 2)

    def test_resources_ignored_with_explicit_topology(self):
        spec = VirtualMachineInstanceSpec(cpu=CPU(cores=2), resources=Resources(limits={"cpu": "8"}))
        self.assertEqual(get_cpu_topology(spec).sockets, 1)


class TestParseCpuQuantity(unittest.TestCase):
    def test_values(self):
        self.assertEqual(parse_cpu_quantity("4"), 4)
        self.assertEqual(parse_cpu_quantity("500m"), 1)
        self.assertEqual(parse_cpu_quantity("2500m"), 3)
        self.assertEqual(parse_cpu_quantity("1.2"), 2)

    def test_kubernetes_suffixes(self):
        self.assertEqual(parse_cpu_quantity("2k"), 2000)
        self.assertEqual(parse_cpu_quantity("1Ki"), 1024)
        self.assertEqual(parse_cpu_quantity("100u"), 1)
        self.assertEqual(parse_cpu_quantity("0.5"), 1)
        self.assertEqual(parse_cpu_quantity(".5"), 1)

    def test_exponent(self):
        self.assertEqual(parse_cpu_quantity("1e3"), 1000)
        self.assertEqual(parse_cpu_quantity("25e-1"), 3)
        self.assertEqual(parse_cpu_quantity("1E"), 10**18)

    def test_invalid(self):
        for bad in ("two", "1x", "", "-1", "1e", "1Kii"):
            with self.subTest(quantity=bad), self.assertRaises(ConfigurationError):
                parse_cpu_quantity(bad)


class TestNetworkQueues(unittest.TestCase):
    def test_one_queue_per_vcpu(self):
        ctx = ConverterContext(vcpu_calculator=lambda _s: 3)
        self.assertEqual(calculate_network_queues(VirtualMachineInstanceSpec(), ctx), 3)

    def test_capped_at_tap_maximum(self):
        ctx = ConverterContext(vcpu_calculator=lambda _s: 64)
        self.assertEqual(calculate_network_queues(VirtualMachineInstanceSpec(), ctx), 8)

    def test_cap_is_configurable(self):
        ctx = ConverterContext(vcpu_calculator=lambda _s: 64, config=ConverterConfig(multiqueue_max_queues=16))
        self.assertEqual(calculate_network_queues(VirtualMachineInstanceSpec(), ctx), 16)

    def test_default_calculator_uses_topology(self):
        spec = VirtualMachineInstanceSpec(cpu=CPU(cores=2, threads=2))
        self.assertEqual(calculate_network_queues(spec, ConverterContext()), 4)


if __name__ == "__main__":
    unittest.main()
