# SPDX-License-Identifier: LGPL-3.0-or-later
"""Tests for the QEMU user-mode network argument builder."""
from __future__ import annotations

import pytest

from vmi2domain.config.config_loader import ConverterConfig
from vmi2domain.converter.slirp import (
    build_slirp_netdev_value,
    create_slirp_network,
    port_forward_clauses,
    vm_network_cidr,
)
from vmi2domain.core.exceptions import ConfigurationError
from vmi2domain.libvirt.domain_model import QemuArg
from vmi2domain.vmi.model import Interface, MultusNetwork, Network, PodNetwork, Port, SlirpBinding


def _iface(*ports):
    return Interface(name="default", binding=SlirpBinding(), model="e1000", ports=list(ports))


@pytest.mark.unit
class TestVmNetworkCidr:
    def test_default_cidr(self):
        assert vm_network_cidr(Network(name="default", pod=PodNetwork()), ConverterConfig()) == "10.0.2.0/24"

    def test_configured_cidr(self):
        net = Network(name="default", pod=PodNetwork(vm_network_cidr="192.168.50.0/24"))
        assert vm_network_cidr(net, ConverterConfig()) == "192.168.50.0/24"

    @pytest.mark.parametrize("cidr", ["192.168.50.0/33", "10.0.2.5", "not-a-cidr", "10.0.2.0/"])
    def test_invalid_cidr(self, cidr):
        net = Network(name="default", pod=PodNetwork(vm_network_cidr=cidr))
        with pytest.raises(ConfigurationError, match=f"Failed parsing CIDR {cidr}"):
            vm_network_cidr(net, ConverterConfig())

    def test_multus_network_uses_default(self):
        net = Network(name="net1", multus=MultusNetwork(network_name="nad"))
        assert vm_network_cidr(net, ConverterConfig(default_vm_cidr="10.10.0.0/16")) == "10.10.0.0/16"


@pytest.mark.unit
class TestPortForward:
    def test_empty_protocol_defaults_to_tcp_and_dedupes(self):
        assert port_forward_clauses([Port(port=80, protocol=""), Port(port=80, protocol="TCP")]) == [
            "hostfwd=tcp::80-:80"
        ]

    def test_same_port_different_protocols(self):
        clauses = port_forward_clauses([Port(port=53, protocol="UDP"), Port(port=53, protocol="TCP")])
        assert clauses == ["hostfwd=udp::53-:53", "hostfwd=tcp::53-:53"]

    def test_first_seen_order(self):
        ports = [Port(port=8080), Port(port=22), Port(port=8080), Port(port=443)]
        assert port_forward_clauses(ports) == [
            "hostfwd=tcp::8080-:8080",
            "hostfwd=tcp::22-:22",
            "hostfwd=tcp::443-:443",
        ]

    def test_zero_port_rejected(self):
        with pytest.raises(ConfigurationError, match="Port must be configured"):
            port_forward_clauses([Port(port=0)])

    def test_no_ports(self):
        assert port_forward_clauses([]) == []


@pytest.mark.unit
class TestCreateSlirpNetwork:
    def test_full_value(self):
        value = build_slirp_netdev_value(
            _iface(Port(port=80)),
            Network(name="default", pod=PodNetwork()),
            ["default.svc.cluster.local", "cluster.local"],
            ConverterConfig(),
        )
        assert value == (
            "user,id=default,net=10.0.2.0/24,dnssearch=default.svc.cluster.local,"
            "dnssearch=cluster.local,hostfwd=tcp::80-:80"
        )

    def test_returns_netdev_pair(self):
        args = create_slirp_network(_iface(), Network(name="default", pod=PodNetwork()), [], ConverterConfig())
        assert args == [QemuArg("-netdev"), QemuArg("user,id=default,net=10.0.2.0/24")]
