# SPDX-License-Identifier: LGPL-3.0-or-later
import pytest

from vmi2domain.converter.dns import parse_nameservers, parse_search_domains, read_resolv_conf


@pytest.mark.unit
class TestResolvConf:
    def test_read(self, resolv_conf):
        nameservers, domains = read_resolv_conf(str(resolv_conf))

        assert nameservers == ["10.96.0.10"]
        assert domains == ["default.svc.cluster.local", "svc.cluster.local", "cluster.local"]

    def test_missing_file_propagates(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            read_resolv_conf(str(tmp_path / "missing"))

    def test_nameservers_ipv4_only_with_default(self):
        assert parse_nameservers("nameserver fd00::10\nnameserver 1.1.1.1\n") == ["1.1.1.1"]
        assert parse_nameservers("nameserver fd00::10\n") == ["8.8.8.8"]
        assert parse_nameservers("") == ["8.8.8.8"]

    def test_search_domains_lowercased_and_merged(self):
        content = "search Example.COM corp\n# search ignored.example\nsearch lab\n"
        assert parse_search_domains(content) == ["example.com", "corp", "lab"]

    def test_search_domain_default(self):
        assert parse_search_domains("nameserver 10.0.0.1\n") == ["cluster.local"]
