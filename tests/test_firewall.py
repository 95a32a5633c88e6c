"""Tests for the desired firewall rule set."""

from __future__ import annotations

import dataclasses
import logging

import pytest

from vmstack.cloud.firewall import standard_firewall_rules, warn_open_rules


class TestStandardRules:
    def test_documented_rule_set(self) -> None:
        """Ports, tags and sources match the published table."""
        rules = {rule.name: rule for rule in standard_firewall_rules()}
        assert rules["allow-http"].ports == ("80",)
        assert rules["allow-https"].ports == ("443",)
        assert sorted(rules["allow-app-ports"].ports) == ["3000", "5173", "8080"]
        assert rules["allow-postgres"].ports == ("5432",)
        assert rules["allow-ollama"].ports == ("11434",)

        assert rules["allow-postgres"].target_tags == ("db",)
        assert rules["allow-ollama"].target_tags == ("ai",)
        for name in ("allow-http", "allow-https", "allow-app-ports"):
            assert rules[name].target_tags == ("web",)
            assert not rules[name].restricted

        assert all(rule.protocol == "tcp" for rule in rules.values())

    def test_names(self) -> None:
        assert [rule.name for rule in standard_firewall_rules()] == [
            "allow-http",
            "allow-https",
            "allow-app-ports",
            "allow-postgres",
            "allow-ollama",
        ]


class TestDiffersFrom:
    @pytest.fixture
    def rule(self):
        return standard_firewall_rules()[2]

    def test_same_rule_in_other_order(self, rule) -> None:
        """Order of ports and ranges is not drift."""
        live = dataclasses.replace(
            rule, ports=tuple(reversed(rule.ports)), description="edited by hand"
        )
        assert not rule.differs_from(live)

    def test_extra_port(self, rule) -> None:
        live = dataclasses.replace(rule, ports=rule.ports + ("22",))
        assert rule.differs_from(live)

    def test_other_source_range(self, rule) -> None:
        live = dataclasses.replace(rule, source_ranges=("10.0.0.0/8",))
        assert rule.differs_from(live)

    def test_other_target(self, rule) -> None:
        live = dataclasses.replace(rule, target_tags=("db",))
        assert rule.differs_from(live)


class TestWarnOpenRules:
    def test_open_restricted_rules_warn(self, caplog) -> None:
        with caplog.at_level(logging.WARNING):
            warn_open_rules(standard_firewall_rules())
        assert "allow-postgres" in caplog.text
        assert "allow-ollama" in caplog.text
        assert "allow-http " not in caplog.text

    def test_restricted_rules_quiet(self, caplog) -> None:
        with caplog.at_level(logging.WARNING):
            warn_open_rules(standard_firewall_rules(("192.0.2.1/32",)))
        assert caplog.text == ""
