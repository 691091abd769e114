# Copyright 2026 socgraph Contributors
# SPDX-License-Identifier: Apache-2.0

"""Tests for the root parser and its sub-parser delegation, driven by synthetic events."""

from pathlib import Path

import pytest

from socgraph.catalog import ComponentLibrary
from socgraph.config import LoaderConfig
from socgraph.model import ReportVersion
from socgraph.parser import (
    DuplicateRootError,
    EndElement,
    Event,
    MissingRootError,
    ParseError,
    SopcInfoParser,
    StartElement,
    Text,
    TruncatedDocumentError,
    UnsupportedVersionError,
    WarningKind,
)
from socgraph.parser.handlers import ConnectionHandler, IgnoreAllHandler, InterfaceHandler, ModuleHandler

# ###############
# Test Helpers
# ###############


def _s(tag: str, **attrs: str) -> StartElement:
    return StartElement(tag, dict(attrs))


def _e(name: str) -> EndElement:
    return EndElement(name)


def _t(chars: str) -> Text:
    return Text(chars)


def _parser(config: LoaderConfig | None = None) -> SopcInfoParser:
    return SopcInfoParser(ComponentLibrary.default(), config, source=Path("test.sopcinfo"))


def _feed(parser: SopcInfoParser, events: list[Event]) -> SopcInfoParser:
    for event in events:
        parser.feed(event)
    return parser


def _root(*body: Event) -> list[Event]:
    return [_s("EnsembleReport", name="sys", version="1.0"), *body, _e("EnsembleReport")]


def _module(name: str, *body: Event, kind: str = "altera_avalon_pio") -> list[Event]:
    return [_s("module", kind=kind, name=name, version="11.0"), *body, _e("module")]


def _interface(name: str, kind: str, is_start: str) -> list[Event]:
    return [_s("interface", name=name, kind=kind, isStart=is_start), _e("interface")]


# ###############
# Root Element
# ###############


class TestRootElement:
    def test_root_creates_system(self) -> None:
        parser = _feed(_parser(), _root())
        system = parser.finish()
        assert system.name == "sys"
        assert system.version == "1.0"
        assert system.source == Path("test.sopcinfo")
        assert system.components == []

    def test_root_name_is_case_insensitive(self) -> None:
        parser = _feed(_parser(), [_s("ensemblereport", name="lower"), _e("ensemblereport")])
        assert parser.finish().name == "lower"

    def test_duplicate_root_is_fatal(self) -> None:
        parser = _parser()
        parser.feed(_s("EnsembleReport", name="a"))
        with pytest.raises(DuplicateRootError):
            parser.feed(_s("EnsembleReport", name="b"))

    def test_module_before_root_is_fatal(self) -> None:
        with pytest.raises(MissingRootError):
            _parser().feed(_s("module", kind="altera_avalon_pio", name="pio"))

    def test_connection_before_root_is_fatal(self) -> None:
        with pytest.raises(MissingRootError):
            _parser().feed(_s("connection", kind="avalon"))

    def test_document_without_root_is_fatal(self) -> None:
        parser = _feed(_parser(), [_s("somethingElse"), _e("somethingElse")])
        with pytest.raises(MissingRootError):
            parser.finish()

    def test_unclosed_root_is_truncated(self) -> None:
        parser = _feed(_parser(), [_s("EnsembleReport", name="sys")])
        with pytest.raises(TruncatedDocumentError):
            parser.finish()

    def test_element_after_root_closed_is_rejected(self) -> None:
        parser = _feed(_parser(), _root())
        with pytest.raises(ParseError):
            parser.feed(_s("module", kind="altera_avalon_pio", name="late"))

    def test_second_root_after_first_closed_is_duplicate(self) -> None:
        parser = _feed(_parser(), _root())
        with pytest.raises(DuplicateRootError):
            parser.feed(_s("EnsembleReport", name="again"))

    def test_unknown_elements_are_ignored(self) -> None:
        parser = _feed(_parser(), _root(_s("fabric"), _t("QSYS"), _e("fabric")))
        system = parser.finish()
        assert system.components == []
        assert parser.warnings == []


# ###############
# Text Targets
# ###############


class TestTextTargets:
    def test_report_version_replaces_root_version(self) -> None:
        parser = _feed(_parser(), _root(_s("reportVersion"), _t("11.0 157"), _e("reportVersion")))
        assert parser.finish().version == "11.0 157"

    def test_text_fragments_are_concatenated(self) -> None:
        events = _root(_s("reportVersion"), _t("11"), _t(".0"), _t(" 157"), _e("reportVersion"))
        assert _feed(_parser(), events).finish().version == "11.0 157"

    def test_unique_identifier_is_stored_on_parser_and_system(self) -> None:
        events = _root(_s("uniqueIdentifier"), _t("1342"), _t("177280"), _e("uniqueIdentifier"))
        parser = _feed(_parser(), events)
        assert parser.unique_identifier == "1342177280"
        assert parser.finish().unique_identifier == "1342177280"

    def test_text_outside_target_is_ignored(self) -> None:
        events = _root(_t("\n  "), _s("uniqueIdentifier"), _t("abc"), _e("uniqueIdentifier"), _t("\n"))
        assert _feed(_parser(), events).unique_identifier == "abc"

    def test_report_version_before_root_is_fatal(self) -> None:
        with pytest.raises(MissingRootError):
            _parser().feed(_s("reportVersion"))


# ###############
# Version Gate
# ###############


class TestVersionGate:
    def test_version_below_minimum_is_rejected(self) -> None:
        parser = _parser()
        _feed(parser, [_s("EnsembleReport", name="sys", version="1.0"), _s("reportVersion"), _t("7.2")])
        with pytest.raises(UnsupportedVersionError) as exc_info:
            parser.feed(_e("reportVersion"))
        assert exc_info.value.version == "7.2"
        assert exc_info.value.minimum == "8.1"
        assert parser.system is not None
        assert parser.system.version == "1.0"

    def test_configured_minimum_is_used(self) -> None:
        config = LoaderConfig(min_supported_version=ReportVersion(10, 0))
        parser = _feed(_parser(config), [_s("EnsembleReport", name="sys"), _s("reportVersion"), _t("9.0")])
        with pytest.raises(UnsupportedVersionError):
            parser.feed(_e("reportVersion"))

    def test_minimum_is_inclusive(self) -> None:
        parser = _feed(_parser(), _root(_s("reportVersion"), _t("8.1"), _e("reportVersion")))
        assert parser.finish().version == "8.1"
        assert parser.warnings == []

    def test_minor_versions_compare_numerically(self) -> None:
        config = LoaderConfig(min_supported_version=ReportVersion(10, 9))
        parser = _feed(_parser(config), _root(_s("reportVersion"), _t("10.10"), _e("reportVersion")))
        assert parser.finish().version == "10.10"

    def test_version_above_maximum_warns(self) -> None:
        parser = _feed(_parser(), _root(_s("reportVersion"), _t("13.1 162"), _e("reportVersion")))
        assert parser.finish().version == "13.1 162"
        assert [w.kind for w in parser.warnings] == [WarningKind.UNTESTED_VERSION]

    def test_unparsable_version_warns(self) -> None:
        parser = _feed(_parser(), _root(_s("reportVersion"), _t("unknown"), _e("reportVersion")))
        assert parser.finish().version == "unknown"
        assert [w.kind for w in parser.warnings] == [WarningKind.UNPARSABLE_VERSION]


# ###############
# Module Delegation
# ###############


class TestModuleDelegation:
    def test_module_installs_module_handler(self) -> None:
        parser = _feed(_parser(), [_s("EnsembleReport", name="sys"), _s("module", kind="altera_avalon_pio", name="pio")])
        assert parser.depth == 2
        assert isinstance(parser.active_handler, ModuleHandler)
        assert parser.current_component is not None
        assert parser.current_component.name == "pio"

    def test_module_end_restores_root(self) -> None:
        parser = _feed(_parser(), [_s("EnsembleReport", name="sys"), *_module("pio")])
        assert parser.depth == 1
        assert parser.active_handler is parser
        assert parser.current_component is None

    def test_components_are_added_in_document_order(self) -> None:
        events = _root(*_module("a"), *_module("b"), *_module("c"))
        system = _feed(_parser(), events).finish()
        assert [c.name for c in system.components] == ["a", "b", "c"]
        assert system.components[0].kind == "altera_avalon_pio"
        assert system.components[0].version == "11.0"

    def test_same_named_child_does_not_end_delegation(self) -> None:
        parser = _parser()
        _feed(parser, [_s("EnsembleReport", name="sys"), _s("module", kind="altera_avalon_pio", name="outer")])
        _feed(parser, [_s("module", kind="altera_avalon_pio", name="inner"), _e("module")])
        assert parser.depth == 2
        assert isinstance(parser.active_handler, ModuleHandler)
        parser.feed(_e("module"))
        assert parser.depth == 1
        _feed(parser, [*_module("after"), _e("EnsembleReport")])
        assert [c.name for c in parser.finish().components] == ["outer", "after"]

    def test_deeply_nested_same_named_children(self) -> None:
        nested = [_s("module", name="x"), _s("module", name="y"), _e("module"), _e("module")]
        system = _feed(_parser(), _root(*_module("outer", *nested))).finish()
        assert [c.name for c in system.components] == ["outer"]

    def test_interfaces_are_created_and_delegated(self) -> None:
        parser = _parser()
        _feed(parser, [_s("EnsembleReport", name="sys"), _s("module", kind="altera_avalon_uart", name="uart")])
        parser.feed(_s("interface", name="s1", kind="avalon_slave", isStart="false"))
        assert parser.depth == 3
        assert isinstance(parser.active_handler, InterfaceHandler)
        _feed(parser, [_e("interface"), _e("module"), _e("EnsembleReport")])
        component = parser.finish().components[0]
        assert [i.name for i in component.interfaces] == ["s1"]
        assert component.interfaces[0].component is component
        assert component.interfaces[0].kind == "avalon_slave"
        assert component.interfaces[0].is_master is False

    def test_master_role_is_inferred_without_is_start(self) -> None:
        body = [_s("interface", name="m0", kind="avalon_master"), _e("interface")]
        component = _feed(_parser(), _root(*_module("dma", *body))).finish().components[0]
        assert component.interfaces[0].is_master is True

    def test_interrupt_roles_are_inferred_without_is_start(self) -> None:
        """Interrupt connections start at the receiver, so the sender is the slave end."""
        body = [
            _s("interface", name="d_irq", kind="interrupt_receiver"),
            _e("interface"),
            _s("interface", name="irq", kind="interrupt_sender"),
            _e("interface"),
        ]
        component = _feed(_parser(), _root(*_module("cpu", *body))).finish().components[0]
        assert component.get_interface("d_irq").is_master is True
        assert component.get_interface("irq").is_master is False

    def test_module_and_interface_parameters_are_captured(self) -> None:
        body = [
            _s("parameter", name="dataWidth"),
            _s("type"),
            _t("int"),
            _e("type"),
            _s("value"),
            _t("3"),
            _t("2"),
            _e("value"),
            _e("parameter"),
            _s("interface", name="s1", kind="avalon_slave", isStart="false"),
            _s("parameter", name="addressSpan"),
            _s("value"),
            _t("16"),
            _e("value"),
            _e("parameter"),
            _e("interface"),
        ]
        component = _feed(_parser(), _root(*_module("pio", *body))).finish().components[0]
        assert component.parameters == {"dataWidth": "32"}
        assert component.interfaces[0].parameters == {"addressSpan": "16"}

    def test_unknown_kind_gets_stand_in_and_warning(self) -> None:
        parser = _feed(_parser(), _root(*_module("custom", kind="my_custom_ip")))
        component = parser.finish().components[0]
        assert component.is_resolved is False
        assert component.kind == "my_custom_ip"
        assert [w.kind for w in parser.warnings] == [WarningKind.UNRESOLVED_COMPONENT]

    def test_document_ending_inside_module_is_truncated(self) -> None:
        parser = _feed(_parser(), [_s("EnsembleReport", name="sys"), _s("module", kind="altera_avalon_pio", name="pio")])
        with pytest.raises(TruncatedDocumentError):
            parser.finish()

    def test_mismatched_end_tag_inside_module_is_fatal(self) -> None:
        parser = _feed(_parser(), [_s("EnsembleReport", name="sys"), _s("module", kind="altera_avalon_pio", name="p")])
        parser.feed(_s("assignment"))
        with pytest.raises(ParseError):
            parser.feed(_e("module"))


# ###############
# Ignored Subtrees
# ###############


class TestIgnoredSubtrees:
    def test_plugin_swallows_nested_modules(self) -> None:
        body = [_s("plugin"), *_module("hidden"), _s("plugin"), _e("plugin"), _e("plugin")]
        parser = _feed(_parser(), _root(*body, *_module("visible")))
        assert [c.name for c in parser.finish().components] == ["visible"]

    def test_parameter_swallows_connections_and_text(self) -> None:
        body = [
            _s("parameter", name="AUTO_GENERATION_ID"),
            _s("connection", kind="avalon", start="a.m", end="b.s"),
            _e("connection"),
            _s("reportVersion"),
            _t("99.0"),
            _e("reportVersion"),
            _e("parameter"),
        ]
        parser = _feed(_parser(), _root(*body))
        system = parser.finish()
        assert len(parser.pending) == 0
        assert system.version == "1.0"

    def test_ignore_handler_is_active_inside_subtree(self) -> None:
        parser = _feed(_parser(), [_s("EnsembleReport", name="sys"), _s("plugin")])
        assert isinstance(parser.active_handler, IgnoreAllHandler)
        parser.feed(_e("plugin"))
        assert parser.active_handler is parser


# ###############
# Connections
# ###############


def _two_modules() -> list[Event]:
    return [
        *_module("cpu", *_interface("data_master", "avalon_master", "true"), kind="altera_nios2_qsys"),
        *_module("uart", *_interface("s1", "avalon_slave", "false"), kind="altera_avalon_uart"),
    ]


class TestConnections:
    def test_connection_endpoints_from_attributes(self) -> None:
        connection_events = [_s("connection", kind="avalon", name="c0", start="cpu.data_master", end="uart.s1")]
        parser = _feed(_parser(), _root(*_two_modules(), *connection_events, _e("connection")))
        system = parser.finish()
        assert len(parser.pending) == 1
        connection = parser.pending[0]
        assert connection.kind == "avalon"
        assert connection.name == "c0"
        assert connection.master is system.get_interface("cpu", "data_master")
        assert connection.slave is system.get_interface("uart", "s1")

    def test_connection_endpoints_from_children(self) -> None:
        body = [
            _s("connection", kind="avalon", start="nowhere.x", end="nowhere.y"),
            _s("startModule"),
            _t("cpu"),
            _e("startModule"),
            _s("startConnectionPoint"),
            _t("data_"),
            _t("master"),
            _e("startConnectionPoint"),
            _s("endModule"),
            _t("uart"),
            _e("endModule"),
            _s("endConnectionPoint"),
            _t("s1"),
            _e("endConnectionPoint"),
            _e("connection"),
        ]
        parser = _feed(_parser(), _root(*_two_modules(), *body))
        system = parser.finish()
        connection = parser.pending[0]
        assert connection.master is system.get_interface("cpu", "data_master")
        assert connection.slave is system.get_interface("uart", "s1")
        assert parser.warnings == []

    def test_connection_parameters_are_captured(self) -> None:
        body = [
            _s("connection", kind="avalon", start="cpu.data_master", end="uart.s1"),
            _s("parameter", name="baseAddress"),
            _s("value"),
            _t("0x1000"),
            _e("value"),
            _e("parameter"),
            _e("connection"),
        ]
        parser = _feed(_parser(), _root(*_two_modules(), *body))
        assert parser.pending[0].parameters == {"baseAddress": "0x1000"}

    def test_connection_is_not_linked_during_parsing(self) -> None:
        body = [_s("connection", kind="avalon", start="cpu.data_master", end="uart.s1"), _e("connection")]
        parser = _feed(_parser(), _root(*_two_modules(), *body))
        system = parser.finish()
        assert system.get_interface("cpu", "data_master").connections == []

    def test_connection_handler_is_active_inside_subtree(self) -> None:
        parser = _feed(_parser(), [_s("EnsembleReport", name="sys"), _s("connection", kind="clock")])
        assert isinstance(parser.active_handler, ConnectionHandler)

    def test_dangling_master_is_queued_with_warning(self) -> None:
        body = [_s("connection", kind="avalon", start="ghost.m0", end="uart.s1"), _e("connection")]
        parser = _feed(_parser(), _root(*_two_modules(), *body))
        connection = parser.pending[0]
        assert connection.master is None
        assert connection.slave is not None
        assert [w.kind for w in parser.warnings] == [WarningKind.DANGLING_CONNECTION_ENDPOINT]
        assert "ghost.m0" in parser.warnings[0].message

    def test_connection_nested_same_name_child(self) -> None:
        body = [
            _s("connection", kind="avalon", start="cpu.data_master", end="uart.s1"),
            _s("connection", kind="bogus"),
            _e("connection"),
            _e("connection"),
        ]
        parser = _feed(_parser(), _root(*_two_modules(), *body))
        parser.finish()
        assert [c.kind for c in parser.pending] == ["avalon"]
