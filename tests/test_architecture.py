"""Architectural boundary tests using pytest-archon.

These tests verify that the codebase follows clean architecture principles:
- Domain layer has no dependencies on adapters
- Application services don't depend on adapters
- Adapters depend on domain contracts, never on application services
- Only the composition root wires both together
"""

from pytest_archon import archrule


def test_domain_models_have_no_dependencies() -> None:
    """Domain models should not import any other modules except standard library and domain itself."""
    (
        archrule("domain models", comment="Domain models should be independent")
        .match("community_hub.domain.models*")
        .should_not_import("community_hub.adapters*")
        .should_not_import("community_hub.application*")
        .should_not_import("community_hub.domain.contracts*")
        .should_not_import("community_hub.domain.ports*")
        .may_import("community_hub.domain.models*")
        .check("community_hub")
    )


def test_domain_contracts_have_no_dependencies() -> None:
    """Domain contracts (protocols/interfaces) should not import adapters or application."""
    (
        archrule("domain contracts", comment="Domain contracts should be independent")
        .match("community_hub.domain.contracts*")
        .should_not_import("community_hub.adapters*")
        .should_not_import("community_hub.application*")
        .may_import("community_hub.domain.contracts*")
        .may_import("community_hub.domain.models*")
        .check("community_hub")
    )


def test_domain_ports_have_no_dependencies() -> None:
    """Domain ports (interfaces) should not import adapters or application."""
    (
        archrule("domain ports", comment="Domain ports should be independent")
        .match("community_hub.domain.ports*")
        .should_not_import("community_hub.adapters*")
        .should_not_import("community_hub.application*")
        .may_import("community_hub.domain.ports*")
        .may_import("community_hub.domain.models*")
        .check("community_hub")
    )


def test_application_services_dont_import_adapters() -> None:
    """Application services should not depend on adapters (infrastructure layer)."""
    (
        archrule(
            "application services", comment="Application services should not depend on adapters"
        )
        .match("community_hub.application*")
        .should_not_import("community_hub.adapters*")
        .may_import("community_hub.domain*")
        .may_import("community_hub.application*")
        .check("community_hub")
    )


def test_adapters_dont_import_application() -> None:
    """Adapters should not import application services (to avoid cycles)."""
    (
        archrule(
            "adapters independence", comment="Adapters should not depend on application services"
        )
        .match("community_hub.adapters*")
        .should_not_import("community_hub.application*")
        .may_import("community_hub.domain*")
        .may_import("community_hub.adapters*")
        .check("community_hub", only_direct_imports=True)
    )


def test_no_circular_dependencies_in_domain() -> None:
    """Domain layer should not have circular dependencies."""
    (
        archrule("domain no cycles", comment="Domain layer should not have circular dependencies")
        .match("community_hub.domain*")
        .should_not_import("community_hub.adapters*")
        .should_not_import("community_hub.application*")
        .may_import("community_hub.domain*")
        .check("community_hub", only_direct_imports=True)
    )


def test_realtime_transport_doesnt_import_web_adapters() -> None:
    """The Socket.IO transport should work without the HTTP API."""
    (
        archrule("realtime independence", comment="Realtime adapter should not import web")
        .match("community_hub.adapters.realtime*")
        .should_not_import("community_hub.adapters.web*")
        .may_import("community_hub.domain*")
        .may_import("community_hub.adapters.config*")
        .may_import("community_hub.adapters.realtime*")
        .check("community_hub")
    )
