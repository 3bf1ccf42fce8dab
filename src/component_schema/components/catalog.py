# src/component_schema/components/catalog.py
"""
Built-in component catalog.

Components with `manages_schema=True` own the tables listed in their
manifest; those tables exist only while the component's schema is
enabled. Bump a manifest's `version` whenever its tables change.
"""
from component_schema.components.types import (
    ColumnSpec as Col,
    ComponentDefinition,
    SchemaManifest,
    TableManifest,
)


def _id_col():
    return Col("id", "varchar", nullable=False, primary_key=True)


def _created_at():
    return Col("created_at", "timestamp")


CARDCHECK_TABLES = (
    TableManifest(
        "cardcheck_definitions",
        columns=(
            _id_col(),
            Col("name", "text", nullable=False),
            Col("description", "text"),
            Col("body", "text"),
            Col("active", "boolean", nullable=False, default=True),
            _created_at(),
        ),
    ),
    TableManifest(
        "cardchecks",
        columns=(
            _id_col(),
            Col("worker_id", "varchar", nullable=False),
            Col("definition_id", "varchar", nullable=False),
            Col("status", "varchar", nullable=False, default="pending"),
            Col("signed_at", "timestamp"),
            Col("esig_id", "varchar"),
            _created_at(),
        ),
    ),
)

BTU_TABLES = (
    TableManifest(
        "sitespecific_btu_csg",
        columns=(
            _id_col(),
            Col("bps_id", "varchar"),
            Col("first_name", "text"),
            Col("last_name", "text"),
            Col("school", "text"),
            Col("status", "varchar", nullable=False, default="open"),
            _created_at(),
        ),
    ),
    TableManifest(
        "sitespecific_btu_employer_map",
        columns=(
            _id_col(),
            Col("department_id", "varchar", nullable=False),
            Col("department_title", "text"),
            Col("employer_id", "varchar"),
        ),
    ),
)

STEWARD_TABLES = (
    TableManifest(
        "worker_steward_assignments",
        columns=(
            _id_col(),
            Col("worker_id", "varchar", nullable=False),
            Col("employer_id", "varchar", nullable=False),
            Col("bargaining_unit_id", "varchar", nullable=False),
            _created_at(),
        ),
    ),
)

TRUST_PROVIDER_TABLES = (
    TableManifest(
        "trust_providers",
        columns=(
            _id_col(),
            Col("name", "text", nullable=False),
            Col("data", "text"),
        ),
    ),
    TableManifest(
        "trust_provider_contacts",
        columns=(
            _id_col(),
            Col("provider_id", "varchar", nullable=False),
            Col("contact_id", "varchar", nullable=False),
            Col("contact_type_id", "varchar"),
        ),
    ),
)

DISPATCH_TABLES = (
    TableManifest(
        "options_dispatch_job_type",
        columns=(
            _id_col(),
            Col("name", "text", nullable=False),
            Col("description", "text"),
            Col("sequence", "integer", nullable=False, default=0),
        ),
    ),
    TableManifest(
        "dispatch_jobs",
        columns=(
            _id_col(),
            Col("employer_id", "varchar", nullable=False),
            Col("job_type_id", "varchar"),
            Col("title", "text", nullable=False),
            Col("status", "varchar", nullable=False, default="draft"),
            Col("worker_count", "integer", nullable=False, default=1),
            Col("start_at", "timestamp"),
            _created_at(),
        ),
    ),
    TableManifest(
        "dispatches",
        columns=(
            _id_col(),
            Col("job_id", "varchar", nullable=False),
            Col("worker_id", "varchar", nullable=False),
            Col("status", "varchar", nullable=False, default="pending"),
            _created_at(),
        ),
    ),
    TableManifest(
        "worker_dispatch_status",
        columns=(
            _id_col(),
            Col("worker_id", "varchar", nullable=False),
            Col("status", "varchar", nullable=False, default="available"),
            Col("seniority_date", "timestamp"),
        ),
    ),
    TableManifest(
        "worker_dispatch_elig_denorm",
        columns=(
            Col("id", "serial", nullable=False, primary_key=True),
            Col("worker_id", "varchar", nullable=False),
            Col("category", "varchar", nullable=False),
            Col("value", "varchar", nullable=False),
        ),
    ),
)

DNC_TABLES = (
    TableManifest(
        "worker_dispatch_dnc",
        columns=(
            _id_col(),
            Col("worker_id", "varchar", nullable=False),
            Col("employer_id", "varchar", nullable=False),
            Col("type", "varchar", nullable=False, default="employer"),
            Col("message", "text"),
            _created_at(),
        ),
    ),
)

HFE_TABLES = (
    TableManifest(
        "worker_dispatch_hfe",
        columns=(
            _id_col(),
            Col("worker_id", "varchar", nullable=False),
            Col("employer_id", "varchar", nullable=False),
            Col("hold_until", "timestamp", nullable=False),
            _created_at(),
        ),
    ),
)


BUILTIN_COMPONENTS = [
    ComponentDefinition(
        id="ledger",
        name="Ledger",
        description="Functionality for tracking charges and payments",
        category="core",
    ),
    ComponentDefinition(
        id="ledger.stripe",
        name="Stripe Integration",
        description="Integration with the Stripe payment processing system",
        category="ledger",
    ),
    ComponentDefinition(
        id="cardcheck",
        name="Card Check",
        description="Worker cardcheck functionality",
        category="core",
        manages_schema=True,
        schema_manifest=SchemaManifest(CARDCHECK_TABLES, version=1),
    ),
    ComponentDefinition(
        id="sitespecific.gbhet",
        name="GBHET Customization",
        description="Custom functionality for GBHET",
        category="site-specific",
    ),
    ComponentDefinition(
        id="sitespecific.gbhet.legal",
        name="GBHET Legal Benefit",
        description="Custom legal benefit functionality for GBHET",
        category="sitespecific.gbhet",
    ),
    ComponentDefinition(
        id="sitespecific.btu",
        name="BTU Customization",
        description="Custom functionality for BTU",
        category="site-specific",
        manages_schema=True,
        schema_manifest=SchemaManifest(BTU_TABLES, version=1),
    ),
    ComponentDefinition(
        id="employer.login",
        name="Employer Login",
        description="Ability for employers to log in",
        category="authentication",
    ),
    ComponentDefinition(
        id="worker.login",
        name="Worker Login",
        description="Ability for workers to log in",
        category="authentication",
    ),
    ComponentDefinition(
        id="worker.steward",
        name="Shop Stewards",
        description="Ability to designate workers as shop stewards",
        category="core",
        manages_schema=True,
        schema_manifest=SchemaManifest(STEWARD_TABLES, version=1),
    ),
    ComponentDefinition(
        id="trust.providers",
        name="Trust Providers",
        description="Management and tracking of trust providers",
        category="core",
        manages_schema=True,
        schema_manifest=SchemaManifest(TRUST_PROVIDER_TABLES, version=1),
    ),
    ComponentDefinition(
        id="trust.providers.login",
        name="Trust Provider Login",
        description="Ability for trust provider contacts to log in",
        category="authentication",
    ),
    ComponentDefinition(
        id="trust.benefits",
        name="Trust Benefits",
        description="Management of trust benefits and eligibility",
        category="core",
    ),
    ComponentDefinition(
        id="trust.benefits.scan",
        name="Trust Benefit Scan",
        description="Automated scanning for worker benefit eligibility",
        category="trust.benefits",
    ),
    ComponentDefinition(
        id="event",
        name="Events",
        description="In-person and virtual events that contacts can register for",
        category="core",
    ),
    ComponentDefinition(
        id="bargainingunits",
        name="Bargaining Units",
        description="Management of bargaining units and worker associations",
        category="core",
    ),
    ComponentDefinition(
        id="dispatch",
        name="Dispatch",
        description="Dispatch functionality",
        category="core",
        manages_schema=True,
        schema_manifest=SchemaManifest(DISPATCH_TABLES, version=1),
    ),
    ComponentDefinition(
        id="dispatch.dnc",
        name="Dispatch Do Not Call",
        description="Do Not Call list management for dispatch",
        category="dispatch",
        manages_schema=True,
        schema_manifest=SchemaManifest(DNC_TABLES, version=1),
    ),
    ComponentDefinition(
        id="dispatch.hfe",
        name="Dispatch Hold for Employer",
        description="Hold for Employer management for dispatch",
        category="dispatch",
        manages_schema=True,
        schema_manifest=SchemaManifest(HFE_TABLES, version=1),
    ),
    ComponentDefinition(
        id="dispatch.ban",
        name="Dispatch Ban",
        description="Excludes workers with active dispatch bans from dispatch eligibility",
        category="dispatch",
    ),
    ComponentDefinition(
        id="debug",
        name="Debug",
        description="Debug tools and developer utilities",
        category="developer",
    ),
]
