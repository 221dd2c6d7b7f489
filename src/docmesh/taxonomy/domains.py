"""Static catalog of documentation domains.

The registry is built once at import and validated there; nothing mutates it
afterwards. Registration order is significant: classifiers break score ties
in favour of the earlier domain.
"""

from __future__ import annotations

from dataclasses import dataclass
from types import MappingProxyType
from typing import Literal, Mapping

from docmesh.invariants import require

DomainCategory = Literal["core", "development", "features", "advanced"]
DOMAIN_CATEGORIES: tuple[str, ...] = ("core", "development", "features", "advanced")


@dataclass(frozen=True)
class Domain:
    id: str
    name: str
    description: str
    keywords: tuple[str, ...]
    priority: int
    category: DomainCategory


_DOMAIN_TABLE: tuple[Domain, ...] = (
    Domain(
        id="agents",
        name="Agents",
        description="Expert agent documentation, specialty matrix",
        keywords=(
            "agent", "agents", "ai", "assistant", "expert", "specialist", "llm",
            "langchain", "rag", "retrieval", "embedding", "vector", "prompt",
            "orchestration", "chain", "tool",
        ),
        priority=5,
        category="advanced",
    ),
    Domain(
        id="api",
        name="API",
        description="API endpoints, routes, specifications, contracts",
        keywords=(
            "api", "endpoint", "endpoints", "route", "routes", "rest", "restful",
            "graphql", "grpc", "openapi", "swagger", "specification", "contract",
            "request", "response", "http", "fastapi", "express", "flask", "django",
        ),
        priority=8,
        category="core",
    ),
    Domain(
        id="architecture",
        name="Architecture",
        description="System design, project registry, patterns",
        keywords=(
            "architecture", "design", "system", "system-design", "pattern", "patterns",
            "microservices", "monolith", "serverless", "event-driven", "cqrs",
            "ddd", "domain-driven", "clean-architecture", "hexagonal", "decision",
            "adr", "registry", "diagram",
        ),
        priority=7,
        category="development",
    ),
    Domain(
        id="backups",
        name="Backups",
        description="Backup/restore guides, disaster recovery",
        keywords=(
            "backup", "backups", "restore", "recovery", "disaster", "disaster-recovery",
            "dr", "snapshot", "archive", "retention", "replication", "failover",
        ),
        priority=4,
        category="advanced",
    ),
    Domain(
        id="database",
        name="Database",
        description="Schema, migrations, RLS, queries, procedures",
        keywords=(
            "database", "db", "postgres", "postgresql", "mysql", "sql", "schema",
            "migration", "migrations", "alembic", "query", "queries", "table",
            "index", "indexes", "rls", "procedure", "function", "trigger",
            "transaction", "orm", "sqlalchemy", "prisma",
        ),
        priority=8,
        category="core",
    ),
    Domain(
        id="devops",
        name="DevOps",
        description="Deployment, CI/CD, Docker, environments, infrastructure",
        keywords=(
            "devops", "deployment", "deploy", "ci", "cd", "ci/cd", "pipeline",
            "docker", "container", "kubernetes", "k8s", "infrastructure", "terraform",
            "ansible", "aws", "gcp", "azure", "cloud", "environment", "production",
            "staging", "development", "nginx", "load-balancer", "monitoring",
        ),
        priority=8,
        category="core",
    ),
    Domain(
        id="features",
        name="Features",
        description="Feature implementation guides, admin docs",
        keywords=(
            "feature", "features", "implementation", "guide", "how-to", "tutorial",
            "admin", "administration", "dashboard", "ui", "component", "module",
            "functionality", "capability",
        ),
        priority=6,
        category="features",
    ),
    Domain(
        id="plans",
        name="Plans",
        description="Planning documents, roadmaps, proposals",
        keywords=(
            "plan", "plans", "planning", "roadmap", "proposal", "proposals", "rfc",
            "design-doc", "specification", "spec", "milestone", "timeline", "schedule",
            "project", "initiative",
        ),
        priority=3,
        category="advanced",
    ),
    Domain(
        id="procedures",
        name="Procedures",
        description="Step-by-step operational procedures (SOP)",
        keywords=(
            "procedure", "procedures", "sop", "standard-operating-procedure", "step",
            "steps", "operational", "operation", "operations", "runbook", "playbook",
            "checklist", "process", "manual",
        ),
        priority=6,
        category="features",
    ),
    Domain(
        id="quickstart",
        name="Quickstart",
        description="Setup guides, dev workflow, onboarding",
        keywords=(
            "quickstart", "quick-start", "getting-started", "setup", "install",
            "installation", "onboarding", "developer", "dev", "workflow", "start",
            "begin", "intro", "introduction", "new-developer",
        ),
        priority=9,
        category="features",
    ),
    Domain(
        id="security",
        name="Security",
        description="Security, auth, Vault, Keycloak, RLS",
        keywords=(
            "security", "auth", "authentication", "authorization", "oauth", "jwt",
            "keycloak", "vault", "secrets", "rls", "row-level-security", "rbac",
            "permissions", "access-control", "encryption", "ssl", "tls", "certificate",
        ),
        priority=9,
        category="core",
    ),
    Domain(
        id="standards",
        name="Standards",
        description="Coding standards (backend, frontend, database, devops, security)",
        keywords=(
            "standard", "standards", "convention", "conventions", "pattern", "patterns",
            "best-practice", "best-practices", "guideline", "guidelines", "style",
            "style-guide", "coding", "naming", "formatting", "linting", "rules",
        ),
        priority=10,
        category="development",
    ),
    Domain(
        id="testing",
        name="Testing",
        description="Test strategies, fixtures, patterns, integration/e2e",
        keywords=(
            "test", "testing", "tests", "unit", "unit-test", "integration",
            "integration-test", "e2e", "end-to-end", "fixture", "fixtures", "mock",
            "mocking", "stub", "pytest", "jest", "vitest", "playwright", "cypress",
            "coverage", "tdd", "bdd",
        ),
        priority=7,
        category="development",
    ),
    Domain(
        id="troubleshooting",
        name="Troubleshooting",
        description="Debug guides, common issues, solutions",
        keywords=(
            "troubleshooting", "troubleshoot", "debug", "debugging", "issue", "issues",
            "problem", "problems", "error", "errors", "fix", "solution", "solutions",
            "resolve", "diagnose", "diagnosis", "log", "logs", "faq",
        ),
        priority=6,
        category="advanced",
    ),
    Domain(
        id="workflows",
        name="Workflows",
        description="Process documentation, multi-step operations",
        keywords=(
            "workflow", "workflows", "process", "processes", "flow", "flowchart",
            "sequence", "pipeline", "automation", "automated", "multi-step",
            "orchestration", "state-machine",
        ),
        priority=5,
        category="features",
    ),
)


def validate_domain_table(table: tuple[Domain, ...]) -> Mapping[str, Domain]:
    seen: dict[str, Domain] = {}
    for domain in table:
        require(bool(domain.id), "domain id must be non-empty", domain=domain.name)
        require(domain.id not in seen, "duplicate domain id", domain=domain.id)
        require(bool(domain.keywords), "domain has no keywords", domain=domain.id)
        require(
            len(set(domain.keywords)) == len(domain.keywords),
            "domain keywords must be unique",
            domain=domain.id,
        )
        require(
            1 <= domain.priority <= 10,
            "domain priority out of range",
            domain=domain.id,
            priority=domain.priority,
        )
        require(
            domain.category in DOMAIN_CATEGORIES,
            "unknown domain category",
            domain=domain.id,
            category=domain.category,
        )
        seen[domain.id] = domain
    return MappingProxyType(seen)


DOMAINS: Mapping[str, Domain] = validate_domain_table(_DOMAIN_TABLE)
DOMAIN_IDS: tuple[str, ...] = tuple(DOMAINS)


def get_domain(domain_id: str) -> Domain:
    return DOMAINS[domain_id]


def is_valid_domain(value: str) -> bool:
    return value in DOMAINS


def domains_by_category(category: str) -> list[str]:
    return [domain.id for domain in _DOMAIN_TABLE if domain.category == category]


def domains_by_priority() -> list[str]:
    """Domain ids, highest load priority first; registry order breaks ties."""
    return [
        domain.id
        for domain in sorted(_DOMAIN_TABLE, key=lambda entry: -entry.priority)
    ]


def keyword_index() -> dict[str, list[str]]:
    """Map each keyword to the domains that list it, in registry order."""
    index: dict[str, list[str]] = {}
    for domain in _DOMAIN_TABLE:
        for keyword in domain.keywords:
            index.setdefault(keyword, []).append(domain.id)
    return index
