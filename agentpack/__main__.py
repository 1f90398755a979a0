"""Command line entry point.

Usage:
    agentpack list
    agentpack validate <key-or-path>
    agentpack apply <key-or-path> --tenant <tenant-id> [--clear-first]
    agentpack clear --tenant <tenant-id>

Results are printed to stdout as JSON; logs go to stderr.
"""

import argparse
import asyncio
import json
import sys
from pathlib import Path

from agentpack.config import Settings, get_settings
from agentpack.observability.logging import get_logger, setup_logging
from agentpack.packs import (
    AgentPackError,
    AgentPackService,
    PackRegistry,
    load_pack_file,
)
from agentpack.packs.models import AgentTemplatePack
from agentpack.stores import HttpEntityStore, create_entity_store

logger = get_logger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="agentpack",
        description="Validate, apply and clear agent template packs",
    )
    commands = parser.add_subparsers(dest="command", required=True)

    commands.add_parser("list", help="List available packs")

    validate = commands.add_parser("validate", help="Validate a pack")
    validate.add_argument("pack", help="Registered pack key or path to a JSON pack file")

    apply = commands.add_parser("apply", help="Apply a pack to a tenant")
    apply.add_argument("pack", help="Registered pack key or path to a JSON pack file")
    apply.add_argument("--tenant", required=True, help="Tenant id receiving the entities")
    apply.add_argument(
        "--clear-first",
        action="store_true",
        help="Soft-delete the tenant's existing pack data before applying",
    )

    clear = commands.add_parser("clear", help="Soft-delete a tenant's pack data")
    clear.add_argument("--tenant", required=True, help="Tenant id to clear")

    return parser


def build_registry(settings: Settings) -> PackRegistry:
    registry = PackRegistry()
    if settings.packs.include_bundled:
        registry.load_bundled()
    if settings.packs.packs_dir is not None:
        registry.load_directory(settings.packs.packs_dir)
    return registry


def resolve_pack_arg(value: str) -> str | AgentTemplatePack:
    """A `.json` suffix or an existing file means a path, anything else a key."""
    path = Path(value)
    if value.endswith(".json") or path.is_file():
        return load_pack_file(path)
    return value


def log_progress(label: str, fraction: float) -> None:
    logger.info("progress", stage=label, percent=round(fraction * 100))


def emit(payload: object) -> None:
    print(json.dumps(payload, indent=2, ensure_ascii=False))


async def run(args: argparse.Namespace, settings: Settings) -> int:
    store = create_entity_store(settings.store)
    service = AgentPackService(
        store,
        build_registry(settings),
        report_unresolved_refs=settings.packs.report_unresolved_refs,
        record_metrics=settings.observability.metrics_enabled,
    )

    try:
        if args.command == "list":
            emit([summary.model_dump(mode="json") for summary in service.list_summaries()])
            return 0

        if args.command == "validate":
            result = service.validate(resolve_pack_arg(args.pack))
            emit(result.model_dump(mode="json"))
            return 0 if result.valid else 1

        if args.command == "apply":
            deployment = await service.apply(
                resolve_pack_arg(args.pack),
                args.tenant,
                log_progress,
                clear_first=args.clear_first,
            )
            emit(deployment.model_dump(mode="json"))
            return 0 if deployment.success else 1

        cleared = await service.clear(args.tenant, log_progress)
        emit(cleared.model_dump(mode="json"))
        return 0 if cleared.success else 1
    finally:
        if isinstance(store, HttpEntityStore):
            await store.close()


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    settings = get_settings()
    setup_logging(
        level=settings.observability.log_level,
        format=settings.observability.log_format,
        redact_pii=settings.observability.redact_pii,
    )

    try:
        return asyncio.run(run(args, settings))
    except AgentPackError as e:
        payload: dict[str, object] = {"error": e.message}
        errors = getattr(e, "errors", None)
        if errors:
            payload["errors"] = errors
        emit(payload)
        return 1


if __name__ == "__main__":
    sys.exit(main())
