"""Terminal front end for a document intake session.

    doc-intake configure --endpoint URL --key KEY --llm-key KEY
    doc-intake show-config
    doc-intake ask invoice.pdf -q "What is the total?" [-q ...]

Without -q, `ask` reads questions from stdin until an empty line.
"""

import argparse
import asyncio
import mimetypes
import sys
from dataclasses import replace
from pathlib import Path

from app.analysis.factory import AnalyzerFactory
from app.config.models import SessionConfig
from app.config.settings import Settings
from app.config.store_base import BaseConfigStore
from app.config.store_factory import ConfigStoreFactory
from app.database.connection import close_pool, init_pool
from app.database.repositories.session_config_repository import SessionConfigRepository
from app.documents.models import DocumentHandle
from app.exceptions import ConfigStoreError
from app.extraction.factory import ExtractionClientFactory
from app.logging.logger import Log
from app.workflow.coordinator import WorkflowCoordinator


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="doc-intake")
    commands = parser.add_subparsers(dest="command", required=True)

    configure = commands.add_parser("configure", help="save service credentials")
    configure.add_argument("--endpoint", help="extraction service endpoint")
    configure.add_argument("--key", help="extraction service key")
    configure.add_argument("--llm-key", help="language model API key")

    commands.add_parser("show-config", help="print the saved configuration")

    ask = commands.add_parser("ask", help="extract a document and ask questions")
    ask.add_argument("path", type=Path)
    ask.add_argument("-q", "--question", action="append", default=[])
    ask.add_argument("--media-type", help="override the guessed media type")
    return parser


def settings_fallback(settings: Settings) -> SessionConfig:
    return SessionConfig(
        extraction_endpoint=settings.azure_endpoint,
        extraction_key=settings.azure_key,
        analysis_key=AnalyzerFactory.default_api_key(settings),
    )


def build_coordinator(settings: Settings, store: BaseConfigStore) -> WorkflowCoordinator:
    return WorkflowCoordinator(
        extraction_client=ExtractionClientFactory.create(settings),
        analyzer=AnalyzerFactory.create(settings),
        config_store=store,
    )


def load_document(path: Path, media_type: str | None = None) -> DocumentHandle:
    guessed, _ = mimetypes.guess_type(path.name)
    return DocumentHandle(
        content=path.read_bytes(),
        media_type=media_type or guessed or "application/octet-stream",
        filename=path.name,
    )


def mask(secret: str) -> str:
    if not secret:
        return "<not set>"
    return f"{secret[:4]}..." if len(secret) > 8 else "****"


def configure(coordinator: WorkflowCoordinator, args: argparse.Namespace) -> int:
    current = coordinator.load_config()
    updated = replace(
        current,
        **{
            field: value
            for field, value in (
                ("extraction_endpoint", args.endpoint),
                ("extraction_key", args.key),
                ("analysis_key", args.llm_key),
            )
            if value is not None
        },
    )
    if not coordinator.save_config(updated):
        print(f"error: {coordinator.state.error}", file=sys.stderr)
        return 1
    print("Configuration saved.")
    return 0


def show_config(coordinator: WorkflowCoordinator, settings: Settings) -> int:
    config = coordinator.load_config(fallback=settings_fallback(settings))
    print(f"extraction endpoint: {config.extraction_endpoint or '<not set>'}")
    print(f"extraction key:      {mask(config.extraction_key)}")
    print(f"language model key:  {mask(config.analysis_key)}")
    print(f"configured:          {'yes' if config.is_configured else 'no'}")
    return 0


async def ask(
    coordinator: WorkflowCoordinator,
    settings: Settings,
    args: argparse.Namespace,
) -> int:
    coordinator.load_config(fallback=settings_fallback(settings))
    if coordinator.state.error:
        print(f"warning: {coordinator.state.error}", file=sys.stderr)
    try:
        document = load_document(args.path, args.media_type)
    except OSError as exc:
        print(f"error: cannot read {args.path}: {exc}", file=sys.stderr)
        return 1
    coordinator.select_document(document)

    result = await coordinator.run_extraction()
    if result is None:
        print(f"error: {coordinator.state.error}", file=sys.stderr)
        return 1
    print(
        f"Extracted {len(result.text)} characters, {len(result.tables)} tables, "
        f"{len(result.key_value_pairs)} key/value pairs."
    )

    questions = args.question or _read_questions()
    exit_code = 0
    for question in questions:
        answer = await coordinator.ask_question(question)
        if answer is None:
            print(f"error: {coordinator.state.error}", file=sys.stderr)
            exit_code = 1
            continue
        print(f"\nQ: {question}\n{answer}")
    return exit_code


def _read_questions() -> list[str]:
    questions: list[str] = []
    print("Enter questions, one per line (empty line to finish):")
    for line in sys.stdin:
        question = line.strip()
        if not question:
            break
        questions.append(question)
    return questions


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    settings = Settings()
    Log.configure(settings.log_level, stream=sys.stderr)

    uses_database = settings.config_store.lower() == "postgres"
    if uses_database:
        init_pool(settings)
    try:
        try:
            store = ConfigStoreFactory.create(settings)
            if isinstance(store, SessionConfigRepository):
                store.ensure_schema()
            coordinator = build_coordinator(settings, store)
        except (ConfigStoreError, ValueError) as exc:
            print(f"error: {exc}", file=sys.stderr)
            return 1
        if args.command == "configure":
            return configure(coordinator, args)
        if args.command == "show-config":
            return show_config(coordinator, settings)
        return asyncio.run(ask(coordinator, settings, args))
    finally:
        if uses_database:
            close_pool()


if __name__ == "__main__":
    sys.exit(main())
