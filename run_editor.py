# run_editor.py
"""
Scripted edit session against a running backend.

    python run_editor.py <actor_id> [template_id]

Opens the actor's schema (and the stored template when an id is given),
prints the raw configuration, then validates and saves it unchanged.
"""
import sys
from pathlib import Path

# Make the repo root importable
repo_root = Path(__file__).resolve().parent
if str(repo_root) not in sys.path:
    sys.path.append(str(repo_root))

from loguru import logger

from core.config import get_settings
from core.exceptions import ConsoleException
from core.log import setup_logging
from services.backend.client import BackendClient, legacy_names_from_actors
from services.config_engine import EditSession, SchemaRegistry
from services.config_engine.overlays import get_overlay, legacy_actor_table


def main(argv) -> int:
    if len(argv) < 2:
        print(__doc__)
        return 2
    actor_id = argv[1]
    template_id = argv[2] if len(argv) > 2 else None

    settings = get_settings()
    setup_logging(settings.LOG_LEVEL)

    with BackendClient.from_settings(settings) as client:
        legacy_names = legacy_actor_table(settings.OVERLAYS_PATH)
        try:
            legacy_names.update(legacy_names_from_actors(client.list_actors()))
        except ConsoleException as exc:
            logger.warning(f"Actor listing unavailable, using the static table only: {exc.message}")

        document = None
        if template_id:
            try:
                document = client.get_template(template_id)
            except ConsoleException as exc:
                logger.error(f"Cannot load template {template_id}: {exc.message}")
                return 1

        session = EditSession(
            SchemaRegistry(client),
            persistence=client,
            overlays=lambda actor: get_overlay(actor, settings.OVERLAYS_PATH),
            legacy_names=legacy_names,
            id_pattern=settings.ACTOR_ID_PATTERN,
        )
        with session:
            session.open(actor_id, document)

            print("\n=== CONFIGURATION ===")
            print(session.switch_to_raw())
            session.switch_to_structured()

            outcome = session.save()
            print("\n=== SAVE ===")
            print(outcome.model_dump_json(indent=2))
            return 0 if outcome.status.value == "success" else 1


if __name__ == "__main__":
    sys.exit(main(sys.argv))
