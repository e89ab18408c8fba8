import argparse
import json
import logging
import sys
from pathlib import Path
from typing import List, Optional

from dotenv import load_dotenv

from src.core.config import (
    build_request_config,
    get_classifier_section,
    load_config,
    load_settings,
)
from src.core.constants import REASONING_EFFORTS
from src.core.errors import ConfigError
from src.core.schemas import ClassificationSchema, Provider
from src.core.service import ClassifierService, describe_changes

# --- Configuration & Setup ---

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
    handlers=[logging.StreamHandler(sys.stderr)],
)
logger = logging.getLogger("TicketClassifier")


def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        description="Classify a support ticket described in a JSON file."
    )
    parser.add_argument(
        "ticket",
        type=Path,
        help='JSON file with "subject", optional "message" (or "content"), and "schema".',
    )
    parser.add_argument("--config", default="config.yaml", help="Path to the YAML config.")
    parser.add_argument("--provider", choices=[p.value for p in Provider])
    parser.add_argument("--model")
    parser.add_argument("--reasoning-effort", choices=REASONING_EFFORTS)
    return parser.parse_args(argv)


def main(argv: Optional[List[str]] = None) -> int:
    args = parse_args(argv)
    load_dotenv()

    # 1. Load Configuration (Fail fast if config is bad)
    try:
        section = dict(get_classifier_section(load_config(args.config)))
        for key in ("provider", "model", "reasoning_effort"):
            if getattr(args, key):
                section[key] = getattr(args, key)
        service = ClassifierService(build_request_config(section), load_settings(section))
    except (ConfigError, FileNotFoundError) as e:
        logger.critical(f"Failed to load configuration: {e}")
        return 2

    # 2. Load the ticket
    try:
        ticket = json.loads(args.ticket.read_text(encoding="utf-8"))
        schema = ClassificationSchema.model_validate(ticket.get("schema") or {})
    except (OSError, ValueError, AttributeError) as e:
        # ValidationError is a ValueError
        logger.critical(f"Invalid ticket file {args.ticket}: {e}")
        return 2

    # 3. Classify (errors are handled per the 'error_handling' setting)
    if ticket.get("content"):
        result = service.classify_content(ticket["content"], schema)
    else:
        result = service.classify_ticket(ticket.get("subject", ""), ticket.get("message"), schema)

    if result is None:
        return 1

    output = {
        "result": result.model_dump(mode="json"),
        "changes": describe_changes(result, schema),
    }
    print(json.dumps(output, indent=2, ensure_ascii=False))
    return 0


if __name__ == "__main__":
    sys.exit(main())
