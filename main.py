import argparse
import json
import logging
import sys

from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker

from core.config_loader import load_config
from core.exceptions import ServiceException
from core.scorer import ScoringService
from core.scorer.status import derive_worker_status
from database.init_db import init_db
from database.uow import staffing_uow

logger = logging.getLogger(__name__)


def configure_logging(level: str, fmt: str) -> None:
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        format=fmt
    )


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="CrewPulse worker scoring engine")
    parser.add_argument("--config", default="config.yaml", help="Path to config.yaml")

    subparsers = parser.add_subparsers(dest="command", required=True)
    subparsers.add_parser("init-db", help="Create database tables")

    recalc = subparsers.add_parser("recalculate", help="Recompute one worker's snapshot")
    recalc.add_argument("worker_id")

    show = subparsers.add_parser("show", help="Print a worker's stored snapshot")
    show.add_argument("worker_id")

    return parser


def main(argv=None) -> int:
    args = build_parser().parse_args(argv)
    config = load_config(args.config)
    configure_logging(config.logging.level, config.logging.format)

    engine = create_engine(config.database.url, echo=config.database.echo)

    if args.command == "init-db":
        init_db(engine)
        return 0

    session_factory = sessionmaker(autocommit=False, autoflush=False, bind=engine)
    try:
        with staffing_uow(session_factory) as repo:
            scorer = ScoringService(repo, config.scorer)
            if args.command == "recalculate":
                snapshot = scorer.recalculate(args.worker_id)
            else:
                snapshot = scorer.current_snapshot(args.worker_id)
            payload = snapshot.to_dict()
            payload['status'] = derive_worker_status(snapshot, config.scorer.status).value
    except ServiceException as e:
        logger.error(f"{args.command} failed: {e}")
        return 1

    print(json.dumps(payload, indent=2))
    return 0


if __name__ == "__main__":
    sys.exit(main())
