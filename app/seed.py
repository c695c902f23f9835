"""
Import seed documents from the command line

Usage:
    python -m app.seed seed/skills.json [more.json ...]
"""
import argparse
import logging
import sys

from app.config import settings
from app.database import get_engine, get_session_factory, init_db
from app.exceptions import ServiceError
from app.services.seed_service import SeedService, load_seed_file

logger = logging.getLogger(__name__)


def main(argv=None) -> int:
    parser = argparse.ArgumentParser(description="Import skills and questions from JSON seed files")
    parser.add_argument("files", nargs="+", help="Seed documents to import")
    parser.add_argument(
        "--database-url",
        default=settings.DATABASE_URL,
        help="Database to import into (defaults to DATABASE_URL)"
    )
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=getattr(logging, settings.LOG_LEVEL.upper(), logging.INFO),
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
    )

    engine = get_engine(args.database_url)
    init_db(engine)
    session_factory = get_session_factory(engine)

    try:
        for path in args.files:
            document = load_seed_file(path)
            db = session_factory()
            try:
                result = SeedService(db).import_document(document)
            finally:
                db.close()
            print(
                f"{path}: {result['skills_created']} skills created, "
                f"{result['skills_reused']} reused, {result['questions_created']} questions created, "
                f"{result['questions_skipped']} skipped"
            )
    except ServiceError as e:
        logger.error(e.message)
        return 1
    finally:
        engine.dispose()

    return 0


if __name__ == "__main__":
    sys.exit(main())
