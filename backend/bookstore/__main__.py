"""Bookstore CLI entry point."""

import argparse
import json
import logging
import sys
from pathlib import Path
from typing import Any

from bson import json_util
from dotenv import load_dotenv
from pydantic import BaseModel, ValidationError

env_file = Path(__file__).parent.parent / ".env"
load_dotenv(env_file)

from bookstore import __version__
from bookstore.config import get_settings
from bookstore.database import (
    check_connection,
    close_client,
    get_collection,
    get_db_info,
    init_client,
)
from bookstore.exceptions import BookstoreError
from bookstore.repository import BookRepository
from bookstore.seed import seed_books
from bookstore.walkthrough import Section, StepResult, run_walkthrough

# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    datefmt="%Y-%m-%d %H:%M:%S",
)

logger = logging.getLogger(__name__)

CONFIG_TEMPLATE = """# Bookstore Configuration
# Connection secrets belong in .env (MONGODB__URL=...), not here.

mongodb:
  url: mongodb://localhost:27017
  database: plp_bookstore
  collection: books
  server_selection_timeout_ms: 5000

queries:
  genre: Fiction
  author: Harper Lee
  title: To Kill a Mockingbird
  year_threshold: 2010
  new_price: 15.99
  page_size: 5
"""


def _init_logfire() -> None:
    """Initialize Logfire if available, without failing commands."""
    try:
        from bookstore.observability import initialize_logfire

        initialize_logfire(get_settings())
    except Exception as e:
        logger.warning(f"Failed to initialize Logfire: {e}")


def _open_repository() -> BookRepository:
    """Connect to the configured database and return a repository for the books collection."""
    init_client(get_settings())
    if not check_connection():
        info = get_db_info()
        raise BookstoreError(f"Cannot reach MongoDB at {info['url']}")
    return BookRepository(get_collection())


def _to_jsonable(value: Any) -> Any:
    if isinstance(value, BaseModel):
        return value.model_dump(mode="json")
    if isinstance(value, list):
        return [_to_jsonable(v) for v in value]
    return value


def _pretty(value: Any) -> str:
    return json.dumps(_to_jsonable(value), indent=2, default=str)


def _print_steps(results: list[StepResult]) -> int:
    current_section = None
    for step in results:
        if step.section != current_section:
            current_section = step.section
            print(f"\n----- {current_section.upper()} -----")

        print(f"\n// {step.number}. {step.description}")
        if step.ok:
            print(_pretty(step.result))
        else:
            print(f"❌ {step.error}")

    print()
    return 0 if all(step.ok for step in results) else 1


def _run_sections(sections: list[Section] | None, debug: bool = False) -> int:
    _init_logfire()

    try:
        logging.getLogger().setLevel(logging.DEBUG if debug else get_settings().log_level)
        repo = _open_repository()
        results = run_walkthrough(repo, sections, params=get_settings().queries)
        return _print_steps(results)

    except Exception as e:
        logger.error(f"Walkthrough failed: {e}", exc_info=True)
        print(f"\n❌ Walkthrough failed: {e}\n")
        return 1
    finally:
        close_client()


def cmd_init(args: argparse.Namespace) -> int:
    """Initialize data directory and configuration file."""
    data_dir = Path("data").resolve()

    try:
        data_dir.mkdir(exist_ok=True)
        logger.info(f"Created data directory: {data_dir}")

        config_path = data_dir / "config.yaml"
        if not config_path.exists():
            config_path.write_text(CONFIG_TEMPLATE)
            logger.info(f"Created config template: {config_path}")
        else:
            logger.info(f"Config file already exists: {config_path}")

        print(f"\n✓ Data directory initialized at {data_dir}")
        print("\nNext steps:")
        print("1. Set MONGODB__URL in .env if MongoDB is not on localhost")
        print("2. Run 'python -m bookstore seed' to load the sample books")
        print("3. Run 'python -m bookstore run' to execute every statement\n")

        return 0

    except OSError as e:
        logger.error(f"Failed to initialize: {e}")
        print(f"\n❌ Initialization failed: {e}\n")
        return 1


def cmd_config(args: argparse.Namespace) -> int:
    """Display merged configuration."""
    try:
        settings = get_settings()
        info = get_db_info(settings)

        print("\n=== Bookstore Configuration ===\n")
        print(f"Data Directory: {settings.data_dir}\n")

        print("MongoDB:")
        print(f"  URL: {info['url']}")
        print(f"  Database: {info['database']}")
        print(f"  Collection: {info['collection']}")
        print(f"  Server Selection Timeout: {settings.mongodb.server_selection_timeout_ms}ms\n")

        print("Query Parameters:")
        print(f"  Genre: {settings.queries.genre}")
        print(f"  Author: {settings.queries.author}")
        print(f"  Title: {settings.queries.title}")
        print(f"  Year Threshold: {settings.queries.year_threshold}")
        print(f"  New Price: {settings.queries.new_price:.2f}")
        print(f"  Page Size: {settings.queries.page_size}\n")

        print(f"Log Level: {settings.log_level}")
        print(f"Logfire: {'✓ Set' if settings.logfire_token else '✗ Not set'}\n")

        return 0

    except ValidationError as e:
        print("\n❌ Configuration Error:\n")
        for error in e.errors():
            print(f"  • {'.'.join(str(x) for x in error['loc'])}: {error['msg']}")
        print()
        return 1


def cmd_ping(args: argparse.Namespace) -> int:
    """Check MongoDB connectivity."""
    try:
        init_client(get_settings())
        info = get_db_info()
        if check_connection():
            print(f"\n✓ Connected to {info['url']} ({info['database']}.{info['collection']})\n")
            return 0

        print(f"\n❌ Cannot reach MongoDB at {info['url']}\n")
        return 1

    except Exception as e:
        logger.error(f"Ping failed: {e}", exc_info=True)
        print(f"\n❌ Ping failed: {e}\n")
        return 1
    finally:
        close_client()


def cmd_seed(args: argparse.Namespace) -> int:
    """Load the sample books into the collection."""
    try:
        repo = _open_repository()
        inserted = seed_books(repo.collection, drop=not args.no_drop)
        print(f"\n✓ Seeded {inserted} books ({repo.count()} in collection)\n")
        return 0

    except Exception as e:
        logger.error(f"Seeding failed: {e}", exc_info=True)
        print(f"\n❌ Seeding failed: {e}\n")
        return 1
    finally:
        close_client()


def cmd_section(args: argparse.Namespace) -> int:
    """Run a single section of statements."""
    return _run_sections([args.section], debug=args.debug)


def cmd_explain(args: argparse.Namespace) -> int:
    """Show execution statistics for a title lookup."""
    try:
        repo = _open_repository()
        title = args.title or get_settings().queries.title
        summary = repo.explain_find_by_title(title)

        print(f"\n=== Explain: title = '{title}' ===\n")
        print(f"Winning Stage: {summary.stage}")
        print(f"Index Used: {summary.index_name or '(none, collection scan)'}")
        print(f"Returned: {summary.n_returned}")
        print(f"Docs Examined: {summary.total_docs_examined}")
        print(f"Keys Examined: {summary.total_keys_examined}")
        print(f"Execution Time: {summary.execution_time_millis}ms\n")

        if args.raw:
            print(json_util.dumps(summary.raw, indent=2))
            print()

        return 0

    except Exception as e:
        logger.error(f"Explain failed: {e}", exc_info=True)
        print(f"\n❌ Explain failed: {e}\n")
        return 1
    finally:
        close_client()


def cmd_run(args: argparse.Namespace) -> int:
    """Run every statement in order."""
    settings = get_settings()

    print("\n=== Bookstore Query Walkthrough ===\n")
    print(f"Version: {__version__}")
    print(f"Target: {settings.mongodb.database}.{settings.mongodb.collection}")

    return _run_sections(None, debug=args.debug)


def main(argv: list[str] | None = None) -> int:
    """Main CLI entry point."""
    parser = argparse.ArgumentParser(
        description="Bookstore: MongoDB CRUD, query, aggregation and index walkthrough",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )

    parser.add_argument(
        "--version",
        action="version",
        version=f"Bookstore {__version__}",
    )

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    parser_init = subparsers.add_parser(
        "init",
        help="Initialize data directory and configuration file",
    )
    parser_init.set_defaults(func=cmd_init)

    parser_config = subparsers.add_parser(
        "config",
        help="Display merged configuration",
    )
    parser_config.set_defaults(func=cmd_config)

    parser_ping = subparsers.add_parser(
        "ping",
        help="Check MongoDB connectivity",
    )
    parser_ping.set_defaults(func=cmd_ping)

    parser_seed = subparsers.add_parser(
        "seed",
        help="Load the sample books",
    )
    parser_seed.add_argument(
        "--no-drop",
        action="store_true",
        help="Keep existing documents instead of replacing them",
    )
    parser_seed.set_defaults(func=cmd_seed)

    section_commands = {
        "crud": ("crud", "Run the basic CRUD statements (1-5)"),
        "advanced": ("advanced", "Run filtering, projection, sorting and pagination (6-10)"),
        "aggregate": ("aggregation", "Run the aggregation pipelines (11-13)"),
        "indexes": ("indexes", "Create indexes and explain the title lookup (14-16)"),
    }
    for command, (section, help_text) in section_commands.items():
        parser_section = subparsers.add_parser(command, help=help_text)
        parser_section.add_argument(
            "--debug",
            action="store_true",
            help="Enable debug logging (prints each query sent)",
        )
        parser_section.set_defaults(func=cmd_section, section=section)

    parser_explain = subparsers.add_parser(
        "explain",
        help="Show execution statistics for a title lookup",
    )
    parser_explain.add_argument(
        "--title",
        help="Title to look up (defaults to the configured title)",
    )
    parser_explain.add_argument(
        "--raw",
        action="store_true",
        help="Also print the full explain document",
    )
    parser_explain.set_defaults(func=cmd_explain)

    parser_run = subparsers.add_parser(
        "run",
        help="Run every statement in order",
    )
    parser_run.add_argument(
        "--debug",
        action="store_true",
        help="Enable debug logging (prints each query sent)",
    )
    parser_run.set_defaults(func=cmd_run)

    args = parser.parse_args(argv)

    if not hasattr(args, "func"):
        parser.print_help()
        return 1

    return args.func(args)


if __name__ == "__main__":
    sys.exit(main())
