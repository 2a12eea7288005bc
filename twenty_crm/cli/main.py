"""Main CLI entry point for twenty-generate."""

import argparse
import logging
import os
import sys
from pathlib import Path

from dotenv import load_dotenv

from twenty_crm.client.crm_client import create_client
from twenty_crm.core.config_store import (
    API_TOKEN_ENV,
    API_URL_ENV,
    CodegenConfig,
    codegen_config_from_options,
    load_codegen_config,
)
from twenty_crm.core.models import ConfigError, TwentyCrmError
from twenty_crm.generator import generate_code

logger = logging.getLogger(__name__)

EPILOG = """\
examples:
  twenty-generate --config twenty-codegen.json
  twenty-generate --namespace myapp.crm --output src/myapp/crm \\
      --api-url https://example.twenty.com/rest/ --api-token TOKEN \\
      --entities person,company
  twenty-generate --namespace myapp.crm --output src/myapp/crm --all

TWENTY_API_URL and TWENTY_API_TOKEN are used when --api-url or
--api-token is not given.
"""


def setup_logging(verbose: bool = False):
    """Configure logging for the CLI."""
    level = logging.DEBUG if verbose else logging.INFO
    logging.basicConfig(
        level=level,
        format="%(levelname)s: %(message)s",
    )
    # Request lines from httpx duplicate our own debug output
    logging.getLogger("httpx").setLevel(logging.WARNING)


def mask_token(token: str) -> str:
    return "*" * min(20, len(token))


def load_config(args) -> CodegenConfig:
    """
    Build the generator configuration from a config file or from flags.

    Flags given together with --config override the file's entities and
    options.

    Raises:
        ConfigError: If the configuration is incomplete
    """
    if args.config:
        print(f"Loading configuration from: {args.config}")
        config = load_codegen_config(args.config)
        if args.entities:
            config.entities = [name.strip() for name in args.entities.split(",") if name.strip()]
        if args.overwrite:
            config.options["overwrite"] = True
        if args.no_services:
            config.options["generate_services"] = False
        if args.no_collections:
            config.options["generate_collections"] = False
        return config

    env_file = Path.cwd() / ".env"
    if env_file.exists():
        load_dotenv(dotenv_path=env_file)

    return codegen_config_from_options(
        namespace=args.namespace,
        output=args.output,
        api_url=args.api_url or os.environ.get(API_URL_ENV),
        api_token=args.api_token or os.environ.get(API_TOKEN_ENV),
        entities=args.entities,
        overwrite=args.overwrite,
        no_services=args.no_services,
        no_collections=args.no_collections,
    )


def print_configuration(config: CodegenConfig):
    print("Configuration:")
    print(f"  Namespace:        {config.namespace}")
    print(f"  Output directory: {config.output_dir}")
    print(f"  API URL:          {config.api_url}")
    print(f"  API token:        {mask_token(config.api_token)}")
    print(f"  Entities:         {', '.join(config.entities) or '(all)'}")
    print(f"  Overwrite:        {'yes' if config.has_option('overwrite') else 'no'}")
    print()


def cmd_generate(args):
    """Handle code generation."""
    try:
        config = load_config(args)
        config.validate()
    except ConfigError as e:
        print(f"Error: Invalid configuration: {e}", file=sys.stderr)
        sys.exit(1)

    print_configuration(config)

    try:
        with create_client(config.api_url, config.api_token) as client:
            if args.all:
                print("Discovering entities...")
                config.entities = client.registry.entity_names

            if not config.entities:
                print("Error: No entities specified. Use --entities or --all.", file=sys.stderr)
                sys.exit(1)

            print(f"Generating code for: {', '.join(config.entities)}")
            print()

            written = generate_code(config, client.registry)

        noun = "entity" if len(config.entities) == 1 else "entities"
        print(f"✓ Generated {len(config.entities)} {noun} ({len(written)} files)")
        print()
        print("Generated files:")
        for path in written:
            print(f"  {path}")

    except TwentyCrmError as e:
        print(f"Error: Generation failed: {e}", file=sys.stderr)
        if args.verbose:
            import traceback
            traceback.print_exc()
        sys.exit(1)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="twenty-generate",
        description="Generate typed Python entities from Twenty CRM metadata",
        epilog=EPILOG,
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="Enable verbose logging")
    parser.add_argument("-c", "--config", help="Path to a JSON configuration file")
    parser.add_argument("--namespace", help="Package path of the generated code (e.g., 'myapp.crm')")
    parser.add_argument("-o", "--output", help="Output directory (e.g., 'src/myapp/crm')")
    parser.add_argument("--api-url", help="Twenty REST API URL (e.g., 'https://example.twenty.com/rest/')")
    parser.add_argument("--api-token", help="Twenty API token")
    parser.add_argument("-e", "--entities", help="Comma-separated entity names (e.g., 'person,company')")
    parser.add_argument("-a", "--all", action="store_true", help="Generate all entities of the workspace")
    parser.add_argument("--overwrite", action="store_true", help="Overwrite existing files")
    parser.add_argument("--no-services", action="store_true", help="Skip service modules")
    parser.add_argument("--no-collections", action="store_true", help="Skip collection modules")
    parser.set_defaults(func=cmd_generate)
    return parser


def main(argv: list[str] | None = None):
    """Main CLI entry point."""
    parser = build_parser()
    args = parser.parse_args(argv)

    setup_logging(args.verbose)

    args.func(args)


if __name__ == "__main__":
    main()
