import argparse
import logging
import sys
from collections.abc import Sequence

from src.api.deps import Settings, build_sqlite_store, get_settings
from src.components.geo_redirect import (
    Category,
    GeoRedirectService,
    RedirectTo,
    code_names,
    create_geo_redirect_service,
)
from src.config.loader import load_config

logger = logging.getLogger("cli")


def get_service(settings: Settings) -> GeoRedirectService:
    try:
        config = load_config(settings.config_path)
    except (FileNotFoundError, ValueError) as e:
        logger.error("%s", e)
        sys.exit(1)

    store = build_sqlite_store(settings, config)
    return create_geo_redirect_service(store, config.urls.allowed_schemes)


def handle_seed(service: GeoRedirectService, args: argparse.Namespace) -> None:
    seeded = service.seed_defaults()
    if seeded:
        print(f"Seeded defaults for: {', '.join(c.value for c in seeded)}")
    else:
        print("Rules already present; nothing seeded.")


def handle_show(service: GeoRedirectService, args: argparse.Namespace) -> None:
    category = Category(args.category)
    names = code_names(category)
    rule_set = service.get_rule_set(category)
    for code, rule in rule_set.items():
        if args.enabled_only and not rule.enabled:
            continue
        flag = "on " if rule.enabled else "off"
        print(f"{code}  {flag}  {rule.url}  ({names[code]})")


def handle_resolve(service: GeoRedirectService, args: argparse.Namespace) -> None:
    decision = service.decide(args.region, args.country)
    if isinstance(decision, RedirectTo):
        print(f"302 -> {decision.url}")
    else:
        print("no redirect")


def handle_reset(service: GeoRedirectService, args: argparse.Namespace) -> None:
    service.reset(Category(args.category))
    print(f"Reset {args.category} to defaults.")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Region Redirect CLI")
    subparsers = parser.add_subparsers(dest="command", required=True)
    categories = [c.value for c in Category]

    # seed
    subparsers.add_parser("seed", help="Write default rules if none are stored")

    # show
    show_parser = subparsers.add_parser("show", help="List rules for a category")
    show_parser.add_argument("category", choices=categories)
    show_parser.add_argument("--enabled-only", action="store_true", help="Only enabled rules")

    # resolve
    resolve_parser = subparsers.add_parser("resolve", help="Dry-run a redirect decision")
    resolve_parser.add_argument("--region", default="", help="Region code, e.g. TX")
    resolve_parser.add_argument("--country", default="", help="Country code, e.g. US")

    # reset
    reset_parser = subparsers.add_parser("reset", help="Reset a category to defaults")
    reset_parser.add_argument("category", choices=categories)

    return parser


def main(argv: Sequence[str] | None = None) -> None:
    logging.basicConfig(level=logging.INFO)
    args = build_parser().parse_args(argv)

    service = get_service(get_settings())

    if args.command == "seed":
        handle_seed(service, args)
    elif args.command == "show":
        handle_show(service, args)
    elif args.command == "resolve":
        handle_resolve(service, args)
    elif args.command == "reset":
        handle_reset(service, args)


if __name__ == "__main__":
    main()
