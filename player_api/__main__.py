"""Entry point for the Player API CLI."""

import argparse
import asyncio
import sys


async def _init_db() -> None:
    from player_api.context import create_context
    from player_api.db.database import create_tables

    ctx = create_context()
    try:
        await create_tables(ctx.engine)
    finally:
        await ctx.dispose()


async def _administer(action: str, email: str, name: str, value: str = "") -> bool:
    """Grant a claim or a role to an existing user. Returns success."""
    from player_api.context import create_context
    from player_api.services.identity_service import IdentityOptions, IdentityService

    ctx = create_context()
    try:
        async with ctx.session() as session:
            identity = IdentityService(session, IdentityOptions.from_settings(ctx.settings))
            if action == "claim":
                result = await identity.add_claim(email, name, value)
            else:
                result = await identity.add_to_role(email, name)
    finally:
        await ctx.dispose()

    for error in result.errors:
        print(f"{error.code}: {error.description}", file=sys.stderr)
    return result.succeeded


def main():
    """Main entry point for the Player API CLI."""
    parser = argparse.ArgumentParser(
        description="Player API - registration, login and Player CRUD service",
        prog="player-api",
    )
    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    serve_parser = subparsers.add_parser("serve", help="Start the HTTP server")
    serve_parser.add_argument("--host", default="0.0.0.0", help="Host to bind to (default: 0.0.0.0)")
    serve_parser.add_argument("--port", type=int, default=8000, help="Port to bind to (default: 8000)")
    serve_parser.add_argument("--reload", action="store_true", help="Enable auto-reload for development")

    subparsers.add_parser("init-db", help="Create database tables")

    claim_parser = subparsers.add_parser("grant-claim", help="Attach a claim to a user")
    claim_parser.add_argument("email")
    claim_parser.add_argument("claim_type", help="e.g. DeletePlayerClaim")
    claim_parser.add_argument("--value", default="", help="Claim value (default: empty)")

    role_parser = subparsers.add_parser("add-role", help="Put a user in a role")
    role_parser.add_argument("email")
    role_parser.add_argument("role")

    args = parser.parse_args()

    if args.command == "serve":
        import uvicorn

        uvicorn.run("player_api.asgi:app", host=args.host, port=args.port, reload=args.reload)

    elif args.command == "init-db":
        asyncio.run(_init_db())
        print("Tables created")

    elif args.command == "grant-claim":
        if not asyncio.run(_administer("claim", args.email, args.claim_type, args.value)):
            sys.exit(1)
        print(f"Granted {args.claim_type} to {args.email}")

    elif args.command == "add-role":
        if not asyncio.run(_administer("role", args.email, args.role)):
            sys.exit(1)
        print(f"Added {args.email} to role {args.role}")

    else:
        parser.print_help()
        sys.exit(1)


if __name__ == "__main__":
    main()
