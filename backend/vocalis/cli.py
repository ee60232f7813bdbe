"""CLI: run the API server or talk to a running one."""
import argparse
import getpass
import os
import sys

from vocalis.client import AssistantClient, ClientError
from vocalis.core.config import get_settings


def cmd_serve(args):
    """Run the API with uvicorn."""
    import uvicorn

    from vocalis.main import app

    settings = get_settings()
    uvicorn.run(
        app,
        host=args.host or settings.api_host,
        port=args.port or settings.api_port,
        reload=False,
    )
    return 0


def _signed_in_client(args) -> AssistantClient:
    client = AssistantClient(base_url=args.url, token=os.environ.get("VOCALIS_TOKEN"))
    if client.token:
        return client
    try:
        email = args.email or input("Email: ")
        password = os.environ.get("VOCALIS_PASSWORD") or getpass.getpass("Password: ")
        client.signin(email, password)
    except (ClientError, EOFError, KeyboardInterrupt):
        client.close()
        raise
    return client


def cmd_ask(args):
    """Send one command, or read commands from stdin line by line."""
    if not args.command and not (args.email or os.environ.get("VOCALIS_TOKEN")):
        # stdin carries the commands, so it cannot also answer the email prompt
        print("Reading commands from stdin needs --email or VOCALIS_TOKEN", file=sys.stderr)
        return 1

    try:
        client = _signed_in_client(args)
    except ClientError as e:
        print(f"Sign-in failed: {e}", file=sys.stderr)
        return 1

    with client:
        commands = [" ".join(args.command)] if args.command else (line.strip() for line in sys.stdin)
        for command in commands:
            if not command:
                continue
            intent = client.ask(command)
            print(f"[{intent.kind.value}] {intent.response}")
    return 0


def build_parser():
    p = argparse.ArgumentParser(prog="vocalis", description="Voice assistant command API")
    sub = p.add_subparsers(dest="cmd")

    s = sub.add_parser("serve", help="Run the API server")
    s.add_argument("--host", help="Bind address (default: API_HOST)")
    s.add_argument("--port", type=int, help="Port (default: API_PORT)")
    s.set_defaults(func=cmd_serve)

    s = sub.add_parser("ask", help="Send commands to a running server")
    s.add_argument("command", nargs="*", help="Command text; read from stdin when omitted")
    s.add_argument("--url", default="http://localhost:8000", help="Server base URL")
    s.add_argument("--email", help="Account email (or set VOCALIS_TOKEN)")
    s.set_defaults(func=cmd_ask)
    return p


def main(argv=None):
    p = build_parser()
    args = p.parse_args(argv)
    if not hasattr(args, "func"):
        p.print_help()
        return 2
    return args.func(args)


if __name__ == "__main__":
    raise SystemExit(main())
