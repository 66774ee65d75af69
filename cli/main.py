import argparse
import getpass
import json
import logging
import os
import sys

from core.errors import ValidationError
from core.validation import validate_request
from pipeline.orchestrator import Orchestrator
from probers.redirect_probe import redirect_url

EXIT_OK = 0
EXIT_NOT_FOUND = 1
EXIT_INVALID = 2


def _print(obj):
    print(json.dumps(obj, indent=2, default=str))


def _password(args) -> str:
    if args.password:
        return args.password
    env_pw = os.environ.get("AUTODISCOVER_PASSWORD")
    if env_pw:
        return env_pw
    return getpass.getpass(f"Password for {args.username}: ")


def cmd_resolve(args) -> int:
    try:
        request = validate_request(args.email, args.username, _password(args))
    except ValidationError as exc:
        print(f"error: {exc}", file=sys.stderr)
        return EXIT_INVALID
    orch = Orchestrator(timeout_s=args.timeout, max_redirects=args.max_redirects)
    result = orch.resolve(request)
    _print(result.model_dump())
    return EXIT_OK if result.ok else EXIT_NOT_FOUND


def cmd_candidates(args) -> int:
    domain = args.email.rsplit("@", 1)[-1]
    _print({"domain": domain, "candidates": Orchestrator.candidate_urls(domain) + [redirect_url(domain)]})
    return EXIT_OK


def main(argv=None) -> int:
    parser = argparse.ArgumentParser(description="Exchange autodiscover (mobilesync) endpoint resolver")
    parser.add_argument("-v", "--verbose", action="store_true", default=False, help="debug logging")
    sub = parser.add_subparsers()

    p_resolve = sub.add_parser("resolve", help="Resolve the EWS URL for a mailbox")
    p_resolve.add_argument("email")
    p_resolve.add_argument("-u", "--username", required=True)
    p_resolve.add_argument("-p", "--password", default=None, help="prompted (or AUTODISCOVER_PASSWORD) when omitted")
    p_resolve.add_argument("--timeout", type=float, default=None, help="seconds per HTTP exchange")
    p_resolve.add_argument("--max-redirects", type=int, default=None, help="302 hops followed per probe")
    p_resolve.set_defaults(func=cmd_resolve)

    p_cand = sub.add_parser("candidates", help="List candidate URLs without any network I/O")
    p_cand.add_argument("email")
    p_cand.set_defaults(func=cmd_candidates)

    args = parser.parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    if hasattr(args, "func"):
        return args.func(args)
    parser.print_help()
    return EXIT_OK


if __name__ == "__main__":
    sys.exit(main())
