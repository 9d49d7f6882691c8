#!/usr/bin/env python3
"""
Dev helper: send a test contact-form submission to the local backend.

Builds a form payload like the website does and POST-s it to the contact
endpoint with an Origin header, then prints the status, the CORS origin the
server answered with, and the JSON body.

Usage
-----
# Basic - valid submission against localhost:8000
python scripts/send_test_submission.py

# Fill the honeypot field (should answer 200 without sending mail)
python scripts/send_test_submission.py --honeypot

# Send an OPTIONS preflight instead of a submission
python scripts/send_test_submission.py --preflight

# Custom fields / origin / backend URL
python scripts/send_test_submission.py --name "Erika" --email erika@example.de \\
    --interest marketing --origin https://www.nordvind-ai.de \\
    --url http://staging.example.com

Environment / .env
------------------
CONTACT_API_URL   Default backend URL (overridden by --url).
ALLOWED_ORIGIN    Default Origin header (overridden by --origin).
"""

import argparse
import json
import os
import sys
import textwrap
from pathlib import Path

import httpx
from dotenv import load_dotenv


def _build_payload(args: argparse.Namespace) -> dict:
    payload = {
        "name": args.name,
        "email": args.email,
        "company": args.company,
        "interest": args.interest,
        "message": args.message,
    }
    if args.honeypot:
        payload["website"] = "http://spam.example"
    return {k: v for k, v in payload.items() if v is not None}


def _print_response(response: httpx.Response) -> None:
    status = response.status_code
    symbol = "OK" if status == 200 else "FAIL"
    print(f"\n[{symbol}] HTTP {status}")
    print(f"Access-Control-Allow-Origin: {response.headers.get('access-control-allow-origin')}")
    if not response.content:
        print("(empty body)")
        return
    try:
        print(json.dumps(response.json(), indent=2, ensure_ascii=False))
    except ValueError:
        print(response.text)


def main() -> int:
    # scripts/ lives one level below the project root
    project_root = Path(__file__).resolve().parent.parent
    load_dotenv(project_root / ".env")
    load_dotenv(project_root / "backend" / ".env")

    parser = argparse.ArgumentParser(
        prog="send_test_submission.py",
        description="Send a test contact-form submission to the contact backend.",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=textwrap.dedent("""\
            Examples:
              python scripts/send_test_submission.py
              python scripts/send_test_submission.py --honeypot
              python scripts/send_test_submission.py --preflight
              python scripts/send_test_submission.py --email not-an-email
        """),
    )
    parser.add_argument(
        "--url",
        default=os.getenv("CONTACT_API_URL", "http://localhost:8000"),
        help="Backend base URL (default: http://localhost:8000)",
    )
    parser.add_argument(
        "--origin",
        default=os.getenv("ALLOWED_ORIGIN", "https://nordvind-ai.de"),
        help="Origin header to send (default: ALLOWED_ORIGIN or https://nordvind-ai.de)",
    )
    parser.add_argument("--name", default="Erika Mustermann")
    parser.add_argument("--email", default="erika@example.de")
    parser.add_argument("--company", default="Muster GmbH")
    parser.add_argument("--interest", default="prozessanalyse")
    parser.add_argument("--message", default="Dies ist eine Testanfrage.")
    parser.add_argument(
        "--honeypot",
        action="store_true",
        help="Fill the hidden website field so the backend treats it as a bot.",
    )
    parser.add_argument(
        "--preflight",
        action="store_true",
        help="Send an OPTIONS preflight instead of a POST.",
    )
    parser.add_argument(
        "--dry-run",
        action="store_true",
        help="Print the payload JSON without sending it.",
    )

    args = parser.parse_args()

    payload = _build_payload(args)
    endpoint = f"{args.url.rstrip('/')}/"

    print(f"Endpoint : {endpoint}")
    print(f"Origin   : {args.origin}")

    if args.dry_run:
        print("\n[DRY RUN] Payload:")
        print(json.dumps(payload, indent=2, ensure_ascii=False))
        return 0

    headers = {"Origin": args.origin}
    try:
        if args.preflight:
            response = httpx.options(endpoint, headers=headers, timeout=30)
        else:
            response = httpx.post(endpoint, json=payload, headers=headers, timeout=30)
    except httpx.ConnectError:
        print(
            f"\nERROR: Could not connect to {endpoint}\n"
            "Is the backend running? Start it with:\n"
            "  cd backend && uvicorn app.main:app --reload",
            file=sys.stderr,
        )
        return 1
    except httpx.HTTPError as exc:
        print(f"\nERROR: {exc}", file=sys.stderr)
        return 1

    _print_response(response)
    return 0 if response.status_code == 200 else 1


if __name__ == "__main__":
    sys.exit(main())
