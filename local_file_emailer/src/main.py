import sys
import logging
import argparse
from typing import List, Optional

from .email_file import load_email
from .emailer import send_email
from .errors import EmailerError
from .utils import load_settings, setup_logging

log = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    ap = argparse.ArgumentParser(
        prog='local-file-emailer',
        description='Send the email described in EMAIL_FILE, optionally with one attachment.')
    ap.add_argument('email_file', help='Path to the email description file')
    ap.add_argument('attachment_file', nargs='?', default=None, help='Optional file to attach')
    return ap


def run(email_file: str, attachment_file: Optional[str] = None) -> int:
    try:
        settings = load_settings()
        setup_logging(settings.log_level, settings.log_file)
        email = load_email(email_file)
        email.attachment_file = attachment_file
        send_email(email, settings)
    except (EmailerError, OSError) as e:
        log.debug("send aborted", exc_info=True)
        print(f"Email failed: {e}", file=sys.stderr)
        return 1
    print("Email Away!")
    return 0


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    return run(args.email_file, args.attachment_file)


if __name__ == "__main__":
    sys.exit(main())
