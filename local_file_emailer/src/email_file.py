"""Parser for the line-oriented email description file.

Expected format::

    Server: smtp host
    User: account (also used as From)
    Password: account password
    To: primary recipient
    CC: comma separated secondary recipients
    BCC: comma separated tertiary recipients
    Subject: subject line
    Body: first line of the body
    any number of further body lines

Keys are case-insensitive and may be indented. ``Body`` starts the body and
everything after it, whatever it looks like, is body text.

Body text is kept verbatim, colons included. Older senders of this format
dropped every colon after the ``Body:`` key (``10:30`` became ``1030``); that
is not reproduced.
"""
import logging
from typing import Iterable, List

from .errors import EmailFileError, MalformedLineError
from .models import EmailRecord

log = logging.getLogger(__name__)

SCALAR_KEYS = ("server", "user", "password", "to", "subject")
LIST_KEYS = ("cc", "bcc")
BODY_KEY = "body"


def split_items(value: str) -> List[str]:
    return [x.strip() for x in value.split(",") if x.strip()]


class EmailFileParser:
    def __init__(self):
        self.record = EmailRecord()
        self._body: List[str] = []
        self._line_no = 0

    def is_body(self, line: str) -> bool:
        if not self.record.in_body and line.lstrip().lower().startswith(BODY_KEY):
            self.record.enter_body()
            return True
        return self.record.in_body

    def feed(self, line: str):
        self._line_no += 1
        line = line.rstrip("\r\n")
        if self.record.in_body:
            self._body.append(line + "\n")
        elif self.is_body(line):
            self._body.append(self._first_body_line(line) + "\n")
        else:
            self._header(line)

    def _first_body_line(self, line: str) -> str:
        line = line.lstrip()
        if ":" in line:
            _, _, rest = line.partition(":")
        else:
            rest = line[len(BODY_KEY):]
        return rest.lstrip()

    def _header(self, line: str):
        if not line.strip():
            return
        if ":" not in line:
            raise MalformedLineError(self._line_no, line)
        key, _, value = line.partition(":")
        key = key.lower().strip()
        if key in SCALAR_KEYS:
            setattr(self.record, key, value.strip())
        elif key in LIST_KEYS:
            getattr(self.record, key).extend(split_items(value))
        else:
            log.debug("ignoring unknown field %r on line %d", key, self._line_no)

    def finish(self) -> EmailRecord:
        self.record.body = "".join(self._body)
        return self.record


def parse_lines(lines: Iterable[str]) -> EmailRecord:
    parser = EmailFileParser()
    for line in lines:
        parser.feed(line)
    return parser.finish()


def load_email(path: str) -> EmailRecord:
    # utf-8-sig drops the BOM some editors write
    try:
        with open(path, "r", encoding="utf-8-sig", newline="") as f:
            record = parse_lines(f)
    except UnicodeDecodeError as e:
        raise EmailFileError(path, f"not valid UTF-8 (byte {e.start})") from e
    log.info("parsed %s: to=%s cc=%d bcc=%d body=%d chars",
             path, record.to, len(record.cc), len(record.bcc), len(record.body))
    return record
