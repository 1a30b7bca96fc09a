from dataclasses import dataclass, field
from enum import Enum
from typing import List, Optional


class ParserState(Enum):
    HEADER = "header"
    BODY = "body"


@dataclass
class EmailRecord:
    """Parsed contents of an email file.

    Filled line by line by the parser, then handed once to the emailer.
    ``user`` doubles as the From address.
    """
    server: str = ""
    user: str = ""
    password: str = field(default="", repr=False)
    to: str = ""
    cc: List[str] = field(default_factory=list)
    bcc: List[str] = field(default_factory=list)
    subject: Optional[str] = None
    body: str = ""
    attachment_file: Optional[str] = None
    state: ParserState = ParserState.HEADER

    @property
    def in_body(self) -> bool:
        return self.state is ParserState.BODY

    def enter_body(self):
        # one way: header -> body, never back
        self.state = ParserState.BODY

    def recipients(self) -> List[str]:
        return [self.to] + list(self.cc) + list(self.bcc)


@dataclass
class Settings:
    log_level: str = "WARNING"
    log_file: Optional[str] = None
    smtp_timeout: float = 60.0
    charset: str = "utf-8"
