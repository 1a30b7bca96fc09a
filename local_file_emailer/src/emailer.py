import os
import logging
import smtplib, ssl, mimetypes
from datetime import datetime, timezone
from email.mime.text import MIMEText
from email.mime.multipart import MIMEMultipart
from email.mime.base import MIMEBase
from email import encoders
from email.utils import format_datetime, make_msgid
from typing import List, Optional

from .errors import AttachmentError, AuthenticationError, InvalidAddressError, TransportError
from .models import EmailRecord, Settings
from .utils import is_valid_address, valid_field

log = logging.getLogger(__name__)

SMTP_SSL_PORT = 465


def validate_recipients(record: EmailRecord):
    if not is_valid_address(record.to):
        raise InvalidAddressError("To", record.to)
    for field_name, addrs in (("CC", record.cc), ("BCC", record.bcc)):
        for addr in addrs:
            if not is_valid_address(addr):
                raise InvalidAddressError(field_name, addr)


def _attach_file(msg: MIMEMultipart, path: str, filename: Optional[str] = None):
    ctype, encoding = mimetypes.guess_type(path)
    if ctype is None or encoding is not None:
        ctype = 'application/octet-stream'
    maintype, subtype = ctype.split('/', 1)
    try:
        with open(path, 'rb') as f:
            part = MIMEBase(maintype, subtype)
            part.set_payload(f.read())
    except OSError as e:
        raise AttachmentError(path, e.strerror or str(e)) from e
    encoders.encode_base64(part)
    part.add_header('Content-Disposition', 'attachment', filename=filename or os.path.basename(path))
    msg.attach(part)


def build_message(record: EmailRecord, charset: str = "utf-8") -> MIMEMultipart:
    validate_recipients(record)

    msg = MIMEMultipart('mixed')
    msg['From'] = record.user
    msg['To'] = record.to
    if record.cc:
        msg['Cc'] = ', '.join(record.cc)
    if valid_field(record.subject):
        msg['Subject'] = record.subject
    msg['Date'] = format_datetime(datetime.now(timezone.utc).astimezone())
    msg['Message-ID'] = make_msgid()

    msg.attach(MIMEText(record.body, 'plain', charset))
    if valid_field(record.attachment_file):
        _attach_file(msg, record.attachment_file)
    return msg


def send_email(record: EmailRecord, settings: Optional[Settings] = None):
    """Build the message for ``record`` and send it over SMTP-over-SSL on port 465.

    Raises an EmailerError subclass on any address, attachment or transport
    failure. Nothing is retried.
    """
    settings = settings or Settings()
    msg = build_message(record, settings.charset)
    to_addrs: List[str] = record.recipients()

    ctx = ssl.create_default_context()
    log.info("connecting to %s:%d as %s", record.server, SMTP_SSL_PORT, record.user)
    try:
        with smtplib.SMTP_SSL(record.server, SMTP_SSL_PORT, timeout=settings.smtp_timeout, context=ctx) as server:
            server.login(record.user, record.password)
            refused = server.sendmail(record.user, to_addrs, msg.as_string())
    except smtplib.SMTPAuthenticationError as e:
        raise AuthenticationError(f"SMTP authentication failed for {record.user}: {e}") from e
    except (smtplib.SMTPException, OSError) as e:
        raise TransportError(f"SMTP send via {record.server} failed: {e}") from e

    for addr, (code, resp) in (refused or {}).items():
        log.warning("recipient refused: %s (%s %s)", addr, code, resp)
    log.info("sent message %s to %d recipient(s)", msg['Message-ID'], len(to_addrs))
