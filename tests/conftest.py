from datetime import datetime, timezone
from urllib.parse import parse_qsl

import pytest

from stratus.base.config import EC2Config
from stratus.base.transport import RawResponse

FIXED_NOW = datetime(2009, 4, 4, 11, 51, 50, tzinfo=timezone.utc)


class RecordingTransport:
    """Transport stand-in that records requests and replays canned responses."""

    def __init__(self, status: int = 200, body: bytes = b"", error: Exception | None = None):
        self.status = status
        self.body = body
        self.error = error
        self.requests: list[dict] = []

    def send(self, method, url, headers, body):
        self.requests.append(
            {"method": method, "url": url, "headers": dict(headers), "body": body}
        )
        if self.error is not None:
            raise self.error
        return RawResponse(self.status, self.body)

    @property
    def last_body(self) -> str:
        return self.requests[-1]["body"].decode("utf-8")

    @property
    def last_params(self) -> dict[str, str]:
        return dict(parse_qsl(self.last_body, keep_blank_values=True))


@pytest.fixture
def ec2_config():
    return EC2Config(
        aws_access_key_id="AKIDEXAMPLE",
        aws_secret_access_key="wJalrXUtnFEMI/K7MDENG/bPxRfiCYEXAMPLEKEY",
    )


@pytest.fixture
def transport():
    return RecordingTransport(
        body=b"<Response><return>true</return><requestId>req-1</requestId></Response>"
    )
