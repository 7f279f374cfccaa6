"""Response assembly shared by the deployment shells."""

import base64
from typing import ClassVar

from pydantic import BaseModel, ConfigDict

from ..common.errors import ScalerError
from ..common.schemas import EncodingHint, RenderedOutput

TEXT_CONTENT_TYPE = "text/plain; charset=utf-8"
GENERIC_ERROR_MESSAGE = "Internal Server Error"


class ShellResponse(BaseModel):
    """Transport-neutral response: status, content type and body bytes."""

    status_code: int
    content_type: str | None = None
    body: bytes = b""
    encoding_hint: EncodingHint = EncodingHint.BASE64

    model_config: ClassVar[ConfigDict] = ConfigDict(frozen=True)

    @classmethod
    def from_output(cls, output: RenderedOutput) -> "ShellResponse":
        return cls(
            status_code=200,
            content_type=output.content_type,
            body=output.payload,
            encoding_hint=output.encoding_hint,
        )

    @classmethod
    def from_error(cls, exc: Exception) -> "ShellResponse":
        """Map a failure to a plain-text response.

        Unknown exceptions collapse to a generic 500 without detail.
        """
        if isinstance(exc, ScalerError):
            status_code, message = exc.status_code, exc.response_message
        else:
            status_code, message = 500, GENERIC_ERROR_MESSAGE
        return cls(
            status_code=status_code,
            content_type=TEXT_CONTENT_TYPE,
            body=message.encode("utf-8"),
        )

    @classmethod
    def no_content(cls) -> "ShellResponse":
        return cls(status_code=204)

    @property
    def headers(self) -> dict[str, str]:
        if self.content_type is None:
            return {}
        return {"Content-Type": self.content_type}

    def to_lambda(self) -> dict[str, object]:
        """API Gateway proxy envelope.

        Binary payloads are base64-encoded and flagged so the gateway decodes
        them; text documents travel as-is.
        """
        is_base64_encoded = self.encoding_hint == EncodingHint.RAW
        if is_base64_encoded:
            body = base64.b64encode(self.body).decode("ascii")
        else:
            body = self.body.decode("utf-8")

        return {
            "statusCode": self.status_code,
            "headers": self.headers,
            "body": body,
            "isBase64Encoded": is_base64_encoded,
        }
