"""Request models for the external reasoning capability.

The capability is provider-agnostic: agents build a CapabilityRequest and the
service adapter translates it into whatever the provider expects.
"""

import base64
import mimetypes
from pathlib import Path
from typing import List, Literal, Optional, Union

from pydantic import BaseModel, Field


class Attachment(BaseModel):
    """Binary document (PDF, scan, image) with its declared media type."""

    name: str = Field(..., description="Original file name")
    mime_type: str = Field(..., description="Declared media type, e.g. application/pdf")
    data: bytes = Field(..., description="Raw file content")

    @classmethod
    def from_path(cls, path: Union[str, Path], mime_type: Optional[str] = None) -> "Attachment":
        """Read a file from disk, guessing its media type from the extension."""
        path = Path(path)
        guessed, _ = mimetypes.guess_type(path.name)
        return cls(
            name=path.name,
            mime_type=mime_type or guessed or "application/octet-stream",
            data=path.read_bytes(),
        )

    @classmethod
    def from_base64(cls, name: str, mime_type: str, encoded: str) -> "Attachment":
        """Build from a base64 payload, tolerating a `data:...;base64,` prefix."""
        if encoded.startswith("data:") and "," in encoded:
            encoded = encoded.split(",", 1)[1]
        return cls(name=name, mime_type=mime_type, data=base64.b64decode(encoded))

    @property
    def is_image(self) -> bool:
        return self.mime_type.startswith("image/")

    def as_base64(self) -> str:
        return base64.b64encode(self.data).decode("ascii")

    def data_url(self) -> str:
        return f"data:{self.mime_type};base64,{self.as_base64()}"


class CapabilityRequest(BaseModel):
    """One invocation of the reasoning capability."""

    prompt: str = Field(..., description="Instruction text")
    attachments: List[Attachment] = Field(default_factory=list)
    system_prompt: Optional[str] = Field(default=None)
    response_format: Literal["text", "json"] = Field(
        default="json", description="Requested output format constraint"
    )


__all__ = ["Attachment", "CapabilityRequest"]
