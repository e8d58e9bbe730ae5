from dataclasses import dataclass, field
from typing import Dict, Optional

from fastapi import Request
from starlette.datastructures import UploadFile
from starlette.formparsers import MultiPartException, MultiPartParser
from starlette.types import Message, Receive

from vidshelf.core.errors import UploadTooLargeError, ValidationError


@dataclass
class UploadedVideo:
    filename: str
    data: bytes
    content_type: Optional[str] = None

    @property
    def size(self) -> int:
        return len(self.data)


@dataclass
class UploadForm:
    file: Optional[UploadedVideo] = None
    fields: Dict[str, str] = field(default_factory=dict)

    def get(self, name: str) -> Optional[str]:
        return self.fields.get(name)


def too_large(limit: int) -> UploadTooLargeError:
    return UploadTooLargeError(f"File too large. Maximum upload size is {limit} bytes.")


def limit_receive(receive: Receive, max_bytes: int, file_limit: int) -> Receive:
    """Wrap an ASGI receive callable so the body stops being read past ``max_bytes``."""
    received = 0

    async def limited() -> Message:
        nonlocal received
        message = await receive()
        if message["type"] == "http.request":
            received += len(message.get("body", b""))
            if received > max_bytes:
                raise too_large(file_limit)
        return message

    return limited


def check_content_length(request: Request, max_bytes: int, file_limit: int) -> None:
    declared = request.headers.get("content-length")
    if declared is None:
        return
    try:
        length = int(declared)
    except ValueError:
        raise ValidationError("Invalid Content-Length header.")
    if length > max_bytes:
        raise too_large(file_limit)


class FileSizeLimitedParser(MultiPartParser):
    """Multipart parser that stops as soon as one file field grows past its limit."""

    def __init__(self, headers, stream, file_field: str, max_file_bytes: int):
        super().__init__(headers, stream)
        self.file_field = file_field
        self.max_file_bytes = max_file_bytes
        self._counting = False
        self._file_bytes = 0

    def on_headers_finished(self) -> None:
        super().on_headers_finished()
        part = self._current_part
        self._counting = part.file is not None and part.field_name == self.file_field
        self._file_bytes = 0

    def on_part_data(self, data: bytes, start: int, end: int) -> None:
        if self._counting:
            self._file_bytes += end - start
            if self._file_bytes > self.max_file_bytes:
                raise too_large(self.max_file_bytes)
        super().on_part_data(data, start, end)


async def parse_form(request: Request, file_field: str, max_file_bytes: int):
    content_type = request.headers.get("content-type", "")
    if not content_type.startswith("multipart/form-data"):
        return await request.form()
    parser = FileSizeLimitedParser(request.headers, request.stream(), file_field, max_file_bytes)
    try:
        return await parser.parse()
    except MultiPartException as exc:
        raise ValidationError(exc.message)


async def read_upload_form(
    request: Request,
    max_upload_bytes: int,
    form_overhead_bytes: int = 0,
    file_field: str = "video",
) -> UploadForm:
    """Parse a multipart upload holding at most one file in ``file_field``.

    Oversized requests are refused from the Content-Length header when one is
    sent, and otherwise as soon as the streamed body crosses the limit or the
    file part alone crosses ``max_upload_bytes``, so an oversized file is never
    fully buffered.
    """
    max_body = max_upload_bytes + form_overhead_bytes
    check_content_length(request, max_body, max_upload_bytes)

    limited = Request(request.scope, receive=limit_receive(request.receive, max_body, max_upload_bytes))
    form = await parse_form(limited, file_field, max_upload_bytes)
    try:
        result = UploadForm()
        for name, value in form.multi_items():
            if isinstance(value, UploadFile):
                if name != file_field or result.file is not None:
                    continue
                data = await value.read()
                if len(data) > max_upload_bytes:
                    raise too_large(max_upload_bytes)
                if not value.filename and not data:
                    continue
                result.file = UploadedVideo(
                    filename=value.filename or "upload",
                    data=data,
                    content_type=value.content_type,
                )
            elif name != file_field:
                result.fields.setdefault(name, value)
        return result
    finally:
        await form.close()
