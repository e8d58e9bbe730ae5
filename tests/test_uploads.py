import pytest
from fastapi import Request

from vidshelf.core.errors import UploadTooLargeError, ValidationError
from vidshelf.utils.uploads import limit_receive, read_upload_form

BOUNDARY = "vidshelfboundary"


def multipart_body(file_bytes, **fields):
    parts = []
    for name, value in fields.items():
        parts.append(
            f'--{BOUNDARY}\r\nContent-Disposition: form-data; name="{name}"\r\n\r\n{value}\r\n'.encode()
        )
    parts.append(
        f'--{BOUNDARY}\r\nContent-Disposition: form-data; name="video"; filename="clip.mp4"\r\n'
        f"Content-Type: video/mp4\r\n\r\n".encode()
        + file_bytes
        + b"\r\n"
    )
    parts.append(f"--{BOUNDARY}--\r\n".encode())
    return b"".join(parts)


def chunked_request(body, chunk_size=256, headers=None):
    """Build a request that streams ``body`` without a Content-Length header."""
    chunks = [body[i:i + chunk_size] for i in range(0, len(body), chunk_size)] or [b""]
    sent = []

    async def receive():
        index = len(sent)
        sent.append(index)
        if index >= len(chunks):
            return {"type": "http.disconnect"}
        return {"type": "http.request", "body": chunks[index], "more_body": index < len(chunks) - 1}

    scope = {
        "type": "http",
        "method": "POST",
        "path": "/upload",
        "query_string": b"",
        "headers": [(b"content-type", f"multipart/form-data; boundary={BOUNDARY}".encode())] + (headers or []),
    }
    return Request(scope, receive), sent, len(chunks)


async def test_read_upload_form_collects_file_and_fields():
    request, _, _ = chunked_request(multipart_body(b"abc" * 10, userId="u1", username="alice"))

    form = await read_upload_form(request, max_upload_bytes=1024)

    assert form.file.filename == "clip.mp4"
    assert form.file.data == b"abc" * 10
    assert form.file.content_type == "video/mp4"
    assert form.get("userId") == "u1"
    assert form.get("username") == "alice"
    assert form.get("title") is None


async def test_streamed_body_is_cut_off_past_the_limit():
    request, sent, total_chunks = chunked_request(multipart_body(b"x" * 10000), chunk_size=256)

    with pytest.raises(UploadTooLargeError):
        await read_upload_form(request, max_upload_bytes=1024, form_overhead_bytes=256)

    assert len(sent) < total_chunks


async def test_file_over_limit_inside_body_allowance_is_cut_off_while_streaming():
    body = multipart_body(b"x" * 1500)
    request, sent, total_chunks = chunked_request(body, chunk_size=64)
    assert len(body) < 1024 + 1024

    with pytest.raises(UploadTooLargeError) as exc_info:
        await read_upload_form(request, max_upload_bytes=1024, form_overhead_bytes=1024)

    assert exc_info.value.status_code == 413
    assert len(sent) < total_chunks


async def test_text_fields_do_not_count_towards_file_limit():
    request, _, _ = chunked_request(
        multipart_body(b"x" * 1000, userId="u" * 200, username="alice"), chunk_size=64
    )

    form = await read_upload_form(request, max_upload_bytes=1024, form_overhead_bytes=1024)

    assert len(form.file.data) == 1000
    assert form.get("userId") == "u" * 200


async def test_declared_content_length_is_checked_before_reading():
    request, sent, _ = chunked_request(b"", headers=[(b"content-length", b"999999")])

    with pytest.raises(UploadTooLargeError):
        await read_upload_form(request, max_upload_bytes=1024)

    assert sent == []


async def test_invalid_content_length_is_a_validation_error():
    request, _, _ = chunked_request(b"", headers=[(b"content-length", b"lots")])

    with pytest.raises(ValidationError):
        await read_upload_form(request, max_upload_bytes=1024)


async def test_limit_receive_passes_small_bodies_through():
    messages = [
        {"type": "http.request", "body": b"12345", "more_body": True},
        {"type": "http.request", "body": b"67890", "more_body": False},
    ]

    async def receive():
        return messages.pop(0)

    limited = limit_receive(receive, max_bytes=10, file_limit=10)

    assert (await limited())["body"] == b"12345"
    assert (await limited())["body"] == b"67890"
