"""httpx transports that record every exchange as a markdown transcript.

Wrap the transport a client would normally use and every request and
response it carries is written into the sink as a fenced block::

    recorder = (
        TransportMarkdownRecorder(sink)
        .with_skip_headers("Date")
        .with_request_info("## Request\\n", "")
        .with_response_info("## Response\\n", "")
    )
    with httpx.Client(transport=recorder) as client:
        client.post("https://api.example.com/items", json={"name": "x"})

produces::

    ## Request
    ```
    POST /items
    Host: api.example.com
    ...
    Content-Type: application/json

    {"name":"x"}
    ```
    ## Response
    ```
    HTTP/1.1 201 Created
    ...
    ```

Recording is transparent to the client: request and response bodies are
read in full, the original streams are closed, and replayable streams
holding the same bytes take their place.  Bodies are buffered in memory
and written to the sink as raw bytes, so a compressed response appears
compressed.

The sink is not synchronized.  Clients shared between threads or tasks
need one recorder (and sink) each, or a lock around their requests.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any, List, Optional, Tuple, Union

import httpx
from jinja2 import Environment, FileSystemLoader

from .errors import ResponseRecordError
from .headers import HeadersSkipper, SkipHeaders, as_skipper
from .sink import Sink, write_all

logger = logging.getLogger(__name__)

TEMPLATES_DIR = Path(__file__).parent / "templates"

FENCE = "```"

_env = Environment(
    loader=FileSystemLoader(TEMPLATES_DIR),
    autoescape=False,
    trim_blocks=True,
    keep_trailing_newline=True,
)


def request_line(request: httpx.Request) -> str:
    """``METHOD /path?query`` for *request*."""
    return f"{request.method} {request.url.raw_path.decode('ascii')}"


def status_line(response: httpx.Response) -> str:
    """``HTTP/1.1 200 OK`` for *response*."""
    return f"{response.http_version} {response.status_code} {response.reason_phrase}".rstrip()


def visible_headers(
    headers: httpx.Headers, skipper: Optional[HeadersSkipper] = None
) -> List[Tuple[str, str]]:
    """Return ``(name, value)`` pairs that survive *skipper*.

    Names keep the case they were sent or received with and pairs keep
    their order.  A header with several values yields one pair per value.
    """
    encoding = headers.encoding
    result = []
    for raw_name, raw_value in headers.raw:
        name = raw_name.decode(encoding)
        if skipper is not None and skipper.skip_header(name, headers.get_list(name)):
            continue
        result.append((name, raw_value.decode(encoding)))
    return result


def _drain(stream: Any) -> bytes:
    try:
        return b"".join(stream)
    finally:
        stream.close()


async def _adrain(stream: Any) -> bytes:
    try:
        return b"".join([chunk async for chunk in stream])
    finally:
        await stream.aclose()


class _MarkdownRecorder:
    """Transcript state and formatting shared by both recorders."""

    def __init__(
        self,
        sink: Sink,
        underlying: Any = None,
        *,
        skip_headers: Any = None,
        request_preamble: str = "",
        request_postamble: str = "",
        response_preamble: str = "",
        response_postamble: str = "",
    ) -> None:
        self.sink = sink
        self.underlying = underlying
        self.skip_headers = as_skipper(skip_headers)
        self.request_preamble = request_preamble
        self.request_postamble = request_postamble
        self.response_preamble = response_preamble
        self.response_postamble = response_postamble

    def with_request_info(self, preamble: str, postamble: str):
        """Set the text written before and after each request block."""
        self.request_preamble = preamble
        self.request_postamble = postamble
        return self

    def with_response_info(self, preamble: str, postamble: str):
        """Set the text written before and after each response block."""
        self.response_preamble = preamble
        self.response_postamble = postamble
        return self

    def with_skip_headers(self, *names: str):
        """Leave the named headers out of transcripts (case-insensitive)."""
        self.skip_headers = SkipHeaders(names)
        return self

    def with_header_filter(self, skipper: Any):
        """Use *skipper* (a :class:`HeadersSkipper` or a callable) as filter."""
        self.skip_headers = as_skipper(skipper)
        return self

    def _write(self, data: Union[str, bytes]) -> None:
        write_all(self.sink, data)

    def _write_head(self, preamble: str, start_line: str, headers: httpx.Headers) -> None:
        self._write(preamble)
        template = _env.get_template("transcript_head.md.jinja2")
        self._write(
            template.render(
                start_line=start_line,
                headers=visible_headers(headers, self.skip_headers),
            )
        )

    def _write_tail(self, body: bytes, postamble: str) -> None:
        self._write(body)
        self._write("\n" + FENCE + "\n")
        self._write(postamble)


class TransportMarkdownRecorder(_MarkdownRecorder, httpx.BaseTransport):
    """Record exchanges passing through a synchronous httpx transport.

    ``underlying`` defaults to an :class:`httpx.HTTPTransport` created on
    first use.  Closing the recorder closes the underlying transport but
    never the sink.
    """

    def _transport(self) -> httpx.BaseTransport:
        if self.underlying is None:
            self.underlying = httpx.HTTPTransport()
        return self.underlying

    def handle_request(self, request: httpx.Request) -> httpx.Response:
        """Record *request*, send it, record and return the response.

        If writing the request fails, the request is not sent and the
        sink's exception propagates.  Transport errors propagate as
        raised, with nothing recorded for the response.

        Raises:
            ResponseRecordError: The response arrived but recording it
                failed.  The response is attached to the exception.
        """
        self._record_request(request)
        response = self._transport().handle_request(request)
        try:
            self._record_response(response)
        except Exception as exc:
            logger.debug("Recording response to %s %s failed: %s", request.method, request.url, exc)
            raise ResponseRecordError(response) from exc
        logger.debug("Recorded %s %s -> %s", request.method, request.url, response.status_code)
        return response

    def _record_request(self, request: httpx.Request) -> None:
        self._write_head(self.request_preamble, request_line(request), request.headers)
        body = _drain(request.stream)
        request.stream = httpx.ByteStream(body)
        self._write_tail(body, self.request_postamble)

    def _record_response(self, response: httpx.Response) -> None:
        self._write_head(self.response_preamble, status_line(response), response.headers)
        body = _drain(response.stream)
        response.stream = httpx.ByteStream(body)
        self._write_tail(body, self.response_postamble)

    def close(self) -> None:
        if self.underlying is not None:
            self.underlying.close()


class AsyncTransportMarkdownRecorder(_MarkdownRecorder, httpx.AsyncBaseTransport):
    """Async counterpart of :class:`TransportMarkdownRecorder`.

    Only the underlying transport and the body streams are awaited; sink
    writes stay synchronous.  ``underlying`` defaults to an
    :class:`httpx.AsyncHTTPTransport`.
    """

    def _transport(self) -> httpx.AsyncBaseTransport:
        if self.underlying is None:
            self.underlying = httpx.AsyncHTTPTransport()
        return self.underlying

    async def handle_async_request(self, request: httpx.Request) -> httpx.Response:
        """Record *request*, send it, record and return the response.

        Failure handling matches
        :meth:`TransportMarkdownRecorder.handle_request`.
        """
        await self._record_request(request)
        response = await self._transport().handle_async_request(request)
        try:
            await self._record_response(response)
        except Exception as exc:
            logger.debug("Recording response to %s %s failed: %s", request.method, request.url, exc)
            raise ResponseRecordError(response) from exc
        logger.debug("Recorded %s %s -> %s", request.method, request.url, response.status_code)
        return response

    async def _record_request(self, request: httpx.Request) -> None:
        self._write_head(self.request_preamble, request_line(request), request.headers)
        body = await _adrain(request.stream)
        request.stream = httpx.ByteStream(body)
        self._write_tail(body, self.request_postamble)

    async def _record_response(self, response: httpx.Response) -> None:
        self._write_head(self.response_preamble, status_line(response), response.headers)
        body = await _adrain(response.stream)
        response.stream = httpx.ByteStream(body)
        self._write_tail(body, self.response_postamble)

    async def aclose(self) -> None:
        if self.underlying is not None:
            await self.underlying.aclose()
