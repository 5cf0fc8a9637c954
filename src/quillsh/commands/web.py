"""HTTP client command."""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from email.message import Message
from urllib import error as urllib_error
from urllib import parse as urllib_parse
from urllib.request import Request, urlopen

from loguru import logger

from ..config import Settings
from ..core.types import CommandResult
from ..errors import CommandError
from ..fs import FileSystem
from .base import Command, describe_os_error, fail, ok

DEFAULT_USER_AGENT = "curl/8.0.0 (compatible; quillsh)"
_WRITE_OUT_RE = re.compile(r"%\{([a-z_]+)\}")
_VALUE_OPTIONS = {
    "-X": "method",
    "--request": "method",
    "-H": "header",
    "--header": "header",
    "-d": "data",
    "--data": "data",
    "--data-raw": "data",
    "-o": "output",
    "--output": "output",
    "-A": "user_agent",
    "--user-agent": "user_agent",
    "-m": "timeout",
    "--max-time": "timeout",
    "-w": "write_out",
    "--write-out": "write_out",
}
_SWITCHES = {
    "-i": "include",
    "--include": "include",
    "-s": "silent",
    "--silent": "silent",
    "-L": "location",
    "--location": "location",
}


@dataclass
class CurlOptions:
    url: str | None = None
    method: str = "GET"
    headers: dict[str, str] = field(default_factory=dict)
    data: str | None = None
    output: str | None = None
    include: bool = False
    silent: bool = False
    location: bool = True
    user_agent: str | None = None
    timeout: float | None = None
    write_out: str | None = None


@dataclass(frozen=True)
class _Response:
    status: int
    reason: str
    headers: Message
    body: str
    url: str


class CurlCommand(Command):
    name = "curl"
    description = "Transfer data from or to a server using HTTP/HTTPS"
    usage = "curl [options] <url>"
    allow_absolute = True

    def __init__(self, fs: FileSystem, settings: Settings) -> None:
        super().__init__(fs)
        self.settings = settings

    def _apply(self, options: CurlOptions, key: str, value: str) -> None:
        if key == "method":
            options.method = value.upper()
        elif key == "header":
            name, colon, content = value.partition(":")
            if colon and name.strip():
                options.headers[name.strip()] = content.strip()
        elif key == "data":
            options.data = value
            if options.method == "GET":
                options.method = "POST"
        elif key == "timeout":
            try:
                options.timeout = float(value)
            except ValueError as exc:
                raise CommandError(f"{self.name}: invalid timeout: {value}") from exc
        else:
            setattr(options, key, value)

    def parse_options(self, args: list[str]) -> CurlOptions:
        options = CurlOptions()
        index = 0
        while index < len(args):
            arg = args[index]
            if arg in _VALUE_OPTIONS:
                index += 1
                if index >= len(args):
                    raise CommandError(f"{self.name}: option {arg}: requires parameter")
                self._apply(options, _VALUE_OPTIONS[arg], args[index])
            elif arg in _SWITCHES:
                setattr(options, _SWITCHES[arg], True)
            elif arg.startswith("-") and not arg.startswith("--") and len(arg) > 2:
                for flag in arg[1:]:
                    switch = _SWITCHES.get(f"-{flag}")
                    if switch is not None:
                        setattr(options, switch, True)
            elif arg.startswith("-"):
                logger.debug("curl.option.ignored option={}", arg)
            elif options.url is None:
                options.url = arg
            index += 1
        return options

    def _request_url(self, url: str) -> str:
        if not self.settings.curl_proxy:
            return url
        return self.settings.curl_proxy.replace("{url}", urllib_parse.quote(url, safe=""))

    def _fetch(self, options: CurlOptions, url: str, timeout: float) -> _Response:
        headers = dict(options.headers)
        body = None
        if options.data is not None and options.method in ("POST", "PUT", "PATCH"):
            body = options.data.encode("utf-8")
            if not any(key.lower() == "content-type" for key in headers):
                headers["Content-Type"] = "application/x-www-form-urlencoded"
        if options.user_agent:
            headers["User-Agent"] = options.user_agent
        elif not any(key.lower() == "user-agent" for key in headers):
            headers["User-Agent"] = DEFAULT_USER_AGENT

        request = Request(self._request_url(url), data=body, headers=headers, method=options.method)  # noqa: S310
        logger.info("curl.request method={} url={} timeout={}", options.method, url, timeout)
        try:
            with urlopen(request, timeout=timeout) as response:  # noqa: S310
                charset = response.headers.get_content_charset() or "utf-8"
                return _Response(
                    status=response.status,
                    reason=response.reason,
                    headers=response.headers,
                    body=response.read().decode(charset, errors="replace"),
                    url=url,
                )
        except urllib_error.HTTPError as exc:
            charset = exc.headers.get_content_charset() if exc.headers else None
            return _Response(
                status=exc.code,
                reason=str(exc.reason),
                headers=exc.headers or Message(),
                body=exc.read().decode(charset or "utf-8", errors="replace"),
                url=url,
            )

    def _write_out(self, template: str, response: _Response) -> str:
        variables = {
            "http_code": str(response.status),
            "response_code": str(response.status),
            "http_version": "1.1",
            "size_download": str(len(response.body)),
            "size_upload": "0",
            "url_effective": response.url,
            "content_type": response.headers.get("Content-Type", ""),
        }
        rendered = _WRITE_OUT_RE.sub(lambda match: variables.get(match.group(1), ""), template)
        return rendered.replace("\\n", "\n").replace("\\t", "\t")

    def run(self, args: list[str], cwd: str, stdin: str | None = None) -> CommandResult:
        options = self.parse_options(args)
        if not options.url:
            raise self.usage_error("no URL specified")
        parts = urllib_parse.urlsplit(options.url)
        if parts.scheme not in ("http", "https"):
            if not parts.scheme:
                raise CommandError(f"{self.name}: invalid URL: {options.url}")
            raise CommandError(f"{self.name}: unsupported protocol: {parts.scheme}:")
        if not parts.netloc:
            raise CommandError(f"{self.name}: invalid URL: {options.url}")

        timeout = options.timeout or self.settings.curl_timeout
        try:
            response = self._fetch(options, options.url, timeout)
        except TimeoutError:
            return fail(f"{self.name}: operation timed out after {timeout:g} seconds")
        except urllib_error.URLError as exc:
            if isinstance(exc.reason, TimeoutError):
                return fail(f"{self.name}: operation timed out after {timeout:g} seconds")
            return fail(f"{self.name}: failed to connect to {parts.hostname}: {exc.reason}")

        head = ""
        if options.include:
            header_lines = "".join(f"{key}: {value}\n" for key, value in response.headers.items())
            head = f"HTTP/1.1 {response.status} {response.reason}\n{header_lines}\n"

        if options.output:
            target = self.resolve(cwd, options.output)
            try:
                self.fs.write_text(target, response.body)
            except OSError as exc:
                raise CommandError(
                    f"{self.name}: failed to write to file {options.output}: {describe_os_error(exc)}"
                ) from exc

        if response.status >= 400 and not options.silent:
            message = f"HTTP {response.status}: {response.reason}"
            if options.output:
                return fail(message)
            return fail(f"{message}\n{head}{response.body}")

        if options.output:
            stdout = "" if options.silent else f"{len(response.body)} bytes written to {options.output}\n"
        else:
            stdout = head + response.body
        if options.write_out:
            stdout += self._write_out(options.write_out, response)
        return ok(stdout)
