import logging
import os
import time
from dataclasses import replace
from typing import Optional
from urllib.parse import unquote

import httpx

from linkcheck.core.config import CheckOptions
from linkcheck.core.models import LinkStatus
from linkcheck.services.classifier import LinkKind, classify
from linkcheck.utils.url_utils import get_headers

# Answers that usually mean "HEAD not supported here", worth a GET.
HEAD_FALLBACK_STATUSES = (400, 403, 405, 501)

TIMEOUT_REASON = "Request timeout"


def describe_error(exc: Exception) -> str:
    if isinstance(exc, httpx.TimeoutException):
        return TIMEOUT_REASON
    message = str(exc)
    if "timed out" in message.lower() or "timeout" in message.lower():
        return TIMEOUT_REASON
    return message or exc.__class__.__name__


def strip_file_target(link: str) -> str:
    """Drop ``#fragment`` and ``?query`` parts and decode percent-escapes."""
    target = link.split("#", 1)[0].split("?", 1)[0]
    return unquote(target)


class LinkChecker:
    """Checks a single link: HTTP(S) URLs over the network, anything else on disk.

    Each HTTP check opens its own client, so no cookies or connection state
    carry over from one link to the next. ``transport`` lets callers swap in
    an ``httpx.MockTransport``.
    """

    def __init__(self, options: Optional[CheckOptions] = None, transport: Optional[httpx.BaseTransport] = None):
        self.options = options or CheckOptions()
        self.transport = transport

    def check(self, link: str, base_context: str = "", timeout: Optional[float] = None, index: int = 0) -> LinkStatus:
        timeout = self.options.timeout if timeout is None else timeout
        if classify(link) == LinkKind.HTTP:
            status = self.check_http(link, timeout)
        else:
            status = self.check_file(link, base_context)
        return replace(status, index=index)

    def _client(self, timeout: float) -> httpx.Client:
        return httpx.Client(
            headers=get_headers(self.options.user_agent),
            timeout=timeout,
            follow_redirects=False,
            transport=self.transport,
        )

    def _request(self, client: httpx.Client, method: str, url: str, timeout: float) -> httpx.Response:
        """Send ``method`` and follow redirects by hand, at most ``max_redirects`` hops.

        ``timeout`` bounds the whole attempt, redirect hops included. Past the
        cap the last response is returned as-is instead of raising.
        """
        deadline = time.monotonic() + timeout
        response = self._send(client, client.build_request(method, url), deadline)
        hops = 0
        while response.next_request is not None and hops < self.options.max_redirects:
            next_request = response.next_request
            response.close()
            logging.debug(f"Redirect {response.status_code}: {response.url} -> {next_request.url}")
            response = self._send(client, next_request, deadline)
            hops += 1
        if response.next_request is not None:
            logging.warning(f"Stopped following redirects for {url} after {hops} hops")
        response.close()
        return response

    @staticmethod
    def _send(client: httpx.Client, request: httpx.Request, deadline: float) -> httpx.Response:
        remaining = deadline - time.monotonic()
        if remaining <= 0:
            raise httpx.TimeoutException(f"timed out before reaching {request.url}", request=request)
        request.extensions["timeout"] = httpx.Timeout(remaining).as_dict()
        return client.send(request, stream=True)

    def check_http(self, url: str, timeout: Optional[float] = None) -> LinkStatus:
        """Try checking the link with HEAD, then GET."""
        timeout = self.options.timeout if timeout is None else timeout
        with self._client(timeout) as client:
            response = None
            try:
                response = self._request(client, "HEAD", url, timeout)
                logging.info(f"HTTP Request: HEAD {url} -> {response.status_code}")
            except Exception as e:
                logging.warning(f"HEAD failed for {url} ({describe_error(e)}), falling back to GET...")

            if response is None or response.status_code in HEAD_FALLBACK_STATUSES:
                try:
                    response = self._request(client, "GET", url, timeout)
                    logging.info(f"HTTP Request: GET {url} -> {response.status_code}")
                except Exception as e:
                    reason = describe_error(e)
                    logging.warning(f"HTTP request failed for {url}: {reason}")
                    return LinkStatus(link=url, valid=False, reason=reason, status_code=0)

        if 200 <= response.status_code < 400:
            return LinkStatus(link=url, valid=True, status_code=response.status_code)
        status_line = f"{response.status_code} {response.reason_phrase}".strip()
        return LinkStatus(link=url, valid=False, reason=status_line, status_code=response.status_code)

    def check_file(self, link: str, base_context: str = "") -> LinkStatus:
        target = strip_file_target(link)
        path = target if os.path.isabs(target) else os.path.join(base_context, target)
        try:
            os.stat(path)
        except OSError as e:
            logging.debug(f"Missing file target {path}: {e}")
            return LinkStatus(link=link, valid=False, reason=str(e), status_code=0)
        return LinkStatus(link=link, valid=True, status_code=0)
