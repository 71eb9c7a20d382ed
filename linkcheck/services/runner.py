"""Checks a set of inputs (markdown/HTML files, directories, web pages).

Every input is processed on its own: a failure to read a path or fetch a
page is recorded as a ``SourceError`` and the remaining inputs still run,
unless ``fail_fast`` is set.
"""

import logging
import os
import time
from dataclasses import dataclass, field
from typing import Dict, Iterable, List, Optional

import httpx

from linkcheck.core.config import CheckOptions
from linkcheck.core.models import ExtractedLink, LinkStatus, ResultEntry, Summary
from linkcheck.services.aggregator import Aggregator
from linkcheck.services.classifier import LinkKind, classify, resolve_link
from linkcheck.services.parser import (
    extract_html_links,
    extract_links_from_file,
    is_html_file,
    is_markdown_file,
)
from linkcheck.services.pool import ValidationPool
from linkcheck.utils.url_utils import IgnoreFilter, get_headers, is_url


class SourceError(RuntimeError):
    """An input path or page could not be read."""

    def __init__(self, source: str, message: str):
        super().__init__(message)
        self.source = source
        self.message = message


@dataclass
class Batch:
    """Verdicts for the links of one source document or page."""

    source: str
    statuses: List[LinkStatus]
    lines: Dict[int, Optional[int]] = field(default_factory=dict)


@dataclass
class RunReport:
    aggregator: Aggregator
    errors: List[SourceError]
    duration: float
    only_dead: bool = False

    @property
    def entries(self) -> List[ResultEntry]:
        return self.aggregator.entries(self.only_dead)

    @property
    def summary(self) -> Summary:
        return self.aggregator.summary(self.only_dead)


def split_inputs(inputs: Iterable[str]):
    """Separate page URLs from filesystem paths; no inputs means the current directory."""
    inputs = list(inputs) or ["."]
    urls = [item for item in inputs if is_url(item)]
    paths = [item for item in inputs if not is_url(item)]
    return paths, urls


class LinkCheckRunner:
    def __init__(
        self,
        options: Optional[CheckOptions] = None,
        ignore: Optional[IgnoreFilter] = None,
        recursive: bool = False,
        transport: Optional[httpx.BaseTransport] = None,
    ):
        self.options = options or CheckOptions()
        self.ignore = ignore or IgnoreFilter()
        self.recursive = recursive
        self.transport = transport
        self.pool = ValidationPool.from_options(self.options, transport=transport)

    def run(self, inputs: Iterable[str], only_dead: bool = False, fail_fast: bool = False) -> RunReport:
        start = time.monotonic()
        aggregator = Aggregator()
        errors: List[SourceError] = []

        paths, urls = split_inputs(inputs)
        jobs = [(path, self.process_path) for path in paths] + [(url, self.process_url) for url in urls]
        for source, process in jobs:
            try:
                batches = process(source)
            except SourceError as e:
                if fail_fast:
                    raise
                logging.error(f"Skipping {source}: {e}")
                errors.append(e)
                continue
            for batch in batches:
                aggregator.add_batch(batch.statuses, batch.source, batch.lines)

        return RunReport(aggregator=aggregator, errors=errors, duration=time.monotonic() - start, only_dead=only_dead)

    def process_path(self, input_path: str) -> List[Batch]:
        if not os.path.exists(input_path):
            raise SourceError(input_path, f"path does not exist: {input_path}")

        if not os.path.isdir(input_path):
            if is_markdown_file(input_path) or is_html_file(input_path):
                return [self.process_file(input_path)]
            logging.debug(f"Ignoring {input_path}: not a markdown or HTML file")
            return []

        batches = []
        for path in self._walk(input_path):
            batches.append(self.process_file(path))
        return batches

    def _walk(self, root: str) -> List[str]:
        def on_error(e: OSError):
            raise SourceError(root, f"error walking {root}: {e}")

        found = []
        for dirpath, dirnames, filenames in os.walk(root, onerror=on_error):
            dirnames.sort()
            for name in sorted(filenames):
                if is_markdown_file(name) or is_html_file(name):
                    found.append(os.path.join(dirpath, name))
            if not self.recursive:
                break
        return found

    def process_file(self, file_path: str) -> Batch:
        try:
            extracted = extract_links_from_file(file_path)
        except OSError as e:
            raise SourceError(file_path, f"error extracting links from {file_path}: {e}") from e

        selected = [
            link for link in extracted
            if classify(link.target) != LinkKind.SKIP and not self.ignore.is_ignored(link.target)
        ]
        logging.info(f"{file_path}: {len(selected)} of {len(extracted)} links will be validated")
        return self._validate(selected, file_path, os.path.dirname(file_path))

    def fetch_page(self, url: str) -> httpx.Response:
        try:
            with httpx.Client(
                headers=get_headers(self.options.user_agent),
                timeout=self.options.timeout,
                follow_redirects=True,
                max_redirects=self.options.max_redirects,
                transport=self.transport,
            ) as client:
                response = client.get(url)
                response.raise_for_status()
                return response
        except httpx.HTTPStatusError as e:
            raise SourceError(url, f"error fetching URL {url}: {e.response.status_code} {e.response.reason_phrase}") from e
        except (httpx.HTTPError, httpx.InvalidURL) as e:
            raise SourceError(url, f"error fetching URL {url}: {e}") from e

    def process_url(self, url: str) -> List[Batch]:
        response = self.fetch_page(url)
        base_url = str(response.url)
        extracted = extract_html_links(response.content)
        logging.debug(f"Found {len(extracted)} raw links in {url}")

        selected = []
        for link in extracted:
            absolute = resolve_link(link.target, base_url)
            if absolute is None:
                logging.debug(f"Skipping link: {link.target!r}")
                continue
            if self.ignore.is_ignored(absolute):
                logging.debug(f"Ignoring link: {absolute}")
                continue
            selected.append(ExtractedLink(target=absolute, line=link.line))
        logging.info(f"{url}: {len(selected)} of {len(extracted)} links will be validated")
        return [self._validate(selected, url, "")]

    def _validate(self, links: List[ExtractedLink], source: str, base_context: str) -> Batch:
        statuses = self.pool.validate_all([link.target for link in links], base_context, self.options.timeout)
        statuses.sort(key=lambda status: status.index)
        lines = {index: link.line for index, link in enumerate(links)}
        return Batch(source=source, statuses=statuses, lines=lines)
