"""Classification of page console events into report entries.

Every console message the page emits is turned into a ConsoleEvent and then
classified into exactly one variant:

    Completion    bootstrap finished, stop listening and report
    Fatal         bootstrap failed, stop listening and abort
    PatchFailed   WebpackInterceptor reported a bad patch
    StartFailed   PluginManager reported a plugin that failed to start
    UnknownTag    a [Vencord] line from any other component
    Debug         bootstrap progress, echoed to stderr
    OtherError    any other error-level message
    Ignored       everything else

The classification is pure; Collector applies the variants to a Report.
"""

import logging
import re
from dataclasses import dataclass, field
from typing import Any

from vreport.config import (
    DEBUG_TAG,
    DONE_SIGNAL,
    FATAL_SIGNAL,
    PLUGIN_MANAGER_TAG,
    VENCORD_TAG,
    WEBPACK_TAG,
)
from vreport.exceptions import PatternMismatchError
from vreport.report import BadPatch, BadStart, PatchFailure, Report

logger = logging.getLogger(__name__)

# Phrasing of the mod's own log lines. Keep verbatim.
PATCH_PATTERN = re.compile(
    r"Patch by (.+?) (had no effect|errored|found no module) \(Module id is (.+?)\): (.+)"
)
START_PATTERN = re.compile(r"Failed to start (.+)")


@dataclass
class ConsoleEvent:
    """A console message with its arguments resolved to plain values.

    Attributes:
        level: Console method used ("log", "warning", "error", ...).
        args: JSON values of the message arguments.
        text: The message text as the browser formats it.
        cause: The ``message`` property of the fourth argument, if any.
    """

    level: str
    args: list[Any] = field(default_factory=list)
    text: str = ""
    cause: str | None = None

    @property
    def first(self) -> Any:
        return self.args[0] if self.args else None


@dataclass
class Completion:
    pass


@dataclass
class Fatal:
    text: str


@dataclass
class PatchFailed:
    entry: BadPatch


@dataclass
class StartFailed:
    entry: BadStart


@dataclass
class UnknownTag:
    tag: str
    message: str


@dataclass
class Debug:
    text: str


@dataclass
class OtherError:
    text: str


@dataclass
class Ignored:
    pass


Classified = (
    Completion
    | Fatal
    | PatchFailed
    | StartFailed
    | UnknownTag
    | Debug
    | OtherError
    | Ignored
)


def parse_patch_failure(message: str, cause: str | None = None) -> BadPatch:
    """Parse a WebpackInterceptor failure line.

    Raises:
        PatternMismatchError: If the line is not in the known format.
    """
    match = PATCH_PATTERN.search(message)
    if not match:
        raise PatternMismatchError(WEBPACK_TAG, message)
    plugin, kind, module_id, find = match.groups()
    return BadPatch(
        plugin=plugin,
        type=PatchFailure(kind),
        id=module_id,
        match=find,
        error=cause,
    )


def parse_start_failure(message: str, cause: str | None = None) -> BadStart:
    """Parse a PluginManager start failure line.

    Raises:
        PatternMismatchError: If the line is not in the known format.
    """
    match = START_PATTERN.search(message)
    if not match:
        raise PatternMismatchError(PLUGIN_MANAGER_TAG, message)
    return BadStart(plugin=match.group(1), error=cause)


def classify(event: ConsoleEvent) -> Classified:
    """Classify a console event.

    Raises:
        PatternMismatchError: If a [Vencord] line from a known component
            does not match that component's format.
    """
    first = event.first

    if first == DONE_SIGNAL:
        return Completion()
    if first == FATAL_SIGNAL:
        return Fatal(str(event.args[1]) if len(event.args) > 1 else event.text)

    if first == VENCORD_TAG:
        tag = event.args[1] if len(event.args) > 1 else None
        message = event.args[2] if len(event.args) > 2 else None
        message = "" if message is None else str(message)

        if tag == WEBPACK_TAG:
            return PatchFailed(parse_patch_failure(message, event.cause))
        if tag == PLUGIN_MANAGER_TAG:
            return StartFailed(parse_start_failure(message, event.cause))
        return UnknownTag(str(tag), message)

    if first == DEBUG_TAG:
        return Debug(event.text)

    if event.level == "error":
        return OtherError(event.text)

    return Ignored()


class Collector:
    """Accumulates classified console events into a Report.

    Events are applied one at a time in arrival order. Once the completion
    or fatal signal has been seen, further events are ignored.
    """

    def __init__(self, report: Report | None = None) -> None:
        self.report = report if report is not None else Report()
        self.failed = False
        self.done = False
        self.fatal: str | None = None

    @property
    def exit_code(self) -> int:
        return 1 if self.failed else 0

    def apply(self, event: ConsoleEvent) -> Classified:
        """Classify an event and record it.

        Raises:
            PatternMismatchError: Propagated from classify(). The run is
                marked failed and done before it is raised.
        """
        if self.done:
            return Ignored()

        if event.first == VENCORD_TAG:
            # The mod only logs warnings and errors; any of them fails the run
            self.failed = True

        try:
            result = classify(event)
        except PatternMismatchError:
            self.done = True
            raise

        if isinstance(result, Completion):
            self.done = True
        elif isinstance(result, Fatal):
            self.done = True
            self.failed = True
            self.fatal = result.text
        elif isinstance(result, PatchFailed):
            self.report.bad_patches.append(result.entry)
        elif isinstance(result, StartFailed):
            self.report.bad_starts.append(result.entry)
        elif isinstance(result, UnknownTag):
            logger.debug("Ignoring %s message from %s", VENCORD_TAG, result.tag)
        elif isinstance(result, OtherError):
            self.report.other_errors.append(result.text)

        return result
