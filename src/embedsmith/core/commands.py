"""Command declaration, discovery and execution.

Handlers declare the command keyword they serve with the ``@handles``
decorator, which stores a lightweight :class:`CommandDefinition` on the
callable. A :class:`CommandEngine` collects those declarations into a
:class:`CommandRegistry`, locates invocations in a text with
:func:`scan_commands` and substitutes the fragment each handler returns.

Invocations are resolved strictly in document order. Expanding a fragment
only ever processes the freshly produced text, never the enclosing command.
"""

from __future__ import annotations

from collections.abc import Callable, Iterator, Mapping
from dataclasses import dataclass
import logging
import re
from typing import TYPE_CHECKING, Any, cast

from .exceptions import CommandError


if TYPE_CHECKING:  # pragma: no cover - typing only
    from .context import EmbedContext


logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class SourceLocation:
    """Position of an invocation inside the text it was scanned from."""

    line: int
    column: int
    source: str | None = None

    def __str__(self) -> str:
        return f"{self.source or '<string>'}:{self.line}:{self.column}"


@dataclass(frozen=True, slots=True)
class CommandInvocation:
    """A command keyword with its brace arguments, as written by the author."""

    name: str
    arguments: tuple[str, ...]
    location: SourceLocation
    snippet: str

    def argument(self, index: int) -> str:
        """Return the stripped content of the brace group at ``index``."""
        return self.arguments[index].strip()


@dataclass(frozen=True, slots=True)
class MacroDefinition:
    """User macro whose body uses ``#1``..``#9`` placeholders."""

    name: str
    nargs: int
    body: str

    def expand(self, arguments: tuple[str, ...]) -> str:
        def _substitute(match: re.Match[str]) -> str:
            index = int(match.group(1)) - 1
            return arguments[index] if index < len(arguments) else match.group(0)

        return _PLACEHOLDER_RE.sub(_substitute, self.body)


_PLACEHOLDER_RE = re.compile(r"#([1-9])")

CommandHandler = Callable[[CommandInvocation, "EmbedContext"], str]


@dataclass(slots=True)
class CommandRule:
    """Concrete handler registered for a command keyword."""

    name: str
    arity: int
    handler: CommandHandler
    summary: str = ""


@dataclass(frozen=True, slots=True)
class CommandDefinition:
    """Descriptor installed on handler callables by :func:`handles`."""

    name: str
    arity: int

    def bind(self, handler: CommandHandler) -> CommandRule:
        """Create a concrete rule bound to the callable."""
        doc = (getattr(handler, "__doc__", None) or "").strip()
        return CommandRule(
            name=self.name,
            arity=self.arity,
            handler=handler,
            summary=doc.splitlines()[0] if doc else "",
        )


def handles(name: str, *, arity: int = 1) -> Callable[[CommandHandler], CommandHandler]:
    """Decorator used to register a command handler."""
    if arity < 0:
        raise ValueError("Command arity cannot be negative")
    definition = CommandDefinition(name=name, arity=arity)

    def decorator(handler: CommandHandler) -> CommandHandler:
        cast(Any, handler).__embed_command__ = definition
        return handler

    return decorator


class CommandRegistry:
    """Container mapping command keywords to their handlers."""

    def __init__(self) -> None:
        self._rules: dict[str, CommandRule] = {}

    def register(self, rule: CommandRule) -> None:
        """Register a rule, replacing any previous handler for the keyword."""
        if rule.name in self._rules:
            logger.debug("Replacing handler for command '%s'", rule.name)
        self._rules[rule.name] = rule

    def get(self, name: str) -> CommandRule:
        try:
            return self._rules[name]
        except KeyError as exc:
            raise CommandError(f"No handler registered for command '{name}'") from exc

    def __contains__(self, name: object) -> bool:
        return name in self._rules

    def arities(self) -> dict[str, int]:
        """Return the number of brace arguments expected by each command."""
        return {name: rule.arity for name, rule in self._rules.items()}

    def describe(self) -> list[dict[str, object]]:
        """Return a serialisable snapshot of the registered commands."""
        return [
            {"name": rule.name, "arity": rule.arity, "summary": rule.summary}
            for rule in sorted(self._rules.values(), key=lambda item: item.name)
        ]


_FENCE_RE = re.compile(r"^[ ]{0,3}(`{3,}|~{3,})")
_NAME_RE = re.compile(r"[A-Za-z]+")


def _read_group(text: str, index: int) -> tuple[str, int] | None:
    """Read a balanced brace group starting at ``index``; return content and end."""
    if index >= len(text) or text[index] != "{":
        return None
    depth = 0
    position = index
    while position < len(text):
        char = text[position]
        if char == "\\" and position + 1 < len(text):
            position += 2
            continue
        if char == "{":
            depth += 1
        elif char == "}":
            depth -= 1
            if depth == 0:
                return text[index + 1 : position], position + 1
        position += 1
    return None


def _fenced_spans(text: str) -> list[tuple[int, int]]:
    """Return character spans covered by fenced code blocks."""
    spans: list[tuple[int, int]] = []
    offset = 0
    fence: str | None = None
    start = 0
    for line in text.splitlines(keepends=True):
        match = _FENCE_RE.match(line)
        if match:
            token = match.group(1)
            if fence is None:
                fence = token
                start = offset
            elif token[0] == fence[0] and len(token) >= len(fence):
                spans.append((start, offset + len(line)))
                fence = None
        offset += len(line)
    if fence is not None:
        spans.append((start, len(text)))
    return spans


def scan_commands(
    text: str,
    arities: Mapping[str, int],
    *,
    source: str | None = None,
) -> Iterator[tuple[int, int, CommandInvocation]]:
    """Yield ``(start, end, invocation)`` for every known command in ``text``.

    A command is a backslash followed by a registered keyword and exactly as
    many brace groups as the keyword expects. ``\\\\`` escapes a backslash.
    Fenced code blocks are skipped and incomplete invocations are left as
    they are.
    """
    fenced = _fenced_spans(text)
    fence_index = 0
    index = 0
    length = len(text)
    while index < length:
        while fence_index < len(fenced) and fenced[fence_index][1] <= index:
            fence_index += 1
        if fence_index < len(fenced) and fenced[fence_index][0] <= index:
            index = fenced[fence_index][1]
            continue

        if text[index] != "\\":
            index += 1
            continue
        if index + 1 < length and text[index + 1] == "\\":
            index += 2
            continue

        match = _NAME_RE.match(text, index + 1)
        if match is None or match.group(0) not in arities:
            index += 1
            continue

        name = match.group(0)
        position = match.end()
        arguments: list[str] = []
        for _ in range(arities[name]):
            group = _read_group(text, position)
            if group is None:
                break
            content, position = group
            arguments.append(content)

        if len(arguments) != arities[name]:
            logger.debug("Ignoring incomplete '\\%s' at offset %d", name, index)
            index = match.end()
            continue

        line = text.count("\n", 0, index) + 1
        column = index - (text.rfind("\n", 0, index) + 1) + 1
        invocation = CommandInvocation(
            name=name,
            arguments=tuple(arguments),
            location=SourceLocation(line=line, column=column, source=source),
            snippet=text[index:position],
        )
        yield index, position, invocation
        index = position


_NEWCOMMAND_RE = re.compile(r"\\newcommand\{\\(?P<name>[A-Za-z]+)\}(?:\[(?P<nargs>[0-9])\])?")


def extract_definitions(text: str) -> tuple[str, dict[str, MacroDefinition]]:
    """Remove ``\\newcommand`` declarations from ``text`` and return them.

    Declarations take the form ``\\newcommand{\\name}[nargs]{body}``; the
    argument count is optional and defaults to zero.
    """
    definitions: dict[str, MacroDefinition] = {}
    pieces: list[str] = []
    cursor = 0
    for match in _NEWCOMMAND_RE.finditer(text):
        if match.start() < cursor:
            continue
        group = _read_group(text, match.end())
        if group is None:
            continue
        body, end = group
        name = match.group("name")
        definitions[name] = MacroDefinition(
            name=name, nargs=int(match.group("nargs") or 0), body=body
        )
        pieces.append(text[cursor : match.start()])
        cursor = end
        if text.startswith("\n", cursor):
            cursor += 1
    pieces.append(text[cursor:])
    return "".join(pieces), definitions


class CommandEngine:
    """Execution engine substituting command invocations with fragments."""

    def __init__(self, registry: CommandRegistry | None = None) -> None:
        self.registry = registry or CommandRegistry()

    def collect_from(self, owner: Any) -> None:
        """Collect decorated callables from an object or module."""
        for attribute in dir(owner):
            handler = getattr(owner, attribute)
            definition = getattr(handler, "__embed_command__", None)
            if isinstance(definition, CommandDefinition):
                self.registry.register(definition.bind(handler))

    def register(self, handler: CommandHandler) -> None:
        """Register a standalone callable decorated with ``@handles``."""
        definition = getattr(handler, "__embed_command__", None)
        if not isinstance(definition, CommandDefinition):
            msg = "Handler must be decorated with @handles"
            raise TypeError(msg)
        self.registry.register(definition.bind(handler))

    def invoke(self, invocation: CommandInvocation, context: EmbedContext) -> str:
        """Run the handler registered for an invocation."""
        rule = self.registry.get(invocation.name)
        if len(invocation.arguments) != rule.arity:
            raise CommandError(
                f"'\\{invocation.name}' expects {rule.arity} argument(s), "
                f"got {len(invocation.arguments)} at {invocation.location}"
            )
        return rule.handler(invocation, context)

    def expand(
        self,
        text: str,
        context: EmbedContext,
        *,
        source: str | None = None,
        wrap: Callable[[str], str] | None = None,
    ) -> str:
        """Replace every registered command and user macro found in ``text``.

        ``wrap`` receives each handler fragment before it is substituted, which
        lets a markup converter protect fragments from further processing.
        User macro bodies are expanded in place and scanned again.
        """
        arities = {name: macro.nargs for name, macro in context.definitions.items()}
        arities.update(self.registry.arities())

        pieces: list[str] = []
        cursor = 0
        for start, end, invocation in scan_commands(text, arities, source=source):
            pieces.append(text[cursor:start])
            if invocation.name in self.registry:
                fragment = self.invoke(invocation, context)
                pieces.append(wrap(fragment) if wrap is not None else fragment)
            else:
                macro = context.definitions[invocation.name]
                body = macro.expand(invocation.arguments)
                pieces.append(self.expand(body, context, source=source, wrap=wrap))
            cursor = end
        pieces.append(text[cursor:])
        return "".join(pieces)


__all__ = [
    "CommandDefinition",
    "CommandEngine",
    "CommandHandler",
    "CommandInvocation",
    "CommandRegistry",
    "CommandRule",
    "MacroDefinition",
    "SourceLocation",
    "extract_definitions",
    "handles",
    "scan_commands",
]
