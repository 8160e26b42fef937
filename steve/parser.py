"""Command line normalization and parsing.

The parser is deliberately tolerant: flags it does not know about are
forwarded to the action untouched, so actions can take their own options
without the parser having to know them.
"""

from dataclasses import dataclass, field
import logging
from typing import FrozenSet, Iterable, List, Optional

logger = logging.getLogger(__name__)

END_OF_FLAGS = "--"

HELP_FLAGS = frozenset({"-h", "--help"})
VERSION_FLAG = "--version"
DEBUG_FLAG = "--debug"


@dataclass
class ParsedCommand:
    """Result of parsing one invocation."""

    action_name: str = ""
    debug: bool = False
    raw_args: List[str] = field(default_factory=list)


@dataclass(frozen=True)
class ArgumentToken:
    """A flag (with its value, if it takes one), a positional value or ``--``."""

    kind: str
    text: str
    value: Optional[str] = None

    FLAG = "flag"
    POSITIONAL = "positional"
    SEPARATOR = "separator"

    @property
    def is_flag(self) -> bool:
        return self.kind == self.FLAG

    @property
    def is_separator(self) -> bool:
        return self.kind == self.SEPARATOR

    def expand(self) -> List[str]:
        """Render the token back into argument strings."""
        if self.value is None:
            return [self.text]
        return [self.text, self.value]


def _is_flag(arg: str) -> bool:
    return arg.startswith("-") and arg != "-" and arg != END_OF_FLAGS


def tokenize(argv: Iterable[str], value_flags: FrozenSet[str] = frozenset()) -> List[ArgumentToken]:
    """Split raw arguments into flag, positional and separator tokens.

    Combined short flags are expanded (``-ab`` -> ``-a``, ``-b``), a short
    flag that takes a value keeps the rest of its token as that value
    (``-oVALUE``), ``--flag=value`` becomes one flag carrying ``value``, and
    a value flag consumes the next argument verbatim. Everything after
    ``--`` is positional and untouched.

    Args:
        argv: Raw arguments
        value_flags: Flags that take a value, e.g. ``{"-o", "--output"}``

    Returns:
        Tokens in command line order
    """
    tokens: List[ArgumentToken] = []
    args = list(argv)
    index = 0

    def take_value(flag: str) -> Optional[str]:
        nonlocal index
        if flag in value_flags and index + 1 < len(args):
            index += 1
            return args[index]
        return None

    while index < len(args):
        arg = args[index]
        if arg == END_OF_FLAGS:
            tokens.append(ArgumentToken(ArgumentToken.SEPARATOR, arg))
            tokens.extend(ArgumentToken(ArgumentToken.POSITIONAL, rest) for rest in args[index + 1:])
            break

        if arg.startswith("--") and "=" in arg:
            flag, value = arg.split("=", 1)
            tokens.append(ArgumentToken(ArgumentToken.FLAG, flag, value))
        elif _is_flag(arg) and not arg.startswith("--") and len(arg) > 2:
            chars = arg[1:]
            for pos, char in enumerate(chars):
                flag = f"-{char}"
                if flag in value_flags:
                    rest = chars[pos + 1:]
                    value = rest if rest else take_value(flag)
                    tokens.append(ArgumentToken(ArgumentToken.FLAG, flag, value))
                    break
                tokens.append(ArgumentToken(ArgumentToken.FLAG, flag))
        elif _is_flag(arg):
            tokens.append(ArgumentToken(ArgumentToken.FLAG, arg, take_value(arg)))
        else:
            tokens.append(ArgumentToken(ArgumentToken.POSITIONAL, arg))
        index += 1

    return tokens


def normalize(argv: Iterable[str], value_flags: FrozenSet[str] = frozenset()) -> List[str]:
    """Normalize an argument list.

    ``-ab`` becomes ``-a -b``, ``-oVALUE`` becomes ``-o VALUE`` and
    ``--flag=value`` becomes ``--flag value``. Everything after ``--`` is
    kept verbatim, including the ``--`` itself.
    """
    return [text for token in tokenize(argv, value_flags) for text in token.expand()]


def _is_global(token: ArgumentToken, names) -> bool:
    return token.is_flag and token.value is None and token.text in names


def parse_args(argv: Iterable[str], value_flags: FrozenSet[str] = frozenset()) -> ParsedCommand:
    """Parse raw process arguments (without the program name).

    Args:
        argv: Raw arguments
        value_flags: Flags that take a value

    Returns:
        ParsedCommand with the action name, debug flag and handler arguments
    """
    parsed = ParsedCommand()
    forced: Optional[str] = None
    passthrough: List[str] = []
    tokens = tokenize(argv, value_flags)

    for index, token in enumerate(tokens):
        if token.is_separator:
            passthrough = [rest.text for rest in tokens[index + 1:]]
            break
        if _is_global(token, HELP_FLAGS):
            logger.debug("%s: forcing action 'help'", token.text)
            forced = "help"
        elif _is_global(token, {VERSION_FLAG}):
            logger.debug("%s: forcing action 'version'", token.text)
            forced = forced or "version"
        elif _is_global(token, {DEBUG_FLAG}):
            parsed.debug = True
        elif not token.is_flag and not parsed.action_name:
            logger.debug("Action name: %s", token.text)
            parsed.action_name = token.text
        else:
            if token.is_flag:
                logger.debug("Forwarding unrecognized flag %s", token.text)
            parsed.raw_args.extend(token.expand())

    if passthrough:
        logger.debug("Passing %d argument(s) after %s verbatim", len(passthrough), END_OF_FLAGS)
        parsed.raw_args.extend(passthrough)

    if forced == "help" and parsed.action_name and parsed.action_name != "help":
        parsed.raw_args = [parsed.action_name] + parsed.raw_args
        parsed.action_name = "help"
    elif forced:
        parsed.action_name = forced

    return parsed
