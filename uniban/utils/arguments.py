"""
Argument Parser
Type-directed consumption of command tokens into typed values

Commands declare their arguments as a comma-separated signature such as
``"user, str, str*"``. A trailing ``?`` marks an optional slot and a trailing
``*`` a variadic one. Conversion of a single token either succeeds and
advances the position, or fails and leaves the position untouched so the next
slot can try the same token.
"""

import re
from dataclasses import dataclass
from enum import Enum
from typing import Any, Awaitable, Callable, Dict, List, Optional, Sequence, Tuple

import discord
from discord.ext import commands

from uniban.errors import ConversionError, InvalidSyntax


SNOWFLAKE_PATTERN = re.compile(r'\d+', re.ASCII)
INTEGER_PATTERN = re.compile(r'[+-]?[0-9]+')

TRUE_WORDS = frozenset({'true', 'yes', 'on', 'enable', 'enabled'})
FALSE_WORDS = frozenset({'false', 'no', 'off', 'disable', 'disabled'})


class SlotKind(Enum):
    REQUIRED = "required"
    OPTIONAL = "optional"
    VARIADIC = "variadic"


Converter = Callable[[str, Any], Awaitable[Any]]


@dataclass(frozen=True)
class TokenType:
    key: str
    name: str
    convert: Converter


@dataclass(frozen=True)
class Slot:
    type: TokenType
    kind: SlotKind = SlotKind.REQUIRED

    def __str__(self) -> str:
        suffix = {SlotKind.REQUIRED: '', SlotKind.OPTIONAL: '?', SlotKind.VARIADIC: '*'}[self.kind]
        return f"{self.type.key}{suffix}"


async def _convert_str(token: str, ctx: Any) -> str:
    return token


async def _convert_int(token: str, ctx: Any) -> int:
    """Strict base-10 integer.

    Trailing garbage is rejected, so ``7abc`` does not parse as ``7`` the way a
    lenient prefix parse would; the token is left for the next slot instead.
    """
    if not INTEGER_PATTERN.fullmatch(token):
        raise ConversionError(token)
    return int(token, 10)


async def _convert_float(token: str, ctx: Any) -> float:
    if not token.isascii():
        raise ConversionError(token)
    try:
        return float(token)
    except ValueError:
        raise ConversionError(token)


async def _convert_bool(token: str, ctx: Any) -> bool:
    lowered = token.lower()
    if lowered in TRUE_WORDS:
        return True
    if lowered in FALSE_WORDS:
        return False
    raise ConversionError(token)


async def _convert_snowflake(token: str, ctx: Any) -> str:
    match = SNOWFLAKE_PATTERN.search(token)
    if not match:
        raise ConversionError(token)
    return match.group(0)


async def _convert_user(token: str, ctx: Any) -> discord.User:
    try:
        return await commands.UserConverter().convert(ctx, token)
    except commands.BadArgument:
        raise ConversionError(token)


async def _convert_channel(token: str, ctx: Any) -> discord.TextChannel:
    try:
        return await commands.TextChannelConverter().convert(ctx, token)
    except commands.BadArgument:
        raise ConversionError(token)


TOKEN_TYPES: Dict[str, TokenType] = {
    'str': TokenType('str', 'string', _convert_str),
    'int': TokenType('int', 'integer', _convert_int),
    'float': TokenType('float', 'float', _convert_float),
    'bool': TokenType('bool', 'boolean', _convert_bool),
    'id': TokenType('id', 'snowflake', _convert_snowflake),
    'user': TokenType('user', 'user', _convert_user),
    'channel': TokenType('channel', 'channel', _convert_channel)
}


def parse_signature(signature: Optional[str]) -> Tuple[Slot, ...]:
    if not signature or not signature.strip():
        return ()

    slots = []
    for part in signature.split(','):
        part = part.strip()
        kind = SlotKind.REQUIRED
        if part.endswith('?'):
            kind = SlotKind.OPTIONAL
            part = part[:-1]
        elif part.endswith('*'):
            kind = SlotKind.VARIADIC
            part = part[:-1]

        token_type = TOKEN_TYPES.get(part)
        if token_type is None:
            raise ValueError(f"Unknown token type {part!r} in signature {signature!r}")
        slots.append(Slot(token_type, kind))

    return tuple(slots)


class ArgumentParser:
    def __init__(self, slots: Sequence[Slot]):
        self.slots = tuple(slots)

    @classmethod
    def from_signature(cls, signature: Optional[str]) -> 'ArgumentParser':
        return cls(parse_signature(signature))

    @property
    def signature(self) -> str:
        return ', '.join(str(slot) for slot in self.slots)

    async def _read(self, tokens: Sequence[str], position: int, slot: Slot, ctx: Any) -> Tuple[bool, Any]:
        if position >= len(tokens):
            return False, None
        try:
            return True, await slot.type.convert(tokens[position], ctx)
        except ConversionError:
            return False, None

    async def parse(self, tokens: Sequence[str], ctx: Any = None) -> List[Any]:
        """Convert ``tokens`` into one value per slot.

        Variadic slots yield a list (possibly empty) and optional slots yield
        ``None`` when nothing was consumed. Raises :class:`InvalidSyntax` for a
        required slot that cannot be filled or for leftover tokens. Anything a
        converter raises besides a failed conversion propagates unchanged.
        """
        position = 0
        parsed: List[Any] = []

        for slot in self.slots:
            if slot.kind is SlotKind.VARIADIC:
                values = []
                while True:
                    ok, value = await self._read(tokens, position, slot, ctx)
                    if not ok:
                        break
                    values.append(value)
                    position += 1
                parsed.append(values)
                continue

            ok, value = await self._read(tokens, position, slot, ctx)
            if ok:
                position += 1
            elif slot.kind is SlotKind.REQUIRED:
                raise InvalidSyntax.expected(slot.type.name, len(parsed) + 1)
            parsed.append(value)

        if position < len(tokens):
            raise InvalidSyntax.too_many_arguments()

        return parsed
