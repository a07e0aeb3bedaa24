"""
Ban Rule Compiler
Parses per-guild ban rule text into predicates over ban records

A rule text is a comma-separated list of ``key=value`` clauses. The compiled
predicate is the conjunction of every clause; an empty conjunction matches
nothing, so a guild never mass-bans because its rules are unset.
"""

from dataclasses import dataclass
from typing import Iterable, List, Sequence, Tuple, Union

from uniban.models.ban import BanReason, BanRecord
from uniban.models.guild import DEFAULT_BAN_RULES


VALID_KEYS = ('all', 'verified', 'reason', 'source')

TRUE_VALUE = 'true'
FALSE_VALUE = 'false'


@dataclass(frozen=True)
class RuleClause:
    key: str
    values: Tuple[str, ...]

    def matches(self, ban: BanRecord) -> bool:
        if self.key == 'all':
            return True
        if self.key == 'verified':
            return ban.verified == (self.values[0] == TRUE_VALUE)
        if self.key == 'reason':
            return ban.reason in self.values
        if self.key == 'source':
            return ban.source in self.values
        return False

    def to_text(self) -> str:
        return f"{self.key}={'|'.join(self.values)}"


@dataclass(frozen=True)
class BanPredicate:
    clauses: Tuple[RuleClause, ...] = ()

    def __len__(self) -> int:
        return len(self.clauses)

    def test(self, ban: BanRecord) -> bool:
        if not self.clauses:
            return False
        return all(clause.matches(ban) for clause in self.clauses)

    def any_match(self, bans: Iterable[BanRecord], guild_id: str) -> bool:
        # A guild always enforces the bans it issued itself.
        for ban in bans:
            if ban.source == guild_id or self.test(ban):
                return True
        return False

    def to_text(self) -> str:
        return ', '.join(clause.to_text() for clause in self.clauses)


@dataclass(frozen=True)
class CompiledRules:
    predicate: BanPredicate
    ok = True


@dataclass(frozen=True)
class RuleError:
    message: str
    ok = False


RuleResult = Union[CompiledRules, RuleError]


def _split_values(value: str) -> List[str]:
    return [part.strip() for part in value.split('|')]


def _parse_bool(key: str, value: str) -> Union[bool, RuleError]:
    if value == TRUE_VALUE:
        return True
    if value == FALSE_VALUE:
        return False
    return RuleError(f"`{key}` must be `true` or `false`!")


def compile_rules(rules: Sequence[str]) -> RuleResult:
    clauses: List[RuleClause] = []

    for rule in rules:
        key, sep, value = rule.partition('=')
        if not sep:
            return RuleError("Ban rules must be `key=value` pairs!")
        key = key.strip()
        value = value.strip()

        if key == 'all':
            flag = _parse_bool(key, value)
            if isinstance(flag, RuleError):
                return flag
            if flag:
                clauses.append(RuleClause('all', (TRUE_VALUE,)))

        elif key == 'verified':
            flag = _parse_bool(key, value)
            if isinstance(flag, RuleError):
                return flag
            clauses.append(RuleClause('verified', (TRUE_VALUE if flag else FALSE_VALUE,)))

        elif key == 'reason':
            reasons = _split_values(value)
            if not all(BanReason.is_valid(reason) for reason in reasons):
                return RuleError(
                    "`reason` must be a `|`-separated list of valid ban reasons! Try `./reasons`."
                )
            clauses.append(RuleClause('reason', tuple(reasons)))

        elif key == 'source':
            clauses.append(RuleClause('source', tuple(_split_values(value))))

        else:
            valid = ', '.join(f"`{k}`" for k in VALID_KEYS)
            return RuleError(f"Invalid ban rule! Valid rules are: {valid}")

    return CompiledRules(BanPredicate(tuple(clauses)))


def split_rule_text(text: str) -> List[str]:
    return [part.strip() for part in text.split(',') if part.strip()]


def compile_rule_text(text: str) -> RuleResult:
    return compile_rules(split_rule_text(text))


def default_predicate() -> BanPredicate:
    result = compile_rule_text(DEFAULT_BAN_RULES)
    assert isinstance(result, CompiledRules)
    return result.predicate
