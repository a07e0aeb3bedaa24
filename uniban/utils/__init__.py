"""
Utility modules for UniBan
"""

from .arguments import ArgumentParser, Slot, SlotKind, TokenType, TOKEN_TYPES, parse_signature
from .banrules import (
    BanPredicate,
    CompiledRules,
    RuleClause,
    RuleError,
    compile_rules,
    compile_rule_text,
    default_predicate
)
from .embed_builder import EmbedBuilder, EmbedColor
from .helpers import build_query, truncate_string
from .permissions import PermissionChecker, PermissionLevel, require_level

__all__ = [
    'ArgumentParser',
    'Slot',
    'SlotKind',
    'TokenType',
    'TOKEN_TYPES',
    'parse_signature',
    'BanPredicate',
    'CompiledRules',
    'RuleClause',
    'RuleError',
    'compile_rules',
    'compile_rule_text',
    'default_predicate',
    'EmbedBuilder',
    'EmbedColor',
    'build_query',
    'truncate_string',
    'PermissionChecker',
    'PermissionLevel',
    'require_level'
]
