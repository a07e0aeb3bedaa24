"""
Embed Builder
Fluent interface for the embeds used in ban lookups and sync reports
"""

import discord
from datetime import datetime
from enum import Enum
from typing import Optional, Union

from uniban.models.ban import BanRecord
from uniban.utils.helpers import truncate_string


class EmbedColor(Enum):
    PRIMARY = 0x5865F2
    SUCCESS = 0x57F287
    WARNING = 0xFEE75C
    ERROR = 0xED4245
    INFO = 0x5865F2
    VERIFIED = 0xEB459E
    UNVERIFIED = 0x99AAB5


class EmbedBuilder:
    def __init__(self, title: Optional[str] = None, description: Optional[str] = None):
        self._embed = discord.Embed()
        if title:
            self._embed.title = title
        if description:
            self._embed.description = description

    def color(self, color: Union[EmbedColor, int, discord.Color]) -> 'EmbedBuilder':
        if isinstance(color, EmbedColor):
            self._embed.color = color.value
        else:
            self._embed.color = color
        return self

    def timestamp(self, timestamp: Optional[datetime] = None) -> 'EmbedBuilder':
        self._embed.timestamp = timestamp or datetime.now()
        return self

    def field(
        self,
        name: str,
        value: str,
        inline: bool = False
    ) -> 'EmbedBuilder':
        self._embed.add_field(name=name, value=value, inline=inline)
        return self

    def footer(self, text: str) -> 'EmbedBuilder':
        self._embed.set_footer(text=text)
        return self

    def build(self) -> discord.Embed:
        return self._embed

    @classmethod
    def ban_record(cls, ban: BanRecord) -> discord.Embed:
        return (
            cls(title=f"🔨 Ban record for {ban.user}")
            .color(EmbedColor.VERIFIED if ban.verified else EmbedColor.UNVERIFIED)
            .field("User", ban.user, True)
            .field("Reason", ban.reason, True)
            .field("Source", ban.source, True)
            .field("Verified", "Yes" if ban.verified else "No", True)
            .field("Evidence", truncate_string(ban.evidence, 1024), False)
            .timestamp(ban.banned_at)
            .footer(f"Record ID: {ban.id}")
            .build()
        )

    @classmethod
    def sync_report(cls, guild_name: str, report) -> discord.Embed:
        builder = (
            cls(title="🔄 Ban list resynchronized", description=f"Reconciled **{guild_name}** against the ban database.")
            .color(EmbedColor.ERROR if report.error else EmbedColor.SUCCESS)
            .field("Bans issued", str(report.bans), True)
            .field("Unbans issued", str(report.unbans), True)
            .field("Failures", str(len(report.failures)), True)
        )
        if report.error:
            builder.field("Error", truncate_string(report.error, 1024), False)
        return builder.timestamp().build()
