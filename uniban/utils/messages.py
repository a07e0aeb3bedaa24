"""
Reply Strings
Fixed user-facing replies shared across cogs
"""

NO_PERMS = "You can't do that!"
NO_QUERY = "Query parameters must be provided in `key=value` pairs!"
NOT_IN_GUILD = "This command is only usable in a server!"
UNBANNABLE = "You cannot ban this user!"
GUILD_BLACKLISTED = "a server has been blacklisted. Contact an administrator for more information."
COMMAND_ERROR = "Command raised error: `{error}`"
