"""Emote Echo backend package.

Watches a single Twitch channel's chat for 7TV emotes, tracks how many distinct
chatters are using each one, and occasionally echoes a trending emote back.

Modules are split by responsibility: config, core utilities, the emote engine,
provider integrations, and the async session that ties them to a transport.
"""

from .core.logging import register_levels

register_levels()
