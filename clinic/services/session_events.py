"""
Cross-connection session events.

HTTP views publish logout and language changes to the channel layer so that
every open session socket of the same user or browser session applies them.
"""
from __future__ import annotations

import logging

from asgiref.sync import async_to_sync
from channels.layers import get_channel_layer

logger = logging.getLogger(__name__)


def user_group(user_id) -> str:
    return f'user.{user_id}'


def session_group(session_key: str) -> str:
    return f'session.{session_key}'


def _send(group: str, event: dict) -> None:
    channel_layer = get_channel_layer()
    if channel_layer is None:
        return
    async_to_sync(channel_layer.group_send)(group, event)
    logger.debug('sent %s to %s', event['type'], group)


def broadcast_session_invalidated(user_id, reason: str = 'logout') -> None:
    _send(user_group(user_id), {'type': 'session.invalidated', 'reason': reason})


def broadcast_language_changed(session_key: str | None, language: str) -> None:
    if not session_key:
        return
    _send(session_group(session_key), {'type': 'language.changed', 'language': language})
