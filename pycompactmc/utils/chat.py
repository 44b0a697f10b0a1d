"""
Chat component rendering

Disconnect reasons and status descriptions are usually JSON chat components,
sometimes plain strings. These helpers flatten either to readable text.
"""

import json
from typing import Any


def _flatten(component: Any) -> str:
    if isinstance(component, str):
        return component
    if isinstance(component, list):
        return ''.join(_flatten(part) for part in component)
    if isinstance(component, dict):
        text = component.get('text', '')
        if not text and 'translate' in component:
            text = component['translate']
            args = component.get('with')
            if args:
                text += ' ' + ' '.join(_flatten(arg) for arg in args)
        return str(text) + ''.join(_flatten(part) for part in component.get('extra', []))
    return str(component)


def chat_to_text(raw: str) -> str:
    """Render a JSON chat component (or plain text) as plain text"""
    try:
        component = json.loads(raw)
    except (ValueError, TypeError):
        return raw
    return _flatten(component)
