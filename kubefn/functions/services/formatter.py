"""
Message formatter.

Renders a ConsolidatedInfo as the human-readable `info` report. Pure: the
same info and options always give the same text.
"""

import re
from datetime import datetime, timezone
from typing import Any, List, Optional

from ..core.console import Color, paint
from ..models import ConsolidatedInfo, FormatOptions
from ..models.function import PUBSUB_TRIGGER


def to_words(key: str) -> str:
    """targetPort -> Target Port"""
    spaced = re.sub(r"([A-Z])", r" \1", key, count=1)
    return spaced[:1].upper() + spaced[1:]


def format_value(value: Any) -> str:
    if value is None:
        return ""
    if isinstance(value, datetime):
        if value.tzinfo is not None:
            value = value.astimezone(timezone.utc).replace(tzinfo=None)
            return value.isoformat() + "Z"
        return value.isoformat()
    return str(value)


class MessageFormatter:
    def __init__(self, options: Optional[FormatOptions] = None):
        self.options = options or FormatOptions()

    def format(self, info: ConsolidatedInfo, options: Optional[FormatOptions] = None) -> str:
        opts = options or self.options
        color = opts.color

        def label(text: str) -> str:
            return paint(text, Color.YELLOW, enabled=color)

        def heading(text: str) -> str:
            return paint(text, Color.YELLOW, Color.UNDERLINE, enabled=color)

        def field(text: str, value: Any, indent: str = "") -> str:
            return f"{indent}{label(text)} {format_value(value)}"

        service = info.service
        f = info.function

        lines: List[str] = [
            "",
            heading(f'Service Information "{service.name}"'),
            field("Cluster IP: ", service.cluster_ip),
            field("Type: ", service.type),
            label("Ports: "),
        ]
        for port in service.ports:
            # Ports can have variable properties
            for key, value in port.items():
                lines.append(field(f"{to_words(key)}: ", value, indent="  "))
        if opts.verbose:
            lines.append(label("Metadata"))
            lines.append(field("Self Link: ", service.self_link, indent="  "))
            lines.append(field("UID: ", service.uid, indent="  "))
            lines.append(field("Timestamp: ", service.created_at, indent="  "))

        lines.append(heading("Function Info"))
        if info.url:
            lines.append(field("URL: ", info.url))
        if opts.verbose:
            if f.description:
                lines.append(field("Description:", f.description))
            if f.labels:
                lines.append(label("Labels:"))
                for key, value in f.labels.items():
                    lines.append(field(f"  {key}:", value))
            if f.annotations:
                lines.append(label("Annotations:"))
                for key, value in f.annotations.items():
                    lines.append(field(f"  {key}:", value))
        lines.append(field("Handler: ", f.handler))
        lines.append(field("Runtime: ", f.runtime))
        if f.trigger_type == PUBSUB_TRIGGER and f.topic:
            lines.append(field("Topic Trigger:", f.topic))
        else:
            lines.append(field("Trigger: ", f.trigger_type))
        lines.append(field("Dependencies: ", f.deps))
        if opts.verbose:
            lines.append(label("Metadata:"))
            lines.append(field("Self Link: ", f.self_link, indent="  "))
            lines.append(field("UID: ", f.uid, indent="  "))
            lines.append(field("Timestamp: ", f.created_at, indent="  "))

        return "\n".join(lines)


def format_message(info: ConsolidatedInfo, options: FormatOptions) -> str:
    return MessageFormatter(options).format(info)
