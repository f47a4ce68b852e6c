from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Callable, Iterable, Optional

from .link_decoder import StreamLinkDecoder


QUALITY_TIERS = ("auto", "high", "medium", "low")

TierLocator = Callable[[dict[str, Any]], Optional[dict[str, Any]]]


@dataclass(frozen=True)
class LinkShape:
    """A recognizer for one kind of link carrier.

    ``locate`` returns the quality-tier map held by a node, or ``None`` when the node
    is not this kind of carrier.
    """

    name: str
    locate: TierLocator


def _urls_field(node: dict[str, Any]) -> Optional[dict[str, Any]]:
    tiers = node.get("urls")
    return tiers if isinstance(tiers, dict) else None


def _stream_url_record(node: dict[str, Any]) -> Optional[dict[str, Any]]:
    if node.get("key") != "stream_url":
        return None
    tiers = node.get("value")
    return tiers if isinstance(tiers, dict) else None


URLS_FIELD_SHAPE = LinkShape(name="urls_field", locate=_urls_field)
STREAM_URL_RECORD_SHAPE = LinkShape(name="stream_url_record", locate=_stream_url_record)
DEFAULT_SHAPES = (URLS_FIELD_SHAPE, STREAM_URL_RECORD_SHAPE)


class PayloadDecryptor:
    def __init__(
        self,
        decoder: Optional[StreamLinkDecoder] = None,
        shapes: Iterable[LinkShape] = DEFAULT_SHAPES,
        tiers: tuple[str, ...] = QUALITY_TIERS,
    ) -> None:
        self.decoder = decoder or StreamLinkDecoder()
        self.shapes = tuple(shapes)
        self.tiers = tiers

    def decrypt_tiers(self, tiers: dict[str, Any]) -> int:
        replaced = 0
        for quality in self.tiers:
            variant = tiers.get(quality)
            if not isinstance(variant, dict):
                continue
            message = variant.get("message")
            if isinstance(message, str) and message:
                variant["message"] = self.decoder.decode(message)
                replaced += 1
        return replaced

    def decrypt(self, payload: Any) -> Any:
        if not isinstance(payload, (dict, list)):
            return payload

        stack: list[Any] = [payload]
        while stack:
            node = stack.pop()
            if isinstance(node, dict):
                for shape in self.shapes:
                    tiers = shape.locate(node)
                    if tiers is not None:
                        self.decrypt_tiers(tiers)
                children: Iterable[Any] = node.values()
            else:
                children = node
            stack.extend(child for child in children if isinstance(child, (dict, list)))

        return payload
