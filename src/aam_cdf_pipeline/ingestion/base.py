"""
Data models for parsed CDF log records.

A LogRecord is the structured form of one Audience Manager CDF line.
Field names follow the destination table schema (camelCase).
"""

from dataclasses import dataclass
from typing import Any

from ..config.constants import FIELD_NAMES
from .exceptions import MalformedLineError


@dataclass(frozen=True)
class RequestParameter:
    """One key/value pair from the requestParameters field."""

    key: str
    value: str

    def to_dict(self) -> dict:
        return {"key": self.key, "value": self.value}


@dataclass(frozen=True)
class LogRecord:
    """
    Parsed representation of one CDF line.

    Array fields are tuples so the record stays immutable. They never
    contain the null sentinel. requestParameters keeps source order and
    may repeat keys.

    Fields:
        eventTime: Event timestamp, passed through from the source
        device: Device identifier
        containerId: Container / account context
        realizedTraits: Traits realized by this event
        realizedSegments: Segments realized by this event
        requestParameters: Call parameters, values percent-decoded
        referer: Referring URL, percent-decoded
        ip: Originating IP address
        mid: Marketing Cloud visitor ID
        allSegments: All segments the device qualifies for
        allTraits: All traits the device qualifies for
    """

    eventTime: str
    device: str
    containerId: str
    realizedTraits: tuple[str, ...] = ()
    realizedSegments: tuple[str, ...] = ()
    requestParameters: tuple[RequestParameter, ...] = ()
    referer: str = ""
    ip: str = ""
    mid: str = ""
    allSegments: tuple[str, ...] = ()
    allTraits: tuple[str, ...] = ()

    def to_dict(self) -> dict:
        """
        Convert to a JSON-ready dictionary.

        Keys are emitted in CDF field order; requestParameters becomes a
        list of {"key": ..., "value": ...} objects.

        Returns:
            Dictionary with all fields
        """
        return {
            "eventTime": self.eventTime,
            "device": self.device,
            "containerId": self.containerId,
            "realizedTraits": list(self.realizedTraits),
            "realizedSegments": list(self.realizedSegments),
            "requestParameters": [p.to_dict() for p in self.requestParameters],
            "referer": self.referer,
            "ip": self.ip,
            "mid": self.mid,
            "allSegments": list(self.allSegments),
            "allTraits": list(self.allTraits),
        }

    @classmethod
    def from_dict(cls, data: dict) -> "LogRecord":
        """
        Create a LogRecord from a dictionary produced by to_dict().

        Args:
            data: Dictionary with record fields

        Returns:
            LogRecord instance

        Raises:
            MalformedLineError: If a field is missing or has the wrong shape
        """
        for field_name in FIELD_NAMES:
            if field_name not in data:
                raise MalformedLineError(
                    f"Missing required field: {field_name}", field=field_name
                )

        try:
            parameters = tuple(
                RequestParameter(key=str(p["key"]), value=str(p["value"]))
                for p in data["requestParameters"]
            )
        except (KeyError, TypeError) as e:
            raise MalformedLineError(
                f"Invalid request parameter: {e}", field="requestParameters"
            ) from e

        return cls(
            eventTime=str(data["eventTime"]),
            device=str(data["device"]),
            containerId=str(data["containerId"]),
            realizedTraits=cls._to_tuple(data, "realizedTraits"),
            realizedSegments=cls._to_tuple(data, "realizedSegments"),
            requestParameters=parameters,
            referer=str(data["referer"]),
            ip=str(data["ip"]),
            mid=str(data["mid"]),
            allSegments=cls._to_tuple(data, "allSegments"),
            allTraits=cls._to_tuple(data, "allTraits"),
        )

    @staticmethod
    def _to_tuple(data: dict, field_name: str) -> tuple[str, ...]:
        value: Any = data[field_name]
        if not isinstance(value, (list, tuple)):
            raise MalformedLineError(
                f"Expected array, got {type(value).__name__}", field=field_name
            )
        return tuple(str(v) for v in value)
