from __future__ import annotations
from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import Any, Dict, Optional

DEFAULT_TIME_ZONE = 'Pacific Standard Time'


@dataclass(frozen=True)
class UserRecord:
    id: str
    display_name: str

    @classmethod
    def from_api(cls, item: Dict[str, Any]) -> 'UserRecord':
        return cls(id=str(item['id']), display_name=str(item.get('displayName') or ''))


@dataclass(frozen=True)
class EventPayload:
    """Calendar event body for POST users/{id}/events."""
    subject: str
    start: datetime
    end: datetime
    location: str = ''
    body: str = ''
    time_zone: str = DEFAULT_TIME_ZONE
    content_type: str = 'Text'

    def __post_init__(self):
        if not self.start < self.end:
            raise ValueError(f"Event start ({self.start.isoformat()}) must be before end ({self.end.isoformat()})")

    @classmethod
    def tomorrow(cls, subject: str, now: Optional[datetime] = None, duration_minutes: int = 30, **kwargs: Any) -> 'EventPayload':
        # Same time of day, one day ahead.
        start = (now or datetime.now()) + timedelta(days=1)
        return cls(subject=subject, start=start, end=start + timedelta(minutes=duration_minutes), **kwargs)

    @staticmethod
    def _format(dt: datetime) -> str:
        # Graph wants a wall-clock time paired with timeZone, not an offset.
        return dt.replace(tzinfo=None).isoformat(timespec='seconds')

    def to_api(self) -> Dict[str, Any]:
        return {
            'subject': self.subject,
            'location': {'displayName': self.location},
            'start': {'dateTime': self._format(self.start), 'timeZone': self.time_zone},
            'end': {'dateTime': self._format(self.end), 'timeZone': self.time_zone},
            'body': {'content': self.body, 'contentType': self.content_type},
        }
