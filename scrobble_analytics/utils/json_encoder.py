"""Custom JSON encoding utilities"""
import json
from datetime import datetime, timezone

from pydantic import BaseModel

class DateTimeEncoder(json.JSONEncoder):
    """JSON encoder that renders datetimes as UTC ISO-8601 strings"""
    def default(self, obj):
        if isinstance(obj, datetime):
            return iso_utc(obj)
        return super().default(obj)

def iso_utc(value: datetime) -> str:
    """Format a datetime as ``YYYY-MM-DDTHH:MM:SS.mmmZ``; naive values are taken as UTC"""
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    value = value.astimezone(timezone.utc)
    return value.replace(tzinfo=None).isoformat(timespec='milliseconds') + 'Z'

def ndjson_line(model: BaseModel) -> str:
    """Encode a model as one compact NDJSON line, newline included"""
    payload = model.model_dump(by_alias=True)
    return json.dumps(payload, ensure_ascii=False, separators=(',', ':'), cls=DateTimeEncoder) + '\n'

def json_pretty(model: BaseModel) -> str:
    """Encode a model as indented JSON with a trailing newline"""
    payload = model.model_dump(by_alias=True)
    return json.dumps(payload, ensure_ascii=False, indent=2, cls=DateTimeEncoder) + '\n'
