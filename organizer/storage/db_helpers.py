import json
from datetime import datetime, timezone

from sqlalchemy import String, TypeDecorator


class TechStack(TypeDecorator):
    """Ordered technology tags stored as a JSON array"""

    impl = String
    cache_ok = True

    def process_bind_param(self, value, dialect):
        return json.dumps(list(value or []))

    def process_result_value(self, value, dialect):
        return json.loads(value) if value else []


class CategoryJson(TypeDecorator):
    """Serialized category (type, tech, confidence); NULL for uncategorized entries"""

    impl = String
    cache_ok = True

    def process_bind_param(self, value, dialect):
        if value is None:
            return None
        return json.dumps(value, sort_keys=True)

    def process_result_value(self, value, dialect):
        if value is None:
            return None
        return json.loads(value)


class UtcDateTime(TypeDecorator):
    """Timestamps kept as ISO-8601 text. Naive values are taken to be UTC."""

    impl = String
    cache_ok = True

    def process_bind_param(self, value, dialect):
        if value is None:
            return None
        if value.tzinfo is None:
            value = value.replace(tzinfo=timezone.utc)
        return value.isoformat()

    def process_result_value(self, value, dialect):
        if value is None:
            return None
        parsed = datetime.fromisoformat(value)
        if parsed.tzinfo is None:
            parsed = parsed.replace(tzinfo=timezone.utc)
        return parsed
