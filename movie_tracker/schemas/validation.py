"""XSS guards shared by the request schemas"""

from pydantic import BaseModel, Field, field_validator
import re
import bleach

# Inline formatting kept in stored movie titles / names
ALLOWED_TAGS = ['b', 'i', 'u', 'em', 'strong']

SCRIPT_PATTERN = re.compile(r'<script[^>]*>|javascript:|on\w+\s*=|<iframe', re.IGNORECASE)


class SafeStringMixin:
    """Mixin for XSS-safe string validation"""

    @staticmethod
    def sanitize_html(value: str) -> str:
        """Strip every tag outside ALLOWED_TAGS"""
        if not value:
            return value
        return bleach.clean(value, tags=ALLOWED_TAGS, strip=True)

    @staticmethod
    def validate_no_script(value: str) -> str:
        """Reject script tags, javascript: URLs, inline handlers and iframes"""
        if value and SCRIPT_PATTERN.search(value):
            raise ValueError("Invalid characters detected")
        return value

    @classmethod
    def clean_text(cls, value: str) -> str:
        """Reject scripts, then strip disallowed markup"""
        return cls.sanitize_html(cls.validate_no_script(value))


class SearchQuerySchema(BaseModel, SafeStringMixin):
    """Validated search query (empty query is allowed and yields no results)"""
    query: str = Field("", max_length=200)

    @field_validator('query')
    @classmethod
    def clean_query(cls, v):
        return cls.validate_no_script(v.strip())
