from .validation import ContactFormData, FormFieldConfig, validation_rules
from .rate_limit import FixedWindowRateLimiter, MemoryStore, RateLimitResult, client_ip

__all__ = [
    "ContactFormData", "FormFieldConfig", "validation_rules",
    "FixedWindowRateLimiter", "MemoryStore", "RateLimitResult", "client_ip",
]
