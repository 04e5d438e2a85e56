"""
Constants and default values for model classes.

This module defines the default values used when a raw tracker payload
omits a field, so the defaulting policy is defined in one place.
"""

# Common defaults
EMPTY_STRING = ""
UNKNOWN = "Unknown"
UNASSIGNED = "Unassigned"
NONE_VALUE = "None"

# Ticket defaults
TICKET_DEFAULT_ID = "0"
CREATED_STATUS = "Created"
DEFAULT_TIME_SPENT = "0m"
DEFAULT_EPIC_COLOR = "blue"
NO_EPIC = "No Epic"
NO_SPRINT = "No Sprint"

# Link directions
INWARD = "inward"
OUTWARD = "outward"

# Risk buckets, ordered from lowest to highest
RISK_LOW = "low"
RISK_MEDIUM = "medium"
RISK_HIGH = "high"
RISK_LEVELS = (RISK_LOW, RISK_MEDIUM, RISK_HIGH)

# Custom field value type tags
FIELD_TYPE_USER = "user"
FIELD_TYPE_OPTION = "option"
FIELD_TYPE_ARRAY = "array"
FIELD_TYPE_OBJECT = "object"
FIELD_TYPE_STRING = "string"
FIELD_TYPE_NUMBER = "number"
FIELD_TYPE_BOOLEAN = "boolean"
FIELD_TYPE_UNKNOWN = "unknown"
