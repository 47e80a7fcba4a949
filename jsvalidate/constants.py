"""Constants for the jsvalidate package.

Primitive type tags and ``format`` tags.
"""

# Primitive type tags accepted by the 'type' keyword
OBJECT_TYPE = 'object'
ARRAY_TYPE = 'array'
STRING_TYPE = 'string'
INTEGER_TYPE = 'integer'
NUMBER_TYPE = 'number'
BOOLEAN_TYPE = 'boolean'
NULL_TYPE = 'null'

PRIMITIVE_TYPES = (
    OBJECT_TYPE,
    ARRAY_TYPE,
    STRING_TYPE,
    INTEGER_TYPE,
    NUMBER_TYPE,
    BOOLEAN_TYPE,
    NULL_TYPE,
)

# Tags accepted by the 'format' keyword
FORMAT_DATE_TIME = 'date-time'
FORMAT_EMAIL = 'email'
FORMAT_HOSTNAME = 'hostname'
FORMAT_IPV4 = 'ipv4'
FORMAT_IPV6 = 'ipv6'
FORMAT_URI = 'uri'

FORMATS = (
    FORMAT_DATE_TIME,
    FORMAT_EMAIL,
    FORMAT_HOSTNAME,
    FORMAT_IPV4,
    FORMAT_IPV6,
    FORMAT_URI,
)

