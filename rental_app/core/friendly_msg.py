FRIENDLY_MESSAGES = {
    "DBAPIError": "Temporary issue while accessing data. Please try again shortly.",
    "SQLAlchemyError": "Temporary issue while accessing data. Please try again shortly.",
    "ConnectionError": "Unable to connect to a required service. Please try again later.",
    "TimeoutError": "The request took too long. Please try again later.",
    "SMTPException": "We could not deliver the email right now. Please try again later.",
    "GeocoderServiceError": "Address lookup is unavailable right now. Please try again later.",
    "CircuitOpenError": "A required service is temporarily unavailable. Please try again later.",
}

DEFAULT_MESSAGE = "Internal server error."


def get_friendly_message(error: Exception) -> str:
    names = {cls.__name__ for cls in type(error).__mro__}
    for key, msg in FRIENDLY_MESSAGES.items():
        if key in names:
            return msg
    return DEFAULT_MESSAGE
