"""Typed failures raised by the service layer."""


class InvalidInputError(ValueError):
    """Raised for negative or non-finite monetary input.

    The services never coerce such values to zero; the HTTP layer turns
    this into a 500 response carrying the message.
    """
