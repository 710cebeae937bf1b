"""Exceptions raised by sink adapters."""


class SinkError(OSError):
    """A sink could not deliver or serialize a record, or could not close.

    Subclasses OSError so transport and serialization failures share the
    reporter's single error boundary.
    """
