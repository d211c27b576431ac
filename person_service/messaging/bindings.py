"""
Stream bindings - the named destinations the person stream is wired to
"""

from dataclasses import dataclass


@dataclass(frozen=True)
class StreamBindings:
    """Logical destinations for the person stream.

    Passed explicitly to the producer and the consumer at construction.
    """

    output_topic: str
    input_topic: str
    group_id: str
