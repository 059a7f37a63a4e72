# shared output contracts
from dataclasses import dataclass


@dataclass(frozen=True, slots=True)
class MessageOut:
    """
    Plain acknowledgment returned by mutations without a richer payload.

    :param message: Human-readable outcome.
    :type message: str
    """

    message: str


@dataclass(frozen=True, slots=True)
class CreatedOut:
    """
    Acknowledgment of a created resource.

    :param message: Human-readable outcome.
    :type message: str
    :param id: Identifier of the new row.
    :type id: int
    """

    message: str
    id: int
