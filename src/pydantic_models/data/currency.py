from enum import Enum


class Currency(str, Enum):
    """
    Feste Währungspaarung des Angebots.
    USD ist die Referenzwährung, der Wechselkurs gibt PEN pro 1 USD an.
    """
    USD = "USD"
    PEN = "PEN"

    @property
    def other(self) -> "Currency":
        return Currency.PEN if self is Currency.USD else Currency.USD


REFERENCE_CURRENCY = Currency.USD
