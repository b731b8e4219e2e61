class QuoteBuilderError(Exception):
    """Basisklasse aller fachlichen Fehler des Angebotsrechners."""


class CatalogValidationError(QuoteBuilderError, ValueError):
    """
    Ungültige Änderung am Leistungskatalog (leere Bezeichnung, doppelter Code,
    letzter Eintrag). Der Katalog bleibt unverändert; die Meldung ist für den Benutzer bestimmt.
    """


class SettingsValidationError(QuoteBuilderError, ValueError):
    """Ungültige Einstellung aus dem Admin-Bereich, der bisherige Stand bleibt erhalten."""
