from pathlib import Path
from typing import Optional

from loguru import logger

from shared_modules.config import Config
from shared_modules.utils import ensure_dir

from .quote_factory import QuoteFactory
from .quote_pdf import QuotePdfRenderer, load_logo
from .quote_session import QuoteSession


class QuoteProcessor:
    """
    Koordiniert den Export eines Angebots:
    - Summen berechnen
    - Export-Kontext ohne interne Kosten erstellen
    - Logo laden (optional) und PDF schreiben
    """

    def __init__(self, config: Config, session: QuoteSession):
        self.config: Config = config
        self.session: QuoteSession = session
        self.quote_factory: QuoteFactory = QuoteFactory(config)
        self.renderer: QuotePdfRenderer = QuotePdfRenderer()

    def run(self, output_path: Optional[Path] = None) -> Path:
        """
        Führt den Export aus und gibt den Pfad der erzeugten PDF-Datei zurück.
        """
        totals = self.session.compute()
        logger.info(
            f"Exportiere Angebot {self.session.meta.quote_number}: "
            f"{len(totals.items)} Positionen, Total {totals.total:.2f} {totals.currency.value}"
        )
        context = self.quote_factory.create_context(self.session, totals)

        # Einziger I/O-Schritt vor dem Satz; ohne Logo wird trotzdem exportiert
        logo = load_logo(self.config.logo_path)

        output_dir = ensure_dir(output_path or self.config.output_dir)
        target = output_dir / context["file_name"]
        self.renderer.render(context, target, logo=logo)
        logger.success(f"Angebot {target.name} erstellt.")
        return target


def export_quote(session: QuoteSession, config: Config, output_path: Optional[Path] = None) -> Path:
    """Exportiert das Angebot der Sitzung als PDF nach config.output_dir (oder output_path)."""
    return QuoteProcessor(config, session).run(output_path)


if __name__ == "__main__":
    print("QuoteProcessor Modul. Nicht direkt ausführbar.")
