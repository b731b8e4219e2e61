import sys
from pathlib import Path

from loguru import logger  # Zentrales Logging-System
from rich import print
from rich.table import Table
from rich.traceback import install

from quotes.modules.quote_processor import export_quote
from quotes.modules.quote_session import QuoteSession
from shared_modules.config import Config
from shared_modules.filters import format_money
from shared_modules.storage import SqliteStorage

DEFAULT_CONFIG_PATH = Path(__file__).resolve().parent.parent.parent / "config" / "quote_builder.yaml"


def print_summary(session: QuoteSession) -> None:
    """Gibt die Summen des Angebots inkl. informativer Umrechnung auf der Konsole aus."""
    totals = session.compute()
    table = Table(title=f"Angebot {session.meta.quote_number} – {session.meta.client_name}")
    table.add_column("Leistung")
    table.add_column(totals.currency.value, justify="right")
    table.add_column(totals.other_currency.value, justify="right", style="dim")
    for item in totals.items:
        table.add_row(session.catalog.label_for(item.service_code), format_money(item.subtotal, totals.currency), "")
    table.add_row("Subtotal", format_money(totals.subtotal, totals.currency),
                  format_money(totals.subtotal_other, totals.other_currency))
    table.add_row("Steuer", format_money(totals.tax, totals.currency),
                  format_money(totals.tax_other, totals.other_currency))
    table.add_row("Total", format_money(totals.total, totals.currency),
                  format_money(totals.total_other, totals.other_currency), style="bold")
    print(table)


# --- Main ---
if __name__ == "__main__":
    install(show_locals=False)

    # Pfad zur YAML-Konfiguration: Argument oder Standard im Projekt
    if len(sys.argv) > 1:
        config_path = Path(sys.argv[1])
    else:
        config_path = DEFAULT_CONFIG_PATH

    config = Config(config_path)
    # Optional abweichendes Ausgabeverzeichnis aus der Umgebung
    output_override = config.get_secret("QUOTE_BUILDER_OUTPUT")

    try:
        storage = SqliteStorage(config.db_path)
        session = QuoteSession.load(config, storage)
        print_summary(session)
        pdf_path = export_quote(session, config, Path(output_override) if output_override else None)
        print(f"[green]PDF gespeichert:[/green] {pdf_path}")
    except Exception as e:
        logger.exception(f"Fehler beim Erstellen des Angebots: {e}")
        sys.exit(1)
