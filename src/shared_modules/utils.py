import json
import math
import re
import unicodedata
from contextlib import contextmanager
from datetime import date, datetime
from decimal import Decimal
from pathlib import Path
from typing import Any, Callable, Dict, Generator, Optional

from loguru import logger


def safe_str(val) -> str:
    """
    Gibt immer einen String zurück, auch wenn val None oder numerisch ist.
    """
    return "" if val is None else str(val)


@contextmanager
def log_exceptions(msg: str, continue_on_error: bool = True) -> Generator[None, None, None]:
    """
    Context-Manager für das Logging von Ausnahmen.
    Loggt eine Fehlermeldung und entscheidet, ob die Exception weitergereicht wird.

    Args:
        msg (str): Nachricht für das Logging im Fehlerfall.
        continue_on_error (bool): Bei False wird die Exception erneut ausgelöst, ansonsten nur geloggt.

    Beispiel:
        with log_exceptions("Speichern der Einstellungen fehlgeschlagen"):
            storage.set(key, value)
    """
    try:
        yield
    except Exception as e:
        logger.warning(f"{msg}: {e}")
        if not continue_on_error:
            raise


# Datumsformate für freie Texteingaben
DATE_FORMATS: tuple[str, ...] = ("%Y-%m-%d", "%d.%m.%Y", "%d/%m/%Y", "%Y/%m/%d")

def _parse_float_str(s: str) -> Optional[float]:
    s = s.strip().replace("’", "").replace("'", "").replace(" ", "").replace(",", ".")
    if not s:
        return None
    try:
        return float(s)
    except ValueError:
        return None

def _parse_date_str(s: str) -> Optional[date]:
    s = s.strip()
    for fmt in DATE_FORMATS:
        try:
            return datetime.strptime(s, fmt).date()
        except ValueError:
            continue
    return None

_FLOAT_CONVERTERS: Dict[type, Callable[[Any], Optional[float]]] = {
    type(None): lambda _v: None,
    int: lambda v: float(v),
    float: lambda v: float(v),
    Decimal: lambda v: float(v),
    str: _parse_float_str,
}

_DATE_CONVERTERS: Dict[type, Callable[[Any], Optional[date]]] = {
    datetime: lambda v: v.date(),
    date: lambda v: v,
    str: _parse_date_str,
    type(None): lambda _v: None,
}

def to_float(v: Any) -> Optional[float]:
    """Typbasierte Zahl-Konvertierung (None/str/int/float/Decimal -> float|None)."""
    conv = _FLOAT_CONVERTERS.get(type(v))
    return conv(v) if conv else None

def coerce_numeric(v: Any, default: float = 0.0) -> float:
    """
    Wandelt Benutzereingaben in eine endliche Zahl um.
    Löst nie eine Exception aus: nicht numerische, NaN- oder unendliche Werte ergeben default.
    """
    try:
        number = to_float(v)
    except (ArithmeticError, ValueError):
        number = None
    if number is None or not math.isfinite(number):
        return default
    return number

def to_date(v: Any) -> Optional[date]:
    """Typbasierte Datums-Konvertierung (None/str/date/datetime -> date|None)."""
    conv = _DATE_CONVERTERS.get(type(v))
    return conv(v) if conv else None

def parse_or_default(raw: Optional[str], default: Any = None) -> Any:
    """
    Liest einen JSON-Snapshot. Fehlt der Wert oder ist er nicht lesbar, wird default zurückgegeben.
    """
    if raw is None:
        return default
    try:
        return json.loads(raw)
    except (TypeError, ValueError) as e:
        logger.debug(f"Snapshot nicht lesbar, verwende Standardwerte: {e}")
        return default

def ensure_dir(path: Path) -> Path:
    """Erzeugt ein Verzeichnis (rekursiv), falls es fehlt, und gibt den Pfad zurück."""
    path.mkdir(parents=True, exist_ok=True)
    return path


_NON_WORD_RE = re.compile(r"[^\w\s-]")
_SEPARATOR_RE = re.compile(r"[\s_-]+")

def slugify(text: str, max_length: int = 40) -> str:
    """
    Erzeugt einen schlüsseltauglichen Code aus einer Bezeichnung.
    "Diseño UI en Figma" -> "diseno_ui_en_figma"
    """
    normalized = unicodedata.normalize("NFKD", safe_str(text))
    ascii_text = normalized.encode("ascii", "ignore").decode("ascii").lower()
    ascii_text = _NON_WORD_RE.sub("", ascii_text).strip()
    slug = _SEPARATOR_RE.sub("_", ascii_text).strip("_")
    return slug[:max_length].rstrip("_")


_FORBIDDEN_FILENAME_CHARS_RE = re.compile(r'[\\/:*?"<>|]')

def sanitize_filename(name: Optional[str], max_length: int = 80) -> str:
    """
    Entfernt in Dateinamen unzulässige Zeichen und ersetzt Leerraum durch "_".
    """
    cleaned = safe_str(name).strip() or "documento"
    cleaned = _FORBIDDEN_FILENAME_CHARS_RE.sub("", cleaned)
    cleaned = re.sub(r"\s+", "_", cleaned)
    return cleaned[:max_length] or "documento"
