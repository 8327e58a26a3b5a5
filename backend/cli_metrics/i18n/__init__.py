import yaml
from pathlib import Path
from typing import Any, Dict

_BASE_PATH = Path(__file__).parent / "locales"
FALLBACK_LOCALE = "en"


class Translator:
    """Looks up error messages in ``locales/<locale>/*.yml`` by dotted key."""

    def __init__(self, base_path: Path = _BASE_PATH):
        self._base_path = base_path
        self._catalogs: Dict[str, Dict[str, Any]] = {}

    def load(self):
        for loc_dir in self._base_path.iterdir():
            if loc_dir.is_dir():
                for yml in sorted(loc_dir.glob("*.yml")):
                    data = yaml.safe_load(yml.read_text(encoding="utf-8")) or {}
                    self._catalogs.setdefault(loc_dir.name, {}).update(data)

    @property
    def locales(self) -> list[str]:
        return sorted(self._catalogs)

    def _lookup(self, key: str, locale: str) -> Any:
        cur: Any = self._catalogs.get(locale, {})
        for part in key.split('.'):
            if not isinstance(cur, dict):
                return None
            cur = cur.get(part)
        return cur

    def t(self, key: str, locale: str = FALLBACK_LOCALE, **kwargs) -> str:
        cur = self._lookup(key, locale)
        if cur is None and locale != FALLBACK_LOCALE:
            cur = self._lookup(key, FALLBACK_LOCALE)
        if cur is None:
            return key
        if isinstance(cur, str):
            try:
                return cur.format(**kwargs)
            except (KeyError, IndexError, ValueError):
                return cur
        return str(cur)


translator = Translator()
translator.load()
