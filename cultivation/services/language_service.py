# cultivation/services/language_service.py
import json
from pathlib import Path

from cultivation.core.constants import DEFAULT_LANGUAGE
from cultivation.utils.logger_utils import logger


class LanguageService:
    """Enumerates the translation files shipped in the lang directory."""

    def __init__(self, lang_dir: Path):
        self.lang_dir = Path(lang_dir)

    def get_languages(self) -> list[dict[str, str]]:
        """
        Returns [{code: display name}, ...] sorted by code.
        English is always offered, even without a translation file.
        """
        languages: dict[str, str] = {}

        if self.lang_dir.is_dir():
            for lang_file in sorted(self.lang_dir.glob("*.json")):
                code = lang_file.stem
                try:
                    with open(lang_file, "r", encoding="utf-8") as f:
                        data = json.load(f)
                    name = data.get("lang_name") if isinstance(data, dict) else None
                except (OSError, json.JSONDecodeError) as e:
                    logger.warning(f"Skipping unreadable language file '{lang_file.name}': {e}")
                    continue
                languages[code] = name or code
        else:
            logger.warning(f"Language directory not found: {self.lang_dir}")

        languages.setdefault(DEFAULT_LANGUAGE, "English")
        return [{code: languages[code]} for code in sorted(languages)]
