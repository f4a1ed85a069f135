# cultivation/services/theme_service.py
import json
from pathlib import Path

from cultivation.core.constants import DEFAULT_THEME, THEME_INDEX_NAME
from cultivation.utils.logger_utils import logger


class ThemeService:
    """Lists installed themes: every folder under themes/ with an index.json."""

    def __init__(self, themes_dir: Path):
        self.themes_dir = Path(themes_dir)

    def get_theme_names(self) -> list[str]:
        names = [DEFAULT_THEME]
        if not self.themes_dir.is_dir():
            logger.debug(f"Themes directory not found: {self.themes_dir}")
            return names

        for theme_dir in sorted(p for p in self.themes_dir.iterdir() if p.is_dir()):
            index_path = theme_dir / THEME_INDEX_NAME
            if not index_path.is_file():
                continue
            try:
                with open(index_path, "r", encoding="utf-8") as f:
                    index = json.load(f)
            except (OSError, json.JSONDecodeError) as e:
                logger.warning(f"Skipping theme '{theme_dir.name}': {e}")
                continue

            name = index.get("name") if isinstance(index, dict) else None
            name = name or theme_dir.name
            if name not in names:
                names.append(name)

        return names
