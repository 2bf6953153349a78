from io import StringIO
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv


def load_env(env_path: Optional[Path] = None) -> bool:
    """
    Загружает .env из корня проекта.
    BOM и CRLF убираются при чтении, сам файл не переписывается.
    Уже заданные переменные окружения не перезаписываются.
    """
    env_path = env_path or Path(__file__).resolve().parent.parent / ".env"
    if not env_path.exists():
        return load_dotenv()

    content = env_path.read_text(encoding="utf-8-sig").replace("\r\n", "\n")
    return load_dotenv(stream=StringIO(content))
