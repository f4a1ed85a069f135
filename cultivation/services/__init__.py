from .config_store import ConfigStore
from .filesystem_service import FileSystemBridge
from .background_service import BackgroundImporter
from .server_config_service import EncryptionFlagClient
from .resource_service import ResourceCacheManager
from .language_service import LanguageService
from .theme_service import ThemeService
