from .config_model import ConfigurationRecord, ViewState
from .option_model import OPTION_POLICIES, EditPhase, OptionPolicy, PersistMode, SideEffect
from .resource_model import CacheEntry
