from .api import ApiResponse, ConsoleApi
from .commands import ApiCommand
from .config import config
from .exceptions import ConsoleConfigError, ConsoleError, ConsoleTransportError
from .models import Alert, Severity, SystemConfig, WeChatMerchantConfig
from .state import UiState

__version__ = '0.3.0'
