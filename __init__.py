"""监控面板配置管理"""

from config import Config, load_config
from constants import APP_NAME, APP_VERSION

__version__ = APP_VERSION
__all__ = ['Config', 'load_config', 'APP_NAME', 'APP_VERSION']
