"""常量定义"""
import string

# 应用信息
APP_NAME = "Dashboard Config"
APP_VERSION = "1.0.0"

# 文件
DEFAULT_CONFIG_FILE = "data/config.yaml"
CONFIG_FILE_MODE = 0o600

# 默认值
DEFAULT_LANGUAGE = "zh-CN"
DEFAULT_LOCATION = "Asia/Shanghai"
DEFAULT_LISTEN_PORT = 8008
DEFAULT_AVG_PING_COUNT = 2
DEFAULT_IP_CHANGE_NOTIFICATION_TAG = "default"

# 密钥长度（其他组件会按此长度校验，不可随意修改）
JWT_SECRET_KEY_LENGTH = 1024
AGENT_SECRET_KEY_LENGTH = 32
SECRET_ALPHABET = string.ascii_letters + string.digits

# IP变更提醒覆盖范围
COVER_ALL = 0  # 提醒未被 IgnoredIPNotification 包含的所有服务器
COVER_IGNORE_ALL = 1  # 仅提醒被 IgnoredIPNotification 包含的服务器

MAX_UINT8 = 2 ** 8 - 1
MAX_UINT64 = 2 ** 64 - 1
MIN_INT64 = -2 ** 63
MAX_INT64 = 2 ** 63 - 1

# 支持的系统语言
LANGUAGES = {
    "zh-CN": "简体中文",
    "zh-TW": "繁體中文",
    "en-US": "English",
    "es-ES": "Español",
}

# 日志配置
LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
LOG_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"
