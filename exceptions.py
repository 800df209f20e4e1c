"""自定义异常类"""


class DashboardConfigError(Exception):
    """基础异常类"""
    pass


class ConfigError(DashboardConfigError):
    """配置内容无法映射到配置结构"""
    pass


class SecretGenerationError(DashboardConfigError):
    """随机源不可用，密钥生成失败"""
    pass
