"""配置管理模块"""
from pathlib import Path
from typing import Annotated, Any, Dict, Mapping, Optional, Set, Union
import logging

import yaml
from pydantic import BaseModel, ConfigDict, Field, ValidationError

from constants import (
    AGENT_SECRET_KEY_LENGTH, COVER_ALL, COVER_IGNORE_ALL,
    DEFAULT_AVG_PING_COUNT, DEFAULT_IP_CHANGE_NOTIFICATION_TAG,
    DEFAULT_LANGUAGE, DEFAULT_LISTEN_PORT, DEFAULT_LOCATION,
    JWT_SECRET_KEY_LENGTH, LANGUAGES, MAX_INT64, MAX_UINT8, MAX_UINT64,
    MIN_INT64,
)
from exceptions import ConfigError
from utils import generate_random_string, parse_id_list, write_file

logger = logging.getLogger(__name__)

UInt = Annotated[int, Field(ge=0, le=MAX_UINT64)]
UInt8 = Annotated[int, Field(ge=0, le=MAX_UINT8)]
Int64 = Annotated[int, Field(ge=MIN_INT64, le=MAX_INT64)]


class Config(BaseModel):
    """
    面板配置

    通过 Config.load 从 YAML 文件创建，调用方可直接修改字段，
    修改完成后需显式调用 save() 写回加载时的文件。
    本类不做任何加锁，并发修改与保存需要调用方自行互斥。
    """

    model_config = ConfigDict(
        populate_by_name=True,
        coerce_numbers_to_str=True,
        extra='ignore',
    )

    debug: bool = Field(default=False, alias="Debug")

    language: str = Field(default="", alias="Language")  # 系统语言，默认 zh-CN
    site_name: str = Field(default="", alias="SiteName")
    jwt_secret_key: str = Field(default="", alias="JWTSecretKey")
    agent_secret_key: str = Field(default="", alias="AgentSecretKey")
    listen_port: UInt = Field(default=0, alias="ListenPort")
    install_host: str = Field(default="", alias="InstallHost")
    tls: bool = Field(default=False, alias="TLS")
    location: str = Field(default="", alias="Location")  # 时区，默认 Asia/Shanghai

    enable_plain_ip_in_notification: bool = Field(default=False, alias="EnablePlainIPInNotification")

    # IP变更提醒
    enable_ip_change_notification: bool = Field(default=False, alias="EnableIPChangeNotification")
    ip_change_notification_tag: str = Field(default="", alias="IPChangeNotificationTag")
    cover: UInt8 = Field(default=COVER_ALL, alias="Cover")
    ignored_ip_notification: str = Field(default="", alias="IgnoredIPNotification")  # 逗号分隔的服务器ID

    avg_ping_count: Int64 = Field(default=0, alias="AvgPingCount")
    dns_servers: str = Field(default="", alias="DNSServers")

    # 由 ignored_ip_notification 派生的缓存，每次加载与保存时重建，不写入文件
    ignored_ip_notification_server_ids: Set[int] = Field(default_factory=set, exclude=True, repr=False)
    # 加载时使用的文件路径，save() 写回此处
    path: Optional[Path] = Field(default=None, exclude=True, repr=False)

    @classmethod
    def from_dict(cls, data: Optional[Mapping[str, Any]], path: Optional[Path] = None) -> "Config":
        """
        将解析后的映射转换为配置对象

        字段名匹配不区分大小写，未知字段被忽略，值为空的字段保持零值。

        Raises:
            ConfigError: 顶层不是映射，或字段值无法转换为声明的类型
        """
        if data is None:
            data = {}
        if not isinstance(data, Mapping):
            raise ConfigError(f"配置文件顶层必须是映射，实际为 {type(data).__name__}")

        aliases = {
            f.alias.lower(): f.alias
            for f in cls.model_fields.values() if f.alias
        }
        values = {}
        for raw_key, value in data.items():
            alias = aliases.get(str(raw_key).lower())
            if alias is None or value is None:
                continue
            values[alias] = value

        try:
            config = cls.model_validate(values)
        except ValidationError as e:
            raise ConfigError(f"配置内容无效: {e}") from e
        if path is not None:
            config.path = Path(path)
        return config

    @classmethod
    def load(cls, path: Union[str, Path]) -> "Config":
        """
        读取配置文件并应用

        依次执行：解析、填充默认值、生成缺失的密钥并立即保存、重建忽略服务器ID集合。
        任一步骤失败都会直接抛出原始异常，不返回未完成初始化的对象。

        Args:
            path: 配置文件路径

        Returns:
            Config: 可直接使用的配置对象

        Raises:
            OSError: 文件无法读取或写入
            yaml.YAMLError: 文件内容不是合法的 YAML
            ConfigError: 内容无法映射到配置结构
            SecretGenerationError: 随机源不可用
        """
        path = Path(path)
        with open(path, 'r', encoding='utf-8') as f:
            data = yaml.safe_load(f)

        config = cls.from_dict(data, path=path)
        config.apply_defaults()
        config.commit_secrets(config.provision_secrets())
        config.update_ignored_ip_notification_ids()

        logger.debug(f"配置已加载: {path}")
        return config

    def apply_defaults(self) -> None:
        """为未设置的字段填充默认值"""
        if self.listen_port == 0:
            self.listen_port = DEFAULT_LISTEN_PORT
        if self.language == "":
            self.language = DEFAULT_LANGUAGE
        elif self.language not in LANGUAGES:
            logger.debug(f"未知的系统语言: {self.language}")
        if self.enable_ip_change_notification and self.ip_change_notification_tag == "":
            self.ip_change_notification_tag = DEFAULT_IP_CHANGE_NOTIFICATION_TAG
        if self.location == "":
            self.location = DEFAULT_LOCATION
        if self.avg_ping_count == 0:
            self.avg_ping_count = DEFAULT_AVG_PING_COUNT

    def provision_secrets(self) -> Dict[str, str]:
        """
        为缺失的密钥生成候选值，不修改当前对象

        Returns:
            Dict[str, str]: 字段名到新密钥的映射，没有缺失时为空
        """
        candidates = {}
        if self.jwt_secret_key == "":
            candidates["jwt_secret_key"] = generate_random_string(JWT_SECRET_KEY_LENGTH)
        if self.agent_secret_key == "":
            candidates["agent_secret_key"] = generate_random_string(AGENT_SECRET_KEY_LENGTH)
        return candidates

    def commit_secrets(self, candidates: Mapping[str, str]) -> None:
        """写入新生成的密钥并立即保存，保存失败时异常直接抛出"""
        if not candidates:
            return
        for name, value in candidates.items():
            setattr(self, name, value)
        self.save()
        logger.debug(f"已生成并保存密钥: {', '.join(sorted(candidates))}")

    def update_ignored_ip_notification_ids(self) -> None:
        """根据 ignored_ip_notification 重建忽略服务器ID集合"""
        self.ignored_ip_notification_server_ids = parse_id_list(self.ignored_ip_notification)

    def is_ignored_server(self, server_id: int) -> bool:
        """服务器是否在 IgnoredIPNotification 列表中"""
        return server_id in self.ignored_ip_notification_server_ids

    def should_notify_ip_change(self, server_id: int) -> bool:
        """
        判断服务器IP变更时是否需要提醒

        COVER_ALL 时提醒列表外的服务器，COVER_IGNORE_ALL 时只提醒列表内的服务器。
        """
        if not self.enable_ip_change_notification:
            return False
        ignored = self.is_ignored_server(server_id)
        if self.cover == COVER_ALL and ignored:
            return False
        if self.cover == COVER_IGNORE_ALL and not ignored:
            return False
        return True

    @property
    def language_name(self) -> str:
        return LANGUAGES.get(self.language, self.language)

    def to_dict(self) -> Dict[str, Any]:
        """按配置文件字段名导出，不包含派生字段"""
        return self.model_dump(by_alias=True)

    def save(self, path: Optional[Union[str, Path]] = None) -> None:
        """
        保存配置文件

        Args:
            path: 新的保存路径，指定后会被记住；默认写回加载时的路径

        Raises:
            ConfigError: 没有可用的保存路径
            OSError: 写入失败
        """
        if path is not None:
            self.path = Path(path)
        if self.path is None:
            raise ConfigError("配置文件路径未知，无法保存")

        self.update_ignored_ip_notification_ids()
        data = yaml.safe_dump(
            self.to_dict(),
            allow_unicode=True,
            sort_keys=False,
            default_flow_style=False,
        )
        write_file(self.path, data)
        logger.debug(f"配置已保存: {self.path}")


def load_config(path: Union[str, Path]) -> Config:
    """读取配置文件，等同于 Config.load"""
    return Config.load(path)
