"""工具函数模块"""
import os
import secrets
import tempfile
from pathlib import Path
from typing import Optional, Set, Union

from constants import CONFIG_FILE_MODE, MAX_UINT64, SECRET_ALPHABET
from exceptions import SecretGenerationError


def generate_random_string(length: int) -> str:
    """
    使用密码学安全的随机源生成可打印的随机字符串

    Args:
        length: 字符串长度

    Returns:
        str: 由字母和数字组成的随机字符串

    Raises:
        ValueError: 长度不是正数
        SecretGenerationError: 系统随机源不可用
    """
    if length <= 0:
        raise ValueError(f"随机字符串长度必须为正数: {length}")

    try:
        return ''.join(secrets.choice(SECRET_ALPHABET) for _ in range(length))
    except (OSError, NotImplementedError) as e:
        raise SecretGenerationError(f"生成随机字符串失败: {e}") from e


def parse_id_list(raw: Optional[str]) -> Set[int]:
    """
    解析逗号分隔的服务器ID列表

    无法解析的片段、0 以及超出 uint64 范围的数值会被直接忽略，不会报错。

    Args:
        raw: 原始字符串，例如 "1,2,3"

    Returns:
        Set[int]: 正整数ID集合
    """
    ids = set()
    if not raw:
        return ids

    for token in raw.split(','):
        # 与 ParseUint 保持一致：只接受纯 ASCII 数字，不接受符号和空白
        if not token.isascii() or not token.isdigit():
            continue
        value = int(token)
        if 0 < value <= MAX_UINT64:
            ids.add(value)

    return ids


def write_file(path: Union[str, Path], data: str, mode: int = CONFIG_FILE_MODE) -> None:
    """
    将文本写入文件并设置权限

    先写入同目录下的临时文件，再通过 os.replace 替换目标文件，
    写入过程中失败不会破坏原有内容。

    Args:
        path: 目标文件路径
        data: 文件内容
        mode: 文件权限
    """
    path = Path(path)
    fd, temp_name = tempfile.mkstemp(
        dir=str(path.parent), prefix=f".{path.name}.", suffix=".tmp"
    )
    try:
        with os.fdopen(fd, 'w', encoding='utf-8') as f:
            f.write(data)
            f.flush()
            os.fsync(f.fileno())
        os.chmod(temp_name, mode)
        os.replace(temp_name, path)
    except BaseException:
        if os.path.exists(temp_name):
            os.remove(temp_name)
        raise
