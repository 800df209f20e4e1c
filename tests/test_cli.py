"""命令行接口测试"""
import logging
import sys
from pathlib import Path

import pytest
import yaml
from click.testing import CliRunner

# 添加项目根目录到Python路径
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

from cli import cli
from config import Config


class TestCli:
    """命令行测试类"""

    def setup_method(self):
        """测试前设置"""
        self.runner = CliRunner()

    def invoke(self, path, *args):
        return self.runner.invoke(cli, ['-c', str(path), *args])

    def test_init_creates_file(self, tmp_path):
        """测试 init 创建配置文件并生成密钥"""
        path = tmp_path / "data" / "config.yaml"

        result = self.invoke(path, 'init')

        assert result.exit_code == 0, result.output
        on_disk = yaml.safe_load(path.read_text(encoding='utf-8'))
        assert on_disk["ListenPort"] == 8008
        assert len(on_disk["JWTSecretKey"]) == 1024
        assert len(on_disk["AgentSecretKey"]) == 32

    def test_init_keeps_existing(self, tmp_path):
        """测试 init 不覆盖已有配置"""
        path = tmp_path / "config.yaml"
        path.write_text("SiteName: demo\nAgentSecretKey: abc\n", encoding='utf-8')

        result = self.invoke(path, 'init')

        assert result.exit_code == 0, result.output
        config = Config.load(path)
        assert config.site_name == "demo"
        assert config.agent_secret_key == "abc"

    def test_show_masks_secrets(self, tmp_path):
        """测试 show 默认隐藏密钥"""
        path = tmp_path / "config.yaml"
        path.write_text("SiteName: demo\nIgnoredIPNotification: '2,1'\n", encoding='utf-8')
        config = Config.load(path)

        result = self.invoke(path, 'show')

        assert result.exit_code == 0, result.output
        assert "SiteName: demo" in result.output
        assert config.agent_secret_key not in result.output
        assert "(32 chars)" in result.output
        assert "1,2" in result.output

    def test_show_secrets(self, tmp_path):
        """测试 show --show-secrets 显示完整密钥"""
        path = tmp_path / "config.yaml"
        path.write_text("SiteName: demo\n", encoding='utf-8')
        config = Config.load(path)

        result = self.invoke(path, 'show', '--show-secrets')

        assert result.exit_code == 0, result.output
        assert config.agent_secret_key in result.output

    def test_ignore_add_remove(self, tmp_path):
        """测试编辑忽略服务器列表"""
        path = tmp_path / "config.yaml"
        path.write_text("IgnoredIPNotification: '1,2'\n", encoding='utf-8')

        result = self.invoke(path, 'ignore', '--add', '5', '--remove', '1')

        assert result.exit_code == 0, result.output
        assert "2,5" in result.output
        assert Config.load(path).ignored_ip_notification == "2,5"

    def test_check_server(self, tmp_path):
        """测试检查服务器是否提醒"""
        path = tmp_path / "config.yaml"
        path.write_text(
            "EnableIPChangeNotification: true\nCover: 1\nIgnoredIPNotification: '3'\n",
            encoding='utf-8'
        )

        notified = self.invoke(path, 'check-server', '3')
        skipped = self.invoke(path, 'check-server', '4')

        assert notified.exit_code == 0
        assert "提醒 (标签: default)" in notified.output
        assert "不提醒" in skipped.output

    def test_config_path_from_env(self, tmp_path):
        """测试通过 DASHBOARD_CONFIG 环境变量指定配置文件"""
        path = tmp_path / "env.yaml"
        path.write_text("SiteName: from-env\n", encoding='utf-8')
        runner = CliRunner(env={'DASHBOARD_CONFIG': str(path)})

        result = runner.invoke(cli, ['show'])

        assert result.exit_code == 0, result.output
        assert "SiteName: from-env" in result.output

    def test_verbose_writes_log_file(self, tmp_path):
        """测试 -v 与 --log-file 输出配置模块的 DEBUG 日志"""
        path = tmp_path / "config.yaml"
        path.write_text("SiteName: demo\n", encoding='utf-8')
        log_file = tmp_path / "logs" / "config.log"

        try:
            result = self.runner.invoke(
                cli, ['-v', '--log-file', str(log_file), '-c', str(path), 'show']
            )
            assert result.exit_code == 0, result.output
            for handler in logging.getLogger().handlers:
                handler.flush()
            assert "配置已加载" in log_file.read_text(encoding='utf-8')
        finally:
            root = logging.getLogger()
            for handler in list(root.handlers):
                handler.close()
                root.removeHandler(handler)
            root.setLevel(logging.WARNING)

    def test_missing_file_fails(self, tmp_path):
        """测试配置文件不存在时退出码为 1"""
        result = self.invoke(tmp_path / "missing.yaml", 'show')

        assert result.exit_code == 1
        assert "加载配置失败" in result.output


if __name__ == '__main__':
    pytest.main([__file__])
