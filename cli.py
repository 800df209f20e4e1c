"""命令行接口模块"""
import sys
from pathlib import Path

import click
import yaml

from config import Config
from constants import APP_NAME, APP_VERSION, DEFAULT_CONFIG_FILE
from logger import setup_cli_logging
from utils import parse_id_list


def _mask(secret: str) -> str:
    """隐藏密钥，只显示长度"""
    if not secret:
        return ""
    return f"****** ({len(secret)} chars)"


def _load(ctx) -> Config:
    try:
        return Config.load(ctx.obj['config_file'])
    except Exception as e:
        click.echo(f"加载配置失败: {e}", err=True)
        sys.exit(1)


@click.group()
@click.version_option(version=APP_VERSION, prog_name=APP_NAME)
@click.option('--verbose', '-v', is_flag=True, help='启用详细输出')
@click.option('--config-file', '-c', type=click.Path(dir_okay=False),
              default=DEFAULT_CONFIG_FILE, show_default=True,
              envvar='DASHBOARD_CONFIG', help='配置文件路径')
@click.option('--log-file', type=click.Path(dir_okay=False), help='日志文件路径')
@click.pass_context
def cli(ctx, verbose, config_file, log_file):
    """面板配置管理工具"""
    ctx.ensure_object(dict)
    ctx.obj['verbose'] = verbose
    ctx.obj['config_file'] = Path(config_file)

    if verbose or log_file:
        setup_cli_logging(verbose, Path(log_file) if log_file else None)


@cli.command()
@click.pass_context
def init(ctx):
    """创建配置文件（如不存在），填充默认值并生成密钥"""
    path = ctx.obj['config_file']
    try:
        if not path.exists():
            path.parent.mkdir(parents=True, exist_ok=True)
            Config().save(path)
            click.echo(f"已创建配置文件: {path}")
    except Exception as e:
        click.echo(f"创建配置文件失败: {e}", err=True)
        sys.exit(1)

    config = _load(ctx)
    click.echo(f"配置就绪: {config.path}")


@cli.command()
@click.option('--show-secrets', is_flag=True, help='显示完整密钥')
@click.pass_context
def show(ctx, show_secrets):
    """显示当前配置"""
    config = _load(ctx)

    data = config.to_dict()
    if not show_secrets:
        data['JWTSecretKey'] = _mask(config.jwt_secret_key)
        data['AgentSecretKey'] = _mask(config.agent_secret_key)

    click.echo(yaml.safe_dump(data, allow_unicode=True, sort_keys=False), nl=False)
    click.echo(f"# 语言: {config.language_name}")
    ids = ','.join(str(i) for i in sorted(config.ignored_ip_notification_server_ids))
    click.echo(f"# 忽略服务器ID: {ids or '无'}")


@cli.command()
@click.option('--add', 'add_ids', type=click.IntRange(min=1), multiple=True, help='加入忽略列表的服务器ID')
@click.option('--remove', 'remove_ids', type=click.IntRange(min=1), multiple=True, help='移出忽略列表的服务器ID')
@click.pass_context
def ignore(ctx, add_ids, remove_ids):
    """编辑 IP 变更提醒的服务器ID列表"""
    config = _load(ctx)

    if add_ids or remove_ids:
        ids = (parse_id_list(config.ignored_ip_notification) | set(add_ids)) - set(remove_ids)
        config.ignored_ip_notification = ','.join(str(i) for i in sorted(ids))
        try:
            config.save()
        except Exception as e:
            click.echo(f"保存配置失败: {e}", err=True)
            sys.exit(1)

    ids = sorted(config.ignored_ip_notification_server_ids)
    click.echo(f"IgnoredIPNotification: {','.join(str(i) for i in ids) or '无'}")


@cli.command('check-server')
@click.argument('server_id', type=click.IntRange(min=1))
@click.pass_context
def check_server(ctx, server_id):
    """检查服务器IP变更时是否会发送提醒"""
    config = _load(ctx)

    if config.should_notify_ip_change(server_id):
        click.echo(f"服务器 {server_id}: 提醒 (标签: {config.ip_change_notification_tag})")
    else:
        click.echo(f"服务器 {server_id}: 不提醒")


if __name__ == '__main__':
    cli()
