"""
CLI 模块

命令行接口实现。
"""

import asyncio
import json
from pathlib import Path
from typing import Optional

import click
import toml
import yaml
from loguru import logger

from modpublish import __version__
from modpublish.environment import GradleBuildEnvironment, StaticBuildEnvironment
from modpublish.exceptions import ModPublishError
from modpublish.logger import setup_logger
from modpublish.models import ConfigDraft
from modpublish.orchestrator import UploadOrchestrator, UploadOutcome
from modpublish.services import ModrinthClient


def load_config(config_path: str) -> dict:
    """加载配置文件"""
    path = Path(config_path)

    if not path.exists():
        raise click.ClickException(f"配置文件不存在: {config_path}")

    suffix = path.suffix.lower()

    if suffix == ".toml":
        return toml.load(config_path)
    elif suffix == ".json":
        return json.loads(path.read_text(encoding="utf-8"))
    elif suffix in (".yaml", ".yml"):
        return yaml.safe_load(path.read_text(encoding="utf-8")) or {}
    else:
        raise click.ClickException(f"不支持的配置文件格式: {suffix}")


def _fail_silently_requested(config: dict, flag: bool) -> bool:
    """命令行参数或配置文件中任一处开启即视为静默失败"""
    section = config.get("modrinth", config)
    return flag or (isinstance(section, dict) and bool(section.get("fail_silently")))


def _environment_factory(config: dict, project_dir: str):
    if "environment" in config:
        return lambda: StaticBuildEnvironment.from_dict(config["environment"])
    return lambda: GradleBuildEnvironment(project_dir)


async def run_async(
    config: dict,
    project_dir: str,
    debug: bool = False,
    fail_silently: bool = False,
) -> Optional[UploadOutcome]:
    """异步运行，配置无法解析且静默失败时返回 None"""
    try:
        draft = ConfigDraft.from_dict(config)
    except ModPublishError as e:
        if not _fail_silently_requested(config, fail_silently):
            raise
        logger.info("上传至 Modrinth 失败，详情请查看日志")
        logger.opt(exception=e).error("Modrinth 配置解析失败（已静默处理）")
        return None

    if debug:
        draft.debug_mode = True
    if fail_silently:
        draft.fail_silently = True

    async with ModrinthClient(token=draft.token, base_url=draft.api_url) as client:
        orchestrator = UploadOrchestrator(
            draft,
            _environment_factory(config, project_dir),
            client,
            base_dir=project_dir,
        )
        return await orchestrator.apply()


@click.command()
@click.argument("config", type=click.Path(exists=True), default="modrinth.toml")
@click.option("--project-dir", default=".", help="Gradle 项目目录")
@click.option("--debug", is_flag=True, help="调试模式（只输出请求，不上传）")
@click.option("--fail-silently", is_flag=True, help="上传失败时不返回错误")
@click.option("-v", "--verbose", is_flag=True, help="输出调试日志")
@click.version_option(version=__version__)
def main(
    config: str,
    project_dir: str,
    debug: bool,
    fail_silently: bool,
    verbose: bool,
):
    """ModPublish - 将构建产物发布为 Modrinth 新版本"""
    setup_logger(level="DEBUG" if verbose else None)

    try:
        config_dict = load_config(config)
        outcome = asyncio.run(run_async(config_dict, project_dir, debug, fail_silently))
    except click.ClickException:
        raise
    except ModPublishError as e:
        logger.error(f"上传失败: {e}")
        raise click.ClickException(str(e))
    except Exception as e:
        logger.exception(f"运行时错误: {e}")
        raise click.ClickException(f"运行时错误: {e}")

    if outcome and outcome.result:
        click.echo(outcome.result.web_url)


if __name__ == "__main__":
    main()
