"""
Lightweight logging helpers with privacy-aware defaults.
"""
# 说明：轻量级日志工具，提供隐私友好的默认配置与统一的 logger 获取入口。
# 职责：
# - PrivacyFilter：根据运行时配置对日志记录中的原始取值、载荷与密钥字段进行脱敏处理
# - configure_logging(...)：初始化 logging 基本配置并为根 logger 挂载隐私过滤器
# - get_logger(...)：按名称获取 logger，必要时自动完成日志系统初始化
# 约定：
# - 是否掩码敏感字段由 RuntimeConfig.mask_sensitive_fields 控制
# - 日志级别优先级：显式参数 level > 环境变量 RAPPOR_LOG_LEVEL > 运行时配置的 log_level

from __future__ import annotations

import logging
import os
from typing import Optional

from .config import get_config

SENSITIVE_ATTRS = ("value", "payload", "secret")


class PrivacyFilter(logging.Filter):
    """Filter that strips sensitive fields from log records if configured."""

    def filter(self, record: logging.LogRecord) -> bool:
        config = get_config()
        if not config.mask_sensitive_fields:
            return True
        # 保留字段结构但隐藏被编码的原始值与 HMAC 密钥
        for attr in SENSITIVE_ATTRS:
            if hasattr(record, attr):
                setattr(record, attr, "***")
        return True


def configure_logging(level: Optional[str] = None) -> None:
    # 初始化根 logger：确定最终日志级别、设置格式，并挂载 PrivacyFilter
    log_level = level or os.environ.get("RAPPOR_LOG_LEVEL", get_config().log_level)
    logging.basicConfig(
        level=log_level,
        format="[%(levelname)s] %(name)s %(asctime)s | %(message)s",
    )
    # 记录从子 logger 传播上来时只经过 handler 级过滤器，因此同时挂载到根 logger 与其 handler
    root = logging.getLogger()
    for target in (root, *root.handlers):
        if not any(isinstance(f, PrivacyFilter) for f in target.filters):
            target.addFilter(PrivacyFilter())


def get_logger(name: str) -> logging.Logger:
    # 获取指定名称的 logger，若尚无 handler，则懒加载方式调用 configure_logging 进行初始化
    logger = logging.getLogger(name)
    if not logger.handlers:
        configure_logging()
    return logger
