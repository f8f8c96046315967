"""
日志系统单元测试
遵循项目测试规范：快速执行，无外部依赖

测试 UnifiedLogger 的核心功能，包括已格式化字符串不被二次格式化、保留字段改名
"""

import logging
from unittest.mock import patch

import pytest

from nanobanana_proxy.core.log_messages import LogMessages, log_messages
from nanobanana_proxy.core.log_utils import UnifiedLogger, get_logger


@pytest.mark.unit
@pytest.mark.logging
class TestUnifiedLogger:
    """UnifiedLogger 单元测试类"""

    def setup_method(self):
        """每个测试方法执行前的设置"""
        self.logger_name = "test_logger"
        self.unified_logger = UnifiedLogger(self.logger_name)

    def test_init(self):
        """测试 UnifiedLogger 初始化"""
        assert self.unified_logger.name == self.logger_name
        assert isinstance(self.unified_logger.logger, logging.Logger)
        assert self.unified_logger.logger.name == self.logger_name

    def test_info_with_simple_message(self):
        """测试记录简单消息（无格式化参数）"""
        with patch.object(self.unified_logger.logger, 'info') as mock_info:
            self.unified_logger.info("简单的日志消息")

            mock_info.assert_called_once()
            call_args = mock_info.call_args
            assert call_args[0][0] == "简单的日志消息"
            assert call_args[1]['extra']['log_module'] == self.logger_name

    def test_info_with_formatted_string_containing_braces(self):
        """已通过 f-string 格式化、包含 JSON 花括号的消息不应抛出 KeyError"""
        with patch.object(self.unified_logger.logger, 'info') as mock_info:
            payload = {"candidates": [{"content": {}}]}
            self.unified_logger.info(f"原始响应: {payload}", operation="debug_payload")

            message = mock_info.call_args[0][0]
            assert "candidates" in message

    def test_info_with_format_parameters(self):
        """测试使用格式化参数的消息"""
        with patch.object(self.unified_logger.logger, 'info') as mock_info:
            self.unified_logger.info(LogMessages.START_OPERATION, operation_name="图片生成")

            call_args = mock_info.call_args
            assert call_args[0][0] == "开始执行操作: 图片生成"
            assert call_args[1]['extra']['operation_name'] == "图片生成"

    def test_reserved_record_keys_are_prefixed(self):
        """与 LogRecord 属性同名的字段加 ctx_ 前缀，避免 logging 抛出 KeyError"""
        with patch.object(self.unified_logger.logger, 'warning') as mock_warning:
            self.unified_logger.warning("上传文件过大", filename="big.png", module="inspect")

            extra = mock_warning.call_args[1]['extra']
            assert extra['ctx_filename'] == "big.png"
            assert extra['ctx_module'] == "inspect"
            assert 'filename' not in extra

    def test_error_with_exception(self):
        """错误日志附带异常类型与堆栈"""
        with patch.object(self.unified_logger.logger, 'error') as mock_error:
            error = ValueError("bad value")
            self.unified_logger.error(log_messages.GENERATE_FAILED, exception=error, req_id="abc")

            call_args = mock_error.call_args
            assert call_args[1]['exc_info'] is error
            assert call_args[1]['extra']['exception_type'] == "ValueError"
            assert call_args[1]['extra']['exception_message'] == "bad value"
            assert call_args[1]['extra']['req_id'] == "abc"

    def test_debug_respects_debug_setting(self):
        """调试日志只在调试模式下输出"""
        with patch('nanobanana_proxy.core.log_utils.settings') as mock_settings, \
                patch.object(self.unified_logger.logger, 'debug') as mock_debug:
            mock_settings.app_debug = False
            self.unified_logger.debug("调试信息")
            mock_debug.assert_not_called()

            mock_settings.app_debug = True
            self.unified_logger.debug("调试信息")
            mock_debug.assert_called_once()

    def test_real_logger_accepts_structured_fields(self, caplog):
        """结构化字段能通过真实的 logging 输出"""
        with caplog.at_level(logging.INFO, logger=self.logger_name):
            self.unified_logger.info("带字段的日志", operation="inspect", filename="a.png")

        record = caplog.records[-1]
        assert record.getMessage() == "带字段的日志"
        assert record.operation == "inspect"
        assert record.ctx_filename == "a.png"


@pytest.mark.unit
@pytest.mark.logging
def test_get_logger_is_cached():
    assert get_logger("cached.logger") is get_logger("cached.logger")
