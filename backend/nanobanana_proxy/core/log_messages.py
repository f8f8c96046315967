"""
日志消息模板模块
统一管理所有业务日志消息模板，便于维护和国际化
"""

from typing import Dict, Any


class LogMessages:
    """日志消息模板类"""

    # ==================== 通用日志消息 ====================
    START_OPERATION = "开始执行操作: {operation_name}"
    OPERATION_SUCCESS = "操作成功完成: {operation_name}"
    OPERATION_FAILED = "操作执行失败: {operation_name}"

    # ==================== 图片生成相关 ====================
    GENERATE_REQUEST = "收到图片生成请求"
    GENERATE_MISSING_PROMPT = "缺少提示词"
    GENERATE_MISSING_MODEL = "缺少模型ID"
    GENERATE_SUCCESS = "图片生成成功"
    GENERATE_FAILED = "图片生成失败"

    # ==================== 元数据下载相关 ====================
    DOWNLOAD_MISSING_DATA = "下载请求缺少图片数据或提示词"
    DOWNLOAD_SUCCESS = "已写入提示词元数据并返回下载"
    DOWNLOAD_FAILED = "下载处理失败"

    # ==================== 图片检查相关 ====================
    INSPECT_SUCCESS = "图片元数据检查完成"
    INSPECT_FAILED = "图片元数据检查失败"

    # ==================== 投递相关 ====================
    DELIVERY_B2_SUCCESS = "已保存到B2存储"
    DELIVERY_B2_FAILED = "B2存储上传失败"
    DELIVERY_WEBHOOK_SUCCESS = "Webhook投递成功"
    DELIVERY_WEBHOOK_FAILED = "Webhook投递失败"

    @classmethod
    def format_message(cls, message_template: str, **kwargs: Any) -> str:
        """格式化日志消息模板"""
        return message_template.format(**kwargs)

    @classmethod
    def get_structured_data(cls, **kwargs: Any) -> Dict[str, Any]:
        """获取结构化日志数据"""
        return kwargs


# 全局实例
log_messages = LogMessages()
