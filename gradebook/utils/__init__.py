"""通用工具。"""
