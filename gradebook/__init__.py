"""Gradebook：作业提交生命周期与并发评分控制。"""
