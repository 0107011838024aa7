"""API v1 路由包入口。"""

from fastapi import APIRouter

from gradebook.api import assignments, auth, submissions

router = APIRouter(prefix="/api/v1")

# 注册子路由
router.include_router(auth.router, prefix="/auth", tags=["认证"])
router.include_router(assignments.router, tags=["作业"])
router.include_router(submissions.router, tags=["提交"])
