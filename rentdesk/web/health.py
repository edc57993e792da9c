from fastapi import APIRouter

from rentdesk.services.scheduler_service import scheduler_service

router = APIRouter(tags=["health"])


@router.get("/health")
async def health():
    return {
        "status": "ok",
        "scheduler_running": scheduler_service.scheduler.running,
        "jobs": scheduler_service.get_jobs_info(),
    }
