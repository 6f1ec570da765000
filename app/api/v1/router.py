from fastapi import APIRouter
from app.api.v1.endpoints import jobs, proposals, agent, services

api_router = APIRouter()

api_router.include_router(jobs.router, prefix="/jobs", tags=["jobs"])
api_router.include_router(proposals.router, prefix="/proposals", tags=["proposals"])
api_router.include_router(agent.router, prefix="/agent", tags=["agent"])
api_router.include_router(services.router, prefix="/services", tags=["services"])
